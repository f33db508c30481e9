"""Bootstrap helpers for configuring the Flask application."""

from __future__ import annotations

import logging

from flask import Flask, jsonify
from flask.logging import default_handler

from ..extensions import csrf_protect, db, login_manager
from .logging_config import setup_logging
from .module_registry import register_default_modules


def configure_logging(app: Flask) -> None:
    """Configure application logging unless it has already been set up."""

    if any(handler is not default_handler for handler in app.logger.handlers):
        return

    app.logger.removeHandler(default_handler)

    if app.config.get("LOG_DIR"):
        # Same logger name as the app, so this also configures app.logger
        setup_logging(app, log_level=str(app.config.get("LOG_LEVEL", "INFO")), log_dir=app.config["LOG_DIR"],
                      json_format=bool(app.config.get("LOG_JSON")))
    else:
        level = getattr(logging, str(app.config.get("LOG_LEVEL", "DEBUG")).upper(), logging.DEBUG)
        app.logger.setLevel(level)
        handler = logging.StreamHandler()
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        handler.setFormatter(formatter)
        app.logger.addHandler(handler)
    app.logger.propagate = False
    app.logger.info("Flask app logger configured successfully.")


def register_extensions(app: Flask) -> None:
    """Initialize shared extensions with the Flask app instance."""

    db.init_app(app)
    login_manager.init_app(app)
    csrf_protect.init_app(app)


def register_login_handlers(app: Flask) -> None:
    """Register the Flask-Login user loader and the JSON 401 response."""

    @login_manager.user_loader
    def load_user(user_id: str):
        from ..models import User

        return db.session.get(User, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'success': False, 'message': 'Authentication required', 'code': 'UNAUTHENTICATED'}), 401


def register_blueprints(app: Flask) -> None:
    """Register all default blueprints with the app."""

    register_default_modules(app)


def initialize_database(app: Flask) -> None:
    """Create database tables and seed the process-wide settings."""

    from ..services.config_service import init_config_service
    from ..services.activity_service import ensure_default_activity_types

    db.create_all()
    init_config_service(app)
    ensure_default_activity_types()
    app.logger.info("Database initialised at %s", app.config.get("SQLALCHEMY_DATABASE_URI"))
