"""Application factory for the Side Bar block app."""

from __future__ import annotations

from flask import Flask

from .config import Config
from .core.bootstrap import (
    configure_logging,
    initialize_database,
    register_blueprints,
    register_extensions,
    register_login_handlers,
)
from .core.error_handlers import register_error_handlers
from .extensions import db

__all__ = ["create_app", "db"]


def create_app(config_class: type[Config] = Config) -> Flask:
    """Create and configure a Flask application instance."""

    app = Flask(__name__)
    app.config.from_object(config_class)
    config_class.init_app(app)

    configure_logging(app)
    register_extensions(app)
    register_login_handlers(app)
    register_error_handlers(app)
    register_blueprints(app)

    with app.app_context():
        initialize_database(app)

    return app
