"""Process-wide settings backed by the AppSettings table."""

from __future__ import annotations

from typing import Any, Iterable, Optional

from flask import Flask, current_app, has_app_context
from sqlalchemy.exc import SQLAlchemyError

from ..core.error_handlers import InvalidArgumentError, StorageError
from ..models import AppSettings, db

SECTION_START_KEY = "SIDE_BAR_SECTION_START"

# Keys that must never be overridden from the database
SENSITIVE_SETTING_KEYS = {"SECRET_KEY", "SQLALCHEMY_DATABASE_URI"}


class ConfigService:
    """Synchronise AppSettings rows with ``app.config``."""

    def __init__(self, app) -> None:
        self.app = app

    def ensure_defaults(self, defaults: Iterable[dict[str, object]]) -> None:
        """Create any default setting that does not exist yet.

        Existing rows are left untouched, so a value seeded at first start-up
        stays in force until an administrator changes it.
        """

        created = False
        for payload in defaults:
            key = str(payload.get("key", "")).strip()
            if not key:
                continue

            if db.session.get(AppSettings, key) is not None:
                continue

            AppSettings.set(
                key,
                payload.get("value"),
                category=str(payload.get("category") or "system"),
                data_type=str(payload.get("data_type") or "string"),
                description=payload.get("description"),
            )
            created = True

        if created:
            db.session.commit()

    def _parse_value(self, setting: AppSettings) -> Any:
        raw_value = setting.value
        data_type = str(setting.data_type or "string").lower()

        try:
            if data_type == "bool":
                if isinstance(raw_value, str):
                    return raw_value.strip().lower() in {"1", "true", "yes", "on"}
                return bool(raw_value)

            if data_type == "int":
                if raw_value == '' or raw_value is None:
                    return 0
                return int(raw_value)
        except (TypeError, ValueError):
            current_app.logger.warning(
                "Could not convert setting %s ('%s') to %s, using a safe default.",
                setting.key,
                raw_value,
                data_type,
            )
            if data_type == 'int':
                return 0
            if data_type == 'bool':
                return False

        return raw_value

    def load_settings(self) -> None:
        """Copy every AppSettings row into ``app.config``."""

        if not has_app_context():
            raise RuntimeError("ConfigService requires an app context to load settings.")

        for setting in AppSettings.query.all():
            if setting.key.upper() in SENSITIVE_SETTING_KEYS:
                current_app.logger.info("Skipping sensitive setting %s from DB", setting.key)
                continue

            self.app.config[setting.key] = self._parse_value(setting)


def get_runtime_config(key: str, default: Any = None) -> Any:
    """Read a config value from current_app, falling back to ``default``."""

    if has_app_context():
        return current_app.config.get(key, default)
    return default


def get_section_start() -> int:
    """Return the first section number reserved for side bar sections."""

    fallback = get_runtime_config(SECTION_START_KEY, 1000)
    value = AppSettings.get(SECTION_START_KEY, fallback)
    try:
        return int(value)
    except (TypeError, ValueError):
        current_app.logger.warning("Invalid %s value %r, using %s", SECTION_START_KEY, value, fallback)
        return int(fallback)


def set_section_start(value: Any, user_id: Optional[int] = None) -> int:
    """Change the allocation base. Only administrators reach this path."""

    if isinstance(value, bool):
        raise InvalidArgumentError("section start must be a positive integer", argument="value")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise InvalidArgumentError("section start must be a positive integer", argument="value")
    if number <= 0:
        raise InvalidArgumentError("section start must be a positive integer", argument="value")

    try:
        AppSettings.set(SECTION_START_KEY, number, category="side_bar", data_type="int", user_id=user_id)
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.error("Could not save %s: %s", SECTION_START_KEY, exc)
        raise StorageError("Could not save the section start", operation="set_section_start") from exc

    current_app.config[SECTION_START_KEY] = number
    current_app.logger.info("Side bar section start changed to %s by user %s", number, user_id)
    return number


def init_config_service(app: Flask) -> ConfigService:
    """Create the config service, seed defaults and load them into app.config."""

    service = ConfigService(app)
    app.extensions["config_service"] = service

    defaults = [
        {
            "key": SECTION_START_KEY,
            "value": app.config.get(SECTION_START_KEY, 1000),
            "category": "side_bar",
            "data_type": "int",
            "description": "First course section number used for Side Bar block sections.",
        },
    ]

    service.ensure_defaults(defaults)
    service.load_settings()
    return service
