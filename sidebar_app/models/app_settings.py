"""Unified application settings model."""

from __future__ import annotations

from typing import Any

from sqlalchemy.sql import func

from ..db_instance import db


class AppSettings(db.Model):
    """Key-value store for process-wide settings such as the allocation base."""

    __tablename__ = 'app_settings'

    key = db.Column(db.String(100), primary_key=True)
    value = db.Column(db.JSON, nullable=False)

    category = db.Column(db.String(50), default='system')
    data_type = db.Column(db.String(50), default='string')  # 'string', 'int', 'bool', 'json'
    description = db.Column(db.Text)

    updated_at = db.Column(db.DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    updated_by = db.Column(db.Integer, db.ForeignKey('users.user_id'), nullable=True)

    updater = db.relationship('User', foreign_keys=[updated_by], lazy=True)

    @classmethod
    def get(cls, key: str, default: Any = None) -> Any:
        """Get a setting value by key with code-level default fallback.

        Args:
            key: The setting key
            default: Manual fallback if not found in DB AND not found in core/defaults.py

        Returns:
            The setting value or default
        """
        setting = db.session.get(cls, key)

        if setting is not None and setting.value is not None:
            return setting.value

        from ..core.defaults import DEFAULT_APP_CONFIGS
        if key in DEFAULT_APP_CONFIGS:
            return DEFAULT_APP_CONFIGS[key]

        return default

    @classmethod
    def set(cls, key: str, value: Any, category: str = None,
            data_type: str = None, description: str = None,
            user_id: int = None) -> 'AppSettings':
        """Set or update a setting. The caller commits."""
        setting = db.session.get(cls, key)
        if setting is None:
            setting = cls(
                key=key,
                value=value,
                category=category or 'system',
                data_type=data_type or 'string',
                description=description,
                updated_by=user_id
            )
            db.session.add(setting)
        else:
            setting.value = value
            if category is not None:
                setting.category = category
            if data_type is not None:
                setting.data_type = data_type
            if description is not None:
                setting.description = description
            if user_id is not None:
                setting.updated_by = user_id
        return setting

    def __repr__(self) -> str:
        return f'<AppSettings {self.key}={self.value!r}>'
