"""Block instance model."""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm.attributes import flag_modified
from sqlalchemy.sql import func

from ..db_instance import db


class BlockInstance(db.Model):
    """A block placed on a page, with its per-instance JSON configuration."""

    __tablename__ = 'block_instances'

    block_id = db.Column(db.Integer, primary_key=True)
    block_name = db.Column(db.String(50), nullable=False, default='side_bar')
    course_id = db.Column(db.Integer, db.ForeignKey('courses.course_id'), nullable=False)
    page_type = db.Column(db.String(50), nullable=False, default='course-view')
    config = db.Column(db.JSON, nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), server_default=func.now())
    updated_at = db.Column(db.DateTime(timezone=True), onupdate=func.now())

    course = db.relationship('Course', lazy=True)

    def get_config(self, key: str, default: Any = None) -> Any:
        return (self.config or {}).get(key, default)

    def update_config(self, **values: Any) -> None:
        """Merge ``values`` into the stored configuration. The caller commits."""

        config = dict(self.config or {})
        config.update(values)
        self.config = config
        flag_modified(self, 'config')

    def __repr__(self):
        return f"<BlockInstance {self.block_id}: {self.block_name} course={self.course_id}>"
