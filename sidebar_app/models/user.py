"""User model and role based capability checks."""

from __future__ import annotations

from flask_login import UserMixin
from sqlalchemy.sql import func
from werkzeug.security import generate_password_hash

from ..db_instance import db


class User(UserMixin, db.Model):
    """Application user model."""

    __tablename__ = 'users'

    ROLE_ADMIN = 'admin'
    ROLE_TEACHER = 'teacher'
    ROLE_STUDENT = 'student'
    ROLE_LABELS = {
        ROLE_ADMIN: 'Administrator',
        ROLE_TEACHER: 'Teacher',
        ROLE_STUDENT: 'Student',
    }

    # Capability name -> roles granted it.
    CAPABILITIES = {
        'course:manageactivities': {ROLE_ADMIN, ROLE_TEACHER},
        'course:viewhiddenactivities': {ROLE_ADMIN, ROLE_TEACHER},
        'block:addinstance': {ROLE_ADMIN, ROLE_TEACHER},
        'site:config': {ROLE_ADMIN},
    }

    user_id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)
    user_role = db.Column(db.String(50), default=ROLE_STUDENT, nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), server_default=func.now())

    def get_id(self) -> str:
        return str(self.user_id)

    def set_password(self, password: str) -> None:
        self.password_hash = generate_password_hash(password)

    def has_capability(self, capability: str) -> bool:
        """Return True when the user's role grants ``capability``."""

        return self.user_role in self.CAPABILITIES.get(capability, set())

    def __repr__(self) -> str:
        return f'<User {self.username}>'
