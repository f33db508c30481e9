"""Database models package for the Side Bar app."""

from ..db_instance import db

from .app_settings import AppSettings
from .block import BlockInstance
from .course import Activity, ActivityType, Course, CourseSection
from .user import User

__all__ = [
    'db',
    'Activity',
    'ActivityType',
    'AppSettings',
    'BlockInstance',
    'Course',
    'CourseSection',
    'User',
]
