import os
import sys

import pytest
from flask import g
from flask_login import FlaskLoginClient

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from sidebar_app import create_app, db
from sidebar_app.config import Config
from sidebar_app.models import BlockInstance, Course, CourseSection, User
from sidebar_app.services.activity_service import ActivityKernelService


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_ENGINE_OPTIONS = {
        'connect_args': {'check_same_thread': False}
    }
    WTF_CSRF_ENABLED = False
    SERVER_NAME = 'localhost'
    LOG_LEVEL = 'WARNING'
    LOG_DIR = None


class SideBarTestClient(FlaskLoginClient):
    """Login test client that does not reuse another client's user.

    Requests share the fixture's app context, and with it the user
    Flask-Login caches on ``g``.
    """

    def open(self, *args, **kwargs):
        g.pop('_login_user', None)
        return super().open(*args, **kwargs)


@pytest.fixture
def app():
    app = create_app(TestConfig)
    app.test_client_class = SideBarTestClient
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


class DataGenerator:
    """Creates courses, sections, activities and users for tests."""

    def __init__(self):
        self._users = 0

    def create_course(self, num_sections=1, **kwargs):
        course = Course(
            shortname=kwargs.pop('shortname', 'C1'),
            fullname=kwargs.pop('fullname', 'Course 1'),
            num_sections=num_sections,
            **kwargs,
        )
        db.session.add(course)
        db.session.commit()
        return course

    def create_course_section(self, course, number, **kwargs):
        section = CourseSection(course_id=course.course_id, section=number, sequence=[], **kwargs)
        db.session.add(section)
        db.session.commit()
        return section

    def create_sections(self, course, numbers):
        sections = [CourseSection(course_id=course.course_id, section=n, sequence=[]) for n in numbers]
        db.session.add_all(sections)
        db.session.commit()
        return sections

    def create_module(self, modname, section, name=None, **kwargs):
        activity = ActivityKernelService.create_activity(
            section, modname, name or f'{modname} in section {section.section}', **kwargs
        )
        db.session.commit()
        return activity

    def create_user(self, role=User.ROLE_TEACHER):
        self._users += 1
        user = User(username=f'user{self._users}', email=f'user{self._users}@example.com', user_role=role)
        user.set_password('password')
        db.session.add(user)
        db.session.commit()
        return user

    def create_block(self, course, **config):
        block = BlockInstance(block_name='side_bar', course_id=course.course_id, config=config or None)
        db.session.add(block)
        db.session.commit()
        return block


@pytest.fixture
def dg(app):
    return DataGenerator()
