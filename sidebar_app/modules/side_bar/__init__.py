# File: sidebar_app/modules/side_bar/__init__.py
from flask import Blueprint

blueprint = Blueprint('side_bar', __name__)

module_metadata = {
    'name': 'Side Bar',
    'icon': 'sidebar',
    'category': 'Course',
    'url_prefix': '/side-bar',
    'enabled': True
}


def setup_module(app):
    from . import routes, events  # noqa: F401
