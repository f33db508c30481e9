# File: sidebar_app/config.py

import os

from dotenv import load_dotenv

load_dotenv()

# Project root, one level above the package directory.
BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))

DATABASE_PATH = os.path.join(BASE_DIR, "database", "side_bar.db")


class Config:
    """Flask configuration for the Side Bar block app."""

    SECRET_KEY = os.environ.get('SECRET_KEY')
    if not SECRET_KEY:
        # Fallback for development, env is preferred
        SECRET_KEY = 'dev-secret-key-replace-in-production'

    SQLALCHEMY_DATABASE_URI = os.environ.get('SQLALCHEMY_DATABASE_URI') or f'sqlite:///{DATABASE_PATH}'
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'connect_args': {'timeout': 30},
    }
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'DEBUG')
    LOG_DIR = os.environ.get('LOG_DIR')
    LOG_JSON = os.environ.get('LOG_JSON', '').lower() in {'1', 'true', 'yes'}

    # Seed value for the allocation base; the live value lives in AppSettings.
    SIDE_BAR_SECTION_START = int(os.environ.get('SIDE_BAR_SECTION_START', 1000))

    @classmethod
    def init_app(cls, app):
        """Create the directories the configuration points at."""
        if app.config['SQLALCHEMY_DATABASE_URI'] == f'sqlite:///{DATABASE_PATH}':
            os.makedirs(os.path.dirname(DATABASE_PATH), exist_ok=True)
