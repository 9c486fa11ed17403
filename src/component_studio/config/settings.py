"""
Application Configuration
=========================

Configuration settings for different environments. Values are read from
the process environment (populated from ``.env`` by the app factory).
"""

import os
from pathlib import Path

from ..constants import MAX_UPLOAD_BYTES, MAX_UPLOAD_FILES


class Config:
    """Base configuration class."""

    APP_ENV = os.environ.get('APP_ENV', 'development')

    # Basic Flask settings
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    JWT_SECRET = os.environ.get('JWT_SECRET') or SECRET_KEY

    # Database settings
    BASE_DIR = Path(__file__).resolve().parent.parent.parent.parent
    DATABASE_PATH = BASE_DIR / 'data' / 'component_studio.db'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or f'sqlite:///{DATABASE_PATH}'
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # OpenRouter
    OPENROUTER_API_KEY = os.environ.get('OPENROUTER_API_KEY', '')
    OPENROUTER_API_URL = os.environ.get('OPENROUTER_API_URL', 'https://openrouter.ai/api/v1/chat/completions')

    # Frontend (CORS origin, share links, HTTP-Referer for OpenRouter)
    FRONTEND_URL = os.environ.get('FRONTEND_URL', 'http://localhost:3000')

    # Uploads: a request may carry MAX_UPLOAD_FILES files of MAX_UPLOAD_BYTES each
    UPLOAD_FOLDER = os.environ.get('UPLOAD_FOLDER') or str(BASE_DIR / 'uploads')
    MAX_CONTENT_LENGTH = MAX_UPLOAD_FILES * MAX_UPLOAD_BYTES + 1024 * 1024

    # Rate limiting (Flask-Limiter)
    RATELIMIT_ENABLED = True
    RATELIMIT_API = os.environ.get('RATELIMIT_API', '100 per 15 minutes')
    RATELIMIT_STORAGE_URI = os.environ.get('RATELIMIT_STORAGE_URI', 'memory://')
    RATELIMIT_HEADERS_ENABLED = True

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_DIR = os.environ.get('LOG_DIR') or str(BASE_DIR / 'logs')

    JSON_SORT_KEYS = False


class DevelopmentConfig(Config):
    """Development configuration."""
    APP_ENV = 'development'
    DEBUG = True
    SQLALCHEMY_ECHO = False


class TestingConfig(Config):
    """Testing configuration."""
    APP_ENV = 'testing'
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SECRET_KEY = 'testing-secret-key'
    JWT_SECRET = 'testing-jwt-secret'
    OPENROUTER_API_KEY = 'test-openrouter-key'
    FRONTEND_URL = 'http://frontend.test'
    RATELIMIT_ENABLED = False
    LOG_DIR = None
    LOG_LEVEL = 'WARNING'


class ProductionConfig(Config):
    """Production configuration."""
    APP_ENV = 'production'
    DEBUG = False

    def __init__(self):
        super().__init__()
        if not os.environ.get('DATABASE_URL'):
            raise ValueError("DATABASE_URL environment variable must be set in production")
        if not os.environ.get('JWT_SECRET'):
            raise ValueError("JWT_SECRET environment variable must be set in production")


# Configuration mapping
config = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
    'default': DevelopmentConfig,
}
