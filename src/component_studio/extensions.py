"""
Flask Extensions Configuration

Extensions are created here and initialized in the app factory.
"""

import logging

from flask import Flask
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()
cors = CORS()
limiter = Limiter(get_remote_address, default_limits=[])

logger = logging.getLogger(__name__)


def init_extensions(app: Flask) -> None:
    """Initialize all Flask extensions with the app."""
    db.init_app(app)
    migrate.init_app(app, db)

    cors.init_app(
        app,
        resources={r"/api/*": {"origins": [app.config['FRONTEND_URL']]}},
        supports_credentials=True,
    )

    # Flask-Limiter reads RATELIMIT_ENABLED / RATELIMIT_STORAGE_URI from app.config
    limiter.init_app(app)

    logger.debug("Extensions initialized")
