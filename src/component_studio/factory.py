"""
Flask Application Factory
=========================

Factory pattern for creating Flask application instances with
configuration, extensions, blueprints, error handlers and request
logging wired in.
"""

import os
import time
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask, g, request
from sqlalchemy.exc import SQLAlchemyError

from .utils.logging_config import get_logger, setup_application_logging

logger = get_logger('factory')

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


def _load_environment() -> None:
    env_path = PROJECT_ROOT / '.env'
    if env_path.exists():
        load_dotenv(env_path, override=False)
        logger.info(f"Loaded .env from {env_path}")


def _ensure_sqlite_directory(database_uri: str) -> None:
    prefix = 'sqlite:///'
    if database_uri.startswith(prefix) and ':memory:' not in database_uri:
        Path(database_uri[len(prefix):]).parent.mkdir(parents=True, exist_ok=True)


def add_security_headers(app: Flask) -> None:
    """Add security headers to all responses."""

    @app.after_request
    def security_headers(response):
        headers = {
            'X-Content-Type-Options': 'nosniff',
            'Referrer-Policy': 'strict-origin-when-cross-origin',
            'X-Permitted-Cross-Domain-Policies': 'none',
        }
        # Stored uploads may be embedded by the frontend
        if not request.path.startswith('/uploads/'):
            headers['X-Frame-Options'] = 'DENY'
        if not app.debug and not app.testing:
            headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'
        for header, value in headers.items():
            response.headers.setdefault(header, value)
        return response


def add_request_logging(app: Flask) -> None:
    @app.before_request  # type: ignore[misc]
    def _req_start_timer():
        g._req_start = time.perf_counter()

    @app.after_request  # type: ignore[misc]
    def _log_response(resp):
        duration_ms = None
        if hasattr(g, '_req_start'):
            duration_ms = round((time.perf_counter() - g._req_start) * 1000.0, 2)
        logger.info(
            f"{request.method} {request.path} -> {resp.status_code} ({duration_ms}ms)",
            extra={
                'event': 'http_request',
                'method': request.method,
                'path': request.path,
                'status': resp.status_code,
                'duration_ms': duration_ms,
            },
        )
        return resp


def create_app(config_name: str = None) -> Flask:
    """
    Create and configure Flask application.

    Args:
        config_name: Configuration environment name; defaults to APP_ENV

    Returns:
        Configured Flask application
    """
    _load_environment()

    # Settings read the environment at import time, so import after .env is loaded
    from .config import config
    from .errors import register_error_handlers
    from .extensions import db, init_extensions
    from .routes import register_blueprints

    config_name = config_name or os.environ.get('APP_ENV', 'default')
    config_class = config.get(config_name, config['default'])

    app = Flask(__name__)
    app.config.from_object(config_class())

    setup_application_logging(app)
    _ensure_sqlite_directory(app.config['SQLALCHEMY_DATABASE_URI'])

    # Request ids must exist before the limiter can reject a request
    register_error_handlers(app)
    init_extensions(app)

    with app.app_context():
        try:
            db.create_all()
        except SQLAlchemyError as e:
            logger.critical(f"Failed to initialize database: {e}")
            raise

    register_blueprints(app)

    # Root-level liveness endpoint for load balancers
    from .routes.api.system import api_health
    app.add_url_rule('/health', 'health_check', api_health)

    add_security_headers(app)
    add_request_logging(app)

    if not app.config.get('OPENROUTER_API_KEY'):
        logger.warning("OPENROUTER_API_KEY not set - /api/generate will fail until configured")

    logger.info(f"Flask application created successfully with config: {config_name}")
    return app
