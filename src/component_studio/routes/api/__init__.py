"""
API Routes Package
==================

API routes organized by domain:
- auth: registration, login, profile
- sessions: session CRUD, archive, sharing, shared read-only view
- generation: AI component generation
- files: uploads and ZIP export
- system: health and user statistics

Every /api blueprint shares one per-IP rate limit window.
"""

from flask import current_app

from ...extensions import limiter
from .auth import auth_bp
from .files import files_bp, uploads_bp
from .generation import gen_bp
from .sessions import sessions_bp, shared_bp
from .system import system_bp

RATE_LIMIT_MESSAGE = 'Too many requests from this IP, please try again later.'

API_BLUEPRINTS = (auth_bp, sessions_bp, shared_bp, gen_bp, files_bp, system_bp)

_api_limit = limiter.shared_limit(
    lambda: current_app.config['RATELIMIT_API'],
    scope='api',
    error_message=RATE_LIMIT_MESSAGE,
)
for _blueprint in API_BLUEPRINTS:
    _api_limit(_blueprint)

__all__ = [
    'API_BLUEPRINTS',
    'RATE_LIMIT_MESSAGE',
    'auth_bp',
    'sessions_bp',
    'shared_bp',
    'gen_bp',
    'files_bp',
    'uploads_bp',
    'system_bp',
]
