"""Route decorators shared by the API blueprints."""

from functools import wraps

from flask import current_app, request

from ..services.auth_service import AuthService


def _bearer_token() -> str:
    header = request.headers.get('Authorization', '')
    if header.startswith('Bearer '):
        return header[7:].strip()
    return ''


def token_required(f):
    """Resolve the bearer token and pass the user as the first argument.

    A missing token raises AuthError (401); an invalid or expired token,
    or one whose user is gone, raises ForbiddenError (403).
    """
    @wraps(f)
    def decorated(*args, **kwargs):
        user = AuthService.from_config(current_app.config).resolve_user(_bearer_token())
        return f(user, *args, **kwargs)
    return decorated
