"""Unified error response utilities for the HTTP layer.

Builds atop the service_base exceptions and adds HTTP semantics.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict

from flask import g, has_request_context, request

HTTP_DEFAULT_STATUS = 500

# Service exceptions are mapped by class name to avoid an import cycle
SERVICE_EXCEPTION_HTTP_MAP = {
    'ValidationError': 400,
    'AuthError': 401,
    'ForbiddenError': 403,
    'NotFoundError': 404,
    'ConfigurationError': 500,
    'UpstreamTimeout': 408,
    'UpstreamAuthError': 401,
    'UpstreamRateLimited': 429,
    'GenerationFailed': 500,
}


def build_error_payload(message: str, *, status: int, **extra: Any) -> Dict[str, Any]:
    payload = {
        'error': message,
        'status_code': status,
        'error_id': getattr(g, 'request_id', None) if has_request_context() else None,
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'path': request.path if has_request_context() else None,
    }
    payload.update({k: v for k, v in extra.items() if v is not None})
    return payload


def map_service_exception(exc: Exception) -> int:
    name = type(exc).__name__
    return SERVICE_EXCEPTION_HTTP_MAP.get(name, HTTP_DEFAULT_STATUS)
