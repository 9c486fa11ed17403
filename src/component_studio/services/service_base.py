"""Service Base Utilities
=========================

Shared exception hierarchy for the service layer.

Usage Pattern:
    from .service_base import ServiceError, NotFoundError, ValidationError

All service modules raise these exceptions so the HTTP layer can map them
uniformly to JSON error responses (see ``utils/errors.py``).
"""
from __future__ import annotations

from typing import Any, Dict, Optional

__all__ = [
    'ServiceError', 'ValidationError', 'AuthError', 'ForbiddenError', 'NotFoundError',
    'ConfigurationError', 'UpstreamTimeout', 'UpstreamAuthError', 'UpstreamRateLimited',
    'GenerationFailed',
]


class ServiceError(Exception):
    """Base class for all service layer errors."""

    def __init__(self, message: str = '', *, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(ServiceError):
    """Invalid input or failed validation rules."""


class AuthError(ServiceError):
    """Missing or rejected credentials."""


class ForbiddenError(ServiceError):
    """Credentials were presented but are not acceptable (invalid, expired, unknown user)."""


class NotFoundError(ServiceError):
    """Entity not found, or not owned by the caller."""


class ConfigurationError(ServiceError):
    """Required runtime configuration is missing."""


class UpstreamTimeout(ServiceError):
    """Completion API did not answer in time or could not be reached."""


class UpstreamAuthError(ServiceError):
    """Completion API rejected our credential."""


class UpstreamRateLimited(ServiceError):
    """Completion API throttled the request."""


class GenerationFailed(ServiceError):
    """Any other upstream failure or an unusable upstream payload."""
