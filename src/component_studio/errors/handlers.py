"""Centralized JSON error handlers.

Every failure leaves the API as ``{"error": <message>, ...}`` with an HTTP
status: service exceptions are mapped by class name, Werkzeug HTTP
exceptions keep their code and anything else becomes a logged 500.
"""
from __future__ import annotations

import uuid

from flask import Blueprint, current_app, g, jsonify, make_response
from werkzeug.exceptions import HTTPException

from ..services.service_base import ServiceError
from ..utils.errors import build_error_payload, map_service_exception

error_bp = Blueprint("errors", __name__)

# Client-facing messages for HTTP errors raised outside our services
HTTP_MESSAGES = {
    400: "Bad request",
    401: "Access token required",
    403: "Forbidden",
    404: "Endpoint not found",
    405: "Method not allowed",
    408: "Request timeout",
    413: "Upload too large",
    415: "Unsupported media type",
    429: "Too many requests from this IP, please try again later.",
    500: "Internal server error",
    503: "Service unavailable",
}


def _is_development() -> bool:
    return current_app.config.get("APP_ENV") == "development"


def render_error(status_code: int, message: str, details=None):
    if status_code >= 500 and not _is_development():
        details = None
    payload = build_error_payload(message, status=status_code, details=details)
    return make_response(jsonify(payload), status_code)


@error_bp.app_errorhandler(ServiceError)  # type: ignore[misc]
def handle_service_error(exc: ServiceError):
    status_code = map_service_exception(exc)
    if status_code >= 500:
        current_app.logger.error(f"{type(exc).__name__}: {exc.message}")
    return render_error(status_code, exc.message or HTTP_MESSAGES.get(status_code, "Error"), exc.details)


@error_bp.app_errorhandler(HTTPException)  # type: ignore[misc]
def handle_http_exception(exc: HTTPException):
    status_code = exc.code or 500
    message = HTTP_MESSAGES.get(status_code, exc.name)
    if status_code == 429 and exc.description:
        message = exc.description
    return render_error(status_code, message)


@error_bp.app_errorhandler(Exception)  # type: ignore[misc]
def handle_uncaught_exception(exc: Exception):
    current_app.logger.exception(f"Unhandled exception: {exc}")
    return render_error(500, HTTP_MESSAGES[500], {"exception": type(exc).__name__, "message": str(exc)})


def register_error_handlers(app):
    """Register handlers and attach request id generation."""
    @app.before_request  # type: ignore[misc]
    def _assign_request_id():
        g.request_id = uuid.uuid4().hex

    app.register_blueprint(error_bp)
    return app
