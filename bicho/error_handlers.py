"""Centralized error handlers."""

from __future__ import annotations

import logging

from flask import Flask, request
from marshmallow import ValidationError as MarshmallowValidationError
from werkzeug.exceptions import HTTPException

from bicho.errors import AppError, ValidationError
from bicho.utils.responses import fail

logger = logging.getLogger(__name__)

_HTTP_ERRORS: dict[int, tuple[str, str]] = {
    404: ("not_found", "Not found"),
    405: ("method_not_allowed", "Method not allowed"),
}


def register_error_handlers(app: Flask) -> None:
    """Register error handlers for the Flask app.

    Rule violations inside the game never get here; they come back as
    ignored commands. These handlers cover malformed payloads, unknown
    tickets and genuine faults.
    """

    @app.errorhandler(AppError)
    def _handle_app_error(exc: AppError):
        logger.info("%s %s -> %s: %s", request.method, request.path, exc.code, exc.message)
        return fail(exc.code, exc.message, exc.status_code, exc.details)

    @app.errorhandler(MarshmallowValidationError)
    def _handle_schema_error(exc: MarshmallowValidationError):
        wrapped = ValidationError(details=exc.messages)
        logger.debug("%s %s rejected: %s", request.method, request.path, exc.messages)
        return fail(wrapped.code, wrapped.message, wrapped.status_code, wrapped.details)

    @app.errorhandler(HTTPException)
    def _handle_http_exception(exc: HTTPException):
        status = int(exc.code or 500)
        if status in _HTTP_ERRORS:
            code, message = _HTTP_ERRORS[status]
            return fail(code, message, status)
        return fail("http_error", exc.description or "HTTP error", status, details={"name": exc.name})

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        logger.exception("Unhandled exception during %s %s", request.method, request.path)
        return fail("internal_error", "Internal server error", 500)
