"""JSON error responses for the Flask API."""

from __future__ import annotations

from flask import Flask, jsonify
from pydantic import ValidationError

from .exceptions import (
    AlreadyLoggedError,
    CategoryNotFoundError,
    HabitNotFoundError,
    InvalidWeekdaySetError,
    NotScheduledError,
    ProfileNotFoundError,
)
from .logging_config import get_logger

logger = get_logger("errors")

STATUS_CODES: dict[type[Exception], tuple[int, str]] = {
    HabitNotFoundError: (404, "habit_not_found"),
    ProfileNotFoundError: (404, "profile_not_found"),
    CategoryNotFoundError: (404, "category_not_found"),
    AlreadyLoggedError: (409, "already_logged"),
    NotScheduledError: (422, "not_scheduled"),
    InvalidWeekdaySetError: (400, "invalid_weekday_set"),
}


def error_response(status: int, kind: str, message: str, **extra):
    body = {"error": kind, "message": message}
    body.update(extra)
    return jsonify(body), status


def validation_details(exc: ValidationError) -> dict[str, list[str]]:
    """Group pydantic errors by field name."""

    structured: dict[str, list[str]] = {}
    for error in exc.errors(include_url=False):
        loc = error.get("loc", ())
        key = str(loc[0]) if loc else "__root__"
        structured.setdefault(key, []).append(error.get("msg", "Invalid value"))
    return structured


def register_error_handlers(app: Flask) -> None:
    """Map engine and validation exceptions to JSON error bodies."""

    def _handle_domain_error(exc: Exception):
        status, kind = STATUS_CODES[type(exc)]
        return error_response(status, kind, str(exc))

    for exc_type in STATUS_CODES:
        app.register_error_handler(exc_type, _handle_domain_error)

    @app.errorhandler(ValidationError)
    def _handle_validation_error(exc: ValidationError):
        return error_response(
            400, "validation_error", "Invalid request payload.", fields=validation_details(exc)
        )

    @app.errorhandler(ValueError)
    def _handle_value_error(exc: ValueError):
        return error_response(400, "invalid_request", str(exc))

    @app.errorhandler(404)
    def _handle_not_found(exc):
        return error_response(404, "not_found", "Resource not found.")

    @app.errorhandler(405)
    def _handle_method_not_allowed(exc):
        return error_response(405, "method_not_allowed", "Method not allowed.")


__all__ = ["error_response", "register_error_handlers", "validation_details"]
