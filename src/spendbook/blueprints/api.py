"""Shared request helpers and error translation for the JSON API."""

from __future__ import annotations

from typing import Any, Iterable

from flask import Flask, current_app, jsonify, request
from werkzeug.exceptions import HTTPException, Unauthorized

from ..errors import SpendbookError
from ..logging_config import get_logger

logger = get_logger(__name__)


def current_user_id() -> str:
    """Return the caller's user id; identity itself is issued upstream."""

    header = current_app.config.get("USER_HEADER", "X-User-Id")
    user_id = (request.headers.get(header) or "").strip()
    if not user_id:
        raise Unauthorized(f"Missing {header} header")
    return user_id


def json_body() -> dict[str, Any]:
    """Return the request JSON object, or an empty dict."""

    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def validation_error(errors: dict[str, list[str]]):
    messages: Iterable[str] = (msg for values in errors.values() for msg in values)
    return (
        jsonify({"message": next(iter(messages), "Invalid input"), "errors": errors}),
        400,
    )


def register_error_handlers(app: Flask) -> None:
    """Translate core errors and HTTP errors into JSON responses."""

    @app.errorhandler(SpendbookError)
    def _handle_core_error(exc: SpendbookError):
        logger.warning(
            "Request rejected",
            extra={"error": type(exc).__name__, "detail": exc.message, "path": request.path},
        )
        return jsonify({"message": exc.message}), exc.status_code

    @app.errorhandler(HTTPException)
    def _handle_http_error(exc: HTTPException):
        return jsonify({"message": exc.description}), exc.code

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):  # pragma: no cover - safety net
        logger.exception("Unhandled error", extra={"path": request.path})
        return jsonify({"message": "Server error"}), 500
