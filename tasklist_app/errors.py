"""
Error taxonomy and JSON error handlers.

Two families live here:

* ``TokenError`` subclasses are *internal* reasons raised by the token
  service and the auth gate.  They never reach a client directly.
* ``ApiError`` subclasses are *outward-facing* and carry the HTTP status
  code and message rendered in the ``{"error": "..."}`` envelope.

``register_error_handlers`` wires both the ``ApiError`` family and a
catch-all handler onto the application so unexpected failures are logged
and surfaced as a generic 500 without leaking detail.
"""

from __future__ import annotations

import logging

from flask import Flask, Response, jsonify
from werkzeug.exceptions import HTTPException

from . import db

logger = logging.getLogger(__name__)


# =====================================================================
# Internal token failure reasons
# =====================================================================


class TokenError(Exception):
    """Base class for bearer-token failures."""

    reason = "invalid"


class MissingToken(TokenError):
    """No bearer token, wrong scheme, or empty token segment."""

    reason = "missing"


class MalformedToken(TokenError):
    """Token cannot be decoded or carries unusable claims."""

    reason = "malformed"


class SignatureInvalid(TokenError):
    """Token signature does not match the signing secret."""

    reason = "bad_signature"


class TokenExpired(TokenError):
    """Token ``exp`` claim is in the past."""

    reason = "expired"


class TokenRevoked(TokenError):
    """Token is present in the revocation set."""

    reason = "revoked"


# =====================================================================
# Outward-facing API errors
# =====================================================================


class ApiError(Exception):
    """An error translated into a JSON response with a fixed status code."""

    status_code = 500
    message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationFailed(ApiError):
    status_code = 400
    message = "Bad request"


class Unauthorized(ApiError):
    status_code = 401
    message = "Unauthorized"


class Forbidden(ApiError):
    status_code = 403
    message = "Forbidden"


class NotFound(ApiError):
    status_code = 404
    message = "Resource not found"


class DuplicateIdentity(ApiError):
    status_code = 409
    message = "Username already exists"


class Internal(ApiError):
    status_code = 500


def _json_error(message: str, status_code: int) -> tuple[Response, int]:
    """Build the standard ``{"error": ...}`` envelope."""
    return jsonify({"error": message}), status_code


def register_error_handlers(app: Flask) -> None:
    """Attach JSON error handlers for API, HTTP and unexpected errors."""

    @app.errorhandler(ApiError)
    def handle_api_error(error: ApiError) -> tuple[Response, int]:
        return _json_error(error.message, error.status_code)

    @app.errorhandler(HTTPException)
    def handle_http_exception(error: HTTPException) -> tuple[Response, int]:
        status_code = error.code or 500
        if status_code == 404:
            return _json_error("Resource not found", 404)
        if status_code == 429:
            return _json_error(
                "Too many requests from this IP, please try again later.", 429
            )
        return _json_error(error.name, status_code)

    @app.errorhandler(Exception)
    def handle_unexpected(error: Exception) -> tuple[Response, int]:
        db.session.rollback()
        logger.exception("Internal server error: %s", error)
        return _json_error(Internal.message, 500)
