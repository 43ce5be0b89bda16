"""
Account and session endpoints.

Endpoints:
    GET  /api/health  -- Liveness probe (public).
    POST /api/signup  -- Create a new user account (public).
    POST /api/login   -- Verify credentials and issue a bearer token (public).
    POST /api/logout  -- Revoke the presented bearer token (authenticated).

Login answers every credential failure with the same 401 body, so a
caller cannot tell an unknown username from a wrong password.
"""

from __future__ import annotations

import logging
import os
from typing import Any

from flask import Blueprint, Response, g, jsonify, request

from ..auth import get_token_service, require_auth
from ..errors import Unauthorized, ValidationFailed
from ..stores import UserStore

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth_api", __name__)

MAX_USERNAME_LENGTH = 80
INVALID_CREDENTIALS = "Invalid username or password"


# =====================================================================
# Helper Functions
# =====================================================================


def _json_body() -> dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationFailed("Request body must be JSON")
    return data


def _validate_required_fields(data: dict[str, Any], required_fields: list[str]) -> None:
    """
    Check that all *required_fields* are present, string-typed and non-blank.

    Raises:
        ValidationFailed: Naming the first missing or blank field.
    """
    for field in required_fields:
        value = data.get(field)
        if not isinstance(value, str) or not value.strip():
            raise ValidationFailed(f"'{field}' is required")


# =====================================================================
# API Endpoints
# =====================================================================


@auth_bp.route("/health", methods=["GET"])
def health_check() -> tuple[Response, int]:
    """Public liveness probe for load balancers and orchestrators."""
    return jsonify(
        {
            "status": "healthy",
            "service": "tasklist",
            "environment": os.getenv("ENVIRONMENT", "unknown"),
        }
    ), 200


@auth_bp.route("/signup", methods=["POST"])
def signup() -> tuple[Response, int]:
    """
    Register a new user account.

    Returns:
        201 with the created user's public fields.
        400 if ``username`` or ``password`` is missing or too long.
        409 if the username is already taken.
    """
    data = _json_body()
    _validate_required_fields(data, ["username", "password"])

    username = data["username"].strip()
    if len(username) > MAX_USERNAME_LENGTH:
        raise ValidationFailed(f"username must be {MAX_USERNAME_LENGTH} characters or less")

    user = UserStore().create(username, data["password"])
    return jsonify({"message": "User created successfully", "user": user.to_dict()}), 201


@auth_bp.route("/login", methods=["POST"])
def login() -> tuple[Response, int]:
    """
    Authenticate a user and issue a bearer token.

    Returns:
        200 with ``message`` and ``token`` on success.
        400 if required fields are missing.
        401 if the credentials do not match.
    """
    data = _json_body()
    _validate_required_fields(data, ["username", "password"])

    user = UserStore().check_credentials(data["username"].strip(), data["password"])
    if user is None:
        logger.info("Login failed")
        raise Unauthorized(INVALID_CREDENTIALS)

    token = get_token_service().issue(user.id)
    logger.info("Login succeeded for user_id=%s", user.id)
    return jsonify({"message": "Login successful", "token": token}), 200


@auth_bp.route("/logout", methods=["POST"])
@require_auth
def logout() -> tuple[Response, int]:
    """Revoke the bearer token used for this request."""
    get_token_service().revoke(g.token)
    logger.info("Logout for user_id=%s", g.user_id)
    return jsonify({"message": "Logout successful"}), 200
