"""
Request authentication gate.

Extracts the bearer token from the ``Authorization`` header, asks the
application's ``TokenService`` to verify it, and binds the resolved
identity to ``flask.g`` for downstream handlers.

Internal failure reasons are collapsed into two outward classes:

    ==================  ==============
    Internal reason     Outward error
    ==================  ==============
    MissingToken        401 Unauthorized
    TokenRevoked        401 Unauthorized
    MalformedToken      403 Forbidden
    SignatureInvalid    403 Forbidden
    TokenExpired        403 Forbidden
    ==================  ==============

Key Concepts Demonstrated:
- Decorator pattern for endpoint authentication (``require_auth``)
- Using ``flask.g`` to store request-scoped identity
- Translating internal reasons to a stable outward contract
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from functools import wraps

from flask import Request, current_app, g, request

from .errors import (
    ApiError,
    Forbidden,
    MissingToken,
    TokenError,
    TokenRevoked,
    Unauthorized,
)
from .tokens import Principal, TokenService

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def extract_bearer_token(auth_header: str | None) -> str:
    """
    Return the token segment of an ``Authorization: Bearer <token>`` header.

    Raises:
        MissingToken: The header is absent, uses another scheme, or has no
            token segment.
    """
    if not auth_header or not auth_header.startswith(BEARER_PREFIX):
        raise MissingToken()
    token = auth_header[len(BEARER_PREFIX):].strip()
    if not token:
        raise MissingToken()
    return token


def _outward_error(error: TokenError) -> ApiError:
    if isinstance(error, MissingToken):
        return Unauthorized("Missing or invalid Authorization header")
    if isinstance(error, TokenRevoked):
        return Unauthorized("Token has been revoked")
    return Forbidden("Invalid or expired token")


def authenticate(req: Request, token_service: TokenService) -> tuple[Principal, str]:
    """
    Authenticate *req* and return the principal plus the raw token.

    Raises:
        Unauthorized: Missing token or revoked token.
        Forbidden: Malformed, badly signed or expired token.
    """
    try:
        token = extract_bearer_token(req.headers.get("Authorization"))
        principal = token_service.verify(token)
    except TokenError as exc:
        logger.warning(
            "Rejected %s %s: token %s", req.method, req.path, exc.reason
        )
        raise _outward_error(exc) from exc
    return principal, token


def get_token_service() -> TokenService:
    """Return the ``TokenService`` owned by the current application."""
    return current_app.extensions["token_service"]


def require_auth(view_func: Callable):
    """
    Decorator that enforces bearer-token authentication on an endpoint.

    On success, ``g.principal``, ``g.user_id`` and ``g.token`` are set
    before the wrapped view runs.  On failure the raised ``ApiError`` is
    rendered by the application's error handlers.
    """

    @wraps(view_func)
    def wrapper(*args, **kwargs):
        principal, token = authenticate(request, get_token_service())
        g.principal = principal
        g.user_id = principal.user_id
        g.token = token
        return view_func(*args, **kwargs)

    return wrapper
