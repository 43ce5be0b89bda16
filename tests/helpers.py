"""Token-minting helpers shared by the test suites."""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

TEST_SECRET = "test-jwt-secret-key-for-local-tests-123456"
DEFAULT_TEST_USER_ID = 1


def token_claims(
    user_id: Any = DEFAULT_TEST_USER_ID,
    *,
    expired: bool = False,
) -> dict[str, Any]:
    """Build a full claim set with a one-hour window (or one already past)."""
    now = datetime.now(timezone.utc)
    if expired:
        issued_at = now - timedelta(hours=2)
        expires_at = now - timedelta(hours=1)
    else:
        issued_at = now
        expires_at = now + timedelta(hours=1)
    return {
        "user_id": user_id,
        "iat": int(issued_at.timestamp()),
        "exp": int(expires_at.timestamp()),
        "jti": uuid.uuid4().hex,
    }


def create_test_token(
    user_id: Any = DEFAULT_TEST_USER_ID,
    *,
    secret: str = TEST_SECRET,
    expired: bool = False,
    algorithm: str = "HS256",
) -> str:
    """Create a signed test token, bypassing the application's token service."""
    return jwt.encode(token_claims(user_id, expired=expired), secret, algorithm=algorithm)


def auth_headers(token: str) -> dict[str, str]:
    """Build common JSON API headers with bearer token auth."""
    return {
        "Authorization": f"Bearer {token}",
        "Content-Type": "application/json",
        "Accept": "application/json",
    }
