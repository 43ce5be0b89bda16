"""
Bearer-token issuance, verification and revocation.

Tokens are HS256-signed JSON Web Tokens carrying the following claims:

    - ``user_id`` -- integer primary key of the authenticated user.
    - ``iat``     -- issued-at timestamp (UTC epoch seconds).
    - ``exp``     -- expiration timestamp; ``iat`` plus a fixed window.
    - ``jti``     -- random unique id, so two tokens issued to the same
      user in the same second are still distinct strings and can be
      revoked independently.

A ``TokenService`` owns the signing secret and a ``RevocationSet``.  One
instance is built per application in ``create_app`` and stored on
``app.extensions["token_service"]``.

Key Concepts Demonstrated:
- Symmetric signing with PyJWT, restricted to a single algorithm
- Revocation check ahead of any cryptographic work
- Mapping PyJWT exceptions onto a small, explicit failure taxonomy
- Lock-guarded shared state with expiry-based pruning
"""

from __future__ import annotations

import logging
import threading
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from .errors import MalformedToken, SignatureInvalid, TokenExpired, TokenRevoked

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
REQUIRED_TOKEN_CLAIMS = ["user_id", "iat", "exp", "jti"]
DEFAULT_EXPIRY_SECONDS = 3600
PRUNE_INTERVAL_SECONDS = 60


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Principal:
    """Identity resolved from a verified token."""

    user_id: int


class RevocationSet:
    """
    Thread-safe set of revoked token strings.

    Each entry remembers the token's encoded expiry (epoch seconds, or
    ``None`` when it could not be read) so that entries can be pruned once
    the token would be rejected as expired anyway.
    """

    def __init__(self) -> None:
        self._entries: dict[str, float | None] = {}
        self._lock = threading.Lock()

    def add(self, token: str, expires_at: float | None = None) -> bool:
        """Insert *token*; return False if it was already present."""
        with self._lock:
            if token in self._entries:
                return False
            self._entries[token] = expires_at
            return True

    def __contains__(self, token: object) -> bool:
        with self._lock:
            return token in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def prune(self, now: float) -> int:
        """Drop entries whose expiry is at or before *now*; return the count removed."""
        with self._lock:
            stale = [
                token
                for token, expires_at in self._entries.items()
                if expires_at is not None and expires_at <= now
            ]
            for token in stale:
                del self._entries[token]
        return len(stale)


class TokenService:
    """
    Issue, verify and revoke bearer tokens for a single signing secret.

    Args:
        secret: HS256 signing secret, loaded from configuration.
        expiry_seconds: Fixed lifetime of every issued token.
        leeway_seconds: Tolerance applied to ``exp`` during verification.
        revocations: Revocation set to use; a fresh one when omitted.
        clock: Returns the current UTC time.  Injectable for tests.
    """

    def __init__(
        self,
        secret: str,
        *,
        expiry_seconds: int = DEFAULT_EXPIRY_SECONDS,
        leeway_seconds: int = 0,
        revocations: RevocationSet | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if not secret:
            raise ValueError("secret must be a non-empty string")
        self._secret = secret
        self.expiry_seconds = int(expiry_seconds)
        self.leeway_seconds = int(leeway_seconds)
        self.revocations = revocations if revocations is not None else RevocationSet()
        self._clock = clock
        self._last_prune = 0.0

    def issue(self, user_id: int) -> str:
        """
        Create a signed token for *user_id*.

        Raises:
            ValueError: If *user_id* is not a positive integer.
        """
        if isinstance(user_id, bool) or not isinstance(user_id, int) or user_id <= 0:
            raise ValueError("user_id must be a positive integer")

        now = self._clock()
        expires_at = now + timedelta(seconds=self.expiry_seconds)
        payload: dict[str, Any] = {
            "user_id": user_id,
            "iat": int(now.timestamp()),
            "exp": int(expires_at.timestamp()),
            "jti": uuid.uuid4().hex,
        }
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def verify(self, token: str) -> Principal:
        """
        Resolve *token* to a ``Principal``.

        Raises:
            TokenRevoked: The token string has been revoked.
            MalformedToken: The token cannot be decoded or its claims are unusable.
            SignatureInvalid: The signature (or algorithm) does not match.
            TokenExpired: The token's ``exp`` has passed.
        """
        if token in self.revocations:
            raise TokenRevoked()

        # Time claims are checked against the service clock below, not PyJWT's.
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={
                    "require": REQUIRED_TOKEN_CLAIMS,
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        except (jwt.InvalidSignatureError, jwt.InvalidAlgorithmError) as exc:
            raise SignatureInvalid() from exc
        except jwt.InvalidTokenError as exc:
            raise MalformedToken() from exc

        exp = payload["exp"]
        if isinstance(exp, bool) or not isinstance(exp, (int, float)):
            raise MalformedToken()
        if self._clock().timestamp() - self.leeway_seconds >= exp:
            raise TokenExpired()

        user_id = payload.get("user_id")
        if isinstance(user_id, bool) or not isinstance(user_id, int) or user_id <= 0:
            raise MalformedToken()
        return Principal(user_id=user_id)

    def revoke(self, token: str) -> None:
        """Add *token* to the revocation set.  Repeated calls are no-ops."""
        now = self._clock().timestamp()
        if self.revocations.add(token, self._expiry_of(token)):
            logger.info("Token revoked (%d entries)", len(self.revocations))
        if now - self._last_prune >= PRUNE_INTERVAL_SECONDS:
            self._last_prune = now
            removed = self.revocations.prune(now - self.leeway_seconds)
            if removed:
                logger.info("Pruned %d expired revocation entries", removed)

    @staticmethod
    def _expiry_of(token: str) -> float | None:
        """Read ``exp`` without verifying; ``None`` when it is unavailable."""
        try:
            claims = jwt.decode(token, options={"verify_signature": False})
        except jwt.InvalidTokenError:
            return None
        exp = claims.get("exp")
        if isinstance(exp, bool) or not isinstance(exp, (int, float)):
            return None
        return float(exp)
