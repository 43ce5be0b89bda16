"""
Configuration for the task-list service.

Provides environment-aware configuration classes following Flask's
recommended pattern: a shared ``Config`` base class holds defaults, and
environment-specific subclasses (``DevelopmentConfig``, ``TestingConfig``,
``ProductionConfig``) override only what differs.  The ``get_config``
factory resolves the correct class at runtime based on an environment
variable or an explicit argument.

Key Concepts Demonstrated:
- Inheritance-based configuration hierarchy
- Environment variable overrides with sensible defaults
- Signing secret injected from the environment, never from source
- Rate-limit and access-log settings consumed by extensions
"""

from __future__ import annotations

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def _load_secret(raw_env_var: str, path_env_var: str) -> str:
    """
    Load the signing secret from a raw environment variable or a file path.

    The raw variable takes precedence over the path variable so that
    orchestrators can inject secrets directly without mounting files.
    """
    raw_secret = os.environ.get(raw_env_var, "").strip()
    if raw_secret:
        return raw_secret

    secret_path = os.environ.get(path_env_var, "").strip()
    if secret_path:
        try:
            secret = Path(secret_path).read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise RuntimeError(
                f"Unable to read JWT secret file at '{secret_path}' from {path_env_var}."
            ) from exc
        if secret:
            return secret
        raise RuntimeError(f"JWT secret file at '{secret_path}' is empty.")

    raise RuntimeError(
        f"Missing JWT secret configuration: set {raw_env_var} or {path_env_var}."
    )


def _has_secret_source(raw_env_var: str, path_env_var: str) -> bool:
    """Return True when at least one secret source variable is configured."""
    return bool(
        os.environ.get(raw_env_var, "").strip()
        or os.environ.get(path_env_var, "").strip()
    )


def load_signing_secret(*, testing: bool) -> str:
    """
    Resolve the HS256 signing secret for the selected environment.

    In testing mode, TEST_* variables are used when configured; otherwise
    it falls back to the standard JWT_* variables.
    """
    if testing and _has_secret_source("TEST_JWT_SECRET_KEY", "TEST_JWT_SECRET_KEY_PATH"):
        return _load_secret("TEST_JWT_SECRET_KEY", "TEST_JWT_SECRET_KEY_PATH")
    return _load_secret("JWT_SECRET_KEY", "JWT_SECRET_KEY_PATH")


class Config:
    """
    Base configuration shared by all environments.

    Attributes:
        SQLALCHEMY_DATABASE_URI: Database connection string (default: local
            SQLite file under ``instance/``).
        JWT_EXPIRY_SECONDS: Fixed lifetime of an issued token.
        JWT_CLOCK_SKEW_SECONDS: Leeway applied to ``exp`` when verifying.
            Issuer and verifier share one clock here, so it defaults to 0.
        RATELIMIT_DEFAULT: Per-client-address request budget.
        RATELIMIT_STRATEGY: ``moving-window`` gives a sliding window.
        ACCESS_LOG_PATH: Optional file that access lines are appended to.
    """

    SQLALCHEMY_TRACK_MODIFICATIONS: bool = False
    SQLALCHEMY_DATABASE_URI: str = os.environ.get(
        "DATABASE_URL",
        f"sqlite:///{BASE_DIR / 'instance' / 'tasklist.db'}",
    )

    JWT_EXPIRY_SECONDS: int = int(os.environ.get("JWT_EXPIRY_SECONDS", "3600"))
    JWT_CLOCK_SKEW_SECONDS: int = int(os.environ.get("JWT_CLOCK_SKEW_SECONDS", "0"))

    RATELIMIT_ENABLED: bool = True
    RATELIMIT_DEFAULT: str = os.environ.get("RATELIMIT_DEFAULT", "100 per hour")
    RATELIMIT_STRATEGY: str = "moving-window"
    RATELIMIT_STORAGE_URI: str = os.environ.get("RATELIMIT_STORAGE_URI", "memory://")

    ACCESS_LOG_PATH: str | None = os.environ.get("ACCESS_LOG_PATH") or None


class DevelopmentConfig(Config):
    """Local development: debug on, testing off."""

    DEBUG: bool = True
    TESTING: bool = False


class TestingConfig(Config):
    """
    Configuration for the automated test suite.

    Uses an in-memory SQLite database so test runs never touch development
    data, and disables rate limiting so the session-scoped app can serve
    the whole suite.  Rate-limit tests build their own app with limiting
    switched back on.
    """

    DEBUG: bool = True
    TESTING: bool = True
    SQLALCHEMY_DATABASE_URI: str = os.environ.get("TEST_DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_ENGINE_OPTIONS: dict = {"pool_pre_ping": True}
    RATELIMIT_ENABLED: bool = False
    ACCESS_LOG_PATH: str | None = None


class ProductionConfig(Config):
    """
    Configuration for production deployments.

    All secrets **must** be supplied through environment variables; there
    is no default signing secret, so ``create_app`` fails fast without one.
    """

    DEBUG: bool = False
    TESTING: bool = False


config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}


def get_config(env: str | None = None) -> type[Config]:
    """
    Resolve a configuration class by environment name.

    Args:
        env: One of ``"development"``, ``"testing"``, or
            ``"production"``.  When ``None``, the ``FLASK_ENV``
            environment variable is consulted, falling back to
            ``"development"`` if unset.

    Returns:
        The configuration class (not an instance).  Falls back to
        ``DevelopmentConfig`` for unrecognised names.
    """
    if env is None:
        env = os.environ.get("FLASK_ENV", "development")
    return config.get(env, config["default"])
