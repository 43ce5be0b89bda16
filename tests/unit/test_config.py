"""Unit tests for configuration resolution and signing-secret loading."""

from __future__ import annotations

import pytest

from tasklist_app.config import (
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    get_config,
    load_signing_secret,
)

pytestmark = pytest.mark.unit

SECRET_VARS = (
    "JWT_SECRET_KEY",
    "JWT_SECRET_KEY_PATH",
    "TEST_JWT_SECRET_KEY",
    "TEST_JWT_SECRET_KEY_PATH",
)


@pytest.fixture
def clean_secret_env(monkeypatch):
    for name in SECRET_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.mark.parametrize(
    ("env", "expected"),
    [
        ("development", DevelopmentConfig),
        ("testing", TestingConfig),
        ("production", ProductionConfig),
        ("unknown", DevelopmentConfig),
    ],
)
def test_get_config_resolves_by_name(env, expected):
    assert get_config(env) is expected


def test_default_token_window_is_one_hour():
    assert TestingConfig.JWT_EXPIRY_SECONDS == 3600


def test_testing_disables_rate_limit_and_production_enables_it():
    assert TestingConfig.RATELIMIT_ENABLED is False
    assert ProductionConfig.RATELIMIT_ENABLED is True
    assert ProductionConfig.RATELIMIT_STRATEGY == "moving-window"


def test_missing_secret_raises(clean_secret_env):
    with pytest.raises(RuntimeError, match="JWT_SECRET_KEY"):
        load_signing_secret(testing=False)


def test_raw_secret_takes_precedence_over_path(clean_secret_env, tmp_path):
    secret_file = tmp_path / "secret"
    secret_file.write_text("from-file", encoding="utf-8")
    clean_secret_env.setenv("JWT_SECRET_KEY", "from-env")
    clean_secret_env.setenv("JWT_SECRET_KEY_PATH", str(secret_file))

    assert load_signing_secret(testing=False) == "from-env"


def test_secret_loaded_from_path(clean_secret_env, tmp_path):
    secret_file = tmp_path / "secret"
    secret_file.write_text("from-file\n", encoding="utf-8")
    clean_secret_env.setenv("JWT_SECRET_KEY_PATH", str(secret_file))

    assert load_signing_secret(testing=False) == "from-file"


def test_unreadable_secret_path_raises(clean_secret_env, tmp_path):
    clean_secret_env.setenv("JWT_SECRET_KEY_PATH", str(tmp_path / "missing"))

    with pytest.raises(RuntimeError, match="Unable to read"):
        load_signing_secret(testing=False)


def test_testing_prefers_test_secret(clean_secret_env):
    clean_secret_env.setenv("JWT_SECRET_KEY", "prod")
    clean_secret_env.setenv("TEST_JWT_SECRET_KEY", "test")

    assert load_signing_secret(testing=True) == "test"
    assert load_signing_secret(testing=False) == "prod"


def test_testing_falls_back_to_standard_secret(clean_secret_env):
    clean_secret_env.setenv("JWT_SECRET_KEY", "prod")

    assert load_signing_secret(testing=True) == "prod"
