"""
Task-list service Flask application factory.

Provides the ``create_app`` factory that assembles the service: config,
the SQLAlchemy extension, the process-scoped ``TokenService`` (signing
secret plus revocation set), rate limiting, access logging, JSON error
handlers and the API blueprints.

The service registers two blueprints under ``/api``:
  * **auth_bp** -- signup, login and logout.
  * **tasks_bp** -- ownership-scoped task CRUD and search.

Key Concepts Demonstrated:
- Application factory pattern (``create_app``)
- One ``TokenService`` per application, built once at startup
- Lazy blueprint import to avoid circular dependencies
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from flask import Flask
from flask_sqlalchemy import SQLAlchemy

from .config import get_config, load_signing_secret

db = SQLAlchemy()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def _ensure_sqlite_db_parent_exists(database_uri: str) -> None:
    """Create parent directories for file-based SQLite URIs when missing."""
    sqlite_prefix = "sqlite:///"
    if not database_uri.startswith(sqlite_prefix):
        return

    sqlite_path = database_uri[len(sqlite_prefix):].split("?", 1)[0]
    if sqlite_path in ("", ":memory:"):
        return

    Path(sqlite_path).parent.mkdir(parents=True, exist_ok=True)


def create_app(
    config_name: str | None = None,
    config_overrides: Mapping[str, Any] | None = None,
) -> Flask:
    """
    Create and configure the task-list application.

    Args:
        config_name: Configuration environment name (``"development"``,
            ``"testing"``, ``"production"``).  When ``None``, the value is
            read from ``FLASK_ENV``, defaulting to ``"development"``.
        config_overrides: Optional settings applied on top of the
            configuration class, e.g. to re-enable rate limiting in a test.

    Returns:
        A fully configured Flask application with tables created.

    Raises:
        RuntimeError: No signing secret is configured.
    """
    from .access_log import init_app as init_access_log
    from .errors import register_error_handlers
    from .rate_limit import init_app as init_rate_limit
    from .tokens import TokenService

    app = Flask(__name__, instance_relative_config=True)
    config_class = get_config(config_name)
    app.config.from_object(config_class)
    if config_overrides:
        app.config.update(config_overrides)

    logger.info("Creating task-list app with config: %s", config_class.__name__)

    os.makedirs(app.instance_path, exist_ok=True)
    _ensure_sqlite_db_parent_exists(app.config.get("SQLALCHEMY_DATABASE_URI", ""))

    db.init_app(app)

    # The revocation set lives inside this service for the app's lifetime.
    app.extensions["token_service"] = TokenService(
        load_signing_secret(testing=bool(app.config.get("TESTING"))),
        expiry_seconds=app.config["JWT_EXPIRY_SECONDS"],
        leeway_seconds=app.config["JWT_CLOCK_SKEW_SECONDS"],
    )

    init_rate_limit(app)
    init_access_log(app)
    register_error_handlers(app)

    from .routes.auth import auth_bp
    from .routes.tasks import tasks_bp

    app.register_blueprint(auth_bp, url_prefix="/api")
    app.register_blueprint(tasks_bp, url_prefix="/api")

    with app.app_context():
        db.create_all()
        logger.info("Task-list database tables created")

    return app
