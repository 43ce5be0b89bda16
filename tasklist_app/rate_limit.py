"""
Rate limiting for the task-list API.

Uses Flask-Limiter keyed by client address.  The ``moving-window``
strategy gives a sliding window: a client may make at most
``RATELIMIT_DEFAULT`` requests in any trailing window, not per
calendar-aligned bucket.  Rejections surface as 429 through the JSON
error handlers.
"""

from __future__ import annotations

import logging

from flask import Flask
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

logger = logging.getLogger(__name__)


def init_app(app: Flask) -> Limiter:
    """Create a limiter bound to *app* from its ``RATELIMIT_*`` settings."""
    limiter = Limiter(
        get_remote_address,
        app=app,
        default_limits=[app.config["RATELIMIT_DEFAULT"]],
        strategy=app.config["RATELIMIT_STRATEGY"],
        storage_uri=app.config["RATELIMIT_STORAGE_URI"],
        enabled=app.config["RATELIMIT_ENABLED"],
    )
    logger.info(
        "Rate limiting %s: %s (%s)",
        "enabled" if app.config["RATELIMIT_ENABLED"] else "disabled",
        app.config["RATELIMIT_DEFAULT"],
        app.config["RATELIMIT_STRATEGY"],
    )
    return limiter
