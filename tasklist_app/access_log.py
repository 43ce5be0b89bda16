"""Per-request access logging."""

from __future__ import annotations

import logging
import os
import time

from flask import Flask, Response, g, request

ACCESS_LOGGER_NAME = "tasklist_app.access"
ACCESS_LOG_FORMAT = "%(asctime)s - %(message)s"

access_logger = logging.getLogger(ACCESS_LOGGER_NAME)


def _attach_file_handler(path: str) -> None:
    """Append access lines to *path* once, even across repeated app creation."""
    path = os.path.abspath(path)
    for handler in access_logger.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == path:
            return
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(logging.Formatter(ACCESS_LOG_FORMAT))
    access_logger.addHandler(handler)


def init_app(app: Flask) -> None:
    """Log one line per response: client, method, path, status and latency."""
    log_path = app.config.get("ACCESS_LOG_PATH")
    if log_path:
        _attach_file_handler(str(log_path))

    @app.before_request
    def _start_timer() -> None:
        g.request_started = time.perf_counter()

    @app.after_request
    def _log_response(response: Response) -> Response:
        started = g.get("request_started")
        elapsed_ms = (time.perf_counter() - started) * 1000 if started else 0.0
        access_logger.info(
            '%s "%s %s" %s %.1fms',
            request.remote_addr or "-",
            request.method,
            request.full_path.rstrip("?"),
            response.status_code,
            elapsed_ms,
        )
        return response
