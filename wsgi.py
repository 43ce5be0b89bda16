"""WSGI entry point for the task-list service."""

import os

from tasklist_app import create_app

app = create_app(os.getenv("FLASK_ENV", "production"))
