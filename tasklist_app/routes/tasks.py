"""
REST API endpoints for tasks.

Every endpoint is protected by ``require_auth`` and every store call is
scoped through ``access.scope_filter``, so a user can only see and change
their own tasks.  A task owned by someone else answers exactly like a task
that does not exist.

Endpoints:
    GET    /api/tasks        - List / search tasks (title, description, status)
    GET    /api/tasks/<id>   - Retrieve a single task
    POST   /api/tasks        - Create a new task
    PUT    /api/tasks/<id>   - Update a task (partial)
    DELETE /api/tasks/<id>   - Delete a task
"""

from __future__ import annotations

import logging
from typing import Any

from flask import Blueprint, Response, g, jsonify, request

from ..access import scope_filter
from ..auth import require_auth
from ..errors import NotFound, ValidationFailed
from ..models import TaskStatus
from ..stores import TaskStore

logger = logging.getLogger(__name__)

tasks_bp = Blueprint("task_api", __name__)

MAX_TITLE_LENGTH = 200
SEARCH_TERMS = ("title", "description", "status")
TASK_NOT_FOUND = "Task not found"


# =====================================================================
# Helper Functions
# =====================================================================


def validate_task_data(data: dict[str, Any], required_fields: list[str] | None = None) -> None:
    """
    Validate an incoming task payload.

    Checks required fields, that ``title``/``description`` are non-blank
    strings when present, title length, and ``status`` enum membership.

    Raises:
        ValidationFailed: Describing the first problem found.
    """
    for field in required_fields or []:
        value = data.get(field)
        if not isinstance(value, str) or not value.strip():
            raise ValidationFailed(f"'{field}' is required")

    for field in ("title", "description"):
        if field in data:
            value = data[field]
            if not isinstance(value, str) or not value.strip():
                raise ValidationFailed(f"'{field}' must be a non-empty string")

    if "title" in data and len(data["title"]) > MAX_TITLE_LENGTH:
        raise ValidationFailed(f"Title must be {MAX_TITLE_LENGTH} characters or less")

    if "status" in data and data["status"] not in TaskStatus.values():
        raise ValidationFailed(f"Invalid status. Must be one of: {TaskStatus.values()}")


def _json_body() -> dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not data:
        raise ValidationFailed("Request body must be JSON")
    return data


# =====================================================================
# API Endpoints
# =====================================================================


@tasks_bp.route("/tasks", methods=["GET"])
@require_auth
def list_tasks() -> tuple[Response, int]:
    """
    List the authenticated user's tasks, newest first.

    Query Parameters:
        title: Case-insensitive substring of the title.
        description: Case-insensitive substring of the description.
        status: Exact status (pending, completed).
    """
    terms = {term: request.args.get(term) for term in SEARCH_TERMS}
    tasks = TaskStore().find(scope_filter(g.principal, terms))
    logger.info("GET /api/tasks - %d tasks for user_id=%s", len(tasks), g.user_id)
    return jsonify({"tasks": [task.to_dict() for task in tasks], "count": len(tasks)}), 200


@tasks_bp.route("/tasks/<int:task_id>", methods=["GET"])
@require_auth
def get_task(task_id: int) -> tuple[Response, int]:
    task = TaskStore().find_one(scope_filter(g.principal, {"task_id": task_id}))
    if task is None:
        raise NotFound(TASK_NOT_FOUND)
    return jsonify(task.to_dict()), 200


@tasks_bp.route("/tasks", methods=["POST"])
@require_auth
def create_task() -> tuple[Response, int]:
    """
    Create a task owned by the authenticated user.

    Request Body (JSON):
        title: Task title (required)
        description: Task description (required)
        status: pending | completed (optional, default: pending)

    Any owner field in the body is ignored; the owner always comes from
    the token.
    """
    data = _json_body()
    if data.get("status") is None:
        data.pop("status", None)
    validate_task_data(data, required_fields=["title", "description"])

    task = TaskStore().create(g.user_id, data)
    return jsonify(task.to_dict()), 201


@tasks_bp.route("/tasks/<int:task_id>", methods=["PUT"])
@require_auth
def update_task(task_id: int) -> tuple[Response, int]:
    """
    Update an existing task.

    Only ``title``, ``description`` and ``status`` present in the body are
    changed.  Returns 404 when the task does not exist for this user.
    """
    data = _json_body()
    validate_task_data(data)

    task = TaskStore().update_one(scope_filter(g.principal, {"task_id": task_id}), data)
    if task is None:
        raise NotFound(TASK_NOT_FOUND)
    logger.info("Updated task %s for user_id=%s", task_id, g.user_id)
    return jsonify(task.to_dict()), 200


@tasks_bp.route("/tasks/<int:task_id>", methods=["DELETE"])
@require_auth
def delete_task(task_id: int) -> tuple[Response, int]:
    if not TaskStore().delete_one(scope_filter(g.principal, {"task_id": task_id})):
        raise NotFound(TASK_NOT_FOUND)
    logger.info("Deleted task %s for user_id=%s", task_id, g.user_id)
    return jsonify({"message": "Task deleted successfully"}), 200
