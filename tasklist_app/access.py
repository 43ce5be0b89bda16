"""
Ownership scoping for task queries.

``scope_filter`` merges the owner term derived from the authenticated
principal with any caller-supplied predicate terms.  The owner term is
always present and cannot be replaced: caller terms naming the owner are
discarded.  Every ``TaskStore`` call receives a ``TaskFilter`` built here.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from sqlalchemy import Select

from .errors import ValidationFailed
from .models import Task, TaskStatus
from .tokens import Principal

# Caller-supplied spellings of the owner term; never honoured.
OWNER_KEYS = frozenset({"user_id", "owner_id", "ownerId"})


@dataclass(frozen=True)
class TaskFilter:
    """
    Conjunction of predicate terms over ``Task`` rows.

    ``owner_id`` is mandatory; every other term is optional and imposes no
    constraint when ``None``.
    """

    owner_id: int
    task_id: int | None = None
    title: str | None = None
    description: str | None = None
    status: str | None = None

    def apply(self, stmt: Select) -> Select:
        """Return *stmt* narrowed by every present term."""
        stmt = stmt.where(Task.user_id == self.owner_id)
        if self.task_id is not None:
            stmt = stmt.where(Task.id == self.task_id)
        # Case-insensitive substring match with LIKE wildcards escaped.
        if self.title is not None:
            stmt = stmt.where(Task.title.icontains(self.title, autoescape=True))
        if self.description is not None:
            stmt = stmt.where(Task.description.icontains(self.description, autoescape=True))
        if self.status is not None:
            stmt = stmt.where(Task.status == self.status)
        return stmt


def _clean_term(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None


def scope_filter(principal: Principal, extra: Mapping[str, Any] | None = None) -> TaskFilter:
    """
    Build the ownership-scoped filter for *principal*.

    Args:
        principal: Authenticated identity from the auth gate.
        extra: Optional caller terms: ``task_id``, ``title``,
            ``description``, ``status``.  Owner terms and unknown keys are
            ignored; blank strings count as absent.

    Raises:
        ValidationFailed: ``status`` is not a valid ``TaskStatus`` value.
    """
    terms = {
        key: value for key, value in (extra or {}).items() if key not in OWNER_KEYS
    }

    status = _clean_term(terms.get("status"))
    if status is not None and status not in TaskStatus.values():
        raise ValidationFailed(f"Invalid status. Must be one of: {TaskStatus.values()}")

    task_id = terms.get("task_id")
    return TaskFilter(
        owner_id=principal.user_id,
        task_id=int(task_id) if task_id is not None else None,
        title=_clean_term(terms.get("title")),
        description=_clean_term(terms.get("description")),
        status=status,
    )
