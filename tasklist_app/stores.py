"""
Record stores for users and tasks.

Thin data-access wrappers around the Flask-SQLAlchemy session.  The task
store never builds its own ownership predicate: every method takes a
``TaskFilter`` produced by ``access.scope_filter``, so a caller cannot
reach another user's rows by accident.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from werkzeug.security import check_password_hash, generate_password_hash

from . import db
from .access import TaskFilter
from .errors import DuplicateIdentity
from .models import Task, TaskStatus, User

logger = logging.getLogger(__name__)

# Only these fields may be written through create/update.
WRITABLE_TASK_FIELDS = ("title", "description", "status")


@lru_cache(maxsize=1)
def _dummy_password_hash() -> str:
    return generate_password_hash("tasklist-dummy-password")


class UserStore:
    """Lookup and creation of user records."""

    def __init__(self, session: Session | None = None) -> None:
        self.session = session if session is not None else db.session

    def find_by_username(self, username: str) -> User | None:
        return self.session.scalar(select(User).where(User.username == username))

    def create(self, username: str, password: str) -> User:
        """
        Persist a new user with a hashed password.

        Raises:
            DuplicateIdentity: *username* is already taken.
        """
        if self.find_by_username(username) is not None:
            raise DuplicateIdentity()

        user = User(username=username)
        user.set_password(password)
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError as exc:
            # Lost a race with a concurrent signup for the same name.
            self.session.rollback()
            raise DuplicateIdentity() from exc
        logger.info("Created user id=%s", user.id)
        return user

    def check_credentials(self, username: str, password: str) -> User | None:
        """
        Return the user when *password* matches, otherwise ``None``.

        Unknown usernames still run a hash comparison so both failure paths
        take comparable time.
        """
        user = self.find_by_username(username)
        if user is None:
            check_password_hash(_dummy_password_hash(), password)
            return None
        if not user.check_password(password):
            return None
        return user


class TaskStore:
    """CRUD and filtered search over task records."""

    def __init__(self, session: Session | None = None) -> None:
        self.session = session if session is not None else db.session

    def find(self, task_filter: TaskFilter) -> list[Task]:
        stmt = task_filter.apply(select(Task)).order_by(Task.created_at.desc(), Task.id.desc())
        return list(self.session.scalars(stmt).all())

    def find_one(self, task_filter: TaskFilter) -> Task | None:
        return self.session.scalar(task_filter.apply(select(Task)))

    def create(self, owner_id: int, fields: Mapping[str, Any]) -> Task:
        task = Task(
            user_id=owner_id,
            title=fields["title"],
            description=fields["description"],
            status=fields.get("status") or TaskStatus.PENDING.value,
        )
        self.session.add(task)
        self.session.commit()
        logger.info("Created task id=%s for user_id=%s", task.id, owner_id)
        return task

    def update_one(self, task_filter: TaskFilter, patch: Mapping[str, Any]) -> Task | None:
        task = self.find_one(task_filter)
        if task is None:
            return None
        for field in WRITABLE_TASK_FIELDS:
            if field in patch:
                setattr(task, field, patch[field])
        # onupdate only fires when a column changed; always bump on update.
        task.updated_at = datetime.now(timezone.utc)
        self.session.commit()
        return task

    def delete_one(self, task_filter: TaskFilter) -> bool:
        task = self.find_one(task_filter)
        if task is None:
            return False
        self.session.delete(task)
        self.session.commit()
        return True
