"""
Shared pytest fixtures for the task-list test suite.

Provides the Flask application, test client, database session, the
application's token service, and factories for users and tasks.

Key SDET Concepts Demonstrated:
- Session-scoped app vs function-scoped database for speed and isolation
- Factory-pattern fixtures for flexible test-data creation
- Environment variable overrides for deterministic configuration
- Per-user header fixtures for tenant-isolation scenarios
"""

from __future__ import annotations

import os
from collections.abc import Callable

import pytest
from faker import Faker
from werkzeug.security import generate_password_hash

from tests.helpers import TEST_SECRET, auth_headers

os.environ["FLASK_ENV"] = "testing"
os.environ["TEST_JWT_SECRET_KEY"] = TEST_SECRET

from tasklist_app import create_app, db
from tasklist_app.models import Task, TaskStatus, User
from tasklist_app.tokens import TokenService

fake = Faker()

# Low iteration count keeps fixture users cheap; login still goes through
# check_password_hash, which reads the method from the stored hash.
FAST_HASH_METHOD = "pbkdf2:sha256:1000"


@pytest.fixture(scope="session")
def app():
    """
    Provide the Flask application instance for the entire test session.

    Creates the app once with the 'testing' config and reuses it so the
    application factory is not invoked repeatedly.
    """
    application = create_app("testing")
    yield application


@pytest.fixture(scope="function")
def db_session(app):
    """
    Provide a clean database for each test function.

    Creates all tables before the test, then rolls back and drops them
    afterward so no rows leak between tests.
    """
    with app.app_context():
        db.create_all()
        yield db
        db.session.rollback()
        db.drop_all()


@pytest.fixture(scope="function")
def client(app, db_session):
    """Provide a Flask test client backed by a fresh database."""
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture
def token_service(app) -> TokenService:
    """The process-scoped token service owned by the test app."""
    return app.extensions["token_service"]


@pytest.fixture
def user_factory(db_session) -> Callable[..., User]:
    """Provide a factory that creates and persists User records."""

    def _create_user(username: str | None = None, password: str = "StrongPass123!") -> User:
        user = User(
            username=username or fake.unique.user_name(),
            password_hash=generate_password_hash(password, method=FAST_HASH_METHOD),
        )
        db_session.session.add(user)
        db_session.session.commit()
        return user

    return _create_user


@pytest.fixture
def alice(user_factory) -> User:
    return user_factory(username="alice", password="pw1")


@pytest.fixture
def bob(user_factory) -> User:
    return user_factory(username="bob", password="pw2")


@pytest.fixture
def alice_headers(alice, token_service) -> dict[str, str]:
    """Bearer headers for alice, minted by the app's own token service."""
    return auth_headers(token_service.issue(alice.id))


@pytest.fixture
def bob_headers(bob, token_service) -> dict[str, str]:
    """Bearer headers for bob, used in tenant-isolation assertions."""
    return auth_headers(token_service.issue(bob.id))


@pytest.fixture
def task_factory(db_session) -> Callable[..., Task]:
    """
    Factory fixture that creates Task rows in the test database.

    Title and description default to Faker text; pass explicit values when
    a test searches on them.
    """

    def _create_task(
        *,
        user_id: int,
        title: str | None = None,
        description: str | None = None,
        status: str = TaskStatus.PENDING.value,
    ) -> Task:
        task = Task(
            user_id=user_id,
            title=title or fake.sentence(nb_words=4),
            description=description or fake.paragraph(),
            status=status,
        )
        db_session.session.add(task)
        db_session.session.commit()
        return task

    return _create_task
