"""
Shared pytest fixtures for the taskboard test suite.

Provides the Flask app and test client for integration tests, plus
workflow-level fixtures (a mocked Task API client and a notification
recorder) for unit tests. The remote Task API is never contacted: tests
either monkeypatch ``requests.request`` inside ``taskboard.client`` or
hand the workflow a ``MagicMock`` built from ``TaskAPIClient``.

Key Concepts Demonstrated:
- Fixture scoping (session vs. function) for performance and isolation
- Environment variable overrides for deterministic test configuration
- Test data factories backed by Faker
"""

from __future__ import annotations

import itertools
import os
from typing import Any
from unittest.mock import MagicMock

import pytest
from faker import Faker

# Set testing environment before importing the app
os.environ["FLASK_ENV"] = "testing"

from shared.test_helpers import task_payload
from taskboard import create_app
from taskboard.client import TaskAPIClient
from taskboard.models import WorkflowState
from taskboard.workflow import TaskWorkflow

fake = Faker()


# -----------------------------------------------------------------------------
# Application Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture(scope="session")
def app():
    """
    Provide the Flask application instance for the entire test session.

    Creates the app once with the 'testing' config and reuses it across
    all tests to avoid repeated startup overhead.
    """
    application = create_app("testing")
    yield application


@pytest.fixture(scope="function")
def client(app):
    """
    Provide a Flask test client scoped to a single test function.

    A new client per test means session cookies (and therefore the
    stored draft) never leak between tests.
    """
    with app.test_client() as test_client:
        yield test_client


# -----------------------------------------------------------------------------
# Workflow Fixtures
# -----------------------------------------------------------------------------


class NotificationRecorder:
    """Collects ``(category, message)`` pairs emitted by the workflow."""

    def __init__(self):
        self.messages: list[tuple[str, str]] = []

    def __call__(self, category: str, message: str) -> None:
        self.messages.append((category, message))

    def of(self, category: str) -> list[str]:
        return [message for cat, message in self.messages if cat == category]


@pytest.fixture
def notifications() -> NotificationRecorder:
    """Provide a fresh notification recorder."""
    return NotificationRecorder()


@pytest.fixture
def api_client() -> MagicMock:
    """Provide a Task API client double with the real client's interface."""
    return MagicMock(spec=TaskAPIClient)


@pytest.fixture
def workflow(api_client, notifications) -> TaskWorkflow:
    """Provide an Idle workflow wired to the mocked client."""
    return TaskWorkflow(api_client, notifications, WorkflowState())


# -----------------------------------------------------------------------------
# Test Data Factory Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def task_factory():
    """
    Factory fixture for Task API records.

    Produces dictionaries shaped like the server's task payloads, with
    sequential ids and Faker-generated text unless overridden.

    Example:
        def test_something(task_factory):
            record = task_factory(title="My Task")
            assert record["id"] == 1
    """
    ids = itertools.count(1)

    def _create_task(
        title: str | None = None,
        description: str | None = None,
        task_id: Any = None,
    ) -> dict[str, Any]:
        return task_payload(
            task_id if task_id is not None else next(ids),
            title or fake.sentence(nb_words=4),
            description or fake.paragraph(),
        )

    return _create_task
