"""
Integration test fixtures for FocusFlow.

Provides fixtures specific to integration testing:
- FastAPI app with the table store swapped for a temporary SQLite store
- Test client
- Auth toggling
"""

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from focusflow.config_models import get_config


# ─────────────────────────────────────────────────────────────────────────────
# Dashboard API Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def dashboard_app(store):
    """The API app, reading and writing the temporary store."""
    from focusflow.dashboard.backend.dependencies import get_store_dep
    from focusflow.dashboard.backend.main import app

    app.dependency_overrides[get_store_dep] = lambda: store

    yield app

    app.dependency_overrides.clear()


@pytest.fixture
def test_client(dashboard_app) -> Generator[TestClient, None, None]:
    """Create a test client for the dashboard API.

    Used without the context manager so the app lifespan (which opens the
    configured store) does not run.
    """
    client = TestClient(dashboard_app)
    yield client
    client.close()


@pytest.fixture
def require_auth(monkeypatch):
    """Turn on header-based auth for the duration of a test."""
    monkeypatch.setattr(get_config().dashboard, "require_auth", True)
    return get_config().dashboard.user_header


@pytest.fixture
def create_task(test_client):
    """Create a task through the API and return its JSON."""

    def _create(**fields) -> dict:
        body = {"title": "Pay rent", **fields}
        response = test_client.post("/api/tasks", json=body)
        assert response.status_code == 201, response.text
        return response.json()

    return _create
