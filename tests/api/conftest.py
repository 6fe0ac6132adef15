"""Shared fixtures for API integration tests.

This module provides common fixtures used across all API test files,
including TestClient setup and EventSimulator dependency injection.
"""

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_event_simulator
from main import app


@pytest.fixture
def client_with_simulator(fresh_simulator):
    """Provide a TestClient with a fresh, connected EventSimulator injected.

    Uses FastAPI's dependency override system to inject the test simulator
    instead of the global one, and connects it through the API.

    Yields:
        A tuple of (TestClient, EventSimulator) for testing.

    Example:
        def test_something(client_with_simulator):
            client, simulator = client_with_simulator
            response = client.get("/events")
            assert response.status_code == 200
    """
    app.dependency_overrides[get_event_simulator] = lambda: fresh_simulator
    client = TestClient(app)

    response = client.post("/simulator/connect")
    assert response.status_code == 200, f"Failed to connect simulator: {response.json()}"

    yield client, fresh_simulator

    app.dependency_overrides.clear()


@pytest.fixture
def client_without_connect(fresh_simulator):
    """Provide a TestClient with a fresh EventSimulator that is NOT connected.

    Yields:
        A tuple of (TestClient, EventSimulator) for testing.
    """
    app.dependency_overrides[get_event_simulator] = lambda: fresh_simulator
    client = TestClient(app)

    yield client, fresh_simulator

    app.dependency_overrides.clear()
