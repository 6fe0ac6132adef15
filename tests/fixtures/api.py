"""Shared fixtures for API testing.

These fixtures provide a TestClient and fresh EventSimulator instance
for each test, ensuring test isolation.
"""

import pytest
from fastapi.testclient import TestClient

from main import app
from models.simulator import EventSimulator
from tests.fixtures.core.simulators import create_simulator


@pytest.fixture
def test_client():
    """Provide a FastAPI TestClient for making API requests.

    Returns:
        A FastAPI TestClient instance (lifespan not started).
    """
    return TestClient(app)


@pytest.fixture
def fresh_simulator() -> EventSimulator:
    """Provide a fresh, disconnected EventSimulator with a fake clock and sleep.

    Returns:
        A newly initialized EventSimulator.
    """
    return create_simulator()
