"""Pytest configuration and shared fixtures."""

import pytest

# Load environment variables from .env file at test startup
from dotenv import load_dotenv
load_dotenv()

pytest_plugins = [
    "tests.fixtures.core.events",
    "tests.fixtures.core.simulators",
    "tests.fixtures.api",
]
