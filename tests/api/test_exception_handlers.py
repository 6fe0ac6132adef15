"""Unit tests for API error handling.

These tests call the exception handlers directly and check the JSON
responses they build.
"""

import asyncio
import json
from unittest.mock import MagicMock

from fastapi import status
from pydantic import BaseModel, ValidationError

from api.exceptions import (
    generic_exception_handler,
    not_connected_handler,
    runtime_error_handler,
    validation_exception_handler,
    value_error_handler,
)
from models.exceptions import CTISimulatorError, NotConnectedError


def run_async(coro):
    """Run an async coroutine synchronously."""
    return asyncio.run(coro)


def body(response) -> dict:
    return json.loads(response.body)


class TestNotConnectedError:
    """Tests for the NotConnectedError exception class."""

    def test_default_message(self):
        """Exception carries the default not-connected message."""
        exc = NotConnectedError()
        assert exc.message == "CTI client not connected. Call connect() first."
        assert str(exc) == exc.message

    def test_is_simulator_error(self):
        """NotConnectedError is part of the simulator error hierarchy."""
        assert isinstance(NotConnectedError(), CTISimulatorError)


class TestHandlers:
    """Tests for each exception handler."""

    def test_not_connected_handler(self):
        """Handler returns 409 with a suggestion."""
        response = run_async(not_connected_handler(MagicMock(), NotConnectedError()))

        assert response.status_code == status.HTTP_409_CONFLICT
        content = body(response)
        assert content["error"] == "Not Connected"
        assert content["detail"] == NotConnectedError().message
        assert "suggestion" in content

    def test_validation_exception_handler(self):
        """Handler returns 422 with the validation errors."""

        class Sample(BaseModel):
            count: int

        try:
            Sample(count="many")
        except ValidationError as e:
            exc = e

        response = run_async(validation_exception_handler(MagicMock(), exc))

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        content = body(response)
        assert content["error"] == "Validation Error"
        assert content["validation_errors"][0]["loc"] == ["count"]

    def test_value_error_handler(self):
        """Handler returns 400 with the error message."""
        response = run_async(value_error_handler(MagicMock(), ValueError("bad value")))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert body(response)["detail"] == "bad value"

    def test_runtime_error_handler(self):
        """Handler returns 500 with the error message."""
        response = run_async(runtime_error_handler(MagicMock(), RuntimeError("broken")))

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert body(response)["type"] == "RuntimeError"

    def test_generic_exception_handler_hides_message(self, caplog):
        """Handler logs the error and returns a generic body."""
        response = run_async(generic_exception_handler(MagicMock(), KeyError("secret")))

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        content = body(response)
        assert content["detail"] == "An unexpected error occurred"
        assert "secret" not in content["detail"]
        assert content["type"] == "KeyError"
        assert "Unhandled exception" in caplog.text
