"""Exception handlers for the CTI simulator FastAPI application.

This module converts simulator and Python exceptions into consistent JSON
responses.
"""

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from models.exceptions import NotConnectedError

logger = logging.getLogger(__name__)


async def not_connected_handler(request: Request, exc: NotConnectedError):
    """Handle NotConnectedError exceptions.

    Returns a 409 (Conflict) indicating the simulator must be connected first.

    Args:
        request: The incoming request that triggered the error.
        exc: The NotConnectedError exception.

    Returns:
        JSONResponse with 409 status.
    """
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={
            "error": "Not Connected",
            "detail": exc.message,
            "suggestion": "Connect the simulator with POST /simulator/connect",
        },
    )


async def validation_exception_handler(request: Request, exc: ValidationError):
    """Handle Pydantic validation errors raised inside route handlers.

    Args:
        request: The incoming request that triggered the error.
        exc: The ValidationError exception.

    Returns:
        JSONResponse with validation error details.
    """
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "Validation Error",
            "detail": "The request data failed validation",
            "validation_errors": exc.errors(include_url=False, include_context=False),
        },
    )


async def value_error_handler(request: Request, exc: ValueError):
    """Handle ValueError exceptions.

    Args:
        request: The incoming request that triggered the error.
        exc: The ValueError exception.

    Returns:
        JSONResponse with error details.
    """
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "Invalid Value",
            "detail": str(exc),
            "type": "ValueError",
        },
    )


async def runtime_error_handler(request: Request, exc: RuntimeError):
    """Handle RuntimeError exceptions, such as an uninitialized simulator.

    Args:
        request: The incoming request that triggered the error.
        exc: The RuntimeError exception.

    Returns:
        JSONResponse with error details.
    """
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Runtime Error",
            "detail": str(exc),
            "type": "RuntimeError",
        },
    )


async def generic_exception_handler(request: Request, exc: Exception):
    """Handle any unhandled exceptions.

    Logs the traceback and returns a generic body so internals are not
    exposed to clients.

    Args:
        request: The incoming request that triggered the error.
        exc: The exception that was raised.

    Returns:
        JSONResponse with generic error message.
    """
    logger.error(f"Unhandled exception: {exc}", exc_info=exc)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal Server Error",
            "detail": "An unexpected error occurred",
            "type": type(exc).__name__,
        },
    )
