"""Main entry point for the CTI Event Simulator FastAPI application.

This module creates the FastAPI app that exposes one mock CTI event
simulator over HTTP, so UI and end-to-end tests can drive call events
without a telephony backend.

To run the development server:
    uv run uvicorn main:app --reload

Configuration comes from CTI_* environment variables (a .env file is loaded
if present); see models/config.py.
"""

from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from pydantic import ValidationError

from api.dependencies import initialize_event_simulator, shutdown_event_simulator
from api.exceptions import (
    generic_exception_handler,
    not_connected_handler,
    runtime_error_handler,
    validation_exception_handler,
    value_error_handler,
)
from api.routes import events as events_routes
from api.routes import scripts as scripts_routes
from api.routes import simulator as simulator_routes
from models.exceptions import NotConnectedError


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan events.

    Creates the shared simulator at startup and disconnects it at shutdown.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control back to FastAPI to handle requests.
    """
    load_dotenv()
    print("🚀 Starting CTI Event Simulator...")
    simulator = initialize_event_simulator()
    if simulator is None:
        print("⚠️ CTI_MODE=disabled, no simulator created")
    else:
        print(f"✅ EventSimulator initialized (max_log_size={simulator.config.max_log_size})")

    yield

    print("🛑 Shutting down CTI Event Simulator...")
    await shutdown_event_simulator()
    print("✅ Shutdown complete")


app = FastAPI(
    title="CTI Event Simulator",
    description="Deterministic mock CTI event source for testing call handling and screen pops",
    version="0.1.0",
    lifespan=lifespan,
)

# Specific exceptions before general ones
app.add_exception_handler(NotConnectedError, not_connected_handler)
app.add_exception_handler(ValidationError, validation_exception_handler)
app.add_exception_handler(ValueError, value_error_handler)
app.add_exception_handler(RuntimeError, runtime_error_handler)
app.add_exception_handler(Exception, generic_exception_handler)

app.include_router(simulator_routes.router)
app.include_router(events_routes.router)
app.include_router(scripts_routes.router)


@app.get("/")
async def root():
    """Root endpoint - returns a welcome message."""
    return {
        "message": "Welcome to the CTI Event Simulator API",
        "version": "0.1.0",
        "docs_url": "/docs",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy"}
