"""Simulator lifecycle endpoints.

These endpoints manage the simulated CTI connection: connecting,
disconnecting, checking status, resetting, and reading statistics.
"""

from fastapi import APIRouter
from pydantic import BaseModel

from api.dependencies import EventSimulatorDep
from models.connection import ConnectionStatus
from models.simulator import SimulatorStats

# Create router for simulator control endpoints
router = APIRouter(
    prefix="/simulator",
    tags=["simulator"],
)


class ResetResponse(BaseModel):
    """Response model for simulator reset.

    Attributes:
        status: Connection status after the reset.
        message: Human-readable summary.
    """

    status: ConnectionStatus
    message: str


@router.post("/connect", response_model=ConnectionStatus)
async def connect(simulator: EventSimulatorDep):
    """Connect the simulator after its settling delay.

    Connecting an already connected simulator only refreshes timestamps.

    Args:
        simulator: The EventSimulator instance (injected by FastAPI).

    Returns:
        Connection status after connecting.
    """
    await simulator.connect()
    return simulator.get_connection_status()


@router.post("/disconnect", response_model=ConnectionStatus)
async def disconnect(simulator: EventSimulatorDep):
    """Disconnect the simulator.

    Args:
        simulator: The EventSimulator instance (injected by FastAPI).

    Returns:
        Connection status after disconnecting.
    """
    await simulator.disconnect()
    return simulator.get_connection_status()


@router.get("/status", response_model=ConnectionStatus)
async def get_status(simulator: EventSimulatorDep):
    """Get the current connection status and event counter."""
    return simulator.get_connection_status()


@router.post("/reset", response_model=ResetResponse)
async def reset(simulator: EventSimulatorDep):
    """Reset the event log, counters and listeners.

    The connection state is left unchanged.

    Args:
        simulator: The EventSimulator instance (injected by FastAPI).

    Returns:
        Status after reset with a summary message.
    """
    discarded = simulator.count_events()
    simulator.reset()
    return ResetResponse(
        status=simulator.get_connection_status(),
        message=f"Simulator reset, {discarded} logged event(s) discarded",
    )


@router.get("/stats", response_model=SimulatorStats)
async def get_stats(simulator: EventSimulatorDep):
    """Get event counters and a per-type breakdown of the current log."""
    return simulator.get_stats()
