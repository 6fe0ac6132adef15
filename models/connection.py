"""Connection lifecycle models."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ConnectionState(str, Enum):
    """Connection state of the simulated CTI link."""

    DISCONNECTED = "disconnected"
    CONNECTED = "connected"


class LifecycleSignal(str, Enum):
    """Signals broadcast when the connection state changes."""

    CONNECTED = "connected"
    DISCONNECTED = "disconnected"


class ConnectionStatus(BaseModel):
    """Point-in-time snapshot of the simulator connection.

    Args:
        state: Current connection state.
        connected: Convenience flag, True when state is CONNECTED.
        connected_at: When the last connect() completed.
        disconnected_at: When the last disconnect() happened (cleared on connect).
        events_processed: Number of events emitted since construction or reset.
    """

    state: ConnectionState = ConnectionState.DISCONNECTED
    connected: bool = False
    connected_at: Optional[datetime] = None
    disconnected_at: Optional[datetime] = None
    events_processed: int = Field(default=0, ge=0)
