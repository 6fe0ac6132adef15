"""CTI event simulator models package.

This package contains the deterministic CTI event simulator and the data
models it works with: typed call events, scripted replay steps, the bounded
event log, the listener registry and the simulator configuration.
"""

from models.config import SimulatorConfig
from models.connection import ConnectionState, ConnectionStatus, LifecycleSignal
from models.cti_event import (
    CallDirection,
    CallState,
    CTIEvent,
    CTIEventType,
    EntityType,
    ScreenPopData,
    ScriptedEvent,
)
from models.event_log import EventLog
from models.exceptions import CTISimulatorError, NotConnectedError
from models.listeners import ListenerRegistry
from models.simulator import EventSimulator, SimulatorStats

__all__ = [
    "CallDirection",
    "CallState",
    "ConnectionState",
    "ConnectionStatus",
    "CTIEvent",
    "CTIEventType",
    "CTISimulatorError",
    "EntityType",
    "EventLog",
    "EventSimulator",
    "LifecycleSignal",
    "ListenerRegistry",
    "NotConnectedError",
    "ScreenPopData",
    "ScriptedEvent",
    "SimulatorConfig",
    "SimulatorStats",
]
