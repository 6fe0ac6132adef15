"""Dependency injection providers for the FastAPI application.

This module defines dependencies that can be injected into route handlers,
providing access to the shared EventSimulator.
"""

from typing import Annotated, Optional

from fastapi import Depends

from models.config import SimulatorConfig
from models.simulator import EventSimulator


# Global state
# One simulator per running app; tests override get_event_simulator instead
_event_simulator: EventSimulator | None = None


def get_event_simulator() -> EventSimulator:
    """Get the shared EventSimulator instance.

    This function is a FastAPI dependency. Route handlers receive the
    simulator by declaring a parameter of type EventSimulatorDep.

    Returns:
        The shared EventSimulator instance.

    Raises:
        RuntimeError: If the simulator hasn't been initialized, or CTI_MODE is disabled.
    """
    if _event_simulator is None:
        raise RuntimeError(
            "EventSimulator not initialized. Call initialize_event_simulator() first "
            "and make sure CTI_MODE is not 'disabled'."
        )

    return _event_simulator


def initialize_event_simulator(
    config: Optional[SimulatorConfig] = None,
) -> EventSimulator | None:
    """Initialize the shared EventSimulator instance.

    This should be called once when the FastAPI app starts up. The
    configuration is read from CTI_* environment variables when not given.

    Args:
        config: Simulator configuration to use instead of the environment.

    Returns:
        The new simulator, or None when CTI_MODE is "disabled".
    """
    global _event_simulator

    config = config or SimulatorConfig.from_env()
    if config.mode == "disabled":
        _event_simulator = None
        return None

    _event_simulator = EventSimulator(config=config)
    return _event_simulator


async def shutdown_event_simulator() -> None:
    """Disconnect and drop the shared EventSimulator.

    This should be called when the FastAPI app shuts down.
    """
    global _event_simulator

    if _event_simulator is not None and _event_simulator.is_connected():
        await _event_simulator.disconnect()

    _event_simulator = None


# Type alias for dependency injection
EventSimulatorDep = Annotated[EventSimulator, Depends(get_event_simulator)]
