"""Core infrastructure fixtures."""

from tests.fixtures.core.events import (
    create_cti_event,
    create_scripted_event,
    create_screen_pop_data,
    CALL_START_EVENT,
    CALL_END_EVENT,
    BASIC_SCRIPT,
    FIXED_TIME,
)
from tests.fixtures.core.simulators import (
    create_simulator,
    create_connected_simulator,
    FakeClock,
    FakeSleep,
    run,
)

__all__ = [
    "create_cti_event",
    "create_scripted_event",
    "create_screen_pop_data",
    "CALL_START_EVENT",
    "CALL_END_EVENT",
    "BASIC_SCRIPT",
    "FIXED_TIME",
    "create_simulator",
    "create_connected_simulator",
    "FakeClock",
    "FakeSleep",
    "run",
]
