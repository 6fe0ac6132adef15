"""End-to-end scenarios against the EventSimulator.

These mirror how call-handling tests use the simulator: connect, drive
events, then assert on what was logged.
"""

import pytest

from models.cti_event import CallDirection, CallState, CTIEventType
from models.exceptions import NotConnectedError
from tests.fixtures.core.simulators import run


class TestIncomingCallScenario:
    """Connect and announce an incoming call."""

    def test_call_start(self, simulator):
        run(simulator.connect())

        event = simulator.emit_call_start(from_number="+15550001234", to="+15550005678")

        assert event.direction == CallDirection.INBOUND
        assert event.state == CallState.RINGING
        assert event.call_id != ""


class TestCallFlowScenario:
    """Connect and replay a full call with a screen pop."""

    def test_call_flow(self, simulator):
        run(simulator.connect())

        run(simulator.script_call_flow(from_number="A", to="B", duration=42, with_screen_pop=True))

        log = simulator.get_event_log()
        assert [e.type for e in log] == [
            CTIEventType.CALL_START,
            CTIEventType.SCREEN_POP,
            CTIEventType.CALL_END,
        ]
        assert len({e.call_id for e in log}) == 1
        assert simulator.get_last_event_by_type(CTIEventType.CALL_END).duration == 42


class TestDisconnectedScenario:
    """Emitting after a disconnect fails."""

    def test_call_end_after_disconnect(self, connected_simulator):
        run(connected_simulator.disconnect())

        with pytest.raises(NotConnectedError):
            connected_simulator.emit_call_end("call-1", 10)


class TestScreenPopScenario:
    """Simulate a screen pop and check the caller data a UI would show."""

    def test_screen_pop_contains_entity(self, connected_simulator, screen_pop_data):
        connected_simulator.emit_screen_pop(screen_pop_data)

        pop = connected_simulator.get_last_event_by_type("screen_pop")
        text_values = [v for v in pop.payload.values() if isinstance(v, str)]
        assert any("John Doe" in v for v in text_values)
