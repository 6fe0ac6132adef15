"""CTI event simulator.

This module contains the EventSimulator, a deterministic in-process stand-in
for a CTI backend such as Asterisk. Tests drive it to produce call events
without telephony hardware and then assert on its event log or on what
their listeners received.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Iterable, Optional, Union

from pydantic import BaseModel

from models.config import SimulatorConfig
from models.connection import ConnectionState, ConnectionStatus, LifecycleSignal
from models.cti_event import (
    CallDirection,
    CallState,
    CTIEvent,
    CTIEventType,
    ScreenPopData,
    ScriptedEvent,
    coerce_event_type,
)
from models.event_log import EventLog
from models.exceptions import NotConnectedError
from models.listeners import CTIEventListener, LifecycleListener, ListenerRegistry

logger = logging.getLogger(__name__)

# Fixed delays used by script_call_flow, in milliseconds
SCREEN_POP_DELAY_MS = 100
CALL_END_DELAY_MS = 500


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SimulatorStats(BaseModel):
    """Statistics over the simulator and its current log.

    Attributes:
        events_processed: Events emitted since construction or the last reset.
        log_size: Number of events currently retained.
        events_by_type: Per-type counts computed from the retained log only.
    """

    events_processed: int
    log_size: int
    events_by_type: dict[str, int]


class EventSimulator:
    """Mock CTI client that emits call events on demand.

    Owns the connection state, the bounded event log, the events_processed
    counter and the call-id counter. Emission is synchronous: by the time
    emit_event() returns, the event is logged and every listener has run.

    The only suspension points are the settling delay in connect() and the
    per-step delays in script(). Other tasks on the same loop may run during
    those waits, so a disconnect() or reset() issued concurrently is visible
    to an in-flight script.

    One simulator is meant to be owned by one test scenario at a time.

    Attributes:
        config: Simulator configuration.
    """

    def __init__(
        self,
        config: Optional[SimulatorConfig] = None,
        *,
        clock: Optional[Callable[[], datetime]] = None,
        sleep: Optional[Callable[[float], Awaitable[Any]]] = None,
    ) -> None:
        """Initialize a disconnected simulator.

        Args:
            config: Simulator configuration (defaults to SimulatorConfig()).
            clock: Wall-clock source returning timezone-aware datetimes.
            sleep: Awaitable delay primitive taking seconds (defaults to asyncio.sleep).
        """
        self.config = config or SimulatorConfig()
        self._clock = clock or _utc_now
        self._sleep = sleep or asyncio.sleep

        self._state = ConnectionState.DISCONNECTED
        self._connected_at: Optional[datetime] = None
        self._disconnected_at: Optional[datetime] = None
        self._events_processed = 0
        self._call_id_counter = 0

        self._log = EventLog(max_size=self.config.max_log_size)
        self._listeners = ListenerRegistry()

    # ===== Connection Lifecycle =====

    async def connect(self) -> None:
        """Simulate connecting to the CTI server.

        Waits for the configured settling delay, then marks the simulator
        connected and broadcasts the "connected" signal. Calling it while
        already connected only refreshes the timestamps.
        """
        await self._sleep(self.config.connect_delay / 1000)

        self._state = ConnectionState.CONNECTED
        self._connected_at = self._clock()
        self._disconnected_at = None

        logger.info("CTI mock client connected")
        self._listeners.notify_lifecycle(LifecycleSignal.CONNECTED)

    async def disconnect(self) -> None:
        """Simulate disconnecting from the CTI server.

        Safe to call when already disconnected.
        """
        self._state = ConnectionState.DISCONNECTED
        self._disconnected_at = self._clock()

        logger.info("CTI mock client disconnected")
        self._listeners.notify_lifecycle(LifecycleSignal.DISCONNECTED)

    def is_connected(self) -> bool:
        """Check whether the simulator is connected."""
        return self._state == ConnectionState.CONNECTED

    def get_connection_status(self) -> ConnectionStatus:
        """Snapshot of the connection state and event counter."""
        return ConnectionStatus(
            state=self._state,
            connected=self.is_connected(),
            connected_at=self._connected_at,
            disconnected_at=self._disconnected_at,
            events_processed=self._events_processed,
        )

    # ===== Event Emission =====

    def emit_event(self, event_type: Union[CTIEventType, str], **fields: Any) -> CTIEvent:
        """Emit a CTI event.

        Builds the event, appends it to the log, bumps events_processed and
        notifies wildcard listeners followed by listeners for its type.

        Args:
            event_type: Event type; unrecognized strings are accepted as-is.
            **fields: Event fields (call_id, from_number, to, direction, state,
                duration, transfer_to, payload). A missing or empty call_id
                is generated.

        Returns:
            The emitted event.

        Raises:
            NotConnectedError: If the simulator is not connected.
            ValidationError: If a field is unknown or invalid.
        """
        self._require_connected()

        given = [fields.pop(key, None) for key in ("call_id", "callId")]
        call_id = next((c for c in given if c), None) or self._generate_call_id()
        event = CTIEvent(
            type=coerce_event_type(event_type),
            timestamp=self._clock(),
            call_id=call_id,
            **fields,
        )

        self._log.append(event)
        self._events_processed += 1

        logger.debug(f"Emitted {event.type_key} for {event.call_id}")
        self._listeners.notify(event)

        return event

    def emit_call_start(
        self,
        from_number: str,
        to: str,
        direction: Optional[CallDirection] = None,
        call_id: Optional[str] = None,
    ) -> CTIEvent:
        """Emit a ringing call_start event (inbound unless told otherwise)."""
        return self.emit_event(
            CTIEventType.CALL_START,
            call_id=call_id,
            from_number=from_number,
            to=to,
            direction=direction or CallDirection.INBOUND,
            state=CallState.RINGING,
        )

    def emit_call_end(self, call_id: str, duration: int = 0) -> CTIEvent:
        """Emit a call_end event with the call duration in seconds."""
        return self.emit_event(
            CTIEventType.CALL_END,
            call_id=call_id,
            duration=duration,
            state=CallState.ENDED,
        )

    def emit_call_transfer(self, call_id: str, transfer_to: str) -> CTIEvent:
        """Emit a call_transfer event."""
        return self.emit_event(
            CTIEventType.CALL_TRANSFER,
            call_id=call_id,
            transfer_to=transfer_to,
            state=CallState.TRANSFERRED,
        )

    def emit_call_hold(self, call_id: str) -> CTIEvent:
        """Emit a call_hold event."""
        return self.emit_event(CTIEventType.CALL_HOLD, call_id=call_id, state=CallState.ON_HOLD)

    def emit_call_resume(self, call_id: str) -> CTIEvent:
        """Emit a call_resume event."""
        return self.emit_event(
            CTIEventType.CALL_RESUME, call_id=call_id, state=CallState.CONNECTED
        )

    def emit_dtmf(self, call_id: str, digits: str) -> CTIEvent:
        """Emit a dtmf_received event carrying the pressed digits."""
        return self.emit_event(
            CTIEventType.DTMF_RECEIVED, call_id=call_id, payload={"digits": digits}
        )

    def emit_screen_pop(self, data: Union[ScreenPopData, dict[str, Any]]) -> CTIEvent:
        """Emit a screen_pop event showing caller information.

        A screen pop always gets a freshly generated call id.

        Args:
            data: Caller identification data.

        Returns:
            The emitted event.
        """
        if not isinstance(data, ScreenPopData):
            data = ScreenPopData.model_validate(data)

        # Checked first so a disconnected call does not consume a call id
        self._require_connected()
        return self.emit_event(
            CTIEventType.SCREEN_POP,
            call_id=self._generate_call_id(),
            from_number=data.caller_id,
            payload=data.to_payload(),
        )

    # ===== Scripted Replay =====

    async def script(
        self, events: Iterable[Union[ScriptedEvent, dict[str, Any]]]
    ) -> list[CTIEvent]:
        """Replay a sequence of events in order, honoring per-step delays.

        Connection is checked once up front. Each step waits for its delay
        (if any) and is then emitted. If the simulator is disconnected while
        the script waits, the next emission raises NotConnectedError; events
        already emitted stay in the log.

        Args:
            events: Steps to replay, as ScriptedEvent or plain dicts.

        Returns:
            The emitted events, in script order.

        Raises:
            NotConnectedError: If not connected when called, or disconnected mid-script.
        """
        self._require_connected()

        steps = [
            step if isinstance(step, ScriptedEvent) else ScriptedEvent.model_validate(step)
            for step in events
        ]

        emitted: list[CTIEvent] = []
        for index, step in enumerate(steps):
            if step.delay and step.delay > 0:
                logger.debug(f"Script step {index}: waiting {step.delay}ms")
                await self._sleep(step.delay / 1000)

            emitted.append(self.emit_event(step.type, **step.event_fields()))

        return emitted

    async def script_call_flow(
        self,
        from_number: str,
        to: str,
        duration: int,
        with_screen_pop: bool = False,
        screen_pop_data: Union[ScreenPopData, dict[str, Any], None] = None,
    ) -> list[CTIEvent]:
        """Replay a complete call: call_start, optional screen_pop, call_end.

        All steps share one generated call id. The screen pop follows the
        start after 100ms and the end follows the previous step after 500ms.

        Args:
            from_number: Caller number.
            to: Callee number.
            duration: Call duration in seconds, set on call_end.
            with_screen_pop: Whether to include a screen_pop step.
            screen_pop_data: Extra screen-pop payload merged after callerId.

        Returns:
            The emitted events.
        """
        # Checked first so a disconnected call does not consume a call id
        self._require_connected()
        call_id = self._generate_call_id()

        steps = [
            ScriptedEvent(
                type=CTIEventType.CALL_START,
                call_id=call_id,
                from_number=from_number,
                to=to,
                direction=CallDirection.INBOUND,
                state=CallState.RINGING,
            )
        ]

        if with_screen_pop:
            if isinstance(screen_pop_data, ScreenPopData):
                extra = screen_pop_data.model_dump(by_alias=True, exclude_none=True, mode="json")
            else:
                extra = dict(screen_pop_data or {})
            steps.append(
                ScriptedEvent(
                    type=CTIEventType.SCREEN_POP,
                    call_id=call_id,
                    from_number=from_number,
                    delay=SCREEN_POP_DELAY_MS,
                    payload={"callerId": from_number, **extra},
                )
            )

        steps.append(
            ScriptedEvent(
                type=CTIEventType.CALL_END,
                call_id=call_id,
                duration=duration,
                state=CallState.ENDED,
                delay=CALL_END_DELAY_MS,
            )
        )

        return await self.script(steps)

    # ===== Event Log =====

    def get_event_log(self) -> list[CTIEvent]:
        """All retained events, oldest first (a copy)."""
        return self._log.events

    def get_events_by_type(self, event_type: Union[CTIEventType, str]) -> list[CTIEvent]:
        """Retained events of one type, in log order."""
        return self._log.get_by_type(event_type)

    def get_events_by_call_id(self, call_id: str) -> list[CTIEvent]:
        """Retained events of one call, in log order."""
        return self._log.get_by_call_id(call_id)

    def get_last_event(self) -> Optional[CTIEvent]:
        """Most recent event, or None."""
        return self._log.last()

    def get_last_event_by_type(self, event_type: Union[CTIEventType, str]) -> Optional[CTIEvent]:
        """Most recent event of one type, or None."""
        return self._log.last_by_type(event_type)

    def has_event(self, event_type: Union[CTIEventType, str]) -> bool:
        """Check whether the log holds an event of the given type."""
        return self._log.has(event_type)

    def count_events(self, event_type: Union[CTIEventType, str, None] = None) -> int:
        """Count retained events, optionally of one type."""
        return self._log.count(event_type)

    def clear_log(self) -> None:
        """Empty the event log; connection state and counters are kept."""
        removed = self._log.clear()
        logger.debug(f"Cleared {removed} event(s) from the log")

    def reset(self) -> None:
        """Reset per-scenario state.

        Clears the log, zeroes events_processed and the call-id counter and
        removes every listener. The connection state is left alone; use
        disconnect() for that.
        """
        self._log.clear()
        self._events_processed = 0
        self._call_id_counter = 0
        self._listeners.clear()
        logger.info("CTI mock client reset")

    def get_stats(self) -> SimulatorStats:
        """Counters plus a per-type breakdown of the retained log."""
        return SimulatorStats(
            events_processed=self._events_processed,
            log_size=len(self._log),
            events_by_type=self._log.counts_by_type(),
        )

    # ===== Listeners =====

    def on_event(self, listener: CTIEventListener) -> "EventSimulator":
        """Register a listener for every emitted event."""
        self._listeners.add(listener)
        return self

    def on_event_type(
        self, event_type: Union[CTIEventType, str], listener: CTIEventListener
    ) -> "EventSimulator":
        """Register a listener for events of one type."""
        self._listeners.add(listener, event_type=event_type)
        return self

    def once_event(self, listener: CTIEventListener) -> "EventSimulator":
        """Register a listener that is removed after the next event."""
        self._listeners.add(listener, once=True)
        return self

    def on_lifecycle(
        self, signal: Union[LifecycleSignal, str], listener: LifecycleListener
    ) -> "EventSimulator":
        """Register a listener for the "connected" or "disconnected" signal."""
        self._listeners.add_lifecycle(signal, listener)
        return self

    def off_event(
        self,
        listener: Callable[..., Any],
        event_type: Union[CTIEventType, str, None] = None,
    ) -> int:
        """Unregister a listener from one type, or from everything when type is None.

        Returns:
            Number of registrations removed.
        """
        return self._listeners.remove(listener, event_type=event_type)

    @property
    def listeners(self) -> ListenerRegistry:
        """The listener registry backing this simulator."""
        return self._listeners

    # ===== Utilities =====

    def _require_connected(self) -> None:
        if not self.is_connected():
            raise NotConnectedError()

    def _generate_call_id(self) -> str:
        self._call_id_counter += 1
        epoch_ms = int(self._clock().timestamp() * 1000)
        return f"call-{epoch_ms}-{self._call_id_counter}"
