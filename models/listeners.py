"""Listener registry for simulator events.

Maps each event type, plus a wildcard channel, to an ordered list of
listeners. The simulator calls notify() itself after every emission;
nothing here depends on an emitter base class.
"""

import asyncio
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Union

from models.connection import LifecycleSignal
from models.cti_event import CTIEvent, CTIEventType, event_type_key

logger = logging.getLogger(__name__)

# Listeners may be plain functions or coroutine functions
CTIEventListener = Callable[[CTIEvent], Union[None, Awaitable[None]]]
LifecycleListener = Callable[[], Union[None, Awaitable[None]]]


@dataclass(eq=False)
class ListenerRegistration:
    """A registered listener and whether it fires only once."""

    listener: Callable[..., Any]
    once: bool = False


def _listener_name(listener: Callable[..., Any]) -> str:
    return getattr(listener, "__qualname__", None) or repr(listener)


class ListenerRegistry:
    """Registry of event and lifecycle listeners.

    Delivery order for an event is fixed: wildcard listeners first, then
    listeners registered for the event's type, each group in registration
    order. A listener that raises is logged and skipped; the remaining
    listeners still run and the emitter never sees the error.

    Listeners that return an awaitable have it scheduled on the running
    event loop. Errors from those tasks are logged the same way.
    """

    def __init__(self) -> None:
        self._wildcard: list[ListenerRegistration] = []
        self._by_type: dict[str, list[ListenerRegistration]] = {}
        self._lifecycle: dict[str, list[ListenerRegistration]] = {}
        self._pending: set[asyncio.Future] = set()

    # ===== Registration =====

    def add(
        self,
        listener: CTIEventListener,
        event_type: Union[CTIEventType, str, None] = None,
        once: bool = False,
    ) -> None:
        """Register an event listener.

        Args:
            listener: Callable invoked with each matching CTIEvent.
            event_type: Type to listen for, or None for every event.
            once: Remove the listener after its first invocation.
        """
        registration = ListenerRegistration(listener=listener, once=once)
        if event_type is None:
            self._wildcard.append(registration)
            logger.debug(f"Registered global listener {_listener_name(listener)}")
            return

        key = event_type_key(event_type)
        self._by_type.setdefault(key, []).append(registration)
        logger.debug(f"Registered listener {_listener_name(listener)} for {key}")

    def add_lifecycle(
        self,
        signal: Union[LifecycleSignal, str],
        listener: LifecycleListener,
        once: bool = False,
    ) -> None:
        """Register a listener for a connection lifecycle signal.

        Args:
            signal: "connected" or "disconnected".
            listener: Callable invoked with no arguments.
            once: Remove the listener after its first invocation.
        """
        key = LifecycleSignal(signal).value
        self._lifecycle.setdefault(key, []).append(
            ListenerRegistration(listener=listener, once=once)
        )

    def remove(
        self,
        listener: Callable[..., Any],
        event_type: Union[CTIEventType, str, None] = None,
    ) -> int:
        """Unregister a listener.

        Args:
            listener: The listener to remove.
            event_type: Type channel to remove it from, or None for every channel.

        Returns:
            Number of registrations removed.
        """
        if event_type is None:
            channels = [self._wildcard, *self._by_type.values(), *self._lifecycle.values()]
        else:
            channels = [self._by_type.get(event_type_key(event_type), [])]

        removed = 0
        for channel in channels:
            before = len(channel)
            channel[:] = [r for r in channel if r.listener != listener]
            removed += before - len(channel)
        return removed

    def clear(self) -> None:
        """Remove every registered listener."""
        self._wildcard.clear()
        self._by_type.clear()
        self._lifecycle.clear()

    def listener_count(self, event_type: Union[CTIEventType, str, None] = None) -> int:
        """Number of event listeners on the wildcard channel or on one type."""
        if event_type is None:
            return len(self._wildcard)
        return len(self._by_type.get(event_type_key(event_type), []))

    # ===== Delivery =====

    def notify(self, event: CTIEvent) -> int:
        """Deliver an event to wildcard listeners, then to its type listeners.

        Args:
            event: The event to deliver.

        Returns:
            Number of listeners invoked.
        """
        deliveries = [
            (self._wildcard, registration) for registration in list(self._wildcard)
        ]
        typed = self._by_type.get(event.type_key)
        if typed:
            deliveries.extend((typed, registration) for registration in list(typed))

        for channel, registration in deliveries:
            self._deliver(channel, registration, event)
        return len(deliveries)

    def notify_lifecycle(self, signal: Union[LifecycleSignal, str]) -> int:
        """Deliver a lifecycle signal to its listeners.

        Returns:
            Number of listeners invoked.
        """
        channel = self._lifecycle.get(LifecycleSignal(signal).value)
        if not channel:
            return 0
        registrations = list(channel)
        for registration in registrations:
            self._deliver(channel, registration)
        return len(registrations)

    def _deliver(
        self,
        channel: list[ListenerRegistration],
        registration: ListenerRegistration,
        *args: Any,
    ) -> None:
        if registration.once:
            # Removed before the call so a re-entrant emit cannot fire it twice
            if registration not in channel:
                return
            channel.remove(registration)

        listener = registration.listener
        try:
            result = listener(*args)
        except Exception as e:
            logger.error(
                f"Error in CTI listener {_listener_name(listener)}: {e}", exc_info=True
            )
            return

        if inspect.isawaitable(result):
            self._schedule(listener, result)

    def _schedule(self, listener: Callable[..., Any], awaitable: Awaitable[Any]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(
                f"Async CTI listener {_listener_name(listener)} called outside an event loop; skipped"
            )
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            return

        future = asyncio.ensure_future(awaitable, loop=loop)
        self._pending.add(future)
        future.add_done_callback(lambda f: self._on_listener_done(listener, f))

    def _on_listener_done(self, listener: Callable[..., Any], future: asyncio.Future) -> None:
        self._pending.discard(future)
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            logger.error(
                f"Error in async CTI listener {_listener_name(listener)}: {error}",
                exc_info=error,
            )

    @property
    def pending_count(self) -> int:
        """Number of async listener tasks still running."""
        return len(self._pending)
