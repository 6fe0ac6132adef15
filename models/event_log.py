"""Bounded event log model."""

import logging
from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from models.config import DEFAULT_MAX_LOG_SIZE
from models.cti_event import CTIEvent, CTIEventType, event_type_key

logger = logging.getLogger(__name__)


def _copy(event: CTIEvent) -> CTIEvent:
    return event.model_copy(deep=True)


class EventLog(BaseModel):
    """Ordered, size-bounded record of emitted events.

    Insertion order is emission order. Once the log grows past max_size
    the oldest entries are discarded so that only the most recent
    max_size events remain (ring-buffer semantics).

    Events are stored and returned as deep copies, so neither the emitter
    nor a query caller can change a logged event through its payload.

    Args:
        entries: Logged events, oldest first.
        max_size: Maximum number of events to keep.
    """

    entries: list[CTIEvent] = Field(
        default_factory=list,
        description="Logged events, oldest first",
    )
    max_size: int = Field(
        default=DEFAULT_MAX_LOG_SIZE,
        description="Maximum number of events to keep",
    )

    @field_validator("max_size")
    @classmethod
    def validate_max_size(cls, v: int) -> int:
        """Validate that max_size is positive.

        Args:
            v: The max_size value.

        Returns:
            The validated max_size.

        Raises:
            ValueError: If max_size is not positive.
        """
        if v <= 0:
            raise ValueError("max_size must be positive")
        return v

    @model_validator(mode="after")
    def trim_entries_to_max_size(self) -> "EventLog":
        """Trim entries if the log was initialized with more than max_size."""
        self._trim()
        return self

    def __len__(self) -> int:
        return len(self.entries)

    def append(self, event: CTIEvent) -> int:
        """Append an event, discarding the oldest entries if over capacity.

        Args:
            event: The event to record.

        Returns:
            Number of entries discarded (0 when under capacity).
        """
        self.entries.append(_copy(event))
        return self._trim()

    def _trim(self) -> int:
        excess = len(self.entries) - self.max_size
        if excess <= 0:
            return 0
        # Oldest entries go first, in one slice
        del self.entries[:excess]
        logger.debug(f"Event log over capacity, discarded {excess} oldest event(s)")
        return excess

    @property
    def events(self) -> list[CTIEvent]:
        """Copy of all logged events, oldest first."""
        return [_copy(e) for e in self.entries]

    def get_by_type(self, event_type: Union[CTIEventType, str]) -> list[CTIEvent]:
        """Get all events of a type, in log order.

        Args:
            event_type: Type to filter by.

        Returns:
            Matching events (may be empty).
        """
        return [_copy(e) for e in self.entries if e.matches(event_type)]

    def get_by_call_id(self, call_id: str) -> list[CTIEvent]:
        """Get all events belonging to one call, in log order.

        Args:
            call_id: Call identifier to filter by.

        Returns:
            Matching events (may be empty).
        """
        return [_copy(e) for e in self.entries if e.call_id == call_id]

    def last(self) -> Optional[CTIEvent]:
        """Most recent event, or None if the log is empty."""
        return _copy(self.entries[-1]) if self.entries else None

    def last_by_type(self, event_type: Union[CTIEventType, str]) -> Optional[CTIEvent]:
        """Most recent event of a type, scanning from the tail.

        Args:
            event_type: Type to look for.

        Returns:
            The latest matching event, or None.
        """
        for event in reversed(self.entries):
            if event.matches(event_type):
                return _copy(event)
        return None

    def has(self, event_type: Union[CTIEventType, str]) -> bool:
        """Check whether any logged event has the given type."""
        return any(e.matches(event_type) for e in self.entries)

    def count(self, event_type: Union[CTIEventType, str, None] = None) -> int:
        """Count logged events, optionally restricted to one type.

        Args:
            event_type: Type to count, or None for all events.

        Returns:
            Number of matching events.
        """
        if event_type is None:
            return len(self.entries)
        return sum(1 for e in self.entries if e.matches(event_type))

    def counts_by_type(self) -> dict[str, int]:
        """Frequency of each event type currently in the log.

        Reflects only retained entries, not lifetime totals.
        """
        counts: dict[str, int] = {}
        for event in self.entries:
            key = event_type_key(event.type)
            counts[key] = counts.get(key, 0) + 1
        return counts

    def clear(self) -> int:
        """Remove every entry.

        Returns:
            Number of entries removed.
        """
        removed = len(self.entries)
        self.entries.clear()
        return removed
