"""Shared request and response models for API endpoints.

This module contains models used by more than one route module.
"""

from typing import Any, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from models.cti_event import CallDirection, CallState, CTIEvent, CTIEventType


class EventFieldsRequest(BaseModel):
    """Optional event fields accepted by emission endpoints.

    Attributes:
        call_id: Call identifier (generated when omitted), also read from ``callId``.
        from_number: Caller number, sent as ``from``.
        to: Callee number.
        direction: Call direction.
        state: Call state.
        duration: Duration in seconds.
        transfer_to: Transfer target, also read from ``transferTo``.
        payload: Free-form event data.
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    call_id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("call_id", "callId")
    )
    from_number: Optional[str] = Field(default=None, alias="from")
    to: Optional[str] = None
    direction: Optional[CallDirection] = None
    state: Optional[CallState] = None
    duration: Optional[int] = Field(default=None, ge=0)
    transfer_to: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("transfer_to", "transferTo")
    )
    payload: Optional[dict[str, Any]] = None

    def event_fields(self) -> dict[str, Any]:
        """Fields to forward to EventSimulator.emit_event()."""
        return self.model_dump(exclude={"type"}, exclude_none=True)


class EventListResponse(BaseModel):
    """Response model for event listings.

    Attributes:
        events: Events in log order.
        total: Number of events matching the filters.
        returned: Number of events in this response (after pagination).
    """

    events: list[CTIEvent]
    total: int
    returned: int


class EmittedEventsResponse(BaseModel):
    """Response model for operations that emit several events.

    Attributes:
        events: The emitted events, in emission order.
        count: Number of emitted events.
        call_ids: Distinct call ids in first-seen order.
    """

    events: list[CTIEvent]
    count: int
    call_ids: list[str]

    @classmethod
    def from_events(cls, events: list[CTIEvent]) -> "EmittedEventsResponse":
        """Build the response from emitted events."""
        return cls(
            events=events,
            count=len(events),
            call_ids=list(dict.fromkeys(e.call_id for e in events)),
        )


class CountResponse(BaseModel):
    """Response model for event counts.

    Attributes:
        type: The counted type, or None for all events.
        count: Number of matching events in the log.
    """

    type: Optional[Union[CTIEventType, str]] = None
    count: int
