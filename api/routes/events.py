"""Event emission and event log endpoints.

These endpoints let clients emit CTI events and query or clear the
simulator's event log.
"""

from typing import Optional, Union

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, ConfigDict, Field

from api.dependencies import EventSimulatorDep
from api.models import CountResponse, EventFieldsRequest, EventListResponse
from models.cti_event import CallDirection, CTIEvent, CTIEventType, ScreenPopData

# Create router for event-related endpoints
router = APIRouter(
    prefix="/events",
    tags=["events"],
)


# Request/Response Models


class EmitEventRequest(EventFieldsRequest):
    """Request model for emitting an arbitrary event.

    Attributes:
        type: Event type; unrecognized strings are accepted.
    """

    type: Union[CTIEventType, str]


class CallStartRequest(BaseModel):
    """Request model for a call_start event.

    Attributes:
        from_number: Caller number, sent as ``from``.
        to: Callee number.
        direction: Call direction (inbound by default).
        call_id: Optional call identifier.
    """

    model_config = ConfigDict(populate_by_name=True)

    from_number: str = Field(alias="from")
    to: str
    direction: Optional[CallDirection] = None
    call_id: Optional[str] = None


class CallEndRequest(BaseModel):
    """Request model for a call_end event."""

    call_id: str = Field(min_length=1)
    duration: int = Field(default=0, ge=0)


class CallTransferRequest(BaseModel):
    """Request model for a call_transfer event."""

    call_id: str = Field(min_length=1)
    transfer_to: str = Field(min_length=1)


class ClearLogResponse(BaseModel):
    """Response model for clearing the log.

    Attributes:
        cleared: Number of events removed from the log.
    """

    cleared: int


# Route Handlers


@router.post("", response_model=CTIEvent)
async def emit_event(request: EmitEventRequest, simulator: EventSimulatorDep):
    """Emit an event of any type.

    Args:
        request: Event type and fields.
        simulator: The EventSimulator instance (injected by FastAPI).

    Returns:
        The emitted event.
    """
    return simulator.emit_event(request.type, **request.event_fields())


@router.post("/call-start", response_model=CTIEvent)
async def emit_call_start(request: CallStartRequest, simulator: EventSimulatorDep):
    """Emit a ringing call_start event."""
    return simulator.emit_call_start(
        from_number=request.from_number,
        to=request.to,
        direction=request.direction,
        call_id=request.call_id,
    )


@router.post("/call-end", response_model=CTIEvent)
async def emit_call_end(request: CallEndRequest, simulator: EventSimulatorDep):
    """Emit a call_end event."""
    return simulator.emit_call_end(request.call_id, request.duration)


@router.post("/call-transfer", response_model=CTIEvent)
async def emit_call_transfer(request: CallTransferRequest, simulator: EventSimulatorDep):
    """Emit a call_transfer event."""
    return simulator.emit_call_transfer(request.call_id, request.transfer_to)


@router.post("/screen-pop", response_model=CTIEvent)
async def emit_screen_pop(request: ScreenPopData, simulator: EventSimulatorDep):
    """Emit a screen_pop event with a fresh call id."""
    return simulator.emit_screen_pop(request)


@router.get("", response_model=EventListResponse)
async def list_events(
    simulator: EventSimulatorDep,
    type: Optional[str] = None,
    call_id: Optional[str] = None,
    limit: Optional[int] = Query(default=None, ge=1),
    offset: int = Query(default=0, ge=0),
):
    """List logged events with optional filters.

    Args:
        simulator: The EventSimulator instance (injected by FastAPI).
        type: Only events of this type.
        call_id: Only events of this call.
        limit: Maximum number of events to return.
        offset: Number of events to skip (for pagination).

    Returns:
        Events in log order, oldest first.
    """
    if type is not None:
        events = simulator.get_events_by_type(type)
    else:
        events = simulator.get_event_log()

    if call_id is not None:
        events = [e for e in events if e.call_id == call_id]

    total = len(events)
    if limit:
        events = events[offset : offset + limit]
    else:
        events = events[offset:]

    return EventListResponse(events=events, total=total, returned=len(events))


@router.get("/last", response_model=CTIEvent)
async def get_last_event(simulator: EventSimulatorDep, type: Optional[str] = None):
    """Get the most recent event, optionally of one type.

    Raises:
        HTTPException: 404 if no matching event is logged.
    """
    if type is not None:
        event = simulator.get_last_event_by_type(type)
    else:
        event = simulator.get_last_event()

    if event is None:
        detail = f"No {type} events in log" if type else "No events in log"
        raise HTTPException(status_code=404, detail=detail)

    return event


@router.get("/count", response_model=CountResponse)
async def count_events(simulator: EventSimulatorDep, type: Optional[str] = None):
    """Count logged events, optionally of one type."""
    return CountResponse(type=type, count=simulator.count_events(type))


@router.delete("", response_model=ClearLogResponse)
async def clear_log(simulator: EventSimulatorDep):
    """Empty the event log without touching connection state or counters."""
    cleared = simulator.count_events()
    simulator.clear_log()
    return ClearLogResponse(cleared=cleared)
