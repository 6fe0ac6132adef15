"""Scripted replay endpoints.

These endpoints replay ordered, delayed event sequences on the simulator.
A request only returns once every step has been emitted, so its latency
is roughly the sum of the step delays.
"""

from typing import Any, Optional

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from api.dependencies import EventSimulatorDep
from api.models import EmittedEventsResponse
from models.cti_event import ScriptedEvent

# Create router for script endpoints
router = APIRouter(
    prefix="/scripts",
    tags=["scripts"],
)


class ScriptRequest(BaseModel):
    """Request model for replaying a script.

    Attributes:
        events: Steps to replay in order; each may carry a delay in ms.
    """

    events: list[ScriptedEvent] = Field(min_length=1)


class CallFlowRequest(BaseModel):
    """Request model for replaying a complete call.

    Attributes:
        from_number: Caller number, sent as ``from``.
        to: Callee number.
        duration: Call duration in seconds.
        with_screen_pop: Whether to emit a screen_pop between start and end.
        screen_pop_data: Extra screen-pop payload fields.
    """

    model_config = ConfigDict(populate_by_name=True)

    from_number: str = Field(alias="from")
    to: str
    duration: int = Field(ge=0)
    with_screen_pop: bool = False
    screen_pop_data: Optional[dict[str, Any]] = None


@router.post("", response_model=EmittedEventsResponse)
async def run_script(request: ScriptRequest, simulator: EventSimulatorDep):
    """Replay a script of events.

    Args:
        request: The steps to replay.
        simulator: The EventSimulator instance (injected by FastAPI).

    Returns:
        The emitted events in script order.
    """
    events = await simulator.script(request.events)
    return EmittedEventsResponse.from_events(events)


@router.post("/call-flow", response_model=EmittedEventsResponse)
async def run_call_flow(request: CallFlowRequest, simulator: EventSimulatorDep):
    """Replay call_start, an optional screen_pop, and call_end for one call."""
    events = await simulator.script_call_flow(
        from_number=request.from_number,
        to=request.to,
        duration=request.duration,
        with_screen_pop=request.with_screen_pop,
        screen_pop_data=request.screen_pop_data,
    )
    return EmittedEventsResponse.from_events(events)
