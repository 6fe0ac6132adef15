"""CTI event models.

Defines the typed events produced by the simulator, the scripted steps used
for replay, and the caller-identification data carried by screen pops.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class CTIEventType(str, Enum):
    """Event types recognized by downstream call-handling tests."""

    CALL_START = "call_start"
    CALL_END = "call_end"
    CALL_TRANSFER = "call_transfer"
    SCREEN_POP = "screen_pop"
    CALL_HOLD = "call_hold"
    CALL_RESUME = "call_resume"
    DTMF_RECEIVED = "dtmf_received"


class CallDirection(str, Enum):
    """Direction of a call relative to the monitored extension."""

    INBOUND = "inbound"
    OUTBOUND = "outbound"
    INTERNAL = "internal"


class CallState(str, Enum):
    """State of a call as reported by an event."""

    RINGING = "ringing"
    CONNECTED = "connected"
    ON_HOLD = "on_hold"
    TRANSFERRED = "transferred"
    ENDED = "ended"


class EntityType(str, Enum):
    """Kind of record a screen pop was matched against."""

    DRIVER = "driver"
    CUSTOMER = "customer"
    VENDOR = "vendor"
    UNKNOWN = "unknown"


def coerce_event_type(value: Union[CTIEventType, str]) -> Union[CTIEventType, str]:
    """Map a recognized type string onto CTIEventType, leaving unknown strings as-is.

    Args:
        value: An event type or an arbitrary type string.

    Returns:
        The matching CTIEventType member, or the original string.
    """
    if isinstance(value, CTIEventType):
        return value
    try:
        return CTIEventType(value)
    except ValueError:
        return value


def event_type_key(value: Union[CTIEventType, str]) -> str:
    """Return the plain string form of an event type, used for grouping."""
    if isinstance(value, CTIEventType):
        return value.value
    return value


class _EventFields(BaseModel):
    """Fields shared by emitted events and scripted steps.

    ``callId`` and ``transferTo`` are accepted as input spellings. Unknown
    keys are rejected.
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    type: Union[CTIEventType, str] = Field(description="Event type identifier")
    from_number: Optional[str] = Field(
        default=None, alias="from", description="Caller phone number"
    )
    to: Optional[str] = Field(default=None, description="Callee phone number")
    direction: Optional[CallDirection] = Field(default=None, description="Call direction")
    state: Optional[CallState] = Field(default=None, description="Current call state")
    duration: Optional[int] = Field(
        default=None, ge=0, description="Duration in seconds (call_end events)"
    )
    transfer_to: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("transfer_to", "transferTo"),
        description="Transfer target (call_transfer events)",
    )
    payload: Optional[dict[str, Any]] = Field(
        default=None,
        description="Caller-defined data; the simulator does not validate it",
    )

    @field_validator("type", mode="before")
    @classmethod
    def validate_type(cls, v: Any) -> Union[CTIEventType, str]:
        """Coerce recognized type strings to CTIEventType."""
        if not isinstance(v, str) or not v.strip():
            raise ValueError("Event type must be a non-empty string")
        return coerce_event_type(v)

    @property
    def type_key(self) -> str:
        """Event type as a plain string."""
        return event_type_key(self.type)


class CTIEvent(_EventFields):
    """A single event from the simulated phone system.

    Events are immutable once built. The simulator creates them only while
    connected and always fills in ``call_id`` and ``timestamp``.

    Args:
        type: Event type (a CTIEventType or any forward-compatible string).
        timestamp: Wall-clock time the event was created.
        call_id: Correlation identifier shared by all events of one call.
        from_number: Caller phone number (serialized as ``from``).
        to: Callee phone number.
        direction: Call direction.
        state: Call state carried by the event.
        duration: Call duration in seconds, only meaningful on call_end.
        transfer_to: Transfer target for call_transfer events.
        payload: Open key-value data, e.g. screen-pop metadata.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    timestamp: datetime = Field(description="When the event was created")
    call_id: str = Field(
        min_length=1,
        validation_alias=AliasChoices("call_id", "callId"),
        description="Unique call identifier",
    )

    def matches(self, event_type: Union[CTIEventType, str]) -> bool:
        """Check whether this event is of the given type."""
        return self.type_key == event_type_key(event_type)


class ScriptedEvent(_EventFields):
    """One step of a scripted replay.

    Like CTIEvent but without a timestamp, with an optional call id, and
    with a ``delay`` in milliseconds to wait after the previous step.
    """

    call_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("call_id", "callId"),
        description="Call identifier",
    )
    delay: Optional[int] = Field(
        default=None, description="Milliseconds to wait before emitting this step"
    )

    def event_fields(self) -> dict[str, Any]:
        """Return the fields to pass on to emission, without type and delay."""
        return self.model_dump(exclude={"type", "delay"})


class ScreenPopData(BaseModel):
    """Caller-identification data displayed when a call comes in.

    Args:
        caller_id: Caller phone number.
        entity_name: Matched record name (driver, customer, ...).
        entity_type: Kind of matched record.
        entity_id: Record identifier in the host system.
        vehicle_plate: Associated vehicle plate, if any.
        metadata: Additional display data.
    """

    model_config = ConfigDict(populate_by_name=True)

    caller_id: str = Field(alias="callerId")
    entity_name: Optional[str] = Field(default=None, alias="entityName")
    entity_type: Optional[EntityType] = Field(default=None, alias="entityType")
    entity_id: Optional[int] = Field(default=None, alias="entityId")
    vehicle_plate: Optional[str] = Field(default=None, alias="vehiclePlate")
    metadata: Optional[dict[str, Any]] = None

    def to_payload(self) -> dict[str, Any]:
        """Build the screen_pop payload for this data."""
        return {
            "entityName": self.entity_name,
            "entityType": self.entity_type.value if self.entity_type else None,
            "entityId": self.entity_id,
            "vehiclePlate": self.vehicle_plate,
            "metadata": self.metadata,
        }
