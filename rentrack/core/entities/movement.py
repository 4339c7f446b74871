"""Movement ledger entities."""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from rentrack.core.entities.location import CustomerLocationRef, LocationRef


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class Direction(str, Enum):
    """Direction of a custody transfer."""

    IN = "in"
    OUT = "out"


class MovementAction(str, Enum):
    """Operator action that produces a movement event."""

    OUT = "out"  # dispatch to a customer location
    IN = "in"  # scan back into a base location
    RECEIVE = "receive"  # customer confirms arrival
    RETURN = "return"  # customer sends the item back

    @property
    def direction(self) -> Direction:
        if self in (MovementAction.IN, MovementAction.RECEIVE):
            return Direction.IN
        return Direction.OUT

    @property
    def opens_batch(self) -> bool:
        """True when the action starts a new rental cycle."""
        return self is MovementAction.OUT


class MovementEvent(BaseModel):
    """Immutable record of one custody transfer.

    ``customer_location`` is the destination of the transfer whichever id
    space it lives in.
    """

    model_config = ConfigDict(frozen=True)

    id: int | None = None
    inventory_id: str
    direction: Direction
    action: MovementAction
    gate_id: str | None = None
    previous_location: LocationRef | None = None
    customer_location: LocationRef
    rate_snapshot: float = 0.0
    recorded_by: str | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    batch_id: str
    remark: str | None = None

    @field_validator("timestamp")
    @classmethod
    def _normalize_timestamp(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    @property
    def charged_location(self) -> CustomerLocationRef | None:
        """Customer location whose rate table applies to this event.

        Outbound dispatches and receipts charge the destination; returns and
        inbound scans charge the customer the item is coming back from.
        """
        if self.action in (MovementAction.OUT, MovementAction.RECEIVE):
            ref = self.customer_location
        else:
            ref = self.previous_location
        return ref if isinstance(ref, CustomerLocationRef) else None

    def sort_key(self) -> tuple[datetime, int]:
        """Ledger order: timestamp, then insertion id."""
        return (self.timestamp, self.id or 0)


class MovementWarning(BaseModel):
    """Non-fatal condition raised while validating a movement."""

    code: str
    inventory_id: str
    message: str
