"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from rentrack.core.entities.inventory import ItemStatus
from rentrack.core.entities.location import LocationRef
from rentrack.core.entities.movement import Direction, MovementAction


class RecordMovementRequest(BaseModel):
    """Submit of one scan session.

    Every listed item gets one ledger event; all of them are written together
    or not at all.
    """

    action: MovementAction = Field(
        ...,
        description="Operator action",
        examples=["out", "in", "receive", "return"],
    )
    inventory_ids: list[str] = Field(
        default_factory=list,
        description="Scanned items, each at most once",
    )
    gate_id: str | None = Field(
        default=None,
        description="Gate the items pass through. Required for out and in",
    )
    to_location: LocationRef | None = Field(
        default=None,
        description=(
            "Destination. Required for out and in; optional for return, where "
            "it defaults to the configured base return location"
        ),
        examples=[{"space": "customer", "id": "CL-TOY"}],
    )
    from_location: LocationRef | None = Field(
        default=None,
        description="Source used only when an item's current location is unknown",
    )
    remark: str | None = Field(default=None, max_length=500)


class ScanRequest(BaseModel):
    """One tag read during a scan session."""

    action: MovementAction
    code: str = Field(..., min_length=1, description="RFID tag or barcode")
    scanned_ids: list[str] = Field(
        default_factory=list,
        description="Items already accepted in this session",
    )


class InventoryReportRequest(BaseModel):
    """Filters for the inventory location report."""

    as_of: datetime | None = None
    location_id: str | None = Field(default=None, description="Resolved location ID")
    status: ItemStatus | None = None
    search: str | None = Field(default=None, description="Tag, type code or item ID")
    limit: int = Field(default=1000, ge=1, le=10000)
    offset: int = Field(default=0, ge=0)


class MovementReportRequest(BaseModel):
    """Filters for the movement report."""

    since: datetime | None = None
    until: datetime | None = None
    direction: Direction | None = None
    search: str | None = Field(default=None, description="Tag search")
    limit: int = Field(default=1000, ge=1, le=10000)


class RentalReportRequest(BaseModel):
    """Filters for the rental cost report."""

    since: datetime | None = Field(default=None, description="Earliest rental start")
    until: datetime | None = Field(default=None, description="Latest rental start")
    as_of: datetime | None = Field(default=None, description="Charge open rentals up to here")
    location_id: str | None = Field(default=None, description="Customer location ID")
    status: ItemStatus | None = None
    search: str | None = Field(default=None, description="Tag or type code")


class MissingReportRequest(BaseModel):
    """Filters for the missing-item report."""

    as_of: datetime | None = Field(default=None, description="Measure absence up to here")
    min_days: int = Field(default=7, ge=0, description="Days unseen before an item counts")
    since: datetime | None = Field(
        default=None,
        description="Earliest last sighting; defaults to 90 days before as_of",
    )
    until: datetime | None = Field(default=None, description="Latest last sighting")
    status: ItemStatus | None = Field(
        default=None,
        description="Only items in this status; by default every status but In-Stock",
    )
    search: str | None = Field(default=None, description="Item ID, tag or last-seen location")
    limit: int = Field(default=1000, ge=1, le=10000)
