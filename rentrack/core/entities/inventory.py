"""Inventory registry entities."""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field

from rentrack.core.entities.location import LocationRef


class ItemStatus(str, Enum):
    """Lifecycle status of a physical item."""

    IN_STOCK = "In-Stock"
    IN_TRANSIT = "In-Transit"
    RECEIVED = "Received"
    RETURNED = "Returned"


class InventoryItem(BaseModel):
    """One physical bin/pallet.

    ``default_location`` is only the home location. Where the item is right
    now is answered by the movement ledger.
    """

    id: str | None = None
    rfid_tag: str
    type_code: str = Field(..., min_length=1, max_length=3)
    status: ItemStatus = ItemStatus.IN_STOCK
    default_location: LocationRef | None = None
    last_scan_time: datetime | None = None
    last_scan_gate: str | None = None
    version: int = 0  # bumped on every registry update
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
