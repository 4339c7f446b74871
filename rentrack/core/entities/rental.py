"""Rental report entities."""

from datetime import datetime

from pydantic import BaseModel, Field

from rentrack.core.entities.inventory import ItemStatus
from rentrack.core.entities.location import CustomerLocationRef


class RentalLine(BaseModel):
    """One rental period of one item, opened by an outbound batch entry."""

    inventory_id: str
    rfid_tag: str | None = None
    type_code: str | None = None
    status: ItemStatus | None = None
    batch_id: str
    location: CustomerLocationRef | None = None
    location_name: str = "Unknown"
    rental_start: datetime
    rental_end: datetime | None = None  # None while the item is still out
    days_rented: int
    rate: float
    rate_source: str = "snapshot"  # snapshot / live / none
    cost: float

    @property
    def daily_average(self) -> float:
        return self.cost / self.days_rented if self.days_rented else 0.0


class RentalReport(BaseModel):
    """Read-only projection of rental cost over the ledger."""

    lines: list[RentalLine] = Field(default_factory=list)
    as_of: datetime

    @property
    def total_cost(self) -> float:
        return sum(line.cost for line in self.lines)

    @property
    def totals_by_location(self) -> dict[str, float]:
        totals: dict[str, float] = {}
        for line in self.lines:
            totals[line.location_name] = totals.get(line.location_name, 0.0) + line.cost
        return totals
