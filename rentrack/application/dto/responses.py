"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
These are the ONLY contracts between use cases and API layer.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from rentrack.core.entities.location import LocationRef


class MovementWarningResponse(BaseModel):
    """Non-fatal condition attached to an accepted scan or submit."""

    code: str
    inventory_id: str
    message: str


class MovementEventResponse(BaseModel):
    """One ledger row."""

    id: int
    inventory_id: str
    direction: str
    action: str
    gate_id: str | None = None
    previous_location: LocationRef | None = None
    customer_location: LocationRef
    rate_snapshot: float = 0.0
    recorded_by: str | None = None
    timestamp: datetime
    batch_id: str
    remark: str | None = None


class InventoryItemResponse(BaseModel):
    """Registry row of an item."""

    id: str
    rfid_tag: str
    type_code: str
    status: str
    default_location: LocationRef | None = None
    last_scan_time: datetime | None = None
    last_scan_gate: str | None = None
    version: int


class MovementResultResponse(BaseModel):
    """Outcome of a recorded batch."""

    batch_ids: list[str] = Field(..., description="Batches the events were written under")
    events: list[MovementEventResponse]
    items: list[InventoryItemResponse]
    warnings: list[MovementWarningResponse] = Field(default_factory=list)


class ScanResponse(BaseModel):
    """Accepted scan."""

    inventory_id: str
    rfid_tag: str
    type_code: str
    status: str
    warning: MovementWarningResponse | None = None


class ResolvedLocationResponse(BaseModel):
    """Current location of one item."""

    inventory_id: str
    location: LocationRef | None = None
    name: str
    source: str = Field(..., description="ledger, default or none")
    event_id: int | None = None


class LocationListResponse(BaseModel):
    """Resolved locations of several items."""

    as_of: datetime | None = None
    locations: list[ResolvedLocationResponse]


class ItemHistoryResponse(BaseModel):
    """Ledger history of one item, newest first."""

    item: InventoryItemResponse
    events: list[MovementEventResponse]


class InventoryReportRow(BaseModel):
    """Inventory report line."""

    inventory_id: str
    rfid_tag: str
    type_code: str
    status: str
    location: LocationRef | None = None
    location_name: str
    last_scan_time: datetime | None = None


class InventoryReportResponse(BaseModel):
    """Items with their resolved location."""

    rows: list[InventoryReportRow]
    total: int
    as_of: datetime | None = None


class MovementReportRow(BaseModel):
    """Movement report line."""

    event_id: int
    timestamp: datetime
    inventory_id: str
    rfid_tag: str | None = None
    type_code: str | None = None
    action: str
    direction: str
    gate_name: str
    from_name: str
    to_name: str
    status: str | None = Field(default=None, description="Item's current status")
    batch_id: str
    recorded_by: str | None = None
    rate_snapshot: float = 0.0
    remark: str | None = None


class MovementReportResponse(BaseModel):
    """Ledger rows in a time window, newest first."""

    rows: list[MovementReportRow]
    total: int


class MissingReportRow(BaseModel):
    """Item not seen for a while, with its last sighting."""

    inventory_id: str
    rfid_tag: str
    type_code: str
    status: str
    last_seen_location: LocationRef | None = None
    last_seen_location_name: str
    last_seen_gate: str
    last_seen_at: datetime
    missing_days: int
    bucket: str = Field(..., description="recently_missing, missing or long_missing")


class MissingReportResponse(BaseModel):
    """Missing-item report."""

    as_of: datetime
    rows: list[MissingReportRow]
    total: int
    counts_by_bucket: dict[str, int]


class RentalLineResponse(BaseModel):
    """One rental period."""

    inventory_id: str
    rfid_tag: str | None = None
    type_code: str | None = None
    status: str | None = None
    batch_id: str
    location: LocationRef | None = None
    location_name: str
    rental_start: datetime
    rental_end: datetime | None = None
    days_rented: int
    rate: float
    rate_source: str
    cost: float
    daily_average: float


class RentalReportResponse(BaseModel):
    """Rental cost report."""

    as_of: datetime
    lines: list[RentalLineResponse]
    total_cost: float
    totals_by_location: dict[str, float]


class ComponentHealthResponse(BaseModel):
    """Health of one dependency."""

    name: str
    available: bool
    latency_ms: float | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: ComponentHealthResponse | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. DUPLICATE_SCAN)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    details: dict | None = Field(default=None, description="Structured error context")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)
