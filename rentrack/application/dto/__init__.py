"""Data transfer objects for the API boundary."""

from rentrack.application.dto.requests import (
    InventoryReportRequest,
    MissingReportRequest,
    MovementReportRequest,
    RecordMovementRequest,
    RentalReportRequest,
    ScanRequest,
)
from rentrack.application.dto.responses import (
    ErrorResponse,
    HealthResponse,
    InventoryReportResponse,
    ItemHistoryResponse,
    LocationListResponse,
    MissingReportResponse,
    MovementReportResponse,
    MovementResultResponse,
    RentalReportResponse,
    ScanResponse,
)

__all__ = [
    # Requests
    "RecordMovementRequest",
    "ScanRequest",
    "InventoryReportRequest",
    "MovementReportRequest",
    "MissingReportRequest",
    "RentalReportRequest",
    # Responses
    "MovementResultResponse",
    "ScanResponse",
    "LocationListResponse",
    "ItemHistoryResponse",
    "InventoryReportResponse",
    "MovementReportResponse",
    "MissingReportResponse",
    "RentalReportResponse",
    "HealthResponse",
    "ErrorResponse",
]
