"""
Application layer - Use cases and DTOs.

This layer orchestrates business logic by:
1. Defining request/response DTOs for API contracts
2. Implementing use cases that coordinate core services and stores

Use cases are the only entry point for API handlers.
"""

from rentrack.application.dto import (
    ErrorResponse,
    HealthResponse,
    RecordMovementRequest,
    ScanRequest,
)
from rentrack.application.use_cases import (
    BuildInventoryReportUseCase,
    BuildMovementReportUseCase,
    BuildRentalReportUseCase,
    GetItemHistoryUseCase,
    LocateItemsUseCase,
    RecordMovementUseCase,
    ScanItemUseCase,
)

__all__ = [
    "RecordMovementRequest",
    "ScanRequest",
    "HealthResponse",
    "ErrorResponse",
    "RecordMovementUseCase",
    "ScanItemUseCase",
    "LocateItemsUseCase",
    "GetItemHistoryUseCase",
    "BuildInventoryReportUseCase",
    "BuildMovementReportUseCase",
    "BuildRentalReportUseCase",
]
