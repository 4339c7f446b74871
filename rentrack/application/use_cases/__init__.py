"""Application use cases."""

from rentrack.application.use_cases.build_inventory_report import BuildInventoryReportUseCase
from rentrack.application.use_cases.build_missing_report import BuildMissingReportUseCase
from rentrack.application.use_cases.build_movement_report import BuildMovementReportUseCase
from rentrack.application.use_cases.build_rental_report import BuildRentalReportUseCase
from rentrack.application.use_cases.locate_items import GetItemHistoryUseCase, LocateItemsUseCase
from rentrack.application.use_cases.record_movement import MovementResult, RecordMovementUseCase
from rentrack.application.use_cases.scan_item import ScanItemUseCase

__all__ = [
    "RecordMovementUseCase",
    "MovementResult",
    "ScanItemUseCase",
    "LocateItemsUseCase",
    "GetItemHistoryUseCase",
    "BuildInventoryReportUseCase",
    "BuildMovementReportUseCase",
    "BuildMissingReportUseCase",
    "BuildRentalReportUseCase",
]
