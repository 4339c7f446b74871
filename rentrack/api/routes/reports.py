"""Report endpoints. Read-only projections of the ledger."""

from datetime import datetime

from fastapi import APIRouter, Depends, Query

from rentrack.api.dependencies import (
    get_inventory_report_use_case,
    get_missing_report_use_case,
    get_movement_report_use_case,
    get_rental_report_use_case,
    require_permission,
)
from rentrack.application.dto.requests import (
    InventoryReportRequest,
    MissingReportRequest,
    MovementReportRequest,
    RentalReportRequest,
)
from rentrack.application.dto.responses import (
    ErrorResponse,
    InventoryReportResponse,
    MissingReportResponse,
    MovementReportResponse,
    RentalReportResponse,
)
from rentrack.application.use_cases.build_inventory_report import BuildInventoryReportUseCase
from rentrack.application.use_cases.build_missing_report import BuildMissingReportUseCase
from rentrack.application.use_cases.build_movement_report import BuildMovementReportUseCase
from rentrack.application.use_cases.build_rental_report import BuildRentalReportUseCase
from rentrack.core.entities.actor import Permission
from rentrack.core.entities.inventory import ItemStatus
from rentrack.core.entities.movement import Direction

router = APIRouter(
    prefix="/api/reports",
    tags=["reports"],
    dependencies=[Depends(require_permission(Permission.REPORTS_VIEW))],
    responses={403: {"model": ErrorResponse}},
)


@router.get("/inventory", response_model=InventoryReportResponse)
async def inventory_report(
    as_of: datetime | None = None,
    location_id: str | None = None,
    status: ItemStatus | None = None,
    search: str | None = None,
    limit: int = Query(default=1000, ge=1, le=10000),
    offset: int = Query(default=0, ge=0),
    use_case: BuildInventoryReportUseCase = Depends(get_inventory_report_use_case),
) -> InventoryReportResponse:
    """Every item with its resolved location and status."""
    report = await use_case.execute(
        InventoryReportRequest(
            as_of=as_of,
            location_id=location_id,
            status=status,
            search=search,
            limit=limit,
            offset=offset,
        )
    )
    return use_case.to_response(report)


@router.get("/movements", response_model=MovementReportResponse)
async def movement_report(
    since: datetime | None = None,
    until: datetime | None = None,
    direction: Direction | None = None,
    search: str | None = None,
    limit: int = Query(default=1000, ge=1, le=10000),
    use_case: BuildMovementReportUseCase = Depends(get_movement_report_use_case),
) -> MovementReportResponse:
    """Movement events in a date range."""
    rows = await use_case.execute(
        MovementReportRequest(
            since=since,
            until=until,
            direction=direction,
            search=search,
            limit=limit,
        )
    )
    return use_case.to_response(rows)


@router.get("/rental", response_model=RentalReportResponse)
async def rental_report(
    since: datetime | None = None,
    until: datetime | None = None,
    as_of: datetime | None = None,
    location_id: str | None = None,
    status: ItemStatus | None = None,
    search: str | None = None,
    use_case: BuildRentalReportUseCase = Depends(get_rental_report_use_case),
) -> RentalReportResponse:
    """Rental periods and cost per customer location."""
    report = await use_case.execute(
        RentalReportRequest(
            since=since,
            until=until,
            as_of=as_of,
            location_id=location_id,
            status=status,
            search=search,
        )
    )
    return use_case.to_response(report)


@router.get("/missing", response_model=MissingReportResponse)
async def missing_report(
    as_of: datetime | None = None,
    min_days: int = Query(default=7, ge=0),
    since: datetime | None = None,
    until: datetime | None = None,
    status: ItemStatus | None = None,
    search: str | None = None,
    limit: int = Query(default=1000, ge=1, le=10000),
    use_case: BuildMissingReportUseCase = Depends(get_missing_report_use_case),
) -> MissingReportResponse:
    """Items not seen for at least ``min_days``, banded by how long they are gone."""
    report = await use_case.execute(
        MissingReportRequest(
            as_of=as_of,
            min_days=min_days,
            since=since,
            until=until,
            status=status,
            search=search,
            limit=limit,
        )
    )
    return use_case.to_response(report)
