"""Movement recording endpoints."""

from fastapi import APIRouter, Depends, status

from rentrack.api.dependencies import (
    get_actor,
    get_record_movement_use_case,
    get_scan_item_use_case,
)
from rentrack.application.dto.requests import RecordMovementRequest, ScanRequest
from rentrack.application.dto.responses import (
    ErrorResponse,
    MovementResultResponse,
    ScanResponse,
)
from rentrack.application.use_cases.record_movement import RecordMovementUseCase
from rentrack.application.use_cases.scan_item import ScanItemUseCase
from rentrack.core.entities.actor import ActorContext

router = APIRouter(prefix="/api/movements", tags=["movements"])


@router.post(
    "",
    response_model=MovementResultResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def record_movement(
    request: RecordMovementRequest,
    actor: ActorContext = Depends(get_actor),
    use_case: RecordMovementUseCase = Depends(get_record_movement_use_case),
) -> MovementResultResponse:
    """
    Submit a scan session.

    All items are recorded under one batch or none are.
    """
    result = await use_case.execute(request, actor)
    return use_case.to_response(result)


@router.post(
    "/scan",
    response_model=ScanResponse,
    responses={400: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
)
async def scan_item(
    request: ScanRequest,
    actor: ActorContext = Depends(get_actor),
    use_case: ScanItemUseCase = Depends(get_scan_item_use_case),
) -> ScanResponse:
    """Check one tag read before adding it to the session."""
    entry = await use_case.execute(request, actor)
    return use_case.to_response(entry)
