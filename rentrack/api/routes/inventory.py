"""Inventory location endpoints."""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status

from rentrack.api.dependencies import (
    get_item_history_use_case,
    get_locate_items_use_case,
)
from rentrack.application.dto.responses import (
    ErrorResponse,
    ItemHistoryResponse,
    LocationListResponse,
)
from rentrack.application.use_cases.locate_items import (
    GetItemHistoryUseCase,
    LocateItemsUseCase,
)
from rentrack.core.exceptions import InventoryItemNotFoundError

router = APIRouter(prefix="/api/inventory", tags=["inventory"])


@router.get("/locations", response_model=LocationListResponse)
async def locate_items(
    ids: list[str] = Query(..., description="Inventory IDs, repeat or comma-separate"),
    as_of: datetime | None = Query(default=None),
    use_case: LocateItemsUseCase = Depends(get_locate_items_use_case),
) -> LocationListResponse:
    """Current location of items, or their location as of a past date."""
    inventory_ids = [i.strip() for value in ids for i in value.split(",") if i.strip()]
    result = await use_case.execute(inventory_ids, as_of=as_of)
    return use_case.to_response(result, as_of=as_of)


@router.get(
    "/{inventory_id}/movements",
    response_model=ItemHistoryResponse,
    responses={404: {"model": ErrorResponse}},
)
async def item_movements(
    inventory_id: str,
    until: datetime | None = Query(default=None),
    use_case: GetItemHistoryUseCase = Depends(get_item_history_use_case),
) -> ItemHistoryResponse:
    """Ledger history of an item, newest first."""
    try:
        history = await use_case.execute(inventory_id, until=until)
    except InventoryItemNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    return use_case.to_response(history)
