"""Locate Items Use Cases.

Current location and ledger history of items.
"""

from dataclasses import dataclass
from datetime import datetime

from rentrack.application.dto.responses import (
    ItemHistoryResponse,
    LocationListResponse,
    ResolvedLocationResponse,
)
from rentrack.application.use_cases.base import LedgerReadUseCase
from rentrack.application.use_cases.record_movement import event_to_response, item_to_response
from rentrack.core.entities.inventory import InventoryItem
from rentrack.core.entities.location import ResolvedLocation
from rentrack.core.entities.movement import MovementEvent
from rentrack.core.exceptions import InventoryItemNotFoundError


class LocateItemsUseCase(LedgerReadUseCase):
    """Where are these items, now or as of a date."""

    async def execute(
        self,
        inventory_ids: list[str],
        as_of: datetime | None = None,
    ) -> dict[str, ResolvedLocation]:
        resolver = await self._get_resolver()
        return await resolver.resolve(inventory_ids, as_of=as_of)

    def to_response(
        self,
        result: dict[str, ResolvedLocation],
        as_of: datetime | None = None,
    ) -> LocationListResponse:
        return LocationListResponse(
            as_of=as_of,
            locations=[
                ResolvedLocationResponse(
                    inventory_id=r.inventory_id,
                    location=r.location,
                    name=r.name,
                    source=r.source,
                    event_id=r.event_id,
                )
                for r in result.values()
            ],
        )


@dataclass
class ItemHistory:
    item: InventoryItem
    events: list[MovementEvent]


class GetItemHistoryUseCase(LedgerReadUseCase):
    """An item's ledger events, newest first."""

    async def execute(self, inventory_id: str, until: datetime | None = None) -> ItemHistory:
        item = await (await self._get_inventory_store()).get_item(inventory_id)
        if item is None:
            raise InventoryItemNotFoundError(inventory_id)
        events = await (await self._get_ledger()).events_for([inventory_id], until=until)
        events.sort(key=MovementEvent.sort_key, reverse=True)
        return ItemHistory(item=item, events=events)

    def to_response(self, result: ItemHistory) -> ItemHistoryResponse:
        return ItemHistoryResponse(
            item=item_to_response(result.item),
            events=[event_to_response(e) for e in result.events],
        )
