"""
Batch grouping for movement events.

An outbound submit opens a batch shared by every item in it. Receive, return
and inbound events close the cycle and inherit the batch of the item's latest
outbound event.
"""

import uuid

from rentrack.config import get_logger
from rentrack.core.entities.movement import MovementAction, MovementEvent
from rentrack.core.interfaces.movement_ledger import IMovementLedger

logger = get_logger(__name__)


def new_batch_id() -> str:
    """Generate a fresh batch identifier."""
    return uuid.uuid4().hex


class BatchGrouper:
    """Assigns batch ids to movement events."""

    def __init__(self, ledger: IMovementLedger) -> None:
        self._ledger = ledger
        self.missing_origin_count = 0

    async def opening_event(self, inventory_id: str) -> MovementEvent | None:
        """Latest outbound event of an item, if any."""
        return await self._ledger.latest_out_event_for(inventory_id)

    async def assign(
        self,
        action: MovementAction,
        inventory_id: str,
        submit_batch_id: str,
        opening_event: MovementEvent | None = None,
    ) -> str:
        """
        Batch id for one item's event.

        Args:
            action: Movement action being recorded.
            inventory_id: Item the event belongs to.
            submit_batch_id: Batch shared by the current outbound submit.
            opening_event: Already fetched latest outbound event, if any.

        Returns:
            ``submit_batch_id`` for OUT, otherwise the inherited batch. When no
            outbound event exists a new id is issued and the anomaly is logged.
        """
        if action.opens_batch:
            return submit_batch_id

        if opening_event is None:
            opening_event = await self.opening_event(inventory_id)
        if opening_event is not None:
            return opening_event.batch_id

        self.missing_origin_count += 1
        batch_id = new_batch_id()
        logger.warning(
            "batch_origin_missing",
            inventory_id=inventory_id,
            action=action.value,
            new_batch_id=batch_id,
            missing_origin_count=self.missing_origin_count,
        )
        return batch_id
