"""
Scan Session.

Accumulates scanned items for one movement before submit. Each scan is
checked against the item's status the moment it is read; the same checks run
again at submit against the freshly loaded registry. Nothing is written until
the batch is submitted, so abandoning a session has no effect.
"""

from dataclasses import dataclass

from rentrack.config import get_logger
from rentrack.core.entities.actor import ActorContext
from rentrack.core.entities.inventory import InventoryItem
from rentrack.core.entities.movement import MovementAction, MovementEvent, MovementWarning
from rentrack.core.exceptions import (
    DuplicateScanError,
    InventoryItemNotFoundError,
    LocationMismatchError,
)
from rentrack.core.interfaces.inventory_store import IInventoryStore
from rentrack.core.interfaces.movement_ledger import IMovementLedger
from rentrack.core.services.status_machine import StatusStateMachine

logger = get_logger(__name__)


def check_receive_location(
    inventory_id: str,
    opening_event: MovementEvent | None,
    actor: ActorContext | None,
) -> None:
    """
    Ensure an item is received where it was sent.

    Actors without an assigned location are not restricted.

    Raises:
        LocationMismatchError: the latest outbound event targets another location.
    """
    if actor is None or actor.location_id is None:
        return
    sent_to = opening_event.customer_location.id if opening_event else None
    if sent_to != actor.location_id:
        raise LocationMismatchError(
            inventory_id=inventory_id,
            sent_to=sent_to,
            actor_location=actor.location_id,
        )


@dataclass
class ScanEntry:
    """One accepted scan."""

    item: InventoryItem
    warning: MovementWarning | None = None


class ScanSession:
    """In-memory list of items scanned for a single movement action."""

    def __init__(
        self,
        action: MovementAction,
        inventory_store: IInventoryStore,
        ledger: IMovementLedger,
        actor: ActorContext | None = None,
        state_machine: StatusStateMachine | None = None,
        require_location_match: bool = True,
        already_scanned: list[str] | None = None,
    ):
        self.action = action
        self._inventory_store = inventory_store
        self._ledger = ledger
        self._actor = actor
        self._state_machine = state_machine or StatusStateMachine()
        self._require_location_match = require_location_match
        # Ids accepted by an earlier request of the same session
        self._prior_ids: set[str] = set(already_scanned or [])
        self._entries: dict[str, ScanEntry] = {}

    def __len__(self) -> int:
        return len(self._prior_ids | self._entries.keys())

    def __contains__(self, inventory_id: str) -> bool:
        return inventory_id in self._entries or inventory_id in self._prior_ids

    @property
    def items(self) -> list[InventoryItem]:
        return [entry.item for entry in self._entries.values()]

    @property
    def inventory_ids(self) -> list[str]:
        return list(self._entries)

    @property
    def warnings(self) -> list[MovementWarning]:
        return [e.warning for e in self._entries.values() if e.warning is not None]

    async def lookup(self, code: str) -> InventoryItem:
        """Find an item by tag, falling back to its inventory id."""
        code = code.strip()
        item = await self._inventory_store.get_item_by_tag(code)
        if item is None:
            item = await self._inventory_store.get_item(code)
        if item is None:
            raise InventoryItemNotFoundError(code)
        return item

    async def scan(self, code: str) -> ScanEntry:
        """
        Add a scanned tag to the session.

        Args:
            code: RFID tag or barcode read at the gate.

        Returns:
            The accepted entry, with a warning for unusual transitions.

        Raises:
            InventoryItemNotFoundError: no item carries this tag.
            DuplicateScanError: the item is already in the session.
            InvalidStatusTransitionError: the action is illegal for the item.
            LocationMismatchError: a receive at the wrong location.
        """
        item = await self.lookup(code)
        if item.id in self:
            raise DuplicateScanError(item.id)

        check = self._state_machine.check(self.action, item.status, item.id)

        if self.action is MovementAction.RECEIVE and self._require_location_match:
            opening = await self._ledger.latest_out_event_for(item.id)
            check_receive_location(item.id, opening, self._actor)

        entry = ScanEntry(item=item, warning=check.to_warning(item.id))
        self._entries[item.id] = entry
        logger.debug(
            "item_scanned",
            action=self.action.value,
            inventory_id=item.id,
            status=item.status.value,
            warning=entry.warning.code if entry.warning else None,
        )
        return entry

    def remove(self, inventory_id: str) -> bool:
        """Drop an item from the session. Returns False if it was not there."""
        self._prior_ids.discard(inventory_id)
        return self._entries.pop(inventory_id, None) is not None

    def clear(self) -> None:
        self._prior_ids.clear()
        self._entries.clear()
