"""
Location Resolver.

An item's current location is the destination of its latest movement event
at or before the requested time, or its default location when it has never
moved. The resolver orders events itself and never trusts the feed order.
"""

from datetime import datetime

from rentrack.config import get_logger
from rentrack.core.entities.location import LocationRef, ResolvedLocation
from rentrack.core.entities.movement import MovementEvent, ensure_utc
from rentrack.core.interfaces.inventory_store import IInventoryStore
from rentrack.core.interfaces.location_directory import ILocationDirectory
from rentrack.core.interfaces.movement_ledger import IMovementLedger

logger = get_logger(__name__)

UNKNOWN_LOCATION = "Unknown"


def latest_events(events: list[MovementEvent]) -> dict[str, MovementEvent]:
    """Latest event per item, by timestamp then insertion id."""
    latest: dict[str, MovementEvent] = {}
    for event in sorted(events, key=MovementEvent.sort_key, reverse=True):
        latest.setdefault(event.inventory_id, event)
    return latest


class LocationResolver:
    """Replays the movement ledger to locate items."""

    def __init__(
        self,
        ledger: IMovementLedger,
        inventory_store: IInventoryStore,
        directory: ILocationDirectory,
    ) -> None:
        self._ledger = ledger
        self._inventory_store = inventory_store
        self._directory = directory

    async def resolve(
        self,
        inventory_ids: list[str],
        as_of: datetime | None = None,
    ) -> dict[str, ResolvedLocation]:
        """
        Resolve the location of several items.

        Args:
            inventory_ids: Items to locate.
            as_of: Cut-off time; None means now.

        Returns:
            Mapping of inventory id to resolved location. Ids with neither an
            event nor a registry row resolve to an empty "Unknown" entry.
        """
        ids = list(dict.fromkeys(inventory_ids))
        if not ids:
            return {}
        if as_of is not None:
            as_of = ensure_utc(as_of)

        events = await self._ledger.events_for(ids, until=as_of)
        if as_of is not None:
            events = [e for e in events if e.timestamp <= as_of]
        latest = latest_events(events)

        missing = [i for i in ids if i not in latest]
        items = await self._inventory_store.get_items(missing) if missing else {}

        names: dict[LocationRef, str] = {}
        resolved: dict[str, ResolvedLocation] = {}
        for inventory_id in ids:
            event = latest.get(inventory_id)
            if event is not None:
                ref: LocationRef | None = event.customer_location
                source = "ledger"
            else:
                item = items.get(inventory_id)
                ref = item.default_location if item else None
                source = "default" if ref is not None else "none"

            name = UNKNOWN_LOCATION
            if ref is not None:
                if ref not in names:
                    names[ref] = await self._directory.resolve_name(ref) or UNKNOWN_LOCATION
                name = names[ref]

            resolved[inventory_id] = ResolvedLocation(
                inventory_id=inventory_id,
                location=ref,
                name=name,
                source=source,
                event_id=event.id if event else None,
            )

        logger.debug(
            "locations_resolved",
            count=len(resolved),
            from_ledger=len(latest),
            as_of=as_of.isoformat() if as_of else None,
        )
        return resolved

    async def resolve_one(
        self,
        inventory_id: str,
        as_of: datetime | None = None,
    ) -> ResolvedLocation:
        """Resolve a single item."""
        result = await self.resolve([inventory_id], as_of=as_of)
        return result[inventory_id]
