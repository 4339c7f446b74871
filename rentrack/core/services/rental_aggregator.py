"""
Rental Aggregator.

Derives rental periods and their cost from outbound ledger events. Each
(batch, item) pair is one rental period no matter how many outbound rows the
cycle produced. Reports are projections only and never write to the ledger.
"""

import math
from datetime import UTC, datetime, timedelta

from rentrack.config import get_logger
from rentrack.core.entities.inventory import InventoryItem, ItemStatus
from rentrack.core.entities.location import CustomerLocationRef
from rentrack.core.entities.movement import (
    Direction,
    MovementAction,
    MovementEvent,
    ensure_utc,
)
from rentrack.core.entities.rental import RentalLine, RentalReport
from rentrack.core.interfaces.inventory_store import IInventoryStore
from rentrack.core.interfaces.location_directory import ILocationDirectory
from rentrack.core.interfaces.movement_ledger import IMovementLedger

logger = get_logger(__name__)

ONE_DAY = timedelta(days=1)


def billable_days(start: datetime, end: datetime) -> int:
    """Started 24h periods between ``start`` and ``end``, at least one."""
    return max(1, math.ceil((end - start) / ONE_DAY))


def rental_openings(events: list[MovementEvent]) -> list[MovementEvent]:
    """First outbound event of every (batch, item) pair, oldest first."""
    seen: set[tuple[str, str]] = set()
    openings: list[MovementEvent] = []
    for event in sorted(events, key=MovementEvent.sort_key):
        if event.direction is not Direction.OUT:
            continue
        key = (event.batch_id, event.inventory_id)
        if key in seen:
            continue
        seen.add(key)
        openings.append(event)
    return openings


def closes_rental(opening: MovementEvent, event: MovementEvent) -> bool:
    """Whether ``event`` ends the rental opened by ``opening``."""
    if event.action in (MovementAction.RETURN, MovementAction.IN):
        return True
    return event.direction is Direction.OUT and event.batch_id != opening.batch_id


class RentalAggregator:
    """Builds rental cost reports from the movement ledger."""

    def __init__(
        self,
        ledger: IMovementLedger,
        inventory_store: IInventoryStore,
        directory: ILocationDirectory,
    ) -> None:
        self._ledger = ledger
        self._inventory_store = inventory_store
        self._directory = directory

    async def build(
        self,
        since: datetime | None = None,
        until: datetime | None = None,
        as_of: datetime | None = None,
        location_id: str | None = None,
        status: ItemStatus | None = None,
        search: str | None = None,
    ) -> RentalReport:
        """
        Build a rental report.

        Args:
            since: Only rentals starting at or after this time.
            until: Only rentals starting at or before this time.
            as_of: Point in time the report is computed for; open rentals
                are charged up to here. Defaults to now.
            location_id: Only rentals charged to this customer location.
            status: Only items currently in this status.
            search: Case-insensitive match on tag, type code or item id.

        Returns:
            RentalReport with one line per rental period.
        """
        as_of = ensure_utc(as_of) if as_of else datetime.now(UTC)
        since = ensure_utc(since) if since else None
        until = ensure_utc(until) if until else None

        out_events = await self._ledger.list_events(direction=Direction.OUT, until=as_of)
        openings = rental_openings(out_events)
        if since is not None:
            openings = [e for e in openings if e.timestamp >= since]
        if until is not None:
            openings = [e for e in openings if e.timestamp <= until]
        if location_id is not None:
            openings = [
                e for e in openings
                if e.charged_location is not None and e.charged_location.id == location_id
            ]
        if not openings:
            return RentalReport(lines=[], as_of=as_of)

        item_ids = list(dict.fromkeys(e.inventory_id for e in openings))
        items = await self._inventory_store.get_items(item_ids)
        history = await self._ledger.events_for(item_ids, until=as_of)
        by_item: dict[str, list[MovementEvent]] = {}
        for event in sorted(history, key=MovementEvent.sort_key):
            by_item.setdefault(event.inventory_id, []).append(event)

        needle = search.strip().lower() if search else None
        names: dict[str, str] = {}
        rate_tables: dict[str, dict[str, float]] = {}
        lines: list[RentalLine] = []

        for opening in openings:
            item = items.get(opening.inventory_id)
            if status is not None and (item is None or item.status != status):
                continue
            if needle and not self._matches(needle, opening, item):
                continue

            charged = opening.charged_location
            end = self._rental_end(opening, by_item.get(opening.inventory_id, []))
            days = billable_days(opening.timestamp, end or as_of)
            rate, source = await self._rate_for(opening, item, charged, rate_tables)

            location_name = "Unknown"
            if charged is not None:
                if charged.id not in names:
                    names[charged.id] = await self._directory.resolve_name(charged) or "Unknown"
                location_name = names[charged.id]

            lines.append(
                RentalLine(
                    inventory_id=opening.inventory_id,
                    rfid_tag=item.rfid_tag if item else None,
                    type_code=item.type_code if item else None,
                    status=item.status if item else None,
                    batch_id=opening.batch_id,
                    location=charged,
                    location_name=location_name,
                    rental_start=opening.timestamp,
                    rental_end=end,
                    days_rented=days,
                    rate=rate,
                    rate_source=source,
                    cost=round(rate * days, 2),
                )
            )

        logger.info(
            "rental_report_built",
            rentals=len(lines),
            as_of=as_of.isoformat(),
        )
        return RentalReport(lines=lines, as_of=as_of)

    @staticmethod
    def _matches(needle: str, opening: MovementEvent, item: InventoryItem | None) -> bool:
        haystack = [opening.inventory_id]
        if item is not None:
            haystack += [item.rfid_tag, item.type_code]
        return any(needle in value.lower() for value in haystack)

    @staticmethod
    def _rental_end(opening: MovementEvent, history: list[MovementEvent]) -> datetime | None:
        start_key = opening.sort_key()
        for event in history:
            if event.sort_key() <= start_key:
                continue
            if closes_rental(opening, event):
                return event.timestamp
        return None

    async def _rate_for(
        self,
        opening: MovementEvent,
        item: InventoryItem | None,
        charged: CustomerLocationRef | None,
        rate_tables: dict[str, dict[str, float]],
    ) -> tuple[float, str]:
        """Snapshot rate; the live table only backs up rows without one."""
        if opening.rate_snapshot:
            return opening.rate_snapshot, "snapshot"
        if charged is None or item is None:
            return 0.0, "none"
        if charged.id not in rate_tables:
            rate_tables[charged.id] = await self._directory.rate_table_of(charged.id)
        rate = rate_tables[charged.id].get(item.type_code)
        if rate is None:
            return 0.0, "none"
        return float(rate), "live"
