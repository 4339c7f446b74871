"""Build Missing Report Use Case.

Items that have not been seen for a while. An item's last sighting is its
latest ledger event at or before ``as_of``; items that never moved fall back
to the registry's last scan. Items never seen at all are left out.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum

from rentrack.application.dto.requests import MissingReportRequest
from rentrack.application.dto.responses import MissingReportResponse, MissingReportRow
from rentrack.application.use_cases.base import LedgerReadUseCase
from rentrack.config import get_logger
from rentrack.core.entities.inventory import InventoryItem, ItemStatus
from rentrack.core.entities.location import LocationRef
from rentrack.core.entities.movement import MovementEvent, ensure_utc
from rentrack.core.services.location_resolver import UNKNOWN_LOCATION, latest_events

logger = get_logger(__name__)


class MissingBucket(str, Enum):
    """Age band of a missing item."""

    RECENTLY_MISSING = "recently_missing"
    MISSING = "missing"
    LONG_MISSING = "long_missing"

    @classmethod
    def for_days(cls, days: int) -> "MissingBucket":
        if days < 30:
            return cls.RECENTLY_MISSING
        if days < 60:
            return cls.MISSING
        return cls.LONG_MISSING


@dataclass
class Sighting:
    location: LocationRef | None
    gate_id: str | None
    at: datetime


@dataclass
class MissingLine:
    item: InventoryItem
    sighting: Sighting
    location_name: str
    gate_name: str
    missing_days: int

    @property
    def bucket(self) -> MissingBucket:
        return MissingBucket.for_days(self.missing_days)


@dataclass
class MissingReport:
    as_of: datetime
    lines: list[MissingLine]


class BuildMissingReportUseCase(LedgerReadUseCase):
    """Missing-item report with age bands and a last-seen window."""

    page_size = 500
    lookback_days = 90

    async def execute(self, request: MissingReportRequest) -> MissingReport:
        store = await self._get_inventory_store()
        ledger = await self._get_ledger()
        directory = await self._get_directory()

        as_of = ensure_utc(request.as_of) if request.as_of else datetime.now(UTC)
        since = (
            ensure_utc(request.since)
            if request.since
            else as_of - timedelta(days=self.lookback_days)
        )
        until = ensure_utc(request.until) if request.until else as_of
        needle = request.search.strip().lower() if request.search else ""

        names: dict[LocationRef, str] = {}
        gate_names: dict[str, str] = {}
        lines: list[MissingLine] = []

        offset = 0
        while True:
            items = await store.list_items(
                status=request.status, limit=self.page_size, offset=offset
            )
            if request.status is None:
                candidates = [i for i in items if i.status is not ItemStatus.IN_STOCK]
            else:
                candidates = items
            latest = latest_events(
                [
                    e
                    for e in await ledger.events_for([i.id for i in candidates], until=as_of)
                    if e.timestamp <= as_of
                ]
            )

            for item in candidates:
                sighting = self._last_sighting(item, latest.get(item.id), as_of)
                if sighting is None or not since <= sighting.at <= until:
                    continue
                missing_days = (as_of - sighting.at).days
                if missing_days < request.min_days:
                    continue

                location_name = UNKNOWN_LOCATION
                if sighting.location is not None:
                    if sighting.location not in names:
                        names[sighting.location] = (
                            await directory.resolve_name(sighting.location) or UNKNOWN_LOCATION
                        )
                    location_name = names[sighting.location]
                if needle and not any(
                    needle in value.lower()
                    for value in (item.id, item.rfid_tag, location_name)
                ):
                    continue

                gate_name = UNKNOWN_LOCATION
                if sighting.gate_id:
                    if sighting.gate_id not in gate_names:
                        gate = await directory.get_gate(sighting.gate_id)
                        gate_names[sighting.gate_id] = gate.name if gate else UNKNOWN_LOCATION
                    gate_name = gate_names[sighting.gate_id]

                lines.append(
                    MissingLine(
                        item=item,
                        sighting=sighting,
                        location_name=location_name,
                        gate_name=gate_name,
                        missing_days=missing_days,
                    )
                )

            if len(items) < self.page_size:
                break
            offset += self.page_size

        lines.sort(key=lambda line: (-line.missing_days, line.item.rfid_tag))
        lines = lines[: request.limit]

        logger.info(
            "missing_report_built",
            rows=len(lines),
            min_days=request.min_days,
            as_of=as_of.isoformat(),
        )
        return MissingReport(as_of=as_of, lines=lines)

    @staticmethod
    def _last_sighting(
        item: InventoryItem, event: MovementEvent | None, as_of: datetime
    ) -> Sighting | None:
        if event is not None:
            return Sighting(
                location=event.customer_location,
                gate_id=event.gate_id,
                at=event.timestamp,
            )
        if item.last_scan_time is None:
            return None
        scanned_at = ensure_utc(item.last_scan_time)
        if scanned_at > as_of:
            return None
        return Sighting(
            location=item.default_location,
            gate_id=item.last_scan_gate,
            at=scanned_at,
        )

    def to_response(self, report: MissingReport) -> MissingReportResponse:
        counts = {bucket.value: 0 for bucket in MissingBucket}
        for line in report.lines:
            counts[line.bucket.value] += 1
        return MissingReportResponse(
            as_of=report.as_of,
            rows=[
                MissingReportRow(
                    inventory_id=line.item.id,
                    rfid_tag=line.item.rfid_tag,
                    type_code=line.item.type_code,
                    status=line.item.status.value,
                    last_seen_location=line.sighting.location,
                    last_seen_location_name=line.location_name,
                    last_seen_gate=line.gate_name,
                    last_seen_at=line.sighting.at,
                    missing_days=line.missing_days,
                    bucket=line.bucket.value,
                )
                for line in report.lines
            ],
            total=len(report.lines),
            counts_by_bucket=counts,
        )
