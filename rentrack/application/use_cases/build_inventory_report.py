"""Build Inventory Report Use Case.

Every item with its resolved location.
"""

from dataclasses import dataclass
from datetime import datetime

from rentrack.application.dto.requests import InventoryReportRequest
from rentrack.application.dto.responses import InventoryReportResponse, InventoryReportRow
from rentrack.application.use_cases.base import LedgerReadUseCase
from rentrack.config import get_logger
from rentrack.core.entities.inventory import InventoryItem
from rentrack.core.entities.location import ResolvedLocation
from rentrack.core.interfaces.inventory_store import IInventoryStore
from rentrack.core.services.location_resolver import LocationResolver

logger = get_logger(__name__)


@dataclass
class InventoryReportLine:
    item: InventoryItem
    location: ResolvedLocation


@dataclass
class InventoryReport:
    lines: list[InventoryReportLine]
    as_of: datetime | None = None


class BuildInventoryReportUseCase(LedgerReadUseCase):
    """Inventory report with location, status and text filters."""

    # Items resolved per round trip when filtering by location
    page_size = 500

    async def execute(self, request: InventoryReportRequest) -> InventoryReport:
        store = await self._get_inventory_store()
        resolver = await self._get_resolver()

        if request.location_id is None:
            items = await store.list_items(
                status=request.status,
                limit=request.limit,
                offset=request.offset,
                search=request.search,
            )
            locations = await resolver.resolve([i.id for i in items], as_of=request.as_of)
            lines = [InventoryReportLine(item=i, location=locations[i.id]) for i in items]
        else:
            lines = await self._lines_at_location(store, resolver, request)

        logger.info(
            "inventory_report_built",
            rows=len(lines),
            status=request.status.value if request.status else None,
            location_id=request.location_id,
        )
        return InventoryReport(lines=lines, as_of=request.as_of)

    async def _lines_at_location(
        self,
        store: IInventoryStore,
        resolver: LocationResolver,
        request: InventoryReportRequest,
    ) -> list[InventoryReportLine]:
        """Page through the registry until ``offset + limit`` items sit at the location.

        The location comes from the ledger, so the filter cannot run in SQL.
        """
        wanted = request.offset + request.limit
        matches: list[InventoryReportLine] = []
        offset = 0
        while len(matches) < wanted:
            items = await store.list_items(
                status=request.status,
                limit=self.page_size,
                offset=offset,
                search=request.search,
            )
            locations = await resolver.resolve([i.id for i in items], as_of=request.as_of)
            for item in items:
                resolved = locations[item.id]
                if resolved.location is not None and resolved.location.id == request.location_id:
                    matches.append(InventoryReportLine(item=item, location=resolved))
            if len(items) < self.page_size:
                break
            offset += self.page_size
        return matches[request.offset : wanted]

    def to_response(self, report: InventoryReport) -> InventoryReportResponse:
        return InventoryReportResponse(
            rows=[
                InventoryReportRow(
                    inventory_id=line.item.id,
                    rfid_tag=line.item.rfid_tag,
                    type_code=line.item.type_code,
                    status=line.item.status.value,
                    location=line.location.location,
                    location_name=line.location.name,
                    last_scan_time=line.item.last_scan_time,
                )
                for line in report.lines
            ],
            total=len(report.lines),
            as_of=report.as_of,
        )
