"""Build Movement Report Use Case.

Ledger rows with readable names.
"""

from rentrack.application.dto.requests import MovementReportRequest
from rentrack.application.dto.responses import MovementReportResponse, MovementReportRow
from rentrack.application.use_cases.base import LedgerReadUseCase
from rentrack.config import get_logger
from rentrack.core.entities.location import LocationRef
from rentrack.core.services.location_resolver import UNKNOWN_LOCATION

logger = get_logger(__name__)


class BuildMovementReportUseCase(LedgerReadUseCase):
    """Movement events in a date range, newest first."""

    async def execute(self, request: MovementReportRequest) -> list[MovementReportRow]:
        ledger = await self._get_ledger()
        directory = await self._get_directory()
        store = await self._get_inventory_store()

        events = await ledger.list_events(
            direction=request.direction,
            since=request.since,
            until=request.until,
            limit=request.limit,
            tag_search=request.search,
        )
        items = await store.get_items(list({e.inventory_id for e in events}))

        gate_names: dict[str, str] = {}
        names: dict[LocationRef, str] = {}

        async def name_of(ref: LocationRef | None) -> str:
            if ref is None:
                return UNKNOWN_LOCATION
            if ref not in names:
                names[ref] = await directory.resolve_name(ref) or UNKNOWN_LOCATION
            return names[ref]

        rows: list[MovementReportRow] = []
        for event in events:
            item = items.get(event.inventory_id)
            gate_name = UNKNOWN_LOCATION
            if event.gate_id:
                if event.gate_id not in gate_names:
                    gate = await directory.get_gate(event.gate_id)
                    gate_names[event.gate_id] = gate.name if gate else UNKNOWN_LOCATION
                gate_name = gate_names[event.gate_id]

            rows.append(
                MovementReportRow(
                    event_id=event.id,
                    timestamp=event.timestamp,
                    inventory_id=event.inventory_id,
                    rfid_tag=item.rfid_tag if item else None,
                    type_code=item.type_code if item else None,
                    action=event.action.value,
                    direction=event.direction.value,
                    gate_name=gate_name,
                    from_name=await name_of(event.previous_location),
                    to_name=await name_of(event.customer_location),
                    status=item.status.value if item else None,
                    batch_id=event.batch_id,
                    recorded_by=event.recorded_by,
                    rate_snapshot=event.rate_snapshot,
                    remark=event.remark,
                )
            )

        logger.info("movement_report_built", rows=len(rows), search=request.search)
        return rows

    def to_response(self, rows: list[MovementReportRow]) -> MovementReportResponse:
        return MovementReportResponse(rows=rows, total=len(rows))
