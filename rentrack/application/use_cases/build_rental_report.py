"""Build Rental Report Use Case."""

from rentrack.application.dto.requests import RentalReportRequest
from rentrack.application.dto.responses import RentalLineResponse, RentalReportResponse
from rentrack.application.use_cases.base import LedgerReadUseCase
from rentrack.core.entities.rental import RentalReport
from rentrack.core.services.rental_aggregator import RentalAggregator


class BuildRentalReportUseCase(LedgerReadUseCase):
    """Rental periods and cost per customer location."""

    async def execute(self, request: RentalReportRequest) -> RentalReport:
        aggregator = RentalAggregator(
            await self._get_ledger(),
            await self._get_inventory_store(),
            await self._get_directory(),
        )
        return await aggregator.build(
            since=request.since,
            until=request.until,
            as_of=request.as_of,
            location_id=request.location_id,
            status=request.status,
            search=request.search,
        )

    def to_response(self, report: RentalReport) -> RentalReportResponse:
        return RentalReportResponse(
            as_of=report.as_of,
            lines=[
                RentalLineResponse(
                    inventory_id=line.inventory_id,
                    rfid_tag=line.rfid_tag,
                    type_code=line.type_code,
                    status=line.status.value if line.status else None,
                    batch_id=line.batch_id,
                    location=line.location,
                    location_name=line.location_name,
                    rental_start=line.rental_start,
                    rental_end=line.rental_end,
                    days_rented=line.days_rented,
                    rate=line.rate,
                    rate_source=line.rate_source,
                    cost=line.cost,
                    daily_average=round(line.daily_average, 2),
                )
                for line in report.lines
            ],
            total_cost=round(report.total_cost, 2),
            totals_by_location={
                name: round(total, 2) for name, total in report.totals_by_location.items()
            },
        )
