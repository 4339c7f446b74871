"""Scan Item Use Case.

Checks a single tag read before it joins a session.
"""

from rentrack.application.dto.requests import ScanRequest
from rentrack.application.dto.responses import ScanResponse
from rentrack.application.use_cases.record_movement import warning_to_response
from rentrack.config import get_logger
from rentrack.config.settings import MovementSettings
from rentrack.core.entities.actor import ActorContext, Permission
from rentrack.core.exceptions import PermissionDeniedError
from rentrack.core.interfaces.inventory_store import IInventoryStore
from rentrack.core.interfaces.movement_ledger import IMovementLedger
from rentrack.core.services.scan_session import ScanEntry, ScanSession

logger = get_logger(__name__)


class ScanItemUseCase:
    """
    Soft-validate one scan.

    The client keeps the session; it sends the ids it has already accepted
    so duplicates are caught here. Nothing is written.
    """

    def __init__(
        self,
        inventory_store: IInventoryStore | None = None,
        ledger: IMovementLedger | None = None,
        settings: MovementSettings | None = None,
    ):
        self._inventory_store = inventory_store
        self._ledger = ledger
        self._settings = settings

    async def _get_inventory_store(self) -> IInventoryStore:
        if self._inventory_store is None:
            from rentrack.infrastructure.storage.sqlite import get_inventory_store

            self._inventory_store = await get_inventory_store()
        return self._inventory_store

    async def _get_ledger(self) -> IMovementLedger:
        if self._ledger is None:
            from rentrack.infrastructure.storage.sqlite import get_movement_ledger

            self._ledger = await get_movement_ledger()
        return self._ledger

    def _get_settings(self) -> MovementSettings:
        if self._settings is None:
            from rentrack.config import get_settings

            self._settings = get_settings().movement
        return self._settings

    async def execute(self, request: ScanRequest, actor: ActorContext) -> ScanEntry:
        if not actor.has(Permission.INVENTORY_MOVEMENT):
            raise PermissionDeniedError(actor.user_id, Permission.INVENTORY_MOVEMENT.value)

        session = ScanSession(
            action=request.action,
            inventory_store=await self._get_inventory_store(),
            ledger=await self._get_ledger(),
            actor=actor,
            require_location_match=self._get_settings().require_receive_location_match,
            already_scanned=request.scanned_ids,
        )
        return await session.scan(request.code)

    def to_response(self, entry: ScanEntry) -> ScanResponse:
        item = entry.item
        return ScanResponse(
            inventory_id=item.id,
            rfid_tag=item.rfid_tag,
            type_code=item.type_code,
            status=item.status.value,
            warning=warning_to_response(entry.warning) if entry.warning else None,
        )
