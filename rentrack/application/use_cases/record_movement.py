"""Record Movement Use Case.

Turns one submitted scan session into ledger events and registry updates.

Flow:
1. Check the actor may move inventory
2. Validate the whole batch against freshly loaded items
3. Resolve from/to, gate, batch id and rate snapshot per item
4. Write every event and every status update in one unit of work
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from rentrack.application.dto.requests import RecordMovementRequest
from rentrack.application.dto.responses import (
    InventoryItemResponse,
    MovementEventResponse,
    MovementResultResponse,
    MovementWarningResponse,
)
from rentrack.config import get_logger
from rentrack.config.settings import MovementSettings
from rentrack.core.entities.actor import ActorContext, Permission
from rentrack.core.entities.inventory import InventoryItem, ItemStatus
from rentrack.core.entities.location import (
    CustomerLocationRef,
    LocationRef,
    ResolvedLocation,
    location_ref,
)
from rentrack.core.entities.movement import (
    MovementAction,
    MovementEvent,
    MovementWarning,
)
from rentrack.core.exceptions import (
    BatchTooLargeError,
    ConcurrentMovementError,
    DuplicateScanError,
    EmptyBatchError,
    InventoryItemNotFoundError,
    MissingSelectionError,
    MovementIntegrityError,
    PermissionDeniedError,
    SameLocationError,
)
from rentrack.core.interfaces.inventory_store import IInventoryStore
from rentrack.core.interfaces.location_directory import ILocationDirectory
from rentrack.core.interfaces.movement_ledger import IMovementLedger
from rentrack.core.interfaces.unit_of_work import IUnitOfWork
from rentrack.core.services.batch_grouper import BatchGrouper, new_batch_id
from rentrack.core.services.location_resolver import LocationResolver
from rentrack.core.services.scan_session import check_receive_location
from rentrack.core.services.status_machine import StatusStateMachine, TransitionCheck

logger = get_logger(__name__)


@dataclass
class MovementResult:
    """Result of a recorded batch."""

    batch_ids: list[str]
    events: list[MovementEvent]
    items: list[InventoryItem]
    warnings: list[MovementWarning] = field(default_factory=list)


@dataclass
class _PlannedMove:
    item: InventoryItem
    check: TransitionCheck
    event: MovementEvent


def event_to_response(event: MovementEvent) -> MovementEventResponse:
    return MovementEventResponse(
        id=event.id,
        inventory_id=event.inventory_id,
        direction=event.direction.value,
        action=event.action.value,
        gate_id=event.gate_id,
        previous_location=event.previous_location,
        customer_location=event.customer_location,
        rate_snapshot=event.rate_snapshot,
        recorded_by=event.recorded_by,
        timestamp=event.timestamp,
        batch_id=event.batch_id,
        remark=event.remark,
    )


def item_to_response(item: InventoryItem) -> InventoryItemResponse:
    return InventoryItemResponse(
        id=item.id,
        rfid_tag=item.rfid_tag,
        type_code=item.type_code,
        status=item.status.value,
        default_location=item.default_location,
        last_scan_time=item.last_scan_time,
        last_scan_gate=item.last_scan_gate,
        version=item.version,
    )


def warning_to_response(warning: MovementWarning) -> MovementWarningResponse:
    return MovementWarningResponse(
        code=warning.code,
        inventory_id=warning.inventory_id,
        message=warning.message,
    )


class RecordMovementUseCase:
    """Record a batch of OUT / IN / RECEIVE / RETURN movements."""

    def __init__(
        self,
        inventory_store: IInventoryStore | None = None,
        ledger: IMovementLedger | None = None,
        directory: ILocationDirectory | None = None,
        unit_of_work: IUnitOfWork | None = None,
        settings: MovementSettings | None = None,
        state_machine: StatusStateMachine | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self._inventory_store = inventory_store
        self._ledger = ledger
        self._directory = directory
        self._unit_of_work = unit_of_work
        self._settings = settings
        self._state_machine = state_machine or StatusStateMachine()
        self._clock = clock or (lambda: datetime.now(UTC))

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

    async def _get_directory(self) -> ILocationDirectory:
        if self._directory is None:
            from rentrack.infrastructure.storage.sqlite import get_location_directory

            self._directory = await get_location_directory()
        return self._directory

    async def _get_unit_of_work(self) -> IUnitOfWork:
        if self._unit_of_work is None:
            from rentrack.infrastructure.storage.sqlite import get_unit_of_work

            self._unit_of_work = await get_unit_of_work()
        return self._unit_of_work

    def _get_settings(self) -> MovementSettings:
        if self._settings is None:
            from rentrack.config import get_settings

            self._settings = get_settings().movement
        return self._settings

    async def execute(
        self,
        request: RecordMovementRequest,
        actor: ActorContext,
    ) -> MovementResult:
        """
        Validate and record a batch.

        Args:
            request: Action, scanned item IDs and selections.
            actor: User submitting the batch.

        Returns:
            MovementResult with the stored events and updated items.

        Raises:
            PermissionDeniedError: actor may not move inventory.
            MovementValidationError: the batch was rejected; nothing written.
            ConcurrentMovementError: an item changed meanwhile; nothing written.
            MovementIntegrityError: the write failed part way.
        """
        action = request.action
        logger.info(
            "record_movement_started",
            action=action.value,
            items=len(request.inventory_ids),
            actor=actor.user_id,
        )

        if not actor.has(Permission.INVENTORY_MOVEMENT):
            logger.warning(
                "movement_permission_denied",
                actor=actor.user_id,
                role=actor.role.value,
            )
            raise PermissionDeniedError(actor.user_id, Permission.INVENTORY_MOVEMENT.value)

        self._validate_request(request)

        inventory = await self._get_inventory_store()
        ledger = await self._get_ledger()
        directory = await self._get_directory()

        planned = await self._plan(request, actor, inventory, ledger, directory)

        batch_ids = list(dict.fromkeys(p.event.batch_id for p in planned))
        inventory_ids = [p.item.id for p in planned]
        warnings = [w for p in planned if (w := p.check.to_warning(p.item.id))]

        uow = await self._get_unit_of_work()
        writing = False
        try:
            async with uow.transaction():
                writing = True
                events = await ledger.insert_events([p.event for p in planned])
                items = []
                for move in planned:
                    items.append(
                        await inventory.update_status(
                            move.item.id,
                            move.check.target,
                            move.event.timestamp,
                            move.event.gate_id,
                            expected_version=move.item.version,
                        )
                    )
        except ConcurrentMovementError:
            logger.warning(
                "movement_batch_conflict",
                action=action.value,
                batch_ids=batch_ids,
            )
            raise
        except Exception as e:
            if not writing:
                raise
            logger.error(
                "movement_integrity_failure",
                action=action.value,
                batch_ids=batch_ids,
                inventory_ids=inventory_ids,
                actor=actor.user_id,
                error=str(e),
            )
            raise MovementIntegrityError(batch_ids, inventory_ids, str(e)) from e

        logger.info(
            "movement_batch_recorded",
            action=action.value,
            batch_ids=batch_ids,
            events=len(events),
            warnings=len(warnings),
            actor=actor.user_id,
        )
        return MovementResult(
            batch_ids=batch_ids,
            events=events,
            items=items,
            warnings=warnings,
        )

    def _validate_request(self, request: RecordMovementRequest) -> None:
        """Checks that need no store access."""
        ids = request.inventory_ids
        if not ids:
            raise EmptyBatchError()

        max_size = self._get_settings().max_batch_size
        if len(ids) > max_size:
            raise BatchTooLargeError(len(ids), max_size)

        seen: set[str] = set()
        for inventory_id in ids:
            if inventory_id in seen:
                raise DuplicateScanError(inventory_id)
            seen.add(inventory_id)

        if request.action in (MovementAction.OUT, MovementAction.IN):
            if not request.gate_id:
                raise MissingSelectionError("gate")
            if request.to_location is None:
                raise MissingSelectionError("location")

    async def _plan(
        self,
        request: RecordMovementRequest,
        actor: ActorContext,
        inventory: IInventoryStore,
        ledger: IMovementLedger,
        directory: ILocationDirectory,
    ) -> list[_PlannedMove]:
        """Build every event of the batch, raising on the first rejected item."""
        action = request.action
        settings = self._get_settings()

        items = await inventory.get_items(request.inventory_ids)
        for inventory_id in request.inventory_ids:
            if inventory_id not in items:
                raise InventoryItemNotFoundError(inventory_id)

        resolver = LocationResolver(ledger, inventory, directory)
        current = await resolver.resolve(request.inventory_ids)
        grouper = BatchGrouper(ledger)
        submit_batch_id = new_batch_id()
        timestamp = self._clock()
        rate_tables: dict[str, dict[str, float]] = {}

        planned: list[_PlannedMove] = []
        for inventory_id in request.inventory_ids:
            item = items[inventory_id]
            check = self._state_machine.check(action, item.status, inventory_id)

            opening = None
            if not action.opens_batch:
                opening = await grouper.opening_event(inventory_id)
            if action is MovementAction.RECEIVE and settings.require_receive_location_match:
                check_receive_location(inventory_id, opening, actor)

            from_ref, to_ref, gate_id = self._endpoints(
                request, actor, current[inventory_id], opening
            )
            self._check_distinct(request, item, from_ref, to_ref)

            batch_id = await grouper.assign(action, inventory_id, submit_batch_id, opening)
            event = MovementEvent(
                inventory_id=inventory_id,
                direction=action.direction,
                action=action,
                gate_id=gate_id,
                previous_location=from_ref,
                customer_location=to_ref,
                recorded_by=actor.user_id,
                timestamp=timestamp,
                batch_id=batch_id,
                remark=request.remark,
            )
            rate = await self._rate_snapshot(event, item, directory, rate_tables)
            if rate:
                event = event.model_copy(update={"rate_snapshot": rate})

            planned.append(_PlannedMove(item=item, check=check, event=event))

        return planned

    def _endpoints(
        self,
        request: RecordMovementRequest,
        actor: ActorContext,
        current: ResolvedLocation,
        opening: MovementEvent | None,
    ) -> tuple[LocationRef | None, LocationRef, str | None]:
        """(from, to, gate) of one item's event."""
        action = request.action

        if action is MovementAction.RECEIVE:
            if opening is not None:
                return (
                    opening.previous_location,
                    opening.customer_location,
                    request.gate_id or opening.gate_id,
                )
            to_ref = request.to_location
            if to_ref is None and actor.location_id:
                to_ref = CustomerLocationRef(id=actor.location_id)
            if to_ref is None:
                raise MissingSelectionError("location")
            return current.location, to_ref, request.gate_id

        if action is MovementAction.RETURN:
            from_ref = opening.customer_location if opening else current.location
            to_ref = request.to_location or self._base_return_location()
            if to_ref is None:
                raise MissingSelectionError("return location")
            gate_id = request.gate_id or (opening.gate_id if opening else None)
            return from_ref, to_ref, gate_id

        return current.location or request.from_location, request.to_location, request.gate_id

    def _check_distinct(
        self,
        request: RecordMovementRequest,
        item: InventoryItem,
        from_ref: LocationRef | None,
        to_ref: LocationRef,
    ) -> None:
        """Reject a move whose source and destination are the same place.

        A returned item restocked at the base it was returned to is already
        there; its IN only books it back into stock.
        """
        if request.from_location is not None and request.from_location == to_ref:
            raise SameLocationError(item.id, to_ref.id)
        if from_ref is None or from_ref != to_ref:
            return
        if request.action is MovementAction.IN and item.status is ItemStatus.RETURNED:
            return
        raise SameLocationError(item.id, to_ref.id)

    def _base_return_location(self) -> LocationRef | None:
        settings = self._get_settings()
        if not settings.base_return_location_id:
            return None
        return location_ref(
            settings.base_return_location_space,
            settings.base_return_location_id,
        )

    async def _rate_snapshot(
        self,
        event: MovementEvent,
        item: InventoryItem,
        directory: ILocationDirectory,
        rate_tables: dict[str, dict[str, float]],
    ) -> float:
        """Daily rate of the rented customer location for this item's type."""
        charged = event.charged_location
        # The return dock is ours even when it sits in the customer space
        if charged is None or charged == self._base_return_location():
            return 0.0
        if charged.id not in rate_tables:
            rate_tables[charged.id] = await directory.rate_table_of(charged.id)
        rate = rate_tables[charged.id].get(item.type_code)
        if rate is None:
            logger.warning(
                "rate_missing",
                inventory_id=item.id,
                type_code=item.type_code,
                customer_location_id=charged.id,
            )
            return 0.0
        return float(rate)

    def to_response(self, result: MovementResult) -> MovementResultResponse:
        """Convert result to API response."""
        return MovementResultResponse(
            batch_ids=result.batch_ids,
            events=[event_to_response(e) for e in result.events],
            items=[item_to_response(i) for i in result.items],
            warnings=[warning_to_response(w) for w in result.warnings],
        )
