"""Lazy store access shared by the read-side use cases."""

from rentrack.core.interfaces.inventory_store import IInventoryStore
from rentrack.core.interfaces.location_directory import ILocationDirectory
from rentrack.core.interfaces.movement_ledger import IMovementLedger
from rentrack.core.services.location_resolver import LocationResolver


class LedgerReadUseCase:
    """Base for use cases that only read the registry, ledger and directory.

    Stores not injected are fetched from the SQLite factories on first use.
    """

    def __init__(
        self,
        inventory_store: IInventoryStore | None = None,
        ledger: IMovementLedger | None = None,
        directory: ILocationDirectory | None = None,
    ):
        self._inventory_store = inventory_store
        self._ledger = ledger
        self._directory = directory

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

    async def _get_resolver(self) -> LocationResolver:
        return LocationResolver(
            await self._get_ledger(),
            await self._get_inventory_store(),
            await self._get_directory(),
        )
