"""Abstract interface for the inventory registry."""

from abc import ABC, abstractmethod
from datetime import datetime

from rentrack.core.entities.inventory import InventoryItem, ItemStatus


class IInventoryStore(ABC):
    """Interface for inventory item persistence."""

    @abstractmethod
    async def create_item(self, item: InventoryItem) -> InventoryItem:
        """Register a new physical item."""
        pass

    @abstractmethod
    async def get_item(self, item_id: str) -> InventoryItem | None:
        """Get inventory item by ID."""
        pass

    @abstractmethod
    async def get_item_by_tag(self, rfid_tag: str) -> InventoryItem | None:
        """Get inventory item by its RFID/barcode tag."""
        pass

    @abstractmethod
    async def get_items(self, item_ids: list[str]) -> dict[str, InventoryItem]:
        """Get several items keyed by ID. Unknown IDs are left out."""
        pass

    @abstractmethod
    async def list_items(
        self,
        status: ItemStatus | None = None,
        limit: int = 1000,
        offset: int = 0,
        search: str | None = None,
    ) -> list[InventoryItem]:
        """List items ordered by tag.

        ``search`` matches ID, tag or type code, case-insensitively.
        """
        pass

    @abstractmethod
    async def update_status(
        self,
        item_id: str,
        status: ItemStatus,
        last_scan_time: datetime,
        last_scan_gate: str | None,
        expected_version: int,
    ) -> InventoryItem:
        """
        Apply a status change if the stored version still equals ``expected_version``.

        Raises:
            ConcurrentMovementError: the item changed since it was read.
        """
        pass
