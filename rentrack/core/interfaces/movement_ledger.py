"""Abstract interface for the append-only movement ledger."""

from abc import ABC, abstractmethod
from datetime import datetime

from rentrack.core.entities.movement import Direction, MovementEvent


class IMovementLedger(ABC):
    """Interface for movement event persistence.

    Events are inserted once and never updated or deleted.
    """

    @abstractmethod
    async def insert_events(self, events: list[MovementEvent]) -> list[MovementEvent]:
        """Append events, returning them with store-assigned IDs."""
        pass

    @abstractmethod
    async def events_for(
        self,
        inventory_ids: list[str],
        until: datetime | None = None,
    ) -> list[MovementEvent]:
        """All events of the given items with ``timestamp <= until``.

        No ordering is promised.
        """
        pass

    @abstractmethod
    async def latest_out_event_for(self, inventory_id: str) -> MovementEvent | None:
        """Most recent outbound event of an item."""
        pass

    @abstractmethod
    async def list_events(
        self,
        direction: Direction | None = None,
        since: datetime | None = None,
        until: datetime | None = None,
        limit: int | None = None,
        tag_search: str | None = None,
    ) -> list[MovementEvent]:
        """Events in a time window, newest first.

        ``tag_search`` keeps events whose item tag contains the text,
        case-insensitively; ``limit`` applies after every filter.
        """
        pass
