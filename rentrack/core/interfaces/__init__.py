"""Core interfaces (ports) for dependency injection."""

from rentrack.core.interfaces.inventory_store import IInventoryStore
from rentrack.core.interfaces.location_directory import ILocationDirectory
from rentrack.core.interfaces.movement_ledger import IMovementLedger
from rentrack.core.interfaces.unit_of_work import IUnitOfWork

__all__ = [
    "IInventoryStore",
    "ILocationDirectory",
    "IMovementLedger",
    "IUnitOfWork",
]
