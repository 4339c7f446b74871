"""SQLite storage implementations."""

from rentrack.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
    in_transaction,
)
from rentrack.infrastructure.storage.sqlite.inventory_store import SQLiteInventoryStore
from rentrack.infrastructure.storage.sqlite.location_directory import SQLiteLocationDirectory
from rentrack.infrastructure.storage.sqlite.movement_ledger import SQLiteMovementLedger
from rentrack.infrastructure.storage.sqlite.unit_of_work import SQLiteUnitOfWork

# Singleton instances
_inventory_store: SQLiteInventoryStore | None = None
_movement_ledger: SQLiteMovementLedger | None = None
_location_directory: SQLiteLocationDirectory | None = None
_unit_of_work: SQLiteUnitOfWork | None = None


async def get_inventory_store() -> SQLiteInventoryStore:
    """Get singleton inventory store instance."""
    global _inventory_store
    if _inventory_store is None:
        _inventory_store = SQLiteInventoryStore()
    return _inventory_store


async def get_movement_ledger() -> SQLiteMovementLedger:
    """Get singleton movement ledger instance."""
    global _movement_ledger
    if _movement_ledger is None:
        _movement_ledger = SQLiteMovementLedger()
    return _movement_ledger


async def get_location_directory() -> SQLiteLocationDirectory:
    """Get singleton location directory instance."""
    global _location_directory
    if _location_directory is None:
        _location_directory = SQLiteLocationDirectory()
    return _location_directory


async def get_unit_of_work() -> SQLiteUnitOfWork:
    """Get singleton unit of work instance."""
    global _unit_of_work
    if _unit_of_work is None:
        _unit_of_work = SQLiteUnitOfWork()
    return _unit_of_work


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    "in_transaction",
    # Store classes
    "SQLiteInventoryStore",
    "SQLiteMovementLedger",
    "SQLiteLocationDirectory",
    "SQLiteUnitOfWork",
    # Factory functions
    "get_inventory_store",
    "get_movement_ledger",
    "get_location_directory",
    "get_unit_of_work",
]
