"""Storage infrastructure implementations."""

from rentrack.infrastructure.storage.sqlite import (
    SQLiteInventoryStore,
    SQLiteLocationDirectory,
    SQLiteMovementLedger,
    SQLiteUnitOfWork,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)

__all__ = [
    # SQLite stores
    "SQLiteInventoryStore",
    "SQLiteLocationDirectory",
    "SQLiteMovementLedger",
    "SQLiteUnitOfWork",
    # Connection pool
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
]
