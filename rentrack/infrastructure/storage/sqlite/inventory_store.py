"""SQLite implementation of the inventory registry."""

import uuid
from datetime import UTC, datetime

import aiosqlite

from rentrack.config import get_logger
from rentrack.core.entities.inventory import InventoryItem, ItemStatus
from rentrack.core.exceptions import ConcurrentMovementError, DatabaseError
from rentrack.core.interfaces.inventory_store import IInventoryStore
from rentrack.infrastructure.storage.sqlite.columns import (
    decode_ref,
    decode_time,
    encode_ref,
    encode_time,
)
from rentrack.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLiteInventoryStore(IInventoryStore):
    """SQLite implementation of inventory item storage."""

    async def create_item(self, item: InventoryItem) -> InventoryItem:
        """Create a new inventory item."""
        now = datetime.now(UTC)
        item = item.model_copy(
            update={
                "id": item.id or uuid.uuid4().hex,
                "created_at": now,
                "updated_at": now,
            }
        )
        space, location_id = encode_ref(item.default_location)
        try:
            async with get_transaction() as conn:
                await conn.execute(
                    """
                    INSERT INTO inventory_items (
                        id, rfid_tag, type_code, status,
                        default_location_space, default_location_id,
                        last_scan_time, last_scan_gate, version,
                        created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        item.id,
                        item.rfid_tag,
                        item.type_code,
                        item.status.value,
                        space,
                        location_id,
                        encode_time(item.last_scan_time),
                        item.last_scan_gate,
                        item.version,
                        encode_time(item.created_at),
                        encode_time(item.updated_at),
                    ),
                )
        except aiosqlite.IntegrityError as e:
            raise DatabaseError("create_item", str(e)) from e

        logger.info(
            "inventory_item_created",
            item_id=item.id,
            rfid_tag=item.rfid_tag,
            type_code=item.type_code,
        )
        return item

    async def get_item(self, item_id: str) -> InventoryItem | None:
        """Get inventory item by ID."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM inventory_items WHERE id = ?", (item_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_inventory_item(row)

    async def get_item_by_tag(self, rfid_tag: str) -> InventoryItem | None:
        """Get inventory item by RFID/barcode tag."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM inventory_items WHERE rfid_tag = ?", (rfid_tag,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_inventory_item(row)

    async def get_items(self, item_ids: list[str]) -> dict[str, InventoryItem]:
        """Get several items keyed by ID."""
        ids = list(dict.fromkeys(item_ids))
        if not ids:
            return {}
        placeholders = ",".join("?" for _ in ids)
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"SELECT * FROM inventory_items WHERE id IN ({placeholders})",
                ids,
            )
            rows = await cursor.fetchall()
            items = [self._row_to_inventory_item(row) for row in rows]
            return {item.id: item for item in items}

    async def list_items(
        self,
        status: ItemStatus | None = None,
        limit: int = 1000,
        offset: int = 0,
        search: str | None = None,
    ) -> list[InventoryItem]:
        """List inventory items with pagination."""
        clauses: list[str] = []
        params: list = []
        if status is not None:
            clauses.append("status = ?")
            params.append(status.value)
        if search and search.strip():
            pattern = f"%{search.strip().lower()}%"
            clauses.append(
                "(LOWER(id) LIKE ? OR LOWER(rfid_tag) LIKE ? OR LOWER(type_code) LIKE ?)"
            )
            params.extend([pattern, pattern, pattern])

        sql = "SELECT * FROM inventory_items"
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        sql += " ORDER BY rfid_tag LIMIT ? OFFSET ?"
        params.extend([limit, offset])

        async with get_connection() as conn:
            cursor = await conn.execute(sql, params)
            rows = await cursor.fetchall()
            return [self._row_to_inventory_item(row) for row in rows]

    async def update_status(
        self,
        item_id: str,
        status: ItemStatus,
        last_scan_time: datetime,
        last_scan_gate: str | None,
        expected_version: int,
    ) -> InventoryItem:
        """Compare-and-swap status update keyed on ``version``."""
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE inventory_items SET
                    status = ?,
                    last_scan_time = ?,
                    last_scan_gate = ?,
                    version = version + 1,
                    updated_at = ?
                WHERE id = ? AND version = ?
                """,
                (
                    status.value,
                    encode_time(last_scan_time),
                    last_scan_gate,
                    encode_time(datetime.now(UTC)),
                    item_id,
                    expected_version,
                ),
            )
            if cursor.rowcount == 0:
                logger.warning(
                    "inventory_version_conflict",
                    item_id=item_id,
                    expected_version=expected_version,
                )
                raise ConcurrentMovementError(item_id, expected_version)

            cursor = await conn.execute(
                "SELECT * FROM inventory_items WHERE id = ?", (item_id,)
            )
            row = await cursor.fetchone()

        logger.debug(
            "inventory_status_updated",
            item_id=item_id,
            status=status.value,
            version=expected_version + 1,
        )
        return self._row_to_inventory_item(row)

    @staticmethod
    def _row_to_inventory_item(row: aiosqlite.Row) -> InventoryItem:
        """Convert a database row to an InventoryItem entity."""
        now = datetime.now(UTC)
        return InventoryItem(
            id=row["id"],
            rfid_tag=row["rfid_tag"],
            type_code=row["type_code"],
            status=ItemStatus(row["status"]),
            default_location=decode_ref(
                row["default_location_space"], row["default_location_id"]
            ),
            last_scan_time=decode_time(row["last_scan_time"]),
            last_scan_gate=row["last_scan_gate"],
            version=row["version"],
            created_at=decode_time(row["created_at"]) or now,
            updated_at=decode_time(row["updated_at"]) or now,
        )
