"""SQLite implementation of the append-only movement ledger."""

from datetime import datetime

import aiosqlite

from rentrack.config import get_logger
from rentrack.core.entities.movement import Direction, MovementAction, MovementEvent
from rentrack.core.exceptions import LedgerImmutableError
from rentrack.core.interfaces.movement_ledger import IMovementLedger
from rentrack.infrastructure.storage.sqlite.columns import (
    decode_ref,
    decode_time,
    encode_ref,
    encode_time,
)
from rentrack.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)

_INSERT_EVENT = """
    INSERT INTO movement_events (
        inventory_id, direction, action, gate_id,
        previous_location_space, previous_location_id,
        customer_location_space, customer_location_id,
        rate_snapshot, recorded_by, timestamp, batch_id, remark
    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
"""


class SQLiteMovementLedger(IMovementLedger):
    """Movement events in SQLite. Rows are never updated or deleted."""

    async def insert_events(self, events: list[MovementEvent]) -> list[MovementEvent]:
        """Append events in order; returns copies carrying their new IDs."""
        if not events:
            return []

        stored: list[MovementEvent] = []
        async with get_transaction() as conn:
            for event in events:
                if event.id is not None:
                    raise LedgerImmutableError(event.id)
                prev_space, prev_id = encode_ref(event.previous_location)
                cust_space, cust_id = encode_ref(event.customer_location)
                cursor = await conn.execute(
                    _INSERT_EVENT,
                    (
                        event.inventory_id,
                        event.direction.value,
                        event.action.value,
                        event.gate_id,
                        prev_space,
                        prev_id,
                        cust_space,
                        cust_id,
                        event.rate_snapshot,
                        event.recorded_by,
                        encode_time(event.timestamp),
                        event.batch_id,
                        event.remark,
                    ),
                )
                stored.append(event.model_copy(update={"id": cursor.lastrowid}))

        logger.debug(
            "movement_events_inserted",
            count=len(stored),
            batch_ids=sorted({e.batch_id for e in stored}),
        )
        return stored

    async def events_for(
        self,
        inventory_ids: list[str],
        until: datetime | None = None,
    ) -> list[MovementEvent]:
        """Events of the given items up to ``until``."""
        ids = list(dict.fromkeys(inventory_ids))
        if not ids:
            return []
        placeholders = ",".join("?" for _ in ids)
        sql = f"SELECT * FROM movement_events WHERE inventory_id IN ({placeholders})"
        params: list = list(ids)
        if until is not None:
            sql += " AND timestamp <= ?"
            params.append(encode_time(until))

        async with get_connection() as conn:
            cursor = await conn.execute(sql, params)
            rows = await cursor.fetchall()
            return [self._row_to_event(row) for row in rows]

    async def latest_out_event_for(self, inventory_id: str) -> MovementEvent | None:
        """Most recent outbound event of an item."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM movement_events
                WHERE inventory_id = ? AND direction = ?
                ORDER BY timestamp DESC, id DESC
                LIMIT 1
                """,
                (inventory_id, Direction.OUT.value),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_event(row)

    async def list_events(
        self,
        direction: Direction | None = None,
        since: datetime | None = None,
        until: datetime | None = None,
        limit: int | None = None,
        tag_search: str | None = None,
    ) -> list[MovementEvent]:
        """Events in a time window, newest first."""
        clauses: list[str] = []
        params: list = []
        if direction is not None:
            clauses.append("e.direction = ?")
            params.append(direction.value)
        if since is not None:
            clauses.append("e.timestamp >= ?")
            params.append(encode_time(since))
        if until is not None:
            clauses.append("e.timestamp <= ?")
            params.append(encode_time(until))

        sql = "SELECT e.* FROM movement_events e"
        if tag_search and tag_search.strip():
            sql += " JOIN inventory_items i ON i.id = e.inventory_id"
            clauses.append("LOWER(i.rfid_tag) LIKE ?")
            params.append(f"%{tag_search.strip().lower()}%")
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        sql += " ORDER BY e.timestamp DESC, e.id DESC"
        if limit is not None:
            sql += " LIMIT ?"
            params.append(limit)

        async with get_connection() as conn:
            cursor = await conn.execute(sql, params)
            rows = await cursor.fetchall()
            return [self._row_to_event(row) for row in rows]

    @staticmethod
    def _row_to_event(row: aiosqlite.Row) -> MovementEvent:
        """Convert a database row to a MovementEvent entity."""
        return MovementEvent(
            id=row["id"],
            inventory_id=row["inventory_id"],
            direction=Direction(row["direction"]),
            action=MovementAction(row["action"]),
            gate_id=row["gate_id"],
            previous_location=decode_ref(
                row["previous_location_space"], row["previous_location_id"]
            ),
            customer_location=decode_ref(
                row["customer_location_space"], row["customer_location_id"]
            ),
            rate_snapshot=float(row["rate_snapshot"] or 0.0),
            recorded_by=row["recorded_by"],
            timestamp=decode_time(row["timestamp"]),
            batch_id=row["batch_id"],
            remark=row["remark"],
        )
