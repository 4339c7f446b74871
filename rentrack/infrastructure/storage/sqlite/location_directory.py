"""SQLite implementation of the location directory."""

import json

import aiosqlite

from rentrack.config import get_logger
from rentrack.core.entities.location import CustomerLocation, Gate, Location
from rentrack.core.interfaces.location_directory import ILocationDirectory
from rentrack.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLiteLocationDirectory(ILocationDirectory):
    """
    Locations, customer locations and gates.

    The movement engine only reads the directory. The ``save_*`` methods load
    master data (seed scripts, tests).
    """

    async def get_location(self, location_id: str) -> Location | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM locations WHERE id = ?", (location_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return Location(id=row["id"], name=row["name"], status=row["status"])

    async def get_customer_location(self, location_id: str) -> CustomerLocation | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM customer_locations WHERE id = ?", (location_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_customer_location(row)

    async def get_gate(self, gate_id: str) -> Gate | None:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM gates WHERE id = ?", (gate_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            return Gate(
                id=row["id"],
                name=row["name"],
                location_id=row["location_id"],
                type=row["type"],
                status=row["status"],
            )

    async def save_location(self, location: Location) -> Location:
        async with get_transaction() as conn:
            await conn.execute(
                "INSERT OR REPLACE INTO locations (id, name, status) VALUES (?, ?, ?)",
                (location.id, location.name, location.status),
            )
        logger.info("location_saved", location_id=location.id)
        return location

    async def save_customer_location(self, location: CustomerLocation) -> CustomerLocation:
        """Insert or replace a customer location.

        Replacing the rate table affects only future movements; recorded
        events keep their snapshot.
        """
        async with get_transaction() as conn:
            await conn.execute(
                """
                INSERT OR REPLACE INTO customer_locations (
                    id, customer_id, location_name, rate_table
                ) VALUES (?, ?, ?, ?)
                """,
                (
                    location.id,
                    location.customer_id,
                    location.location_name,
                    json.dumps(location.rate_table),
                ),
            )
        logger.info(
            "customer_location_saved",
            location_id=location.id,
            rate_types=len(location.rate_table),
        )
        return location

    async def save_gate(self, gate: Gate) -> Gate:
        async with get_transaction() as conn:
            await conn.execute(
                """
                INSERT OR REPLACE INTO gates (id, name, location_id, type, status)
                VALUES (?, ?, ?, ?, ?)
                """,
                (gate.id, gate.name, gate.location_id, gate.type, gate.status),
            )
        logger.info("gate_saved", gate_id=gate.id)
        return gate

    @staticmethod
    def _row_to_customer_location(row: aiosqlite.Row) -> CustomerLocation:
        """Convert a database row to a CustomerLocation entity."""
        try:
            raw = json.loads(row["rate_table"] or "{}")
        except json.JSONDecodeError:
            logger.warning("rate_table_unreadable", location_id=row["id"])
            raw = {}
        rate_table = {}
        for type_code, rate in raw.items():
            try:
                rate_table[type_code] = float(rate)
            except (TypeError, ValueError):
                continue
        return CustomerLocation(
            id=row["id"],
            customer_id=row["customer_id"],
            location_name=row["location_name"],
            rate_table=rate_table,
        )
