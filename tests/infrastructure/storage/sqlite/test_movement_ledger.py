"""Tests for SQLiteMovementLedger."""

from datetime import UTC, datetime, timedelta

import aiosqlite
import pytest

from rentrack.core.entities.inventory import InventoryItem
from rentrack.core.entities.location import (
    BaseLocationRef,
    CustomerLocationRef,
    UntaggedLocationRef,
)
from rentrack.core.entities.movement import Direction, MovementAction, MovementEvent
from rentrack.core.exceptions import LedgerImmutableError
from rentrack.infrastructure.storage.sqlite.connection import get_transaction
from rentrack.infrastructure.storage.sqlite.inventory_store import SQLiteInventoryStore
from rentrack.infrastructure.storage.sqlite.movement_ledger import SQLiteMovementLedger

T0 = datetime(2024, 3, 1, 8, 0, tzinfo=UTC)


def make_event(
    action: MovementAction,
    at: datetime,
    inventory_id: str = "INV-1",
    batch_id: str = "B1",
    to=CustomerLocationRef(id="CL-TOY"),
    previous=BaseLocationRef(id="WH1"),
    **kwargs,
) -> MovementEvent:
    return MovementEvent(
        inventory_id=inventory_id,
        direction=action.direction,
        action=action,
        previous_location=previous,
        customer_location=to,
        timestamp=at,
        batch_id=batch_id,
        **kwargs,
    )


@pytest.fixture
async def ledger(sqlite_db) -> SQLiteMovementLedger:
    store = SQLiteInventoryStore()
    await store.create_item(InventoryItem(id="INV-1", rfid_tag="TAG-1", type_code="PLT"))
    await store.create_item(InventoryItem(id="INV-2", rfid_tag="TAG-2", type_code="PLT"))
    return SQLiteMovementLedger()


class TestInsert:
    """Tests for appending events."""

    async def test_insert_assigns_ids(self, ledger):
        stored = await ledger.insert_events(
            [
                make_event(MovementAction.OUT, T0, gate_id="G1", rate_snapshot=50.0, remark="r"),
                make_event(MovementAction.OUT, T0, inventory_id="INV-2"),
            ]
        )

        assert [e.id for e in stored] == [stored[0].id, stored[0].id + 1]

        events = await ledger.events_for(["INV-1"])
        assert len(events) == 1
        event = events[0]
        assert event.id == stored[0].id
        assert event.direction is Direction.OUT
        assert event.previous_location == BaseLocationRef(id="WH1")
        assert event.customer_location == CustomerLocationRef(id="CL-TOY")
        assert event.rate_snapshot == 50.0
        assert event.gate_id == "G1"
        assert event.remark == "r"
        assert event.timestamp == T0

    async def test_insert_empty(self, ledger):
        assert await ledger.insert_events([]) == []

    async def test_stored_event_cannot_be_reinserted(self, ledger):
        stored = await ledger.insert_events([make_event(MovementAction.OUT, T0)])
        with pytest.raises(LedgerImmutableError):
            await ledger.insert_events(stored)
        assert len(await ledger.events_for(["INV-1"])) == 1

    async def test_unknown_item_rejected(self, ledger):
        with pytest.raises(aiosqlite.IntegrityError):
            await ledger.insert_events([make_event(MovementAction.OUT, T0, inventory_id="GHOST")])


class TestAppendOnly:
    """The schema refuses to change recorded events."""

    async def test_update_blocked(self, ledger):
        await ledger.insert_events([make_event(MovementAction.OUT, T0)])

        with pytest.raises(aiosqlite.DatabaseError, match="append-only"):
            async with get_transaction() as conn:
                await conn.execute("UPDATE movement_events SET rate_snapshot = 0")

    async def test_delete_blocked(self, ledger):
        await ledger.insert_events([make_event(MovementAction.OUT, T0)])

        with pytest.raises(aiosqlite.DatabaseError, match="append-only"):
            async with get_transaction() as conn:
                await conn.execute("DELETE FROM movement_events")

        assert len(await ledger.events_for(["INV-1"])) == 1


class TestQueries:
    """Tests for ledger reads."""

    async def test_events_for_until(self, ledger):
        await ledger.insert_events(
            [
                make_event(MovementAction.OUT, T0),
                make_event(MovementAction.RECEIVE, T0 + timedelta(days=1)),
                make_event(MovementAction.OUT, T0, inventory_id="INV-2"),
            ]
        )

        assert len(await ledger.events_for(["INV-1"])) == 2
        assert len(await ledger.events_for(["INV-1", "INV-2"])) == 3
        early = await ledger.events_for(["INV-1"], until=T0 + timedelta(hours=1))
        assert [e.action for e in early] == [MovementAction.OUT]
        assert await ledger.events_for([]) == []

    async def test_latest_out_event(self, ledger):
        """Test the newest outbound event wins and inbound rows are skipped."""
        await ledger.insert_events(
            [
                make_event(MovementAction.OUT, T0, batch_id="B1"),
                make_event(MovementAction.OUT, T0 + timedelta(days=2), batch_id="B2"),
                make_event(MovementAction.RECEIVE, T0 + timedelta(days=3), batch_id="B2"),
            ]
        )

        latest = await ledger.latest_out_event_for("INV-1")

        assert latest.batch_id == "B2"
        assert latest.action is MovementAction.OUT
        assert await ledger.latest_out_event_for("INV-2") is None

    async def test_latest_out_event_tie_uses_id(self, ledger):
        await ledger.insert_events([make_event(MovementAction.OUT, T0, batch_id="B1")])
        await ledger.insert_events([make_event(MovementAction.OUT, T0, batch_id="B2")])

        assert (await ledger.latest_out_event_for("INV-1")).batch_id == "B2"

    async def test_list_events(self, ledger):
        await ledger.insert_events(
            [
                make_event(MovementAction.OUT, T0),
                make_event(MovementAction.RECEIVE, T0 + timedelta(days=1)),
                make_event(MovementAction.OUT, T0 + timedelta(days=2), inventory_id="INV-2"),
            ]
        )

        newest_first = await ledger.list_events()
        assert [e.timestamp for e in newest_first] == [
            T0 + timedelta(days=2),
            T0 + timedelta(days=1),
            T0,
        ]

        outbound = await ledger.list_events(direction=Direction.OUT)
        assert all(e.direction is Direction.OUT for e in outbound)
        assert len(outbound) == 2

        window = await ledger.list_events(since=T0 + timedelta(hours=1), until=T0 + timedelta(days=1))
        assert [e.action for e in window] == [MovementAction.RECEIVE]

        assert len(await ledger.list_events(limit=1)) == 1

    async def test_list_events_tag_search(self, ledger):
        """Test the tag filter runs before the limit."""
        await ledger.insert_events(
            [
                make_event(MovementAction.OUT, T0),
                make_event(MovementAction.RECEIVE, T0 + timedelta(days=1)),
                make_event(MovementAction.OUT, T0 + timedelta(days=2), inventory_id="INV-2"),
            ]
        )

        tagged = await ledger.list_events(tag_search="tag-1", limit=1)
        assert [(e.inventory_id, e.action) for e in tagged] == [("INV-1", MovementAction.RECEIVE)]

        assert len(await ledger.list_events(tag_search="tag-1")) == 2
        assert await ledger.list_events(tag_search="nothing") == []

    async def test_legacy_row_without_space(self, ledger):
        """Test rows stored without a location space decode as untagged."""
        async with get_transaction() as conn:
            await conn.execute(
                """
                INSERT INTO movement_events (
                    inventory_id, direction, action, previous_location_space,
                    previous_location_id, customer_location_space, customer_location_id,
                    timestamp, batch_id
                ) VALUES ('INV-1', 'out', 'out', NULL, '7', 'customer', 'CL-TOY', ?, 'B0')
                """,
                (T0.isoformat(timespec="microseconds"),),
            )

        event = (await ledger.events_for(["INV-1"]))[0]

        assert event.previous_location == UntaggedLocationRef(id="7")
        assert event.rate_snapshot == 0.0
