"""Tests for ScanSession."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest

from rentrack.core.entities.actor import ActorContext, Role
from rentrack.core.entities.inventory import InventoryItem, ItemStatus
from rentrack.core.entities.location import BaseLocationRef, CustomerLocationRef
from rentrack.core.entities.movement import Direction, MovementAction, MovementEvent
from rentrack.core.exceptions import (
    DuplicateScanError,
    InvalidStatusTransitionError,
    InventoryItemNotFoundError,
    LocationMismatchError,
)
from rentrack.core.services.scan_session import ScanSession, check_receive_location
from rentrack.core.services.status_machine import WARN_CUSTOMER_TRANSFER

ITEMS = {
    "TAG-1": InventoryItem(id="INV-1", rfid_tag="TAG-1", type_code="PLT"),
    "TAG-2": InventoryItem(
        id="INV-2", rfid_tag="TAG-2", type_code="PLT", status=ItemStatus.RECEIVED
    ),
    "TAG-3": InventoryItem(
        id="INV-3", rfid_tag="TAG-3", type_code="PLT", status=ItemStatus.IN_TRANSIT
    ),
}


def opening(to_id: str) -> MovementEvent:
    return MovementEvent(
        id=1,
        inventory_id="INV-3",
        direction=Direction.OUT,
        action=MovementAction.OUT,
        previous_location=BaseLocationRef(id="WH1"),
        customer_location=CustomerLocationRef(id=to_id),
        timestamp=datetime(2024, 3, 1, tzinfo=UTC),
        batch_id="B1",
    )


@pytest.fixture
def mock_inventory_store():
    store = AsyncMock()
    store.get_item_by_tag.side_effect = lambda tag: ITEMS.get(tag)
    store.get_item.side_effect = lambda item_id: next(
        (i for i in ITEMS.values() if i.id == item_id), None
    )
    return store


@pytest.fixture
def mock_ledger():
    ledger = AsyncMock()
    ledger.latest_out_event_for.return_value = opening("CL-TOY")
    return ledger


def session(store, ledger, action=MovementAction.OUT, **kwargs) -> ScanSession:
    return ScanSession(action=action, inventory_store=store, ledger=ledger, **kwargs)


class TestCheckReceiveLocation:
    """Tests for check_receive_location."""

    def test_actor_without_location_unrestricted(self):
        actor = ActorContext(user_id="u1", role=Role.ADMIN)
        check_receive_location("INV-3", opening("CL-TOY"), actor)
        check_receive_location("INV-3", None, None)

    def test_matching_location(self):
        actor = ActorContext(user_id="u1", role=Role.USER, location_id="CL-TOY")
        check_receive_location("INV-3", opening("CL-TOY"), actor)

    def test_mismatch(self):
        actor = ActorContext(user_id="u1", role=Role.USER, location_id="CL-HON")
        with pytest.raises(LocationMismatchError) as exc_info:
            check_receive_location("INV-3", opening("CL-TOY"), actor)
        assert exc_info.value.details["sent_to"] == "CL-TOY"

    def test_never_sent(self):
        actor = ActorContext(user_id="u1", role=Role.USER, location_id="CL-HON")
        with pytest.raises(LocationMismatchError):
            check_receive_location("INV-3", None, actor)


class TestScanSession:
    """Tests for ScanSession."""

    async def test_scan_by_tag(self, mock_inventory_store, mock_ledger):
        s = session(mock_inventory_store, mock_ledger)

        entry = await s.scan("TAG-1")

        assert entry.item.id == "INV-1"
        assert entry.warning is None
        assert "INV-1" in s
        assert len(s) == 1
        assert s.inventory_ids == ["INV-1"]

    async def test_scan_strips_and_falls_back_to_id(self, mock_inventory_store, mock_ledger):
        s = session(mock_inventory_store, mock_ledger)
        entry = await s.scan("  INV-1 ")
        assert entry.item.rfid_tag == "TAG-1"

    async def test_unknown_tag(self, mock_inventory_store, mock_ledger):
        s = session(mock_inventory_store, mock_ledger)
        with pytest.raises(InventoryItemNotFoundError):
            await s.scan("TAG-404")
        assert len(s) == 0

    async def test_duplicate_scan_rejected(self, mock_inventory_store, mock_ledger):
        """Test the second read of an item is refused."""
        s = session(mock_inventory_store, mock_ledger)
        await s.scan("TAG-1")
        with pytest.raises(DuplicateScanError):
            await s.scan("INV-1")
        assert len(s) == 1

    async def test_duplicate_against_prior_ids(self, mock_inventory_store, mock_ledger):
        s = session(mock_inventory_store, mock_ledger, already_scanned=["INV-1"])
        with pytest.raises(DuplicateScanError):
            await s.scan("TAG-1")

    async def test_illegal_status_rejected(self, mock_inventory_store, mock_ledger):
        s = session(mock_inventory_store, mock_ledger, action=MovementAction.IN)
        with pytest.raises(InvalidStatusTransitionError):
            await s.scan("TAG-1")

    async def test_warning_kept(self, mock_inventory_store, mock_ledger):
        s = session(mock_inventory_store, mock_ledger)
        entry = await s.scan("TAG-2")
        assert entry.warning.code == WARN_CUSTOMER_TRANSFER
        assert [w.inventory_id for w in s.warnings] == ["INV-2"]

    async def test_receive_checks_location(self, mock_inventory_store, mock_ledger):
        actor = ActorContext(user_id="u1", role=Role.USER, location_id="CL-HON")
        s = session(mock_inventory_store, mock_ledger, action=MovementAction.RECEIVE, actor=actor)
        with pytest.raises(LocationMismatchError):
            await s.scan("TAG-3")

    async def test_receive_check_disabled(self, mock_inventory_store, mock_ledger):
        actor = ActorContext(user_id="u1", role=Role.USER, location_id="CL-HON")
        s = session(
            mock_inventory_store,
            mock_ledger,
            action=MovementAction.RECEIVE,
            actor=actor,
            require_location_match=False,
        )
        entry = await s.scan("TAG-3")
        assert entry.item.id == "INV-3"
        mock_ledger.latest_out_event_for.assert_not_called()

    async def test_remove_and_clear(self, mock_inventory_store, mock_ledger):
        """Test items can be dropped without any write."""
        s = session(mock_inventory_store, mock_ledger, already_scanned=["INV-9"])
        await s.scan("TAG-1")
        await s.scan("TAG-2")
        assert len(s) == 3

        assert s.remove("INV-1") is True
        assert s.remove("INV-1") is False
        assert s.remove("INV-9") is False
        assert "INV-9" not in s
        assert [i.id for i in s.items] == ["INV-2"]

        s.clear()
        assert len(s) == 0
        mock_inventory_store.update_status.assert_not_called()
        mock_ledger.insert_events.assert_not_called()
