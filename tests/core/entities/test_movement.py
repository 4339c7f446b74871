"""Tests for movement ledger entities."""

from datetime import UTC, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from rentrack.core.entities.location import BaseLocationRef, CustomerLocationRef
from rentrack.core.entities.movement import (
    Direction,
    MovementAction,
    MovementEvent,
    ensure_utc,
)


def make_event(**overrides) -> MovementEvent:
    data = {
        "inventory_id": "INV-1",
        "direction": Direction.OUT,
        "action": MovementAction.OUT,
        "previous_location": BaseLocationRef(id="WH1"),
        "customer_location": CustomerLocationRef(id="CL-TOY"),
        "timestamp": datetime(2024, 3, 1, 8, 0, tzinfo=UTC),
        "batch_id": "B1",
    }
    data.update(overrides)
    return MovementEvent(**data)


class TestMovementAction:
    """Tests for MovementAction."""

    @pytest.mark.parametrize(
        "action,direction",
        [
            (MovementAction.OUT, Direction.OUT),
            (MovementAction.RETURN, Direction.OUT),
            (MovementAction.IN, Direction.IN),
            (MovementAction.RECEIVE, Direction.IN),
        ],
    )
    def test_direction(self, action, direction):
        """Test each action maps to its direction."""
        assert action.direction is direction

    def test_only_out_opens_batch(self):
        assert MovementAction.OUT.opens_batch is True
        assert MovementAction.IN.opens_batch is False
        assert MovementAction.RECEIVE.opens_batch is False
        assert MovementAction.RETURN.opens_batch is False

    def test_values(self):
        assert MovementAction("receive") is MovementAction.RECEIVE
        assert Direction("in") is Direction.IN


class TestEnsureUtc:
    """Tests for ensure_utc."""

    def test_naive_treated_as_utc(self):
        value = ensure_utc(datetime(2024, 3, 1, 8, 0))
        assert value.tzinfo is UTC
        assert value.hour == 8

    def test_aware_converted(self):
        plus_two = timezone(timedelta(hours=2))
        value = ensure_utc(datetime(2024, 3, 1, 10, 0, tzinfo=plus_two))
        assert value == datetime(2024, 3, 1, 8, 0, tzinfo=UTC)
        assert value.utcoffset() == timedelta(0)


class TestMovementEvent:
    """Tests for MovementEvent."""

    def test_create(self):
        """Test creating an event with defaults."""
        event = make_event()
        assert event.id is None
        assert event.rate_snapshot == 0.0
        assert event.gate_id is None
        assert event.remark is None

    def test_timestamp_normalized_to_utc(self):
        """Test a naive timestamp is stored as UTC."""
        event = make_event(timestamp=datetime(2024, 3, 1, 8, 0))
        assert event.timestamp.tzinfo is UTC

    def test_frozen(self):
        """Test recorded events cannot be changed."""
        event = make_event()
        with pytest.raises(ValidationError):
            event.rate_snapshot = 99.0

    def test_customer_location_required(self):
        with pytest.raises(ValidationError):
            MovementEvent(
                inventory_id="INV-1",
                direction=Direction.OUT,
                action=MovementAction.OUT,
                batch_id="B1",
            )

    def test_charged_location_out(self):
        """Test dispatches charge the destination customer."""
        event = make_event()
        assert event.charged_location == CustomerLocationRef(id="CL-TOY")

    def test_charged_location_return(self):
        """Test returns charge the customer the item comes back from."""
        event = make_event(
            direction=Direction.OUT,
            action=MovementAction.RETURN,
            previous_location=CustomerLocationRef(id="CL-TOY"),
            customer_location=BaseLocationRef(id="WH1"),
        )
        assert event.charged_location == CustomerLocationRef(id="CL-TOY")

    def test_charged_location_none_for_base(self):
        """Test events between base locations charge nobody."""
        event = make_event(
            direction=Direction.IN,
            action=MovementAction.IN,
            previous_location=BaseLocationRef(id="WH2"),
            customer_location=BaseLocationRef(id="WH1"),
        )
        assert event.charged_location is None

    def test_sort_key_breaks_ties_by_id(self):
        """Test equal timestamps order by insertion id."""
        first = make_event(id=1)
        second = make_event(id=2)
        assert sorted([second, first], key=MovementEvent.sort_key) == [first, second]
