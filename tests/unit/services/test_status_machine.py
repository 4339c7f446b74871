"""Tests for StatusStateMachine."""

import pytest

from rentrack.core.entities.inventory import ItemStatus
from rentrack.core.entities.movement import MovementAction
from rentrack.core.exceptions import InvalidStatusTransitionError
from rentrack.core.services.status_machine import (
    WARN_CUSTOMER_TRANSFER,
    WARN_UNEXPECTED_IN,
    StatusStateMachine,
)


@pytest.fixture
def machine() -> StatusStateMachine:
    return StatusStateMachine()


class TestAllowedTransitions:
    """Legal transitions and their targets."""

    @pytest.mark.parametrize(
        "action,current,target",
        [
            (MovementAction.OUT, ItemStatus.IN_STOCK, ItemStatus.IN_TRANSIT),
            (MovementAction.OUT, ItemStatus.RECEIVED, ItemStatus.IN_TRANSIT),
            (MovementAction.RECEIVE, ItemStatus.IN_TRANSIT, ItemStatus.RECEIVED),
            (MovementAction.RETURN, ItemStatus.RECEIVED, ItemStatus.RETURNED),
            (MovementAction.IN, ItemStatus.RETURNED, ItemStatus.IN_STOCK),
            (MovementAction.IN, ItemStatus.RECEIVED, ItemStatus.IN_STOCK),
            (MovementAction.IN, ItemStatus.IN_TRANSIT, ItemStatus.IN_STOCK),
        ],
    )
    def test_target(self, machine, action, current, target):
        check = machine.check(action, current, "INV-1")
        assert check.current == current
        assert check.target == target

    def test_plain_out_has_no_warning(self, machine):
        check = machine.check(MovementAction.OUT, ItemStatus.IN_STOCK, "INV-1")
        assert check.warning_code is None
        assert check.to_warning("INV-1") is None

    def test_customer_to_customer_warns(self, machine):
        """Test OUT from Received succeeds with a warning."""
        check = machine.check(MovementAction.OUT, ItemStatus.RECEIVED, "INV-1")
        warning = check.to_warning("INV-1")
        assert warning is not None
        assert warning.code == WARN_CUSTOMER_TRANSFER
        assert warning.inventory_id == "INV-1"

    @pytest.mark.parametrize("current", [ItemStatus.RECEIVED, ItemStatus.IN_TRANSIT])
    def test_unexpected_in_warns(self, machine, current):
        check = machine.check(MovementAction.IN, current, "INV-1")
        assert check.warning_code == WARN_UNEXPECTED_IN

    def test_in_from_returned_is_clean(self, machine):
        check = machine.check(MovementAction.IN, ItemStatus.RETURNED, "INV-1")
        assert check.warning_code is None


class TestRejectedTransitions:
    """Illegal transitions."""

    @pytest.mark.parametrize(
        "action,current,reason",
        [
            (MovementAction.IN, ItemStatus.IN_STOCK, "already In-Stock"),
            (MovementAction.OUT, ItemStatus.IN_TRANSIT, "not In-Stock or Received"),
            (MovementAction.OUT, ItemStatus.RETURNED, "not In-Stock or Received"),
            (MovementAction.RECEIVE, ItemStatus.IN_STOCK, "not in transit"),
            (MovementAction.RECEIVE, ItemStatus.RECEIVED, "not in transit"),
            (MovementAction.RETURN, ItemStatus.IN_TRANSIT, "not received"),
            (MovementAction.RETURN, ItemStatus.IN_STOCK, "not received"),
        ],
    )
    def test_rejected(self, machine, action, current, reason):
        with pytest.raises(InvalidStatusTransitionError) as exc_info:
            machine.check(action, current, "INV-1")
        assert exc_info.value.details["reason"] == reason
        assert exc_info.value.details["inventory_id"] == "INV-1"
        assert reason in exc_info.value.message
