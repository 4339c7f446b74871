"""
Status state machine for inventory items.

Every movement action is legal only from a fixed set of statuses. A few
legal transitions are unusual enough to warn about without blocking.
"""

from dataclasses import dataclass

from rentrack.core.entities.inventory import ItemStatus
from rentrack.core.entities.movement import MovementAction, MovementWarning
from rentrack.core.exceptions import InvalidStatusTransitionError

WARN_CUSTOMER_TRANSFER = "customer_to_customer_transfer"
WARN_UNEXPECTED_IN = "in_from_unexpected_status"


@dataclass(frozen=True)
class _Rule:
    target: ItemStatus
    warning_code: str | None = None
    warning: str | None = None


# action -> {allowed current status -> rule}
TRANSITIONS: dict[MovementAction, dict[ItemStatus, _Rule]] = {
    MovementAction.OUT: {
        ItemStatus.IN_STOCK: _Rule(ItemStatus.IN_TRANSIT),
        ItemStatus.RECEIVED: _Rule(
            ItemStatus.IN_TRANSIT,
            WARN_CUSTOMER_TRANSFER,
            "Item is at a customer location; it will move to the new location "
            "without passing through base",
        ),
    },
    MovementAction.IN: {
        ItemStatus.RETURNED: _Rule(ItemStatus.IN_STOCK),
        ItemStatus.RECEIVED: _Rule(
            ItemStatus.IN_STOCK,
            WARN_UNEXPECTED_IN,
            "Item was not marked Returned by the customer",
        ),
        ItemStatus.IN_TRANSIT: _Rule(
            ItemStatus.IN_STOCK,
            WARN_UNEXPECTED_IN,
            "Item was never confirmed received by the customer",
        ),
    },
    MovementAction.RECEIVE: {
        ItemStatus.IN_TRANSIT: _Rule(ItemStatus.RECEIVED),
    },
    MovementAction.RETURN: {
        ItemStatus.RECEIVED: _Rule(ItemStatus.RETURNED),
    },
}

REJECTION_REASONS: dict[MovementAction, str] = {
    MovementAction.OUT: "not In-Stock or Received",
    MovementAction.IN: "already In-Stock",
    MovementAction.RECEIVE: "not in transit",
    MovementAction.RETURN: "not received",
}


@dataclass(frozen=True)
class TransitionCheck:
    """Outcome of a legal transition."""

    action: MovementAction
    current: ItemStatus
    target: ItemStatus
    warning_code: str | None = None
    warning: str | None = None

    def to_warning(self, inventory_id: str) -> MovementWarning | None:
        if self.warning_code is None:
            return None
        return MovementWarning(
            code=self.warning_code,
            inventory_id=inventory_id,
            message=self.warning or self.warning_code,
        )


class StatusStateMachine:
    """Validates and computes status transitions."""

    def check(
        self,
        action: MovementAction,
        status: ItemStatus,
        inventory_id: str | None = None,
    ) -> TransitionCheck:
        """
        Check ``action`` against ``status``.

        Returns:
            The transition, possibly carrying a warning.

        Raises:
            InvalidStatusTransitionError: the action is illegal from ``status``.
        """
        rule = TRANSITIONS[action].get(status)
        if rule is None:
            raise InvalidStatusTransitionError(
                inventory_id=inventory_id,
                action=action.value,
                status=status.value,
                reason=REJECTION_REASONS[action],
            )
        return TransitionCheck(
            action=action,
            current=status,
            target=rule.target,
            warning_code=rule.warning_code,
            warning=rule.warning,
        )
