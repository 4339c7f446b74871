"""
Domain exceptions for RENTrack.

Validation errors block a submit before anything is written. Integrity errors
mean the ledger and the registry may disagree and need a manual audit.
"""

from typing import Any


class RentrackError(Exception):
    """Base exception for all RENTrack errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Storage Exceptions
class StorageError(RentrackError):
    """Base exception for storage operations."""

    pass


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


class LedgerImmutableError(StorageError):
    """An attempt was made to change or delete a recorded movement event."""

    def __init__(self, event_id: int | None = None):
        super().__init__(
            "Movement events are append-only and cannot be changed",
            code="LEDGER_IMMUTABLE",
            details={"event_id": event_id},
        )


# Movement validation exceptions
class MovementValidationError(RentrackError):
    """A submitted batch was rejected before any write happened."""

    pass


class EmptyBatchError(MovementValidationError):
    """No items were scanned."""

    def __init__(self) -> None:
        super().__init__(
            "No items scanned",
            code="EMPTY_BATCH",
        )


class MissingSelectionError(MovementValidationError):
    """A required selection (gate, location, customer) is missing."""

    def __init__(self, field: str):
        super().__init__(
            f"Please select a {field}",
            code="MISSING_SELECTION",
            details={"field": field},
        )


class SameLocationError(MovementValidationError):
    """Source and destination of a movement are the same location."""

    def __init__(self, inventory_id: str, location_id: str):
        super().__init__(
            f"Item {inventory_id} is already at {location_id}",
            code="SAME_LOCATION",
            details={"inventory_id": inventory_id, "location_id": location_id},
        )


class DuplicateScanError(MovementValidationError):
    """The same item appears more than once in one batch."""

    def __init__(self, inventory_id: str):
        super().__init__(
            f"Item {inventory_id} already scanned",
            code="DUPLICATE_SCAN",
            details={"inventory_id": inventory_id},
        )


class InventoryItemNotFoundError(MovementValidationError):
    """Inventory item not found in the registry."""

    def __init__(self, key: str):
        super().__init__(
            f"No item found with this Inventory ID: {key}",
            code="INVENTORY_ITEM_NOT_FOUND",
            details={"key": key},
        )


class InvalidStatusTransitionError(MovementValidationError):
    """The requested action is illegal for the item's current status."""

    def __init__(self, inventory_id: str | None, action: str, status: str, reason: str):
        super().__init__(
            f"Cannot {action} item {inventory_id}: {reason}",
            code="INVALID_STATUS_TRANSITION",
            details={
                "inventory_id": inventory_id,
                "action": action,
                "status": status,
                "reason": reason,
            },
        )


class LocationMismatchError(MovementValidationError):
    """An item is being received somewhere other than where it was sent."""

    def __init__(self, inventory_id: str, sent_to: str | None, actor_location: str):
        super().__init__(
            f"Cannot receive {inventory_id}: last sent to {sent_to}, "
            f"your location is {actor_location}",
            code="LOCATION_MISMATCH",
            details={
                "inventory_id": inventory_id,
                "sent_to": sent_to,
                "actor_location": actor_location,
            },
        )


class BatchTooLargeError(MovementValidationError):
    """A batch exceeds the configured size limit."""

    def __init__(self, size: int, max_size: int):
        super().__init__(
            f"Batch of {size} items exceeds the limit of {max_size}",
            code="BATCH_TOO_LARGE",
            details={"size": size, "max_size": max_size},
        )


# Access
class PermissionDeniedError(RentrackError):
    """The actor lacks the permission needed for the operation."""

    def __init__(self, actor_id: str | None, permission: str):
        super().__init__(
            f"User {actor_id} lacks permission '{permission}'",
            code="PERMISSION_DENIED",
            details={"actor_id": actor_id, "permission": permission},
        )


# Write-time failures
class ConcurrentMovementError(RentrackError):
    """An item changed between validation and write; the batch was rolled back."""

    def __init__(self, inventory_id: str, expected_version: int):
        super().__init__(
            f"Item {inventory_id} was modified by another session, rescan and resubmit",
            code="CONCURRENT_MOVEMENT",
            details={"inventory_id": inventory_id, "expected_version": expected_version},
        )


class MovementIntegrityError(RentrackError):
    """Ledger and registry writes did not complete together.

    Never retried automatically; an operator must reconcile the ledger.
    """

    def __init__(self, batch_ids: list[str], inventory_ids: list[str], reason: str):
        super().__init__(
            f"Movement batch failed mid-write and needs manual reconciliation: {reason}",
            code="MOVEMENT_INTEGRITY_ERROR",
            details={
                "batch_ids": batch_ids,
                "inventory_ids": inventory_ids,
                "reason": reason,
            },
        )


class ConfigurationError(RentrackError):
    """Configuration error."""

    pass
