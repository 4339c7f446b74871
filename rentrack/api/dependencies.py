"""
Dependency injection container for FastAPI.

Provides use case instances and the request actor to route handlers.
"""

from collections.abc import Awaitable, Callable
from functools import lru_cache

from fastapi import Depends, Header, HTTPException, status

from rentrack.application.use_cases import (
    BuildInventoryReportUseCase,
    BuildMissingReportUseCase,
    BuildMovementReportUseCase,
    BuildRentalReportUseCase,
    GetItemHistoryUseCase,
    LocateItemsUseCase,
    RecordMovementUseCase,
    ScanItemUseCase,
)
from rentrack.config import Settings, get_settings
from rentrack.core.entities.actor import ActorContext, Permission, Role
from rentrack.core.exceptions import PermissionDeniedError


@lru_cache
def get_app_settings() -> Settings:
    """Get cached application settings."""
    return get_settings()


# Request actor
async def get_actor(
    x_user_id: str | None = Header(default=None),
    x_user_role: str | None = Header(default=None),
    x_user_location: str | None = Header(default=None),
) -> ActorContext:
    """Build the actor from the headers set by the authenticating proxy."""
    if not x_user_id or not x_user_role:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-User-Id and X-User-Role headers are required",
        )
    try:
        role = Role(x_user_role.strip().lower())
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown role: {x_user_role}",
        ) from None
    return ActorContext(
        user_id=x_user_id,
        role=role,
        location_id=x_user_location or None,
    )


def require_permission(permission: Permission) -> Callable[..., Awaitable[ActorContext]]:
    """Dependency that admits only actors holding ``permission``."""

    async def _check(actor: ActorContext = Depends(get_actor)) -> ActorContext:
        if not actor.has(permission):
            raise PermissionDeniedError(actor.user_id, permission.value)
        return actor

    return _check


# Use case dependencies
def get_record_movement_use_case() -> RecordMovementUseCase:
    """Get record movement use case."""
    return RecordMovementUseCase()


def get_scan_item_use_case() -> ScanItemUseCase:
    """Get scan item use case."""
    return ScanItemUseCase()


def get_locate_items_use_case() -> LocateItemsUseCase:
    """Get locate items use case."""
    return LocateItemsUseCase()


def get_item_history_use_case() -> GetItemHistoryUseCase:
    """Get item history use case."""
    return GetItemHistoryUseCase()


def get_inventory_report_use_case() -> BuildInventoryReportUseCase:
    """Get inventory report use case."""
    return BuildInventoryReportUseCase()


def get_movement_report_use_case() -> BuildMovementReportUseCase:
    """Get movement report use case."""
    return BuildMovementReportUseCase()


def get_rental_report_use_case() -> BuildRentalReportUseCase:
    """Get rental report use case."""
    return BuildRentalReportUseCase()


def get_missing_report_use_case() -> BuildMissingReportUseCase:
    """Get missing report use case."""
    return BuildMissingReportUseCase()
