"""Core domain entities."""

from rentrack.core.entities.actor import (
    ROLE_PERMISSIONS,
    ActorContext,
    Permission,
    Role,
    permissions_for,
)
from rentrack.core.entities.inventory import InventoryItem, ItemStatus
from rentrack.core.entities.location import (
    BaseLocationRef,
    CustomerLocation,
    CustomerLocationRef,
    Gate,
    Location,
    LocationRef,
    LocationSpace,
    ResolvedLocation,
    UntaggedLocationRef,
    location_ref,
)
from rentrack.core.entities.movement import (
    Direction,
    MovementAction,
    MovementEvent,
    MovementWarning,
)
from rentrack.core.entities.rental import RentalLine, RentalReport

__all__ = [
    # Actor
    "ActorContext",
    "Permission",
    "Role",
    "ROLE_PERMISSIONS",
    "permissions_for",
    # Inventory
    "InventoryItem",
    "ItemStatus",
    # Locations
    "BaseLocationRef",
    "CustomerLocationRef",
    "UntaggedLocationRef",
    "LocationRef",
    "LocationSpace",
    "location_ref",
    "Location",
    "CustomerLocation",
    "Gate",
    "ResolvedLocation",
    # Movements
    "Direction",
    "MovementAction",
    "MovementEvent",
    "MovementWarning",
    # Rental
    "RentalLine",
    "RentalReport",
]
