"""Request-scoped actor and role permissions."""

from enum import Enum

from pydantic import BaseModel


class Role(str, Enum):
    """Closed set of user roles."""

    ADMIN = "admin"
    USER = "user"
    OPERATOR = "operator"


class Permission(str, Enum):
    """Application permissions."""

    USER_MANAGEMENT = "user_management"
    BIN_MANAGEMENT = "bin_management"
    GATE_MANAGEMENT = "gate_management"
    BARCODE_PRINTING = "barcode_printing"
    INVENTORY_MOVEMENT = "inventory_movement"
    REPORTS_VIEW = "reports_view"
    DATABASE_UTILITIES = "database_utilities"
    SETTINGS = "settings"


ROLE_PERMISSIONS: dict[Role, frozenset[Permission]] = {
    Role.ADMIN: frozenset(Permission),
    Role.USER: frozenset(
        {
            Permission.BIN_MANAGEMENT,
            Permission.BARCODE_PRINTING,
            Permission.INVENTORY_MOVEMENT,
            Permission.REPORTS_VIEW,
        }
    ),
    Role.OPERATOR: frozenset(
        {
            Permission.BARCODE_PRINTING,
            Permission.INVENTORY_MOVEMENT,
        }
    ),
}


def permissions_for(role: Role) -> frozenset[Permission]:
    """Permissions granted to ``role``."""
    return ROLE_PERMISSIONS[role]


class ActorContext(BaseModel):
    """Who is performing an operation, passed explicitly into every core call."""

    user_id: str
    role: Role
    location_id: str | None = None  # assigned customer location, if any

    def has(self, permission: Permission) -> bool:
        return permission in permissions_for(self.role)
