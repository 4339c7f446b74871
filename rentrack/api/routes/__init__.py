"""API route modules."""

from rentrack.api.routes.health import router as health_router
from rentrack.api.routes.inventory import router as inventory_router
from rentrack.api.routes.movements import router as movements_router
from rentrack.api.routes.reports import router as reports_router

__all__ = [
    "health_router",
    "movements_router",
    "inventory_router",
    "reports_router",
]
