"""API route modules."""

from orderdesk.api.routes.health import router as health_router
from orderdesk.api.routes.inventory import router as inventory_router
from orderdesk.api.routes.ledger import router as ledger_router
from orderdesk.api.routes.orders import router as orders_router

__all__ = [
    "health_router",
    "orders_router",
    "inventory_router",
    "ledger_router",
]
