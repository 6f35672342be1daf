"""API v1 routers package."""

from ticket_inventory.api.v1.events import router as events_router
from ticket_inventory.api.v1.orders import router as orders_router
from ticket_inventory.api.v1.reservations import router as reservations_router

__all__ = [
    "events_router",
    "reservations_router",
    "orders_router",
]
