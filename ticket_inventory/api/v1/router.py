"""API v1 main router."""

from fastapi import APIRouter

from ticket_inventory.api.v1.events import router as events_router
from ticket_inventory.api.v1.orders import purchases_router, router as orders_router
from ticket_inventory.api.v1.reservations import router as reservations_router

router = APIRouter(prefix="/v1")

router.include_router(events_router, prefix="/events", tags=["Events"])
router.include_router(reservations_router, prefix="/reservations", tags=["Reservations"])
router.include_router(purchases_router, prefix="/purchases", tags=["Purchases"])
router.include_router(orders_router, prefix="/orders", tags=["Orders"])
