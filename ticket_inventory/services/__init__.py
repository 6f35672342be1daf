"""Services package."""

from ticket_inventory.services.event_service import EventService
from ticket_inventory.services.hold_service import HoldService
from ticket_inventory.services.inventory_store import InventoryStore
from ticket_inventory.services.order_service import OrderService

__all__ = [
    "EventService",
    "InventoryStore",
    "HoldService",
    "OrderService",
]
