"""SQLAlchemy models."""

from ticket_inventory.models.base import Base
from ticket_inventory.models.event import Event, EventStatus
from ticket_inventory.models.hold import Hold, HoldStatus
from ticket_inventory.models.order import Order, OrderLine, OrderStatus
from ticket_inventory.models.ticket_type import Inventory, TicketType

__all__ = [
    "Base",
    "Event",
    "EventStatus",
    "TicketType",
    "Inventory",
    "Hold",
    "HoldStatus",
    "Order",
    "OrderLine",
    "OrderStatus",
]
