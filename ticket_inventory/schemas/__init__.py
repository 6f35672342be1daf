"""Pydantic schemas."""

from ticket_inventory.schemas.common import ErrorResponse, HealthResponse
from ticket_inventory.schemas.event import (
    EventResponse,
    TicketTypeListResponse,
    TicketTypeResponse,
)
from ticket_inventory.schemas.hold import (
    ActiveHoldResponse,
    HoldBatchResponse,
    HoldCreate,
    HoldItemRequest,
    HoldLineResponse,
)
from ticket_inventory.schemas.order import (
    OrderLineResponse,
    OrderResponse,
    PurchaseRequest,
    PurchaseResponse,
)

__all__ = [
    "ErrorResponse",
    "HealthResponse",
    "EventResponse",
    "TicketTypeResponse",
    "TicketTypeListResponse",
    "HoldItemRequest",
    "HoldCreate",
    "HoldLineResponse",
    "HoldBatchResponse",
    "ActiveHoldResponse",
    "PurchaseRequest",
    "PurchaseResponse",
    "OrderLineResponse",
    "OrderResponse",
]
