"""Order schemas."""

from pydantic import AliasChoices, Field

from ticket_inventory.models.order import OrderStatus
from ticket_inventory.schemas.common import BaseSchema, Money, UtcDatetime


class PurchaseRequest(BaseSchema):
    """Schema for finalizing a session's holds."""

    session_id: str = Field(..., min_length=1, max_length=100)
    event_id: int = Field(..., gt=0)
    user_name: str | None = Field(
        None,
        max_length=255,
        validation_alias=AliasChoices("user_name", "buyer_name"),
    )
    user_phone: str | None = Field(
        None,
        max_length=50,
        validation_alias=AliasChoices("user_phone", "buyer_phone"),
    )


class PurchaseResponse(BaseSchema):
    """Schema for a confirmed purchase."""

    success: bool = True
    message: str = "Order confirmed"
    order_id: int
    event_id: int
    total_amount: Money
    confirmation_code: str
    line_item_count: int
    total_tickets: int
    title: str | None = None
    venue: str | None = None
    date_time: str | None = None


class OrderLineResponse(BaseSchema):
    """One line of an order."""

    ticket_type_id: int
    quantity: int
    unit_price: Money
    line_total: Money


class OrderResponse(BaseSchema):
    """Schema for an order with its lines."""

    order_id: int
    event_id: int
    user_name: str | None
    user_phone: str | None
    total_amount: Money
    order_status: OrderStatus
    confirmation_code: str | None
    created_at: UtcDatetime
    lines: list[OrderLineResponse]
