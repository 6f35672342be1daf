"""Hold (reservation) schemas."""

from pydantic import Field

from ticket_inventory.models.hold import HoldStatus
from ticket_inventory.schemas.common import BaseSchema, Money, UtcDatetime


class HoldItemRequest(BaseSchema):
    """One requested ticket type and quantity."""

    ticket_type_id: int = Field(..., gt=0)
    quantity: int = Field(..., gt=0)


class HoldCreate(BaseSchema):
    """Schema for reserving tickets."""

    session_id: str | None = Field(None, max_length=100)
    event_id: int = Field(..., gt=0)
    items: list[HoldItemRequest] = Field(..., min_length=1)


class HoldLineResponse(BaseSchema):
    """One held ticket type."""

    ticket_type_id: int
    quantity: int
    unit_price: Money
    total_price: Money


class HoldBatchResponse(BaseSchema):
    """Schema for a successful reserve."""

    success: bool = True
    message: str = "Tickets reserved"
    session_id: str
    event_id: int
    expires_at: UtcDatetime
    reservations: list[HoldLineResponse]


class ActiveHoldResponse(HoldLineResponse):
    """An active hold of a session."""

    reservation_id: int
    status: HoldStatus
    created_at: UtcDatetime
    expires_at: UtcDatetime
