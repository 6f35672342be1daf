"""Event and ticket type schemas."""

from datetime import date, time

from ticket_inventory.models.event import EventStatus
from ticket_inventory.schemas.common import BaseSchema, Money, UtcDatetime


class EventResponse(BaseSchema):
    """Schema for event response."""

    event_id: int
    event_name: str
    event_description: str | None
    event_date: date
    event_time: time | None
    venue_name: str | None
    venue_address: str | None
    event_image_url: str | None
    total_capacity: int
    status: EventStatus


class TicketTypeResponse(BaseSchema):
    """Schema for a ticket type with live availability."""

    ticket_type_id: int
    event_id: int
    ticket_name: str
    ticket_description: str | None
    price: Money
    available_quantity: int
    sold_quantity: int
    max_per_order: int
    sale_start_date: UtcDatetime | None
    sale_end_date: UtcDatetime | None
    is_on_sale: bool
    free_quantity: int


class TicketTypeListResponse(BaseSchema):
    """Ticket types of an event."""

    event_id: int
    data: list[TicketTypeResponse]
    count: int
