"""Events API endpoints."""

from fastapi import APIRouter

from ticket_inventory.api.v1.dependencies import EventServiceDep
from ticket_inventory.config import get_settings
from ticket_inventory.schemas.event import (
    EventResponse,
    TicketTypeListResponse,
    TicketTypeResponse,
)

settings = get_settings()

router = APIRouter()


@router.get(
    "",
    response_model=list[EventResponse],
    summary="List active events",
)
async def list_events(
    event_service: EventServiceDep,
) -> list[EventResponse]:
    """List active events, soonest first."""
    events = await event_service.list_active_events()
    return [EventResponse.model_validate(e) for e in events]


@router.get(
    "/{event_id}/tickets",
    response_model=TicketTypeListResponse,
    summary="List ticket types of an event",
)
async def list_ticket_types(
    event_id: int,
    event_service: EventServiceDep,
) -> TicketTypeListResponse:
    """List ticket types with their live free quantity, cheapest first."""
    availability = await event_service.get_ticket_availability(event_id)

    items = [
        TicketTypeResponse(
            ticket_type_id=a.ticket_type.ticket_type_id,
            event_id=a.ticket_type.event_id,
            ticket_name=a.ticket_type.ticket_name,
            ticket_description=a.ticket_type.ticket_description,
            price=a.ticket_type.price,
            available_quantity=a.ticket_type.available_quantity,
            sold_quantity=a.ticket_type.sold_quantity or 0,
            max_per_order=a.ticket_type.order_limit(settings.DEFAULT_MAX_PER_ORDER),
            sale_start_date=a.ticket_type.sale_start_date,
            sale_end_date=a.ticket_type.sale_end_date,
            is_on_sale=a.is_on_sale,
            free_quantity=a.free_quantity,
        )
        for a in availability
    ]
    return TicketTypeListResponse(event_id=event_id, data=items, count=len(items))
