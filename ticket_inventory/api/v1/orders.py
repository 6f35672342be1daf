"""Purchase and order API endpoints."""

from fastapi import APIRouter, status

from ticket_inventory.api.v1.dependencies import OrderServiceDep
from ticket_inventory.schemas.order import (
    OrderResponse,
    PurchaseRequest,
    PurchaseResponse,
)

purchases_router = APIRouter()
router = APIRouter()


@purchases_router.post(
    "",
    response_model=PurchaseResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Purchase held tickets",
)
async def purchase_tickets(
    purchase_data: PurchaseRequest,
    order_service: OrderServiceDep,
) -> PurchaseResponse:
    """
    Convert the session's active holds for an event into a confirmed order.

    Fails with 409 when the session has no active hold, including when it
    was already purchased.
    """
    confirmation = await order_service.finalize_holds(
        session_id=purchase_data.session_id,
        event_id=purchase_data.event_id,
        user_name=purchase_data.user_name,
        user_phone=purchase_data.user_phone,
    )
    order = confirmation.order
    event = confirmation.event

    return PurchaseResponse(
        order_id=order.order_id,
        event_id=order.event_id,
        total_amount=order.total_amount,
        confirmation_code=confirmation.confirmation_code,
        line_item_count=len(confirmation.lines),
        total_tickets=confirmation.total_tickets,
        title=event.event_name,
        venue=event.venue_name,
        date_time=event.date_time,
    )


@router.get(
    "/{order_id}",
    response_model=OrderResponse,
    summary="Get order details",
)
async def get_order(
    order_id: int,
    order_service: OrderServiceDep,
) -> OrderResponse:
    """Get an order with its lines."""
    order = await order_service.get_order(order_id)
    return OrderResponse.model_validate(order)
