"""Reservations (holds) API endpoints."""

from fastapi import APIRouter, Query, status

from ticket_inventory.api.v1.dependencies import ClientIP, HoldServiceDep
from ticket_inventory.schemas.hold import (
    ActiveHoldResponse,
    HoldBatchResponse,
    HoldCreate,
    HoldLineResponse,
)
from ticket_inventory.services.hold_service import HoldItem

router = APIRouter()


@router.post(
    "",
    response_model=HoldBatchResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Reserve tickets",
)
async def reserve_tickets(
    hold_data: HoldCreate,
    client_ip: ClientIP,
    hold_service: HoldServiceDep,
) -> HoldBatchResponse:
    """
    Hold tickets of one or more types for a short window.

    All requested items are held or none are. A session id is issued when
    the request carries none; send it back to purchase the held tickets.
    """
    batch = await hold_service.create_hold(
        event_id=hold_data.event_id,
        items=[HoldItem(i.ticket_type_id, i.quantity) for i in hold_data.items],
        session_id=hold_data.session_id,
        client_ip=client_ip,
    )

    return HoldBatchResponse(
        session_id=batch.session_id,
        event_id=batch.event_id,
        expires_at=batch.expires_at,
        reservations=[HoldLineResponse.model_validate(h) for h in batch.holds],
    )


@router.get(
    "",
    response_model=list[ActiveHoldResponse],
    summary="Get active holds of a session",
)
async def get_session_holds(
    hold_service: HoldServiceDep,
    session_id: str = Query(..., min_length=1, max_length=100),
    event_id: int = Query(..., gt=0),
) -> list[ActiveHoldResponse]:
    """Get the unexpired holds a session has on an event."""
    holds = await hold_service.get_session_holds(session_id, event_id)
    return [ActiveHoldResponse.model_validate(h) for h in holds]
