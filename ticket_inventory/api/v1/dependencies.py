"""API dependencies."""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ticket_inventory.database import get_db
from ticket_inventory.services.event_service import EventService
from ticket_inventory.services.hold_service import HoldService
from ticket_inventory.services.order_service import OrderService

# Type aliases
DBSession = Annotated[AsyncSession, Depends(get_db)]


def get_client_ip(request: Request) -> str | None:
    """Address of the caller, recorded on holds."""
    return request.client.host if request.client else None


ClientIP = Annotated[str | None, Depends(get_client_ip)]


def get_event_service(db: DBSession) -> EventService:
    """Get event service."""
    return EventService(db)


def get_hold_service(db: DBSession) -> HoldService:
    """Get hold service."""
    return HoldService(db)


def get_order_service(db: DBSession) -> OrderService:
    """Get order service."""
    return OrderService(db)


# Annotated dependencies
EventServiceDep = Annotated[EventService, Depends(get_event_service)]
HoldServiceDep = Annotated[HoldService, Depends(get_hold_service)]
OrderServiceDep = Annotated[OrderService, Depends(get_order_service)]
