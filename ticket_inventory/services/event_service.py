"""Event and catalog lookups."""

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ticket_inventory.errors import NotFoundError, ValidationError
from ticket_inventory.models.event import Event, EventStatus
from ticket_inventory.models.ticket_type import TicketType
from ticket_inventory.services.expiry import Clock, utcnow
from ticket_inventory.services.inventory_store import InventoryStore


@dataclass(frozen=True)
class TicketAvailability:
    """A ticket type together with its free capacity at a point in time."""

    ticket_type: TicketType
    held_quantity: int
    free_quantity: int
    is_on_sale: bool


class EventService:
    """Service for event and ticket type lookups."""

    def __init__(self, db: AsyncSession, clock: Clock = utcnow):
        self.db = db
        self.clock = clock

    async def get_event(self, event_id: int) -> Event | None:
        """Get event by ID."""
        result = await self.db.execute(
            select(Event).where(Event.event_id == event_id)
        )
        return result.scalar_one_or_none()

    async def get_active_event(self, event_id: int) -> Event:
        """
        Get an event that currently accepts holds and orders.

        Raises:
            NotFoundError: If the event does not exist or is not active
        """
        event = await self.get_event(event_id)
        if event is None or not event.is_active:
            raise NotFoundError(
                "Event not found",
                detail=f"event {event_id} missing or inactive",
            )
        return event

    async def list_active_events(self) -> list[Event]:
        """List active events, soonest first."""
        result = await self.db.execute(
            select(Event)
            .where(Event.status == EventStatus.ACTIVE)
            .order_by(Event.event_date.asc(), Event.event_id.asc())
        )
        return list(result.scalars().all())

    async def get_ticket_availability(self, event_id: int) -> list[TicketAvailability]:
        """
        List an active event's ticket types with live free capacity.

        Free capacity is ``available_quantity`` minus active holds; it is a
        non-locking read and only indicative for the caller.
        """
        if event_id <= 0:
            raise ValidationError("Invalid Event ID")

        await self.get_active_event(event_id)

        result = await self.db.execute(
            select(TicketType)
            .where(TicketType.event_id == event_id)
            .order_by(TicketType.price.asc(), TicketType.ticket_type_id.asc())
        )
        ticket_types = list(result.scalars().all())
        if not ticket_types:
            return []

        now: datetime = self.clock()
        held = await InventoryStore(self.db).held_quantities(
            event_id, [tt.ticket_type_id for tt in ticket_types], now
        )

        availability = []
        for tt in ticket_types:
            held_qty = held.get(tt.ticket_type_id, 0)
            availability.append(
                TicketAvailability(
                    ticket_type=tt,
                    held_quantity=held_qty,
                    free_quantity=max(tt.inventory.free(held_qty), 0),
                    is_on_sale=tt.is_on_sale(now),
                )
            )
        return availability
