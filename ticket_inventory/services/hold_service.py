"""Hold manager: time-boxed holds on ticket inventory."""

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Iterable

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ticket_inventory.config import get_settings
from ticket_inventory.database import atomic
from ticket_inventory.errors import ConflictError, ValidationError
from ticket_inventory.models.hold import Hold, HoldStatus
from ticket_inventory.models.ticket_type import TicketType
from ticket_inventory.services.event_service import EventService
from ticket_inventory.services.expiry import Clock, hold_expiry, is_active, utcnow
from ticket_inventory.services.inventory_store import InventoryStore

logger = logging.getLogger(__name__)

settings = get_settings()

SESSION_ID_MAX_LENGTH = 100


@dataclass(frozen=True)
class HoldItem:
    """Requested quantity of one ticket type."""

    ticket_type_id: int
    quantity: int


@dataclass(frozen=True)
class HoldBatch:
    """Holds created together by one reserve call."""

    session_id: str
    event_id: int
    expires_at: datetime
    holds: list[Hold]

    @property
    def total_amount(self) -> Decimal:
        return sum((h.total_price for h in self.holds), Decimal("0"))


def generate_session_id() -> str:
    """Random opaque session token."""
    return secrets.token_hex(16)


def normalize_session_id(session_id: str | None) -> str | None:
    """Strip a client supplied session id; blank means none."""
    if session_id is None:
        return None
    session_id = session_id.strip()
    if not session_id:
        return None
    if len(session_id) > SESSION_ID_MAX_LENGTH:
        raise ValidationError("Invalid session_id")
    return session_id


def merge_items(items: Iterable[HoldItem]) -> dict[int, int]:
    """
    Validate items and sum quantities per ticket type.

    Returns:
        Requested quantity keyed by ticket type id, in ascending id order

    Raises:
        ValidationError: If there are no items or any item is malformed
    """
    demand: dict[int, int] = {}
    for item in items:
        if item.ticket_type_id <= 0 or item.quantity <= 0:
            raise ValidationError("Invalid item")
        demand[item.ticket_type_id] = demand.get(item.ticket_type_id, 0) + item.quantity

    if not demand:
        raise ValidationError("items required")
    if len(demand) > settings.MAX_ITEMS_PER_HOLD:
        raise ValidationError(
            f"Cannot hold more than {settings.MAX_ITEMS_PER_HOLD} ticket types at once"
        )
    return dict(sorted(demand.items()))


class HoldService:
    """Service for creating and inspecting holds."""

    def __init__(self, db: AsyncSession, clock: Clock = utcnow):
        self.db = db
        self.clock = clock
        self.store = InventoryStore(db)
        self.events = EventService(db, clock)

    async def create_hold(
        self,
        event_id: int,
        items: Iterable[HoldItem],
        session_id: str | None = None,
        client_ip: str | None = None,
    ) -> HoldBatch:
        """
        Hold tickets for a session, all or nothing.

        Ticket type rows are locked before active holds are counted, so two
        callers racing for the same capacity are serialized and only one of
        them can claim it. Nothing is written to the capacity counters here;
        the hold only reduces free capacity until it expires or is finalized.

        Args:
            event_id: Event ID
            items: Requested ticket types and quantities; duplicates are summed
            session_id: Existing session token, generated when omitted
            client_ip: Caller address recorded on the holds

        Returns:
            The created holds

        Raises:
            ValidationError: If the input is malformed or exceeds a per-order limit
            NotFoundError: If the event or a ticket type does not exist
            ConflictError: If any ticket type lacks free capacity or is not on sale
        """
        if event_id <= 0:
            raise ValidationError("event_id required")
        demand = merge_items(items)
        session_id = normalize_session_id(session_id) or generate_session_id()

        async with atomic(self.db):
            await self.events.get_active_event(event_id)
            locked = await self.store.lock_ticket_types(event_id, list(demand))

            now = self.clock()
            for tt_id, quantity in demand.items():
                ticket_type = locked[tt_id]
                if not ticket_type.is_on_sale(now):
                    raise ConflictError(f"Ticket type {tt_id} is not on sale")
                limit = ticket_type.order_limit(settings.DEFAULT_MAX_PER_ORDER)
                if quantity > limit:
                    raise ValidationError(
                        f"Cannot hold more than {limit} tickets of type {tt_id}"
                    )

            held = await self.store.held_quantities(event_id, list(demand), now)
            for tt_id, quantity in demand.items():
                free = locked[tt_id].inventory.free(held.get(tt_id, 0))
                if free < quantity:
                    logger.warning(
                        f"Hold rejected for session {session_id}: ticket type {tt_id} "
                        f"requested {quantity}, free {free}"
                    )
                    raise ConflictError("Not enough availability")

            expires_at = hold_expiry(now, settings.HOLD_WINDOW_SECONDS)
            holds = []
            for tt_id, quantity in demand.items():
                unit_price = locked[tt_id].price
                hold = Hold(
                    session_id=session_id,
                    event_id=event_id,
                    ticket_type_id=tt_id,
                    quantity=quantity,
                    unit_price=unit_price,
                    total_price=unit_price * quantity,
                    status=HoldStatus.RESERVED,
                    created_at=now,
                    expires_at=expires_at,
                    user_ip=client_ip,
                )
                self.db.add(hold)
                holds.append(hold)
            await self.db.flush()

        logger.info(
            f"Session {session_id} holds {sum(demand.values())} tickets "
            f"for event {event_id} until {expires_at.isoformat()}"
        )
        return HoldBatch(
            session_id=session_id,
            event_id=event_id,
            expires_at=expires_at,
            holds=holds,
        )

    async def get_free_capacity(
        self,
        event_id: int,
        ticket_type_ids: list[int],
    ) -> dict[int, int]:
        """
        Free capacity per ticket type right now, without locking.

        Unknown ticket types are left out of the result. Never below zero,
        even when capacity was cut under existing holds.
        """
        if not ticket_type_ids:
            return {}
        result = await self.db.execute(
            select(TicketType.ticket_type_id, TicketType.available_quantity).where(
                and_(
                    TicketType.ticket_type_id.in_(ticket_type_ids),
                    TicketType.event_id == event_id,
                )
            )
        )
        available = {tt_id: qty for tt_id, qty in result.all()}
        held = await self.store.held_quantities(
            event_id, list(available), self.clock()
        )
        return {
            tt_id: max(qty - held.get(tt_id, 0), 0)
            for tt_id, qty in sorted(available.items())
        }

    async def get_session_holds(self, session_id: str, event_id: int) -> list[Hold]:
        """Active holds of a session for an event."""
        session_id = normalize_session_id(session_id)
        if session_id is None:
            raise ValidationError("session_id required")

        result = await self.db.execute(
            select(Hold)
            .where(
                and_(
                    Hold.session_id == session_id,
                    Hold.event_id == event_id,
                    is_active(self.clock()),
                )
            )
            .order_by(Hold.ticket_type_id, Hold.reservation_id)
        )
        return list(result.scalars().all())
