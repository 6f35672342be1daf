"""Order finalizer: converts a session's active holds into a confirmed order."""

import hashlib
import logging
from collections import defaultdict
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy import and_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ticket_inventory.database import atomic
from ticket_inventory.errors import ConflictError, NotFoundError, ValidationError
from ticket_inventory.models.event import Event
from ticket_inventory.models.hold import Hold, HoldStatus
from ticket_inventory.models.order import Order, OrderLine, OrderStatus
from ticket_inventory.services.event_service import EventService
from ticket_inventory.services.expiry import Clock, is_active, reclaim_stale_holds, utcnow
from ticket_inventory.services.hold_service import normalize_session_id
from ticket_inventory.services.inventory_store import InventoryStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderConfirmation:
    """Result of a successful finalize."""

    order: Order
    lines: list[OrderLine]
    event: Event

    @property
    def confirmation_code(self) -> str:
        return self.order.confirmation_code

    @property
    def total_tickets(self) -> int:
        return sum(line.quantity for line in self.lines)


def make_confirmation_code(order_id: int, session_id: str, event_id: int) -> str:
    """
    Display code bound to an order and the session that placed it.

    Collision resistant, not secret: never use it to authorize anything.
    """
    digest = hashlib.sha256(f"{order_id}|{session_id}|{event_id}".encode()).hexdigest()
    return f"ORD-{order_id}-{digest[:12].upper()}"


class OrderService:
    """Service for finalizing holds into orders."""

    def __init__(self, db: AsyncSession, clock: Clock = utcnow):
        self.db = db
        self.clock = clock
        self.store = InventoryStore(db)
        self.events = EventService(db, clock)

    async def finalize_holds(
        self,
        session_id: str,
        event_id: int,
        user_name: str | None = None,
        user_phone: str | None = None,
    ) -> OrderConfirmation:
        """
        Convert the session's active holds for an event into one confirmed order.

        Everything happens in a single transaction: the order, its lines, the
        inventory decrement and the COMPLETED flip on the holds are committed
        together or not at all. Calling this again after a success finds no
        active hold and fails, so a retried request cannot create a second order.

        Args:
            session_id: Session that owns the holds
            event_id: Event ID
            user_name: Optional buyer name
            user_phone: Optional buyer phone

        Returns:
            The confirmed order with its lines

        Raises:
            ValidationError: If session_id or event_id is missing
            NotFoundError: If the event or a held ticket type no longer exists
            ConflictError: If there is no active hold or inventory changed
        """
        session_id = normalize_session_id(session_id)
        if session_id is None:
            raise ValidationError("session_id required")
        if event_id <= 0:
            raise ValidationError("event_id required")

        async with atomic(self.db):
            event = await self.events.get_active_event(event_id)

            now = self.clock()
            await reclaim_stale_holds(self.db, now)

            result = await self.db.execute(
                select(Hold)
                .where(
                    and_(
                        Hold.session_id == session_id,
                        Hold.event_id == event_id,
                        is_active(now),
                    )
                )
                .order_by(Hold.reservation_id)
                .with_for_update()
            )
            holds = list(result.scalars().all())
            if not holds:
                raise ConflictError("Hold expired or not found")

            by_type: dict[int, int] = defaultdict(int)
            by_price: dict[tuple[int, Decimal], int] = defaultdict(int)
            total = Decimal("0")
            for hold in holds:
                by_type[hold.ticket_type_id] += hold.quantity
                by_price[(hold.ticket_type_id, hold.unit_price)] += hold.quantity
                total += hold.unit_price * hold.quantity

            locked = await self.store.lock_ticket_types(event_id, list(by_type))
            for tt_id, quantity in by_type.items():
                if not locked[tt_id].inventory.can_decrement(quantity):
                    raise ConflictError(
                        "Inventory changed; not enough",
                        detail=(
                            f"ticket type {tt_id} holds {quantity}, "
                            f"available {locked[tt_id].available_quantity}"
                        ),
                    )

            order = Order(
                session_id=session_id,
                user_name=user_name or None,
                user_phone=user_phone or None,
                event_id=event_id,
                total_amount=total,
                order_status=OrderStatus.CONFIRMED,
                created_at=now,
                lines=[],
            )
            self.db.add(order)
            await self.db.flush()
            order.confirmation_code = make_confirmation_code(
                order.order_id, session_id, event_id
            )

            lines = []
            for (tt_id, unit_price), quantity in sorted(by_price.items()):
                line = OrderLine(
                    order_id=order.order_id,
                    ticket_type_id=tt_id,
                    quantity=quantity,
                    unit_price=unit_price,
                )
                order.lines.append(line)
                lines.append(line)

            for tt_id in sorted(by_type):
                await self.store.decrement(event_id, locked[tt_id], by_type[tt_id])

            await self.db.execute(
                update(Hold)
                .where(Hold.reservation_id.in_([h.reservation_id for h in holds]))
                .values(status=HoldStatus.COMPLETED)
                .execution_options(synchronize_session=False)
            )
            await self.db.flush()

        logger.info(
            f"Order {order.order_id} confirmed for session {session_id}: "
            f"{sum(by_type.values())} tickets, total {total}"
        )
        return OrderConfirmation(order=order, lines=lines, event=event)

    async def get_order(self, order_id: int) -> Order:
        """
        Get an order with its lines.

        Raises:
            NotFoundError: If the order does not exist
        """
        result = await self.db.execute(
            select(Order)
            .options(selectinload(Order.lines))
            .where(Order.order_id == order_id)
        )
        order = result.scalar_one_or_none()
        if order is None:
            raise NotFoundError("Order not found")
        return order
