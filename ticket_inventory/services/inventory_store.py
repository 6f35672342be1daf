"""Inventory store: row locking and the conditional decrement of capacity."""

from datetime import datetime

from sqlalchemy import and_, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from ticket_inventory.errors import ConflictError, NotFoundError
from ticket_inventory.models.hold import Hold
from ticket_inventory.models.ticket_type import Inventory, TicketType
from ticket_inventory.services.expiry import is_active


class InventoryStore:
    """
    Access to ticket type capacity.

    All methods run inside the caller's transaction. Ticket type rows are
    always locked in ascending id order so that concurrent holds and
    finalizes touching overlapping sets cannot deadlock on each other.
    :meth:`decrement` is the only code path that writes the capacity counters,
    and it only writes what :meth:`Inventory.decrement` derives.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def lock_ticket_types(
        self,
        event_id: int,
        ticket_type_ids: list[int],
    ) -> dict[int, TicketType]:
        """
        Lock ticket type rows of an event with SELECT ... FOR UPDATE.

        Returns:
            Locked rows keyed by ticket type id, in ascending id order

        Raises:
            NotFoundError: If any id does not resolve under the event
        """
        ids = sorted(set(ticket_type_ids))
        result = await self.db.execute(
            select(TicketType)
            .where(
                and_(
                    TicketType.ticket_type_id.in_(ids),
                    TicketType.event_id == event_id,
                )
            )
            .order_by(TicketType.ticket_type_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        locked = {tt.ticket_type_id: tt for tt in result.scalars().all()}

        missing = [tt_id for tt_id in ids if tt_id not in locked]
        if missing:
            raise NotFoundError(
                "Ticket type not found",
                detail=f"ticket types {missing} not found for event {event_id}",
            )
        return locked

    async def held_quantities(
        self,
        event_id: int,
        ticket_type_ids: list[int],
        now: datetime,
    ) -> dict[int, int]:
        """Sum active hold quantities per ticket type as of ``now``."""
        result = await self.db.execute(
            select(Hold.ticket_type_id, func.coalesce(func.sum(Hold.quantity), 0))
            .where(
                and_(
                    Hold.ticket_type_id.in_(ticket_type_ids),
                    Hold.event_id == event_id,
                    is_active(now),
                )
            )
            .group_by(Hold.ticket_type_id)
        )
        return {tt_id: int(qty) for tt_id, qty in result.all()}

    async def decrement(
        self,
        event_id: int,
        ticket_type: TicketType,
        quantity: int,
    ) -> Inventory:
        """
        Take ``quantity`` tickets out of a locked ticket type's capacity.

        The new counters come from :meth:`Inventory.decrement` on the locked
        snapshot and are written with a statement guarded by
        ``available_quantity >= quantity`` and by the snapshot's available
        count; anything other than exactly one affected row is a concurrent
        modification.

        Returns:
            The capacity written to the row

        Raises:
            ConflictError: If the snapshot cannot give up ``quantity`` or the
                guarded update did not apply
        """
        current = ticket_type.inventory
        try:
            target = current.decrement(quantity)
        except ValueError as e:
            raise ConflictError("Inventory changed; not enough", detail=str(e)) from e

        result = await self.db.execute(
            update(TicketType)
            .where(
                and_(
                    TicketType.ticket_type_id == ticket_type.ticket_type_id,
                    TicketType.event_id == event_id,
                    TicketType.available_quantity >= quantity,
                    TicketType.available_quantity == current.available,
                )
            )
            .values(available_quantity=target.available, sold_quantity=target.sold)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise ConflictError(
                "Concurrent update; try again",
                detail=(
                    f"decrement of {quantity} on ticket type "
                    f"{ticket_type.ticket_type_id} affected {result.rowcount} rows"
                ),
            )

        set_committed_value(ticket_type, "available_quantity", target.available)
        set_committed_value(ticket_type, "sold_quantity", target.sold)
        return target
