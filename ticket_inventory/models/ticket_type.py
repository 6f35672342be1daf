"""Ticket type model and its capacity value object."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ticket_inventory.models.base import Base, BigIntPrimaryKey

if TYPE_CHECKING:
    from ticket_inventory.models.event import Event


@dataclass(frozen=True)
class Inventory:
    """Snapshot of a ticket type's capacity counters.

    ``available`` is the remaining unsold capacity and ``sold`` the number of
    tickets sold so far. The only way to derive a new snapshot is
    :meth:`decrement`, mirroring the conditional decrement applied in the store.
    """

    available: int
    sold: int = 0

    def __post_init__(self) -> None:
        if self.available < 0:
            raise ValueError("Available quantity cannot be negative")
        if self.sold < 0:
            raise ValueError("Sold quantity cannot be negative")

    def can_decrement(self, quantity: int) -> bool:
        return 0 < quantity <= self.available

    def decrement(self, quantity: int) -> "Inventory":
        if not self.can_decrement(quantity):
            raise ValueError(
                f"Cannot take {quantity} from {self.available} available"
            )
        return Inventory(available=self.available - quantity, sold=self.sold + quantity)

    def free(self, held: int) -> int:
        """Capacity left once ``held`` active hold quantity is set aside."""
        return self.available - held


class TicketType(Base):
    """Ticket type model carrying the capacity counters for one kind of ticket."""

    __tablename__ = "ticket_types"

    ticket_type_id: Mapped[int] = mapped_column(
        BigIntPrimaryKey, primary_key=True, autoincrement=True
    )
    event_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("events.event_id"), nullable=False
    )
    ticket_name: Mapped[str] = mapped_column(String(100), nullable=False)
    ticket_description: Mapped[str | None] = mapped_column(Text)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    available_quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    sold_quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    max_per_order: Mapped[int | None] = mapped_column(Integer)
    sale_start_date: Mapped[datetime | None] = mapped_column(DateTime)
    sale_end_date: Mapped[datetime | None] = mapped_column(DateTime)

    # Relationships
    event: Mapped["Event"] = relationship("Event", back_populates="ticket_types")

    __table_args__ = (
        CheckConstraint("available_quantity >= 0", name="ck_ticket_types_available"),
        CheckConstraint("sold_quantity >= 0", name="ck_ticket_types_sold"),
        Index("idx_ticket_types_event", "event_id"),
    )

    @property
    def inventory(self) -> Inventory:
        return Inventory(
            available=self.available_quantity,
            sold=self.sold_quantity or 0,
        )

    def order_limit(self, default: int) -> int:
        """Per-hold ticket limit; ``default`` only when the limit is unset."""
        if self.max_per_order is None:
            return default
        return self.max_per_order

    def is_on_sale(self, now: datetime) -> bool:
        """Whether ``now`` falls inside the sale window (open ends allowed)."""
        if self.sale_start_date is not None and now < self.sale_start_date:
            return False
        if self.sale_end_date is not None and now > self.sale_end_date:
            return False
        return True
