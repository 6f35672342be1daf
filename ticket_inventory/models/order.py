"""Order models."""

import enum
from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    BigInteger,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ticket_inventory.models.base import Base, BigIntPrimaryKey


class OrderStatus(str, enum.Enum):
    """Order status enum. Orders are created directly as confirmed."""

    CONFIRMED = "confirmed"


class Order(Base):
    """Order model representing a confirmed purchase of held tickets."""

    __tablename__ = "orders"

    order_id: Mapped[int] = mapped_column(
        BigIntPrimaryKey, primary_key=True, autoincrement=True
    )
    session_id: Mapped[str] = mapped_column(String(100), nullable=False)
    user_name: Mapped[str | None] = mapped_column(String(255))
    user_phone: Mapped[str | None] = mapped_column(String(50))
    event_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("events.event_id"), nullable=False
    )
    total_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    order_status: Mapped[OrderStatus] = mapped_column(
        Enum(OrderStatus, values_callable=lambda e: [m.value for m in e]),
        default=OrderStatus.CONFIRMED,
        nullable=False,
    )
    confirmation_code: Mapped[str | None] = mapped_column(String(50))
    created_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.current_timestamp()
    )

    # Relationships
    lines: Mapped[list["OrderLine"]] = relationship(
        "OrderLine", back_populates="order", cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("idx_orders_session_event", "session_id", "event_id"),
        Index("idx_orders_confirmation_code", "confirmation_code"),
    )


class OrderLine(Base):
    """One priced line of an order."""

    __tablename__ = "order_items"

    order_item_id: Mapped[int] = mapped_column(
        BigIntPrimaryKey, primary_key=True, autoincrement=True
    )
    order_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("orders.order_id"), nullable=False
    )
    ticket_type_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("ticket_types.ticket_type_id"), nullable=False
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    # Relationships
    order: Mapped["Order"] = relationship("Order", back_populates="lines")

    __table_args__ = (Index("idx_order_items_order", "order_id"),)

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity
