"""Hold (ticket reservation) model."""

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
from sqlalchemy.orm import Mapped, mapped_column

from ticket_inventory.models.base import Base, BigIntPrimaryKey


class HoldStatus(str, enum.Enum):
    """Hold status enum.

    Transitions are one-way: RESERVED -> EXPIRED or RESERVED -> COMPLETED.
    """

    RESERVED = "reserved"
    EXPIRED = "expired"
    COMPLETED = "completed"


class Hold(Base):
    """A time-boxed claim on a quantity of one ticket type, owned by a session."""

    __tablename__ = "ticket_reservations"

    reservation_id: Mapped[int] = mapped_column(
        BigIntPrimaryKey, primary_key=True, autoincrement=True
    )
    session_id: Mapped[str] = mapped_column(String(100), nullable=False)
    event_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("events.event_id"), nullable=False
    )
    ticket_type_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("ticket_types.ticket_type_id"), nullable=False
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    total_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    status: Mapped[HoldStatus] = mapped_column(
        Enum(HoldStatus, values_callable=lambda e: [m.value for m in e]),
        default=HoldStatus.RESERVED,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.current_timestamp()
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    user_ip: Mapped[str | None] = mapped_column(String(45))

    __table_args__ = (
        Index("idx_holds_session_event", "session_id", "event_id", "status"),
        Index("idx_holds_type_status_expiry", "ticket_type_id", "status", "expires_at"),
        Index("idx_holds_status_expiry", "status", "expires_at"),
    )
