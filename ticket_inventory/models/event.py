"""Event model."""

import enum
from datetime import date, datetime, time
from typing import TYPE_CHECKING

from sqlalchemy import (
    Date,
    DateTime,
    Enum,
    Index,
    Integer,
    String,
    Text,
    Time,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ticket_inventory.models.base import Base, BigIntPrimaryKey

if TYPE_CHECKING:
    from ticket_inventory.models.ticket_type import TicketType


class EventStatus(str, enum.Enum):
    """Event status enum."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class Event(Base):
    """Event model. Read-only from the hold and purchase paths."""

    __tablename__ = "events"

    event_id: Mapped[int] = mapped_column(
        BigIntPrimaryKey, primary_key=True, autoincrement=True
    )
    event_name: Mapped[str] = mapped_column(String(255), nullable=False)
    event_description: Mapped[str | None] = mapped_column(Text)
    event_date: Mapped[date] = mapped_column(Date, nullable=False)
    event_time: Mapped[time | None] = mapped_column(Time)
    venue_name: Mapped[str | None] = mapped_column(String(255))
    venue_address: Mapped[str | None] = mapped_column(String(500))
    event_image_url: Mapped[str | None] = mapped_column(String(500))
    total_capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[EventStatus] = mapped_column(
        Enum(EventStatus, values_callable=lambda e: [m.value for m in e]),
        default=EventStatus.ACTIVE,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.current_timestamp()
    )

    # Relationships
    ticket_types: Mapped[list["TicketType"]] = relationship(
        "TicketType", back_populates="event"
    )

    __table_args__ = (
        Index("idx_events_status_date", "status", "event_date"),
    )

    @property
    def is_active(self) -> bool:
        return self.status == EventStatus.ACTIVE

    @property
    def date_time(self) -> str:
        """Date and time as shown on the confirmation screen."""
        parts = [self.event_date.isoformat() if self.event_date else ""]
        if self.event_time:
            parts.append(self.event_time.isoformat())
        return " ".join(parts).strip()
