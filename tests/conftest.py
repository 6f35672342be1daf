"""Pytest configuration and shared fixtures.

Services run against an in-memory SQLite database. SQLite ignores
SELECT ... FOR UPDATE, so these tests exercise the hold and purchase
protocol sequentially; the lock ordering itself needs MySQL.
"""

import os

# Must be set before ticket_inventory reads its settings
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["TRANSACTION_ISOLATION_LEVEL"] = ""
os.environ["DEBUG"] = "false"

from collections.abc import AsyncGenerator  # noqa: E402
from dataclasses import dataclass  # noqa: E402
from datetime import date, datetime, time, timedelta  # noqa: E402
from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from ticket_inventory.models import Base, Event, EventStatus, TicketType  # noqa: E402
from ticket_inventory.services.hold_service import HoldItem, HoldService  # noqa: E402
from ticket_inventory.services.order_service import OrderService  # noqa: E402


class FakeClock:
    """Controllable naive-UTC clock."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += timedelta(seconds=seconds)


@dataclass
class Catalog:
    """Ids of the seeded catalog."""

    event_id: int
    inactive_event_id: int
    other_event_id: int
    general_id: int
    vip_id: int
    limited_id: int
    other_event_type_id: int


@pytest.fixture
async def session_maker() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 10, 19, 12, 0, 0))


@pytest.fixture
async def catalog(session_maker) -> Catalog:
    """One active event with three ticket types, plus an inactive and a second event."""
    async with session_maker() as db:
        event = Event(
            event_name="Autumn Jazz Night",
            event_description="Live jazz in the park",
            event_date=date(2026, 11, 20),
            event_time=time(19, 30),
            venue_name="Riverside Hall",
            venue_address="1 River Road",
            total_capacity=25,
            status=EventStatus.ACTIVE,
        )
        inactive = Event(
            event_name="Cancelled Gala",
            event_date=date(2026, 12, 1),
            total_capacity=10,
            status=EventStatus.INACTIVE,
        )
        other = Event(
            event_name="Winter Choir",
            event_date=date(2026, 12, 15),
            total_capacity=10,
            status=EventStatus.ACTIVE,
        )
        db.add_all([event, inactive, other])
        await db.flush()

        general = TicketType(
            event_id=event.event_id,
            ticket_name="General Admission",
            price=Decimal("25.00"),
            available_quantity=10,
            sold_quantity=0,
        )
        vip = TicketType(
            event_id=event.event_id,
            ticket_name="VIP",
            price=Decimal("100.00"),
            available_quantity=5,
            sold_quantity=0,
        )
        limited = TicketType(
            event_id=event.event_id,
            ticket_name="Backstage Pass",
            price=Decimal("250.00"),
            available_quantity=10,
            sold_quantity=0,
            max_per_order=2,
        )
        other_type = TicketType(
            event_id=other.event_id,
            ticket_name="Choir Seat",
            price=Decimal("15.00"),
            available_quantity=10,
            sold_quantity=0,
        )
        db.add_all([general, vip, limited, other_type])
        await db.commit()

        return Catalog(
            event_id=event.event_id,
            inactive_event_id=inactive.event_id,
            other_event_id=other.event_id,
            general_id=general.ticket_type_id,
            vip_id=vip.ticket_type_id,
            limited_id=limited.ticket_type_id,
            other_event_type_id=other_type.ticket_type_id,
        )


@pytest.fixture
def reserve(session_maker, clock):
    """Create a hold in a fresh session."""

    async def _reserve(event_id: int, items: list[tuple[int, int]], session_id=None):
        async with session_maker() as db:
            return await HoldService(db, clock).create_hold(
                event_id=event_id,
                items=[HoldItem(tt_id, qty) for tt_id, qty in items],
                session_id=session_id,
                client_ip="203.0.113.7",
            )

    return _reserve


@pytest.fixture
def purchase(session_maker, clock):
    """Finalize a session's holds in a fresh session."""

    async def _purchase(session_id: str, event_id: int, **buyer):
        async with session_maker() as db:
            return await OrderService(db, clock).finalize_holds(
                session_id=session_id, event_id=event_id, **buyer
            )

    return _purchase


@pytest.fixture
def free_capacity(session_maker, clock):
    """Free capacity of one ticket type in a fresh session."""

    async def _free(event_id: int, ticket_type_id: int) -> int:
        async with session_maker() as db:
            free = await HoldService(db, clock).get_free_capacity(
                event_id, [ticket_type_id]
            )
            return free[ticket_type_id]

    return _free
