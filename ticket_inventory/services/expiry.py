"""Hold expiry.

There is no background sweeper. A hold stops counting against capacity the
moment ``expires_at`` passes, because every consumer filters with
:func:`is_active`. Finalize additionally flips stale rows to EXPIRED with
:func:`reclaim_stale_holds` before it looks at a session's holds.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable

from sqlalchemy import and_, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from ticket_inventory.models.hold import Hold, HoldStatus

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, matching the DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def hold_expiry(now: datetime, window_seconds: int) -> datetime:
    """Expiry instant for a hold created at ``now``."""
    return now + timedelta(seconds=window_seconds)


def is_active(now: datetime) -> ColumnElement[bool]:
    """Predicate selecting holds that still consume capacity at ``now``."""
    return and_(
        Hold.status == HoldStatus.RESERVED,
        Hold.expires_at > now,
    )


def is_stale(now: datetime) -> ColumnElement[bool]:
    """Predicate selecting reserved holds whose window has elapsed."""
    return and_(
        Hold.status == HoldStatus.RESERVED,
        Hold.expires_at <= now,
    )


async def reclaim_stale_holds(db: AsyncSession, now: datetime) -> int:
    """
    Flip every stale reserved hold to EXPIRED.

    Must run inside the caller's transaction.

    Returns:
        Number of holds expired
    """
    result = await db.execute(
        update(Hold)
        .where(is_stale(now))
        .values(status=HoldStatus.EXPIRED)
        .execution_options(synchronize_session=False)
    )
    count = result.rowcount or 0
    if count > 0:
        logger.info(f"Expired {count} stale holds")
    return count
