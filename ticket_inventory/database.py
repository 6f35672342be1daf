"""Async database engine, sessions and transaction helpers."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from ticket_inventory.config import get_settings
from ticket_inventory.errors import ConflictError, InternalError, InventoryError
from ticket_inventory.models import Base

logger = logging.getLogger(__name__)

settings = get_settings()

# MySQL error codes the caller may retry
DEADLOCK_ERROR_CODE = 1213
LOCK_WAIT_TIMEOUT_ERROR_CODE = 1205
RETRIABLE_ERROR_CODES = frozenset({DEADLOCK_ERROR_CODE, LOCK_WAIT_TIMEOUT_ERROR_CODE})

_engine: AsyncEngine | None = None
_session_maker: async_sessionmaker[AsyncSession] | None = None


def get_engine() -> AsyncEngine:
    """Get the process-wide async engine, creating it on first use."""
    global _engine
    if _engine is None:
        options = {"pool_pre_ping": True, "echo": settings.DEBUG}
        if not settings.database_url.startswith("sqlite"):
            options["pool_size"] = settings.DB_POOL_SIZE
            options["pool_recycle"] = settings.DB_POOL_RECYCLE_SECONDS
        _engine = create_async_engine(settings.database_url, **options)
    return _engine


def get_session_maker() -> async_sessionmaker[AsyncSession]:
    """Get the session factory bound to the engine."""
    global _session_maker
    if _session_maker is None:
        _session_maker = async_sessionmaker(
            get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
        )
    return _session_maker


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding a session that never outlives the request."""
    async with get_session_maker()() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Create all tables."""
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def ping_db() -> bool:
    """Check that the store accepts connections."""
    try:
        async with get_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning(f"Database ping failed: {e}")
        return False
    return True


async def close_db() -> None:
    """Dispose of the engine and its pool."""
    global _engine, _session_maker
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_maker = None


def _mysql_error_code(exc: DBAPIError) -> int | None:
    args = getattr(exc.orig, "args", None)
    if args and isinstance(args[0], int):
        return args[0]
    return None


def translate_db_error(exc: SQLAlchemyError) -> InventoryError:
    """Map a store failure onto the error taxonomy."""
    if isinstance(exc, DBAPIError) and _mysql_error_code(exc) in RETRIABLE_ERROR_CODES:
        return ConflictError(
            "Inventory is busy, please try again",
            detail=str(exc.orig),
        )
    return InternalError("Internal server error", detail=str(exc))


@asynccontextmanager
async def atomic(db: AsyncSession) -> AsyncGenerator[AsyncSession, None]:
    """
    Run a block as one all-or-nothing transaction.

    The configured isolation level is applied before the first statement.
    Anything raised inside the block rolls the transaction back; store errors
    are re-raised as taxonomy errors.
    """
    try:
        async with db.begin():
            if settings.isolation_level:
                await db.connection(
                    execution_options={"isolation_level": settings.isolation_level}
                )
            yield db
    except SQLAlchemyError as e:
        raise translate_db_error(e) from e
