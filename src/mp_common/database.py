"""Async SQLAlchemy engine and session plumbing.

Sessions handed out here never commit on their own. Services own the
transaction: checkout commits once after the order, its lines and the cart
deletion are written, and rolls back on any failure. The analytics
aggregator opens its own session through `async_session_factory` so its
counters commit independently of the checkout that triggered them.
"""

from collections.abc import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from config.settings import settings

engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_size=settings.DB_POOL_SIZE,
    max_overflow=settings.DB_MAX_OVERFLOW,
    pool_pre_ping=True,
)

# expire_on_commit=False: domain objects built from rows stay readable after
# the service commits (checkout returns the order number post-commit).
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request, closed afterwards.

    Anything the handler left uncommitted is discarded when the session closes.
    """
    async with async_session_factory() as session:
        yield session


async def check_database() -> None:
    """Fail fast at startup if PostgreSQL is unreachable."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
