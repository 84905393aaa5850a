"""Database seeding entry points.

Each function accepts an optional session; without one it opens its own
from the application sessionmaker.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from discussion_sync.logging_config import get_logger
from discussion_sync.seed.sources import (
    SOURCE_SEED_DATA,
    clear_sources,
    reseed_sources,
    seed_sources,
)

logger = get_logger(__name__)


@asynccontextmanager
async def session_scope(session: Optional[AsyncSession] = None) -> AsyncIterator[AsyncSession]:
    """Use the given session, or open one for the duration of the block."""
    if session is not None:
        yield session
        return

    from discussion_sync.database import async_session_maker

    async with async_session_maker() as owned:
        yield owned


async def seed_all(session: Optional[AsyncSession] = None) -> None:
    """Run all seeds."""
    logger.info("Running all database seeds")
    try:
        async with session_scope(session) as db:
            await seed_sources(db)
    except Exception:
        logger.exception("Seeding failed")
        raise
    logger.info("All seeds completed successfully")


async def clear_all(session: Optional[AsyncSession] = None) -> None:
    """Clear all seeded data."""
    logger.info("Clearing all seeded data")
    try:
        async with session_scope(session) as db:
            await clear_sources(db)
    except Exception:
        logger.exception("Clearing failed")
        raise
    logger.info("All data cleared successfully")


async def reseed_all(session: Optional[AsyncSession] = None) -> None:
    """Clear and reseed all data."""
    await clear_all(session)
    await seed_all(session)


async def seed_sources_only(session: Optional[AsyncSession] = None) -> None:
    """Seed only the sources table."""
    async with session_scope(session) as db:
        await seed_sources(db)


__all__ = [
    "SOURCE_SEED_DATA",
    "clear_all",
    "clear_sources",
    "reseed_all",
    "reseed_sources",
    "seed_all",
    "seed_sources",
    "seed_sources_only",
    "session_scope",
]
