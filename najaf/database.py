"""
Database Connection Module
Handles the SQLAlchemy async engine used by the database storage backend.

The engine is created lazily so that the memory and file backends never
touch a database driver.
"""

from functools import lru_cache
from typing import Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from najaf.core.config import get_settings


# Base class for all our models
class Base(DeclarativeBase):
    pass


@lru_cache()
def get_engine(database_url: Optional[str] = None) -> AsyncEngine:
    """
    Create (once per URL) the async engine.

    SQLite URLs get the driver's default pool; server databases get a
    small fixed pool.
    """
    url = database_url or get_settings().database_url
    if url.startswith("sqlite"):
        return create_async_engine(url, echo=False)
    return create_async_engine(
        url,
        echo=False,
        pool_size=5,  # Connection pool size
        max_overflow=10  # Extra connections when pool is full
    )


def get_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the given engine."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False  # Objects remain accessible after commit
    )


async def init_db(engine: Optional[AsyncEngine] = None) -> None:
    """
    Create all tables in database.
    Called once when the database backend is first used.
    """
    # Register models on Base.metadata
    import najaf.models  # noqa: F401

    engine = engine or get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
