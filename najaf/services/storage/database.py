"""
Database Key-Value Store

Keeps the shared entries in the kv_entries table through SQLAlchemy's async
engine (SQLite via aiosqlite by default, PostgreSQL via psycopg when
DATABASE_URL points there). Tables are created on first use.

Author: Khalil_Bannouri
Version: 1.0.0
"""

import logging
from pathlib import Path
from typing import Optional

from sqlalchemy import select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from najaf.core.exceptions import StorageError
from najaf.database import get_session_maker, init_db
from najaf.models import KeyValueEntry
from najaf.services.storage.base import BaseKeyValueStore

logger = logging.getLogger(__name__)


class DatabaseKeyValueStore(BaseKeyValueStore):
    """SQLAlchemy-backed store."""

    def __init__(self, engine: AsyncEngine):
        self._engine = engine
        self._session_maker = get_session_maker(engine)
        self._initialized = False
        logger.info(f"DatabaseKeyValueStore initialized ({engine.url.render_as_string(hide_password=True)})")

    @property
    def provider_name(self) -> str:
        return "database"

    async def _ensure_schema(self) -> None:
        if self._initialized:
            return
        url = self._engine.url
        if url.get_backend_name() == "sqlite" and url.database:
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)
        await init_db(self._engine)
        self._initialized = True
        logger.info("✅ kv_entries table ready")

    async def get(self, key: str) -> Optional[str]:
        try:
            await self._ensure_schema()
            async with self._session_maker() as session:
                result = await session.execute(
                    select(KeyValueEntry.value).where(KeyValueEntry.key == key)
                )
                return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.warning(f"Error reading '{key}' from database: {e}")
            return None

    async def set(self, key: str, value: str) -> None:
        try:
            await self._ensure_schema()
            async with self._session_maker() as session:
                entry = await session.get(KeyValueEntry, key)
                if entry is None:
                    session.add(KeyValueEntry(key=key, value=value))
                else:
                    entry.value = value
                await session.commit()
        except SQLAlchemyError as e:
            logger.exception(f"Error writing '{key}' to database")
            raise StorageError(str(e)) from e

    async def delete(self, key: str) -> None:
        try:
            await self._ensure_schema()
            async with self._session_maker() as session:
                entry = await session.get(KeyValueEntry, key)
                if entry is not None:
                    await session.delete(entry)
                    await session.commit()
        except SQLAlchemyError as e:
            logger.exception(f"Error deleting '{key}' from database")
            raise StorageError(str(e)) from e

    async def health_check(self) -> bool:
        try:
            await self._ensure_schema()
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.error(f"Database health check failed: {e}")
            return False

    async def close(self) -> None:
        await self._engine.dispose()
