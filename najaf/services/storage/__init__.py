"""
Storage Service Factory

Provides a single entry point for obtaining the shared key-value store.
Automatically selects the backend from STORAGE_BACKEND.

Usage:
    from najaf.services.storage import get_storage

    store = get_storage()
    raw_orders = await store.get(ORDERS_KEY)

Backends:
    - STORAGE_BACKEND=memory → MemoryKeyValueStore (tests, demos)
    - STORAGE_BACKEND=file → FileKeyValueStore (JSON files under DATA_DIRECTORY)
    - STORAGE_BACKEND=database → DatabaseKeyValueStore (DATABASE_URL)

Author: Khalil_Bannouri
Version: 1.0.0
"""

import logging
from functools import lru_cache

from najaf.core.config import get_settings, StorageBackend
from najaf.database import get_engine
from najaf.services.storage.base import BaseKeyValueStore, PRODUCTS_KEY, ORDERS_KEY
from najaf.services.storage.memory import MemoryKeyValueStore
from najaf.services.storage.file import FileKeyValueStore
from najaf.services.storage.database import DatabaseKeyValueStore

logger = logging.getLogger(__name__)


@lru_cache()
def get_storage() -> BaseKeyValueStore:
    """
    Get the configured key-value store instance.

    The instance is cached so every session in the process shares it.

    Returns:
        BaseKeyValueStore: Configured store
    """
    settings = get_settings()

    if settings.storage_backend == StorageBackend.MEMORY:
        logger.info("Storage: Using MemoryKeyValueStore")
        return MemoryKeyValueStore()

    if settings.storage_backend == StorageBackend.DATABASE:
        logger.info("Storage: Using DatabaseKeyValueStore")
        return DatabaseKeyValueStore(get_engine(settings.database_url))

    logger.info(f"Storage: Using FileKeyValueStore ({settings.data_directory})")
    return FileKeyValueStore(
        data_dir=settings.data_path,
        lock_timeout=settings.storage_lock_timeout,
    )


def reset_storage() -> None:
    """
    Clear the cached store instance.

    Useful for testing or when configuration changes at runtime.
    """
    get_storage.cache_clear()
    logger.debug("Storage cache cleared")


__all__ = [
    "get_storage",
    "reset_storage",
    "BaseKeyValueStore",
    "MemoryKeyValueStore",
    "FileKeyValueStore",
    "DatabaseKeyValueStore",
    "PRODUCTS_KEY",
    "ORDERS_KEY",
]
