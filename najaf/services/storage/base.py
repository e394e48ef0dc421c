"""
Key-Value Storage Abstract Base Class

Defines the interface contract for the shared store that plays the part of
browser-local storage: a handful of string keys ("products", "orders"), each
holding the full JSON text of a list that is rewritten on every mutation.

All sessions of the application read and write through the same store;
there is no locking or merge across writers, so two sessions writing the
same key within one poll interval can lose one write.

Author: Khalil_Bannouri
Version: 1.0.0
"""

from abc import ABC, abstractmethod
from typing import Optional


PRODUCTS_KEY = "products"
ORDERS_KEY = "orders"


class BaseKeyValueStore(ABC):
    """
    Abstract base class for key-value stores.

    Example:
        >>> store = get_storage()
        >>> await store.set(ORDERS_KEY, "[]")
        >>> await store.get(ORDERS_KEY)
        '[]'
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """
        Return the name of the storage backend.

        Returns:
            str: Backend name (e.g., "memory", "file", "database")
        """
        pass

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """
        Read the raw text stored under key.

        Returns:
            The stored text, or None if the key was never written
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """
        Replace the text stored under key.

        Raises:
            StorageError: If the write could not be completed
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove key; no-op if absent."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Verify the backend is usable.

        Returns:
            bool: True if reads and writes can be served
        """
        pass

    async def close(self) -> None:
        """Release backend resources (engines, handles)."""
        return None
