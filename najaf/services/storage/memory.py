"""
In-Memory Key-Value Store

Process-local store used by tests and single-process demos. Every session
created in the same process shares one instance through the factory, which
is what makes orders placed in one session visible to the others.
"""

import logging
from typing import Optional

from najaf.services.storage.base import BaseKeyValueStore

logger = logging.getLogger(__name__)


class MemoryKeyValueStore(BaseKeyValueStore):
    """Dict-backed store."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._entries: dict[str, str] = dict(initial or {})
        logger.info(f"MemoryKeyValueStore initialized ({len(self._entries)} keys)")

    @property
    def provider_name(self) -> str:
        return "memory"

    async def get(self, key: str) -> Optional[str]:
        return self._entries.get(key)

    async def set(self, key: str, value: str) -> None:
        self._entries[key] = value

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    async def health_check(self) -> bool:
        return True
