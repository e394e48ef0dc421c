"""
File Key-Value Store with Concurrency Control

Stores each key as <data_directory>/<key>.json. Several server processes (or
the simulation script and a running server) can share the same directory,
which is how orders placed by one process show up in another's poller.

A per-key file lock keeps each individual write whole; it does not make
read-modify-write sequences atomic across sessions.

Author: Khalil_Bannouri
Version: 1.0.0
"""

import asyncio
import logging
import os
from pathlib import Path
from typing import Optional

from filelock import FileLock, Timeout

from najaf.core.exceptions import StorageError
from najaf.services.storage.base import BaseKeyValueStore

logger = logging.getLogger(__name__)


class FileKeyValueStore(BaseKeyValueStore):
    """Thread-safe JSON file store."""

    def __init__(self, data_dir: Path, lock_timeout: float = 10):
        self.data_dir = Path(data_dir)
        self.lock_timeout = lock_timeout
        logger.info(f"FileKeyValueStore initialized (data_dir={self.data_dir})")

    @property
    def provider_name(self) -> str:
        return "file"

    def _ensure_data_dir(self) -> None:
        """Create data directory if needed."""
        if not self.data_dir.exists():
            self.data_dir.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created data directory: {self.data_dir}")

    def _path(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def _lock(self, key: str) -> FileLock:
        return FileLock(str(self.data_dir / f"{key}.json.lock"), timeout=self.lock_timeout)

    def _read(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            with self._lock(key):
                return path.read_text(encoding="utf-8")
        except Timeout:
            logger.error(f"Lock timeout reading '{key}' ({self.lock_timeout}s)")
            return None
        except OSError as e:
            logger.warning(f"Error reading {path}: {e}")
            return None

    def _write(self, key: str, value: str) -> None:
        self._ensure_data_dir()
        path = self._path(key)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            with self._lock(key):
                tmp_path.write_text(value, encoding="utf-8")
                os.replace(tmp_path, path)
        except Timeout:
            logger.error(f"Lock timeout writing '{key}' ({self.lock_timeout}s)")
            raise StorageError(f"Lock timeout writing '{key}'")
        except OSError as e:
            logger.exception(f"Error writing {path}")
            raise StorageError(str(e)) from e

    def _delete(self, key: str) -> None:
        path = self._path(key)
        if not path.exists():
            return
        with self._lock(key):
            path.unlink(missing_ok=True)

    async def get(self, key: str) -> Optional[str]:
        return await asyncio.to_thread(self._read, key)

    async def set(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._write, key, value)

    async def delete(self, key: str) -> None:
        await asyncio.to_thread(self._delete, key)

    async def health_check(self) -> bool:
        try:
            self._ensure_data_dir()
            return os.access(self.data_dir, os.W_OK)
        except OSError:
            return False
