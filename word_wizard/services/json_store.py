"""JSON file backed key-value store."""

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Any

from word_wizard.exceptions import StorageError

logger = logging.getLogger(__name__)


class JsonFileStore:
    """Durable key-value store kept as a single JSON document.

    The document is read once and cached; every write rewrites the whole
    file through a temporary file so a crash never leaves half a document.
    File access runs in a worker thread, one operation at a time.
    """

    def __init__(self, path: Path):
        """Initialize the store.

        Args:
            path: Location of the JSON document (created on first write)
        """
        self.path = Path(path)
        self._data: dict[str, Any] | None = None
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Any | None:
        async with self._lock:
            return (await self._loaded()).get(key)

    async def set(self, key: str, value: Any) -> None:
        async with self._lock:
            data = dict(await self._loaded())
            data[key] = value
            await asyncio.to_thread(self._write, data)
            self._data = data

    async def remove(self, key: str) -> None:
        async with self._lock:
            data = dict(await self._loaded())
            if data.pop(key, None) is not None:
                await asyncio.to_thread(self._write, data)
            self._data = data

    async def _loaded(self) -> dict[str, Any]:
        if self._data is None:
            self._data = await asyncio.to_thread(self._read)
        return self._data

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}

        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            # An unreadable document is treated as empty; the next write replaces it
            logger.warning("Storage file %s is corrupt, starting empty: %s", self.path, e)
            return {}
        except OSError as e:
            raise StorageError(f"Cannot read storage file {self.path}: {e}") from e

        if not isinstance(data, dict):
            logger.warning("Storage file %s does not hold an object, starting empty", self.path)
            return {}
        return data

    def _write(self, data: dict[str, Any]) -> None:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            raise StorageError(f"Cannot write storage file {self.path}: {e}") from e


class MemoryStore:
    """In-process key-value store for sessions that need no durability."""

    def __init__(self, initial: dict[str, Any] | None = None):
        self._data: dict[str, Any] = dict(initial or {})

    async def get(self, key: str) -> Any | None:
        return self._data.get(key)

    async def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    async def remove(self, key: str) -> None:
        self._data.pop(key, None)
