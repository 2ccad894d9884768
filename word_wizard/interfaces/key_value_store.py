"""Protocol for durable key-value storage."""

from typing import Any, Protocol


class KeyValueStore(Protocol):
    """Interface for the durable store holding persisted engine state.

    Values are JSON-compatible. Implementations raise StorageError when
    the underlying medium fails. Any other exception raised by a write is
    treated as a storage failure by PersistenceSync.
    """

    async def get(self, key: str) -> Any | None:
        """Return the value stored under ``key``, or None if absent."""
        ...

    async def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key``."""
        ...

    async def remove(self, key: str) -> None:
        """Delete ``key`` if present."""
        ...
