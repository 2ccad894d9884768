"""Debounced write-back of engine state to durable storage."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from word_wizard.exceptions import StorageError, ValidationError
from word_wizard.interfaces import KeyValueStore, ScheduledHandle, Scheduler
from word_wizard.models import HistoryEntry, PersistedSnapshot, Settings, WordRecord
from word_wizard.models.snapshot import (
    HISTORY_KEY,
    REVIEW_QUEUE_KEY,
    SETTINGS_KEY,
    STATS_KEY,
)
from word_wizard.utils import AsyncioScheduler

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 1.0


class PersistenceSync:
    """Load persisted state at start-up and flush it back after mutations.

    Every call to ``schedule_flush`` restarts a debounce timer; when it
    fires, one snapshot of the current state is written. Only one write
    runs at a time: a flush requested while another is in progress is
    folded into a single follow-up write of the latest state. A failed
    write is logged and left dirty so the next mutation retries it.
    """

    def __init__(
        self,
        store: KeyValueStore,
        snapshot_provider: Callable[[], PersistedSnapshot],
        scheduler: Scheduler | None = None,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
    ):
        """Initialize the persistence sync.

        Args:
            store: Durable key-value store
            snapshot_provider: Returns the current state to persist
            scheduler: Delayed-callback scheduler (asyncio loop by default)
            debounce_seconds: Debounce window for coalescing flushes
        """
        self.store = store
        self.snapshot_provider = snapshot_provider
        self.scheduler = scheduler or AsyncioScheduler()
        self.debounce_seconds = debounce_seconds

        self._timer: ScheduledHandle | None = None
        self._flush_task: asyncio.Task | None = None
        self._dirty = False
        self.flush_count = 0
        self.last_error: StorageError | None = None

    @property
    def dirty(self) -> bool:
        """True while there is state that has not been written successfully."""
        return self._dirty

    @property
    def pending(self) -> bool:
        """True while a flush is scheduled or running."""
        running = self._flush_task is not None and not self._flush_task.done()
        return self._timer is not None or running

    async def load(self) -> PersistedSnapshot:
        """Read persisted state, falling back to defaults key by key.

        A missing or malformed key never fails the whole load.
        """
        history = await self._load_key(HISTORY_KEY, _parse_history, ())
        review_queue = await self._load_key(REVIEW_QUEUE_KEY, _parse_review_queue, ())
        settings = await self._load_key(SETTINGS_KEY, _parse_settings, Settings())
        mastered_words = await self._load_key(STATS_KEY, _parse_mastered_words, 0)

        return PersistedSnapshot(
            history=history,
            review_queue=review_queue,
            settings=settings,
            mastered_words=mastered_words,
        )

    def schedule_flush(self) -> None:
        """Mark state dirty and (re)start the debounce timer."""
        self._dirty = True
        if self._timer is not None:
            self._timer.cancel()
        self._timer = self.scheduler.call_later(self.debounce_seconds, self._on_timer)
        logger.debug("Flush scheduled in %.2fs", self.debounce_seconds)

    async def flush_now(self) -> bool:
        """Cancel any pending timer and write the current state immediately.

        Returns:
            True if the state was written successfully
        """
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._dirty = True
        await self.wait_idle()
        if not self._dirty:
            return True
        return await self._write()

    async def wait_idle(self) -> None:
        """Wait for the flush currently running, if any."""
        while self._flush_task is not None and not self._flush_task.done():
            await asyncio.shield(self._flush_task)

    async def close(self) -> None:
        """Write any unsaved state and stop the timer."""
        if self._dirty or self._timer is not None:
            await self.flush_now()
        else:
            await self.wait_idle()

    def _on_timer(self) -> None:
        self._timer = None
        if self._flush_task is not None and not self._flush_task.done():
            # The running write re-checks the dirty flag when it finishes
            return
        self._flush_task = asyncio.get_running_loop().create_task(self._flush_loop())

    async def _flush_loop(self) -> None:
        while self._dirty:
            if not await self._write():
                return

    async def _write(self) -> bool:
        self._dirty = False
        snapshot = self.snapshot_provider()
        try:
            for key, value in snapshot.to_storage().items():
                await self.store.set(key, value)
        except StorageError as e:
            return self._write_failed(e)
        except Exception as e:
            # Stores should raise StorageError; anything else counts as one
            logger.debug("Unexpected store failure", exc_info=True)
            error = StorageError(f"Store write failed: {e!r}")
            error.__cause__ = e
            return self._write_failed(error)

        self.flush_count += 1
        self.last_error = None
        logger.info("Persisted %d history entries", len(snapshot.history))
        return True

    def _write_failed(self, error: StorageError) -> bool:
        self._dirty = True
        self.last_error = error
        logger.warning("Could not persist state, will retry on next change: %s", error)
        return False

    async def _load_key(self, key: str, parse: Callable[[Any], Any], default: Any) -> Any:
        try:
            raw = await self.store.get(key)
        except StorageError as e:
            logger.warning("Could not read '%s' from storage, using defaults: %s", key, e)
            return default

        if raw is None:
            return default
        try:
            return parse(raw)
        except (TypeError, ValueError, KeyError, ValidationError) as e:
            logger.warning("Ignoring malformed '%s' in storage: %s", key, e)
            return default


def _parse_history(raw: Any) -> tuple[HistoryEntry, ...]:
    if not isinstance(raw, list):
        raise TypeError(f"expected a list, got {type(raw).__name__}")
    entries = []
    for item in raw:
        if not isinstance(item, dict):
            logger.warning("Skipping malformed history entry: %r", item)
            continue
        try:
            entries.append(HistoryEntry.from_dict(item))
        except (TypeError, ValueError) as e:
            logger.warning("Skipping malformed history entry: %s", e)
    return tuple(entries)


def _parse_review_queue(raw: Any) -> tuple[WordRecord, ...]:
    if not isinstance(raw, list):
        raise TypeError(f"expected a list, got {type(raw).__name__}")
    records = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        try:
            records.append(WordRecord.from_dict(item))
        except (TypeError, ValueError) as e:
            logger.warning("Skipping malformed review item: %s", e)
    return tuple(records)


def _parse_settings(raw: Any) -> Settings:
    if not isinstance(raw, dict):
        raise TypeError(f"expected an object, got {type(raw).__name__}")
    return Settings.from_dict(raw)


def _parse_mastered_words(raw: Any) -> int:
    if not isinstance(raw, dict):
        raise TypeError(f"expected an object, got {type(raw).__name__}")
    return max(0, int(raw.get("mastered_words", 0)))
