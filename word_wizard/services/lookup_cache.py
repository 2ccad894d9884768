"""Time-bounded cache of recent lookup results."""

import dataclasses
import logging
import time
from collections.abc import Callable

from word_wizard.models import AnalysisRequest, WordRecord

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 24 * 60 * 60


class LookupCache:
    """Keep recently analysed records so repeated lookups skip the provider.

    Entries are keyed by the normalized term, context and analysis options.
    Save flags are not part of the key since they do not change the record.
    The least recently used entry is evicted once ``capacity`` is exceeded,
    and entries older than ``ttl_seconds`` are never returned.
    """

    def __init__(
        self,
        capacity: int = 200,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.capacity = capacity
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[AnalysisRequest, tuple[float, WordRecord]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def enabled(self) -> bool:
        return self.capacity > 0 and self.ttl_seconds > 0

    @staticmethod
    def key(request: AnalysisRequest) -> AnalysisRequest:
        options = dataclasses.replace(
            request.options, save_to_note_service=False, save_to_flashcard_service=False
        )
        return dataclasses.replace(request, options=options)

    def get(self, request: AnalysisRequest) -> WordRecord | None:
        """Return the cached record for ``request`` unless missing or expired."""
        key = self.key(request)
        entry = self._entries.pop(key, None)
        if entry is None:
            return None

        stored_at, record = entry
        if self._clock() - stored_at > self.ttl_seconds:
            logger.debug("Cached lookup for '%s' expired", request.term)
            return None
        self._entries[key] = entry
        return record

    def put(self, request: AnalysisRequest, record: WordRecord) -> None:
        if not self.enabled:
            return
        key = self.key(request)
        self._entries.pop(key, None)
        self._entries[key] = (self._clock(), record)
        while len(self._entries) > self.capacity:
            del self._entries[next(iter(self._entries))]

    def clear(self) -> None:
        self._entries.clear()
