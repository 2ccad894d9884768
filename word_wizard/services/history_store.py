"""Bounded learning history and review queue."""

import logging
import time
from collections.abc import Callable, Iterable
from dataclasses import replace
from datetime import datetime, timedelta, timezone

from word_wizard.exceptions import ValidationError
from word_wizard.models import HistoryEntry, LearningStats, WordRecord

logger = logging.getLogger(__name__)

SORT_ORDERS = ("recent", "alphabetical", "frequency")
WEEK_SECONDS = 7 * 24 * 60 * 60


def _day(timestamp: float):
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).date()


class HistoryStore:
    """Most-recent-first history of learned words.

    Terms are unique (case-sensitive). Re-adding a term moves it to the
    front; once the capacity is exceeded the oldest entries at the tail
    are dropped. The review queue follows the same rules with its own
    capacity.
    """

    def __init__(
        self,
        capacity: int = 100,
        review_capacity: int = 50,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize the history store.

        Args:
            capacity: Maximum number of history entries
            review_capacity: Maximum number of records in the review queue
            clock: Source of the current time (epoch seconds)
        """
        self.capacity = capacity
        self.review_capacity = review_capacity
        self._clock = clock
        self._entries: list[HistoryEntry] = []
        self._review: list[WordRecord] = []
        self._mastered_words = 0

    @property
    def entries(self) -> tuple[HistoryEntry, ...]:
        return tuple(self._entries)

    @property
    def review_queue(self) -> tuple[WordRecord, ...]:
        return tuple(self._review)

    @property
    def mastered_words(self) -> int:
        return self._mastered_words

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, term: str) -> bool:
        return self._index(term) is not None

    def get(self, term: str) -> HistoryEntry | None:
        index = self._index(term)
        return self._entries[index] if index is not None else None

    def add(self, record: WordRecord) -> HistoryEntry:
        """Insert ``record`` at the front, replacing any entry for the same term.

        Returns:
            The new front entry
        """
        previous = None
        index = self._index(record.term)
        if index is not None:
            previous = self._entries.pop(index)

        entry = HistoryEntry(
            record=record,
            lookup_count=previous.lookup_count + 1 if previous else 1,
            last_viewed=self._clock(),
            mastered=previous.mastered if previous else False,
        )
        self._entries.insert(0, entry)

        dropped = self._entries[self.capacity :]
        if dropped:
            del self._entries[self.capacity :]
            logger.debug("History full, evicted %s", ", ".join(e.term for e in dropped))
        return entry

    def add_to_review(self, record: WordRecord) -> None:
        """Put ``record`` at the front of the review queue."""
        self._review = [r for r in self._review if r.term != record.term]
        self._review.insert(0, record)
        del self._review[self.review_capacity :]

    def mark_learned(self, term: str) -> bool:
        """Remove ``term`` from the review queue and flag it mastered.

        Returns:
            True if the term was found in the review queue or history
        """
        in_review = any(r.term == term for r in self._review)
        self._review = [r for r in self._review if r.term != term]

        index = self._index(term)
        already_mastered = False
        if index is not None:
            entry = self._entries[index]
            already_mastered = entry.mastered
            self._entries[index] = replace(entry, mastered=True)

        if not in_review and index is None:
            return False
        if not already_mastered:
            self._mastered_words += 1
        return True

    def clear(self) -> None:
        """Remove all history entries."""
        self._entries.clear()

    def clear_review(self) -> None:
        self._review.clear()

    def restore(
        self,
        entries: Iterable[HistoryEntry],
        review_queue: Iterable[WordRecord] = (),
        mastered_words: int = 0,
    ) -> None:
        """Replace the contents with previously persisted state.

        Duplicates keep their first (most recent) occurrence and capacities
        are enforced.
        """
        self._entries = []
        for entry in entries:
            if entry.term not in self and len(self._entries) < self.capacity:
                self._entries.append(entry)

        self._review = []
        seen: set[str] = set()
        for record in review_queue:
            if record.term not in seen and len(self._review) < self.review_capacity:
                seen.add(record.term)
                self._review.append(record)

        self._mastered_words = max(0, mastered_words)

    def query(
        self,
        search: str = "",
        mastered: bool | None = None,
        difficulty: str | None = None,
        sort: str = "recent",
    ) -> list[HistoryEntry]:
        """Filter and sort history entries.

        Args:
            search: Case-insensitive substring of the term or definition
            mastered: Only entries with this mastered flag (None = all)
            difficulty: Only entries in this difficulty bucket (None = all)
            sort: "recent", "alphabetical" or "frequency"

        Raises:
            ValidationError: If ``sort`` is not a known order
        """
        if sort not in SORT_ORDERS:
            raise ValidationError(f"Unknown sort order '{sort}'")

        needle = search.strip().lower()
        results = [
            entry
            for entry in self._entries
            if (
                not needle
                or needle in entry.term.lower()
                or needle in entry.record.definition.lower()
            )
            and (mastered is None or entry.mastered == mastered)
            and (difficulty is None or entry.difficulty == difficulty)
        ]

        if sort == "alphabetical":
            results.sort(key=lambda e: e.term.lower())
        elif sort == "frequency":
            # Stable sort keeps recency order among equal counts
            results.sort(key=lambda e: e.lookup_count, reverse=True)
        return results

    def stats(self) -> LearningStats:
        """Compute learning analytics for the current history."""
        now = self._clock()
        views = [entry.last_viewed for entry in self._entries]

        days = {_day(ts) for ts in views}
        streak = 0
        day = _day(now)
        while day in days:
            streak += 1
            day -= timedelta(days=1)

        return LearningStats(
            total_words=len(self._entries),
            weekly_progress=sum(1 for ts in views if now - ts <= WEEK_SECONDS),
            current_streak=streak,
            mastered_words=self._mastered_words,
        )

    def _index(self, term: str) -> int | None:
        for i, entry in enumerate(self._entries):
            if entry.term == term:
                return i
        return None
