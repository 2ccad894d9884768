"""Data model for the persisted subset of engine state."""

from dataclasses import dataclass, field

from .history import HistoryEntry
from .settings import Settings
from .word import WordRecord

HISTORY_KEY = "history"
REVIEW_QUEUE_KEY = "review_queue"
SETTINGS_KEY = "settings"
STATS_KEY = "stats"


@dataclass(frozen=True)
class PersistedSnapshot:
    """State written to durable storage.

    Quota is deliberately absent: it is re-derived from the subscription
    source on every start.
    """

    history: tuple[HistoryEntry, ...] = ()
    review_queue: tuple[WordRecord, ...] = ()
    settings: Settings = field(default_factory=Settings)
    mastered_words: int = 0

    def to_storage(self) -> dict:
        """Storage key to JSON-compatible value."""
        return {
            HISTORY_KEY: [entry.to_dict() for entry in self.history],
            REVIEW_QUEUE_KEY: [record.to_dict() for record in self.review_queue],
            SETTINGS_KEY: self.settings.to_dict(),
            STATS_KEY: {"mastered_words": self.mastered_words},
        }
