"""Data models for learning history entries."""

from __future__ import annotations

from dataclasses import dataclass

from .word import WordRecord

DIFFICULTIES = ("easy", "medium", "hard")


def difficulty_for_level(level: str) -> str:
    """Map a CEFR level to a difficulty bucket."""
    level = (level or "").upper()
    if level in ("A1", "A2"):
        return "easy"
    if level in ("B1", "B2"):
        return "medium"
    return "hard"


@dataclass(frozen=True)
class HistoryEntry:
    """A learned word plus access metadata. Owned by the history store."""

    record: WordRecord
    lookup_count: int = 1
    last_viewed: float = 0.0  # Epoch seconds
    mastered: bool = False

    @property
    def term(self) -> str:
        return self.record.term

    @property
    def difficulty(self) -> str:
        return difficulty_for_level(self.record.level)

    def to_dict(self) -> dict:
        return {
            "record": self.record.to_dict(),
            "lookup_count": self.lookup_count,
            "last_viewed": self.last_viewed,
            "mastered": self.mastered,
        }

    @classmethod
    def from_dict(cls, data: dict) -> HistoryEntry:
        """Build an entry from its stored form.

        Raises:
            ValueError: If the entry or its record is malformed
        """
        record = data.get("record")
        if not isinstance(record, dict):
            raise ValueError("History entry has no record")
        return cls(
            record=WordRecord.from_dict(record),
            lookup_count=max(1, int(data.get("lookup_count", 1))),
            last_viewed=float(data.get("last_viewed") or 0.0),
            mastered=bool(data.get("mastered", False)),
        )


@dataclass(frozen=True)
class LearningStats:
    """Learning analytics derived from history."""

    total_words: int = 0
    weekly_progress: int = 0  # Words viewed in the last 7 days
    current_streak: int = 0  # Consecutive days with a lookup, ending today
    mastered_words: int = 0

    def to_dict(self) -> dict:
        return {
            "total_words": self.total_words,
            "weekly_progress": self.weekly_progress,
            "current_streak": self.current_streak,
            "mastered_words": self.mastered_words,
        }
