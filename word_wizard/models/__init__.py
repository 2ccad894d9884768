"""Data models for Word Wizard."""

from .batch import BatchItemResult, BatchJob, BatchResult, BatchStatus, BatchSummary
from .history import HistoryEntry, LearningStats, difficulty_for_level
from .integration import FLASHCARD_SERVICE, NOTE_SERVICE, DispatchReport, SaveResult
from .quota import PLANS, UNLIMITED, QuotaState
from .request import AnalysisRequest
from .settings import COMPLEXITY_LEVELS, LookupOptions, Settings
from .snapshot import PersistedSnapshot
from .word import (
    PROVENANCE_ERROR,
    PROVENANCE_PROVIDER,
    PROVENANCE_USER_INPUT,
    WordFamilyItem,
    WordRecord,
)

__all__ = [
    "WordRecord",
    "WordFamilyItem",
    "PROVENANCE_PROVIDER",
    "PROVENANCE_USER_INPUT",
    "PROVENANCE_ERROR",
    "AnalysisRequest",
    "QuotaState",
    "PLANS",
    "UNLIMITED",
    "HistoryEntry",
    "LearningStats",
    "difficulty_for_level",
    "LookupOptions",
    "Settings",
    "COMPLEXITY_LEVELS",
    "BatchJob",
    "BatchItemResult",
    "BatchResult",
    "BatchStatus",
    "BatchSummary",
    "SaveResult",
    "DispatchReport",
    "NOTE_SERVICE",
    "FLASHCARD_SERVICE",
    "PersistedSnapshot",
]
