"""Data models for batch lookups."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from uuid import uuid4

from word_wizard.exceptions import BatchItemError

from .word import WordRecord


class BatchStatus(Enum):
    """Status of a batch job."""

    PENDING = "pending"
    PARTIAL = "partial"
    COMPLETE = "complete"


@dataclass
class BatchItemResult:
    """Outcome of one term in a batch: a record or an error."""

    term: str
    record: WordRecord | None = None
    error: BatchItemError | None = None
    processing_time: float = 0.0  # Seconds
    settled: bool = False

    @property
    def success(self) -> bool:
        return self.record is not None

    def to_dict(self) -> dict:
        return {
            "term": self.term,
            "success": self.success,
            "record": self.record.to_dict() if self.record else None,
            "error": str(self.error.cause) if self.error else None,
            "error_kind": self.error.cause_kind if self.error else None,
            "processing_time": self.processing_time,
        }


@dataclass(frozen=True)
class BatchSummary:
    """Aggregate figures for a settled batch."""

    success_rate: float
    average_processing_time: float

    def to_dict(self) -> dict:
        return {
            "success_rate": self.success_rate,
            "average_processing_time": self.average_processing_time,
        }


@dataclass
class BatchJob:
    """A group of terms looked up together, one result slot per term."""

    terms: list[str]
    mode: str
    id: str = field(default_factory=lambda: str(uuid4()))
    items: list[BatchItemResult] = field(default_factory=list)
    status: BatchStatus = BatchStatus.PENDING

    def __post_init__(self):
        if not self.items:
            self.items = [BatchItemResult(term=term) for term in self.terms]

    @property
    def total_words(self) -> int:
        return len(self.items)

    @property
    def processed_words(self) -> int:
        return sum(1 for item in self.items if item.settled and item.success)

    @property
    def failed_words(self) -> int:
        return sum(1 for item in self.items if item.settled and not item.success)

    @property
    def settled_words(self) -> int:
        return sum(1 for item in self.items if item.settled)

    def settle(self, index: int, record: WordRecord | None, error: BatchItemError | None,
               processing_time: float) -> None:
        """Record the outcome of item ``index`` and update the job status."""
        item = self.items[index]
        item.record = record
        item.error = error
        item.processing_time = processing_time
        item.settled = True

        if self.settled_words == self.total_words:
            self.status = BatchStatus.COMPLETE
        else:
            self.status = BatchStatus.PARTIAL

    @property
    def summary(self) -> BatchSummary:
        total = self.total_words
        if total == 0:
            return BatchSummary(success_rate=0.0, average_processing_time=0.0)
        return BatchSummary(
            success_rate=self.processed_words / total,
            average_processing_time=sum(item.processing_time for item in self.items) / total,
        )

    def to_result(self) -> BatchResult:
        return BatchResult(
            job_id=self.id,
            mode=self.mode,
            total_words=self.total_words,
            processed_words=self.processed_words,
            failed_words=self.failed_words,
            results=list(self.items),
            summary=self.summary,
        )


@dataclass(frozen=True)
class BatchResult:
    """Caller-facing result of a settled batch job."""

    job_id: str
    mode: str
    total_words: int
    processed_words: int
    failed_words: int
    results: list[BatchItemResult]
    summary: BatchSummary

    @property
    def records(self) -> list[WordRecord]:
        """Successful records in input order."""
        return [item.record for item in self.results if item.record is not None]

    def to_dict(self) -> dict:
        return {
            "job_id": self.job_id,
            "mode": self.mode,
            "total_words": self.total_words,
            "processed_words": self.processed_words,
            "failed_words": self.failed_words,
            "results": [item.to_dict() for item in self.results],
            "summary": self.summary.to_dict(),
        }
