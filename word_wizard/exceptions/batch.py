"""Batch processing exceptions."""

from .base import WordWizardException


class BatchItemError(WordWizardException):
    """Failure of a single term inside a batch.

    Never raised out of a batch; it is captured in the item's result slot.
    """

    kind = "batch-item"

    def __init__(self, term: str, cause: Exception):
        self.term = term
        self.cause = cause
        super().__init__(f"{term}: {cause}")

    @property
    def cause_kind(self) -> str:
        """Kind of the underlying error (validation, quota, provider, ...)."""
        return getattr(self.cause, "kind", "error")
