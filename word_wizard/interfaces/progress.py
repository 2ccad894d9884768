"""Progress callback protocol for batch lookups."""

from typing import Protocol


class ProgressCallback(Protocol):
    """Interface for reporting progress while a batch of terms settles.

    Items settle in completion order, not input order, so ``current``
    counts settled terms rather than positions in the batch.
    """

    def on_start(self, total: int, description: str) -> None:
        """Called when a batch starts.

        Args:
            total: Number of terms in the batch
            description: Description of the batch
        """
        ...

    def on_progress(self, current: int, item_description: str) -> None:
        """Called when a term succeeds.

        Args:
            current: Number of terms settled so far (1-based)
            item_description: The term that settled
        """
        ...

    def on_complete(self) -> None:
        """Called once every term has settled."""
        ...

    def on_error(self, item_description: str, error_message: str) -> None:
        """Called when a term fails.

        Args:
            item_description: The term that failed
            error_message: Human-readable error
        """
        ...
