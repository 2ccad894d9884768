"""Null progress callback for testing (no output)."""


class NullProgressCallback:
    """Null implementation of progress callback (testing)."""

    def on_start(self, total: int, description: str) -> None:
        """Called when a batch starts (no-op)."""
        pass

    def on_progress(self, current: int, item_description: str) -> None:
        """Called when a term succeeds (no-op)."""
        pass

    def on_complete(self) -> None:
        """Called when a batch completes (no-op)."""
        pass

    def on_error(self, item_description: str, error_message: str) -> None:
        """Called when a term fails (no-op)."""
        pass
