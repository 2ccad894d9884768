"""Progress callback that reports batch progress to the log."""

import logging

logger = logging.getLogger(__name__)


class LoggingProgressCallback:
    """Report batch progress through the standard logging module."""

    def __init__(self):
        """Initialize the progress callback."""
        self.total = 0
        self.current = 0
        self.failed = 0

    def on_start(self, total: int, description: str) -> None:
        self.total = total
        self.current = 0
        self.failed = 0
        logger.info("%s (%d terms)", description, total)

    def on_progress(self, current: int, item_description: str) -> None:
        self.current = current
        logger.debug("[%d/%d] %s", current, self.total, item_description)

    def on_complete(self) -> None:
        logger.info(
            "Batch complete: %d/%d succeeded", self.total - self.failed, self.total
        )

    def on_error(self, item_description: str, error_message: str) -> None:
        self.failed += 1
        logger.warning("Failed %s: %s", item_description, error_message)
