"""Protocol for delayed callbacks."""

from collections.abc import Callable
from typing import Protocol


class ScheduledHandle(Protocol):
    """A pending delayed callback."""

    def cancel(self) -> None:
        """Prevent the callback from running if it has not run yet."""
        ...


class Scheduler(Protocol):
    """Runs callbacks after a delay. Tests inject a manual implementation."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledHandle:
        """Schedule ``callback`` to run once after ``delay`` seconds."""
        ...
