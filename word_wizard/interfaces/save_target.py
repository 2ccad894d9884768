"""Protocol for external save targets (note service, flashcard service)."""

from collections.abc import Mapping
from typing import Any, Protocol

from word_wizard.models import SaveResult, WordRecord


class SaveTarget(Protocol):
    """Interface for a service that stores individual word records.

    Methods are blocking; the engine runs them off the event loop.
    """

    @property
    def name(self) -> str:
        """Identifier of the target ('notion', 'anki')."""
        ...

    def save_record(
        self, record: WordRecord, target_config: Mapping[str, Any] | None = None
    ) -> SaveResult:
        """Create or update the remote copy of ``record``.

        Args:
            record: Record to save
            target_config: Target-specific overrides (database id, deck name)

        Returns:
            SaveResult; failures are reported here rather than raised
        """
        ...

    def check_connection(self) -> bool:
        """Return True if the target is reachable and configured."""
        ...
