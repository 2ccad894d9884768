"""Best-effort forwarding of records to the note and flashcard services."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from typing import Any

from word_wizard.exceptions import ValidationError
from word_wizard.interfaces import SaveTarget
from word_wizard.models import (
    FLASHCARD_SERVICE,
    NOTE_SERVICE,
    DispatchReport,
    SaveResult,
    WordRecord,
)

logger = logging.getLogger(__name__)


class IntegrationTrigger:
    """Dispatch saved records to the configured save targets.

    Saves never raise and never undo anything already recorded; every
    failure comes back as a SaveResult with ``success=False``.
    """

    def __init__(
        self,
        note_target: SaveTarget | None = None,
        flashcard_target: SaveTarget | None = None,
        target_config: Callable[[str], Mapping[str, Any]] | None = None,
    ):
        """Initialize the trigger.

        Args:
            note_target: Note service (Notion), if configured
            flashcard_target: Flashcard service (Anki), if configured
            target_config: Returns per-target overrides for a target name
        """
        self.targets: dict[str, SaveTarget | None] = {
            NOTE_SERVICE: note_target,
            FLASHCARD_SERVICE: flashcard_target,
        }
        self._target_config = target_config or (lambda name: {})
        self._background: set[asyncio.Task] = set()
        self.last_report: DispatchReport | None = None

    async def dispatch(
        self,
        record: WordRecord,
        save_to_note: bool = False,
        save_to_flashcard: bool = False,
    ) -> DispatchReport:
        """Save ``record`` to every enabled target concurrently."""
        names = []
        if save_to_note:
            names.append(NOTE_SERVICE)
        if save_to_flashcard:
            names.append(FLASHCARD_SERVICE)

        results = await asyncio.gather(*(self.save(name, record) for name in names))
        report = DispatchReport(term=record.term, results=dict(zip(names, results)))
        self.last_report = report
        if not report.success:
            logger.warning("Integration save for '%s' failed: %s", record.term, "; ".join(report.errors))
        return report

    def dispatch_in_background(
        self,
        record: WordRecord,
        save_to_note: bool = False,
        save_to_flashcard: bool = False,
    ) -> asyncio.Task | None:
        """Fire-and-forget ``dispatch``. Returns the task, or None if nothing is enabled."""
        if not (save_to_note or save_to_flashcard):
            return None
        task = asyncio.get_running_loop().create_task(
            self.dispatch(record, save_to_note=save_to_note, save_to_flashcard=save_to_flashcard)
        )
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return task

    async def wait_idle(self) -> None:
        """Wait for background dispatches started so far."""
        if self._background:
            await asyncio.gather(*list(self._background))

    async def save(self, target_name: str, record: WordRecord) -> SaveResult:
        """Save ``record`` to one target, reporting every failure as a result."""
        target = self._target(target_name)
        if target is None:
            return SaveResult(
                target=target_name, success=False, error=f"{target_name} is not configured"
            )

        try:
            return await asyncio.to_thread(
                target.save_record, record, dict(self._target_config(target_name))
            )
        except Exception as e:
            logger.warning("Unexpected error saving '%s' to %s: %s", record.term, target_name, e)
            return SaveResult(target=target_name, success=False, error=str(e))

    async def test_connection(self, target_name: str) -> bool:
        """Check whether a target is reachable."""
        target = self._target(target_name)
        if target is None:
            return False
        return await asyncio.to_thread(target.check_connection)

    def _target(self, target_name: str) -> SaveTarget | None:
        if target_name not in self.targets:
            raise ValidationError(f"Unknown save target: {target_name}")
        return self.targets[target_name]
