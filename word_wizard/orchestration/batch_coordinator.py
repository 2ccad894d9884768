"""Orchestrator for batch lookups."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Mapping
from typing import Any

from word_wizard.config import WordWizardConfig
from word_wizard.exceptions import BatchItemError, ValidationError, WordWizardException
from word_wizard.interfaces import ProgressCallback
from word_wizard.models import AnalysisRequest, BatchJob, BatchResult, LookupOptions, WordRecord
from word_wizard.orchestration.request_orchestrator import RequestOrchestrator
from word_wizard.utils import split_batch_terms

logger = logging.getLogger(__name__)

# Options each batch mode switches on. Saves are never triggered by a batch.
MODE_OPTIONS: dict[str, dict[str, bool]] = {
    "synonyms": {"generate_synonyms": True},
    "comprehensive": {"include_examples": True, "include_word_family": True},
}
BATCH_SAVE_OPTIONS = {"save_to_note_service": False, "save_to_flashcard_service": False}


class BatchCoordinator:
    """Run a batch of terms with per-term failure isolation.

    Every term goes through the same validation and quota admission as a
    single lookup. A failing term is recorded in its own result slot and
    never affects the others. Terms run concurrently up to
    ``config.batch_concurrency``.
    """

    def __init__(
        self,
        config: WordWizardConfig,
        orchestrator: RequestOrchestrator,
        progress_callback: ProgressCallback | None = None,
    ):
        """Initialize the batch coordinator.

        Args:
            config: Configuration
            orchestrator: Single-lookup orchestrator whose admission rules are reused
            progress_callback: Default progress reporting for batches
        """
        self.config = config
        self.orchestrator = orchestrator
        self.progress_callback = progress_callback
        self.current_job: BatchJob | None = None

    def prepare_terms(self, terms: str | list[str]) -> list[str]:
        """Split, trim and bound the batch input.

        Raises:
            ValidationError: If fewer than ``batch_min_terms`` terms remain
        """
        if not isinstance(terms, (str, list, tuple)):
            raise ValidationError("Batch terms must be a string or a list of strings")

        prepared = split_batch_terms(
            terms if isinstance(terms, str) else list(terms), self.config.batch_max_terms
        )
        if len(prepared) < self.config.batch_min_terms:
            raise ValidationError(
                f"Batch needs between {self.config.batch_min_terms} and "
                f"{self.config.batch_max_terms} terms, got {len(prepared)}"
            )
        return prepared

    def units_for_mode(self, mode: str) -> int:
        """Quota units consumed per successful term in ``mode``.

        Raises:
            ValidationError: If the mode is unknown
        """
        if not isinstance(mode, str):
            raise ValidationError("Batch mode must be a string")
        if mode not in MODE_OPTIONS or mode not in self.config.batch_mode_multipliers:
            raise ValidationError(f"Unknown batch mode '{mode}'")
        return self.config.batch_mode_multipliers[mode]

    def clear_job(self) -> None:
        """Forget the last batch job."""
        self.current_job = None

    async def process_batch(
        self,
        terms: str | list[str],
        mode: str = "synonyms",
        options: Mapping[str, Any] | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> BatchResult:
        """Look up every term in a batch.

        Args:
            terms: 5-25 terms, as a list or a comma/newline separated string
            mode: "synonyms" or "comprehensive"
            options: Lookup options overriding the session defaults
            progress_callback: Progress reporting for this batch

        Returns:
            BatchResult once every term has succeeded or failed

        Raises:
            ValidationError: If the batch itself is malformed
        """
        units = self.units_for_mode(mode)
        prepared = self.prepare_terms(terms)
        merged = (
            self.orchestrator.merge_options(options)
            .merged(MODE_OPTIONS[mode])
            .merged(BATCH_SAVE_OPTIONS)
        )
        progress = progress_callback or self.progress_callback

        job = BatchJob(terms=prepared, mode=mode)
        self.current_job = job
        if progress:
            progress.on_start(job.total_words, f"Processing {job.total_words} terms ({mode})")

        semaphore = asyncio.Semaphore(self.config.batch_concurrency)

        async def run_item(index: int, term: str) -> None:
            async with semaphore:
                started = time.monotonic()
                record = None
                error = None
                try:
                    record = await self._process_item(term, merged, units)
                except WordWizardException as e:
                    error = BatchItemError(term, e)
                except Exception as e:
                    logger.exception("Unexpected failure processing batch term '%s'", term)
                    error = BatchItemError(term, e)

                job.settle(index, record, error, time.monotonic() - started)
                if progress:
                    if error is None:
                        progress.on_progress(job.settled_words, term)
                    else:
                        progress.on_error(term, str(error.cause))

        await asyncio.gather(*(run_item(i, term) for i, term in enumerate(prepared)))

        if progress:
            progress.on_complete()
        result = job.to_result()
        logger.info(
            "Batch %s complete: %d/%d succeeded",
            job.id,
            result.processed_words,
            result.total_words,
        )
        return result

    async def _process_item(self, term: str, options: LookupOptions, units: int) -> WordRecord:
        normalized = self.orchestrator.validate_term(term)

        # Units of work still in flight, batch or single lookup, are reserved
        quota_guard = self.orchestrator.quota_guard
        self.orchestrator.check_quota(units)
        quota_guard.reserve(units)
        try:
            record = await self.orchestrator.analyze(
                AnalysisRequest(term=normalized, options=options)
            )
        finally:
            quota_guard.release(units)

        self.orchestrator.commit(record, units=units)
        return record
