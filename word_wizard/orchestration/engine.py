"""The Word Wizard engine: one explicitly constructed owner of all state."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from word_wizard.config import WordWizardConfig
from word_wizard.exceptions import StateNotLoadedError, ValidationError
from word_wizard.interfaces import (
    AnalysisProvider,
    KeyValueStore,
    ProgressCallback,
    SaveTarget,
    Scheduler,
)
from word_wizard.models import (
    FLASHCARD_SERVICE,
    NOTE_SERVICE,
    PLANS,
    UNLIMITED,
    BatchResult,
    LookupOptions,
    PersistedSnapshot,
    QuotaState,
    Settings,
    WordRecord,
)
from word_wizard.orchestration.batch_coordinator import BatchCoordinator
from word_wizard.orchestration.request_orchestrator import RequestOrchestrator
from word_wizard.services import (
    HistoryStore,
    IntegrationTrigger,
    LookupCache,
    PersistenceSync,
    QuotaGuard,
)

logger = logging.getLogger(__name__)


class WordWizardEngine:
    """Own the quota, history, settings and persistence of one session.

    Construct one engine per session and pass it to whatever needs it.
    Nothing that changes persisted state is accepted until ``start`` has
    loaded it; lookups and batches issued while loading wait for it.
    """

    def __init__(
        self,
        config: WordWizardConfig,
        provider: AnalysisProvider,
        store: KeyValueStore,
        note_target: SaveTarget | None = None,
        flashcard_target: SaveTarget | None = None,
        scheduler: Scheduler | None = None,
        progress_callback: ProgressCallback | None = None,
        quota: QuotaState | None = None,
        history: HistoryStore | None = None,
    ):
        """Initialize the engine and wire its components.

        Args:
            config: Configuration
            provider: Analysis provider
            store: Durable key-value store
            note_target: Optional note service (Notion)
            flashcard_target: Optional flashcard service (Anki)
            scheduler: Scheduler for debounced flushes (asyncio loop by default)
            progress_callback: Default progress reporting for batches
            quota: Starting quota (a fresh free plan by default)
            history: History store to use (built from config by default)
        """
        self.config = config
        self.settings = Settings()

        self.quota_guard = QuotaGuard(
            quota or self._plan_quota("free"), low_ratio=config.quota_low_ratio
        )
        self.history = history or HistoryStore(
            capacity=config.history_capacity,
            review_capacity=config.review_queue_capacity,
        )
        self.persistence = PersistenceSync(
            store,
            self.snapshot,
            scheduler=scheduler,
            debounce_seconds=config.flush_debounce_seconds,
        )
        self.integrations = IntegrationTrigger(
            note_target=note_target,
            flashcard_target=flashcard_target,
            target_config=self._target_config,
        )
        self.orchestrator = RequestOrchestrator(
            config,
            provider,
            self.quota_guard,
            self.history,
            persistence=self.persistence,
            integrations=self.integrations,
            default_options=self.default_options,
            cache=LookupCache(
                capacity=config.lookup_cache_capacity,
                ttl_seconds=config.lookup_cache_ttl_seconds,
            ),
        )
        self.batch = BatchCoordinator(config, self.orchestrator, progress_callback)
        self.started = False
        self._loading = False
        self._loaded = asyncio.Event()

    @property
    def current_lookup(self) -> WordRecord | None:
        return self.orchestrator.current_lookup

    @property
    def quota(self) -> QuotaState:
        return self.quota_guard.state

    async def start(self) -> PersistedSnapshot:
        """Load persisted state into the engine.

        Calling it again, or while a load is running, does not reload.
        """
        if self.started or self._loading:
            await self.wait_started()
            return self.snapshot()

        self._loading = True
        self._loaded.clear()
        try:
            snapshot = await self.persistence.load()
            self.history.restore(
                snapshot.history, snapshot.review_queue, snapshot.mastered_words
            )
            self.settings = snapshot.settings
            self.started = True
        finally:
            self._loading = False
            self._loaded.set()
        logger.info("Engine started with %d history entries", len(self.history))
        return snapshot

    async def wait_started(self) -> None:
        """Wait for a running ``start`` to finish.

        Raises:
            StateNotLoadedError: If the engine was not started or loading failed
        """
        if not self.started and self._loading:
            await self._loaded.wait()
        self._require_started()

    def _require_started(self) -> None:
        if not self.started:
            raise StateNotLoadedError("Engine has not loaded its state; call start() first")

    async def close(self) -> None:
        """Wait for outstanding saves and write any unsaved state."""
        await self.integrations.wait_idle()
        await self.persistence.close()

    def snapshot(self) -> PersistedSnapshot:
        """The subset of state that is persisted."""
        return PersistedSnapshot(
            history=self.history.entries,
            review_queue=self.history.review_queue,
            settings=self.settings,
            mastered_words=self.history.mastered_words,
        )

    def default_options(self) -> LookupOptions:
        return self.settings.default_lookup_options()

    async def lookup(
        self,
        term: str,
        context: str | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> WordRecord:
        """Look up a single term (see RequestOrchestrator.lookup)."""
        await self.wait_started()
        return await self.orchestrator.lookup(term, context=context, options=options)

    async def process_batch(
        self,
        terms: str | list[str],
        mode: str = "synonyms",
        options: Mapping[str, Any] | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> BatchResult:
        """Look up a batch of terms (see BatchCoordinator.process_batch)."""
        await self.wait_started()
        return await self.batch.process_batch(
            terms, mode=mode, options=options, progress_callback=progress_callback
        )

    def update_settings(self, **changes: Any) -> Settings:
        """Apply setting changes and persist them.

        Raises:
            ValidationError: If a setting is unknown or has an invalid value
        """
        self._require_started()
        self.settings = self.settings.updated(changes)
        self.persistence.schedule_flush()
        return self.settings

    def set_subscription(
        self, plan: str, remaining: int | None = None, limit: int | None = None
    ) -> QuotaState:
        """Re-derive the quota from the subscription source.

        Missing values fall back to the plan's configured limit.

        Raises:
            ValidationError: If the plan is unknown
        """
        state = self._plan_quota(plan, remaining=remaining, limit=limit)
        self.quota_guard.reset(state)
        return state

    def add_to_review(self, term: str) -> bool:
        """Queue a term from history for review.

        Returns:
            False if the term is not in history
        """
        self._require_started()
        entry = self.history.get(term)
        if entry is None:
            return False
        self.history.add_to_review(entry.record)
        self.persistence.schedule_flush()
        return True

    def mark_learned(self, term: str) -> bool:
        """Mark a term mastered (see HistoryStore.mark_learned)."""
        self._require_started()
        found = self.history.mark_learned(term)
        if found:
            self.persistence.schedule_flush()
        return found

    def clear_history(self) -> None:
        self._require_started()
        self.history.clear()
        self.history.clear_review()
        self.persistence.schedule_flush()

    def _plan_quota(
        self, plan: str, remaining: int | None = None, limit: int | None = None
    ) -> QuotaState:
        if plan not in PLANS:
            raise ValidationError(f"Unknown plan '{plan}'")
        if limit is None:
            limit = self.config.plan_limits.get(plan, UNLIMITED)
        if remaining is None:
            remaining = 0 if limit == UNLIMITED else limit
        return QuotaState(plan=plan, remaining=remaining, limit=limit)

    def _target_config(self, target_name: str) -> dict[str, Any]:
        if target_name == NOTE_SERVICE and self.settings.notion_database_id:
            return {"database_id": self.settings.notion_database_id}
        if target_name == FLASHCARD_SERVICE and self.settings.anki_deck_name:
            return {"deck_name": self.settings.anki_deck_name}
        return {}
