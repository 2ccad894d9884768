"""Orchestrator for single-term lookups."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from typing import Any

from word_wizard.config import WordWizardConfig
from word_wizard.exceptions import (
    ProviderError,
    QuotaExceededError,
    ValidationError,
    WordWizardException,
)
from word_wizard.interfaces import AnalysisProvider
from word_wizard.models import AnalysisRequest, LookupOptions, WordRecord
from word_wizard.services import (
    HistoryStore,
    IntegrationTrigger,
    LookupCache,
    PersistenceSync,
    QuotaGuard,
)
from word_wizard.utils import count_tokens, normalize_term

logger = logging.getLogger(__name__)


class RequestOrchestrator:
    """Run the lookup lifecycle for one term at a time.

    Each lookup is tagged with an increasing sequence number. When lookups
    overlap, only the most recently started one is committed (history,
    quota, publication, saves); older results are still returned to their
    own callers but otherwise dropped. Identical requests that are in
    flight at the same time share a single provider call. While any lookup
    is in flight one quota unit stays reserved for it, since only the newest
    of the overlapping lookups can commit.
    """

    def __init__(
        self,
        config: WordWizardConfig,
        provider: AnalysisProvider,
        quota_guard: QuotaGuard,
        history: HistoryStore,
        persistence: PersistenceSync | None = None,
        integrations: IntegrationTrigger | None = None,
        default_options: Callable[[], LookupOptions] | None = None,
        cache: LookupCache | None = None,
    ):
        """Initialize the request orchestrator.

        Args:
            config: Configuration
            provider: Analysis provider
            quota_guard: Quota admission control
            history: Learning history
            persistence: Optional persistence sync, notified after commits
            integrations: Optional save-target dispatcher
            default_options: Returns the session's default lookup options
            cache: Optional cache of recent records, consulted after admission
        """
        self.config = config
        self.provider = provider
        self.quota_guard = quota_guard
        self.history = history
        self.persistence = persistence
        self.integrations = integrations
        self.default_options = default_options or LookupOptions
        self.cache = cache

        self.current_lookup: WordRecord | None = None
        self._sequence = 0
        self._active_lookups = 0
        self._in_flight: dict[AnalysisRequest, asyncio.Future] = {}
        self._observers: list[Callable[[WordRecord], None]] = []

    @property
    def latest_sequence(self) -> int:
        """Sequence number of the most recently started lookup."""
        return self._sequence

    @property
    def in_flight(self) -> int:
        """Number of distinct provider calls currently outstanding."""
        return len(self._in_flight)

    def subscribe(self, observer: Callable[[WordRecord], None]) -> None:
        """Register a callback invoked with every published lookup."""
        self._observers.append(observer)

    def validate_term(self, term: str, max_tokens: int | None = None) -> str:
        """Normalize ``term`` and check its length and token count.

        Args:
            term: Raw term
            max_tokens: Token limit (defaults to the single-lookup limit)

        Returns:
            The normalized term

        Raises:
            ValidationError: If the term is empty, too long or has too many words
        """
        if not isinstance(term, str):
            raise ValidationError("Term must be a string")

        normalized = normalize_term(term)
        if not normalized:
            raise ValidationError("Term must not be empty")
        if len(normalized) > self.config.max_term_length:
            raise ValidationError(
                f"Term is too long ({len(normalized)} characters, "
                f"maximum {self.config.max_term_length})"
            )

        limit = self.config.max_term_tokens if max_tokens is None else max_tokens
        if count_tokens(normalized) > limit:
            raise ValidationError(f"Term has more than {limit} words")
        return normalized

    def check_quota(self, units: int = 1, held: int = 0) -> None:
        """Raise QuotaExceededError unless ``units`` lookups may start.

        ``held`` is the part of the current reservations owned by the caller.
        """
        if not self.quota_guard.can_consume(units, held=held):
            state = self.quota_guard.state
            raise QuotaExceededError(state.plan, state.remaining, state.limit)

    def merge_options(self, options: Mapping[str, Any] | LookupOptions | None = None) -> LookupOptions:
        """Apply caller options over the session defaults.

        Raises:
            ValidationError: If an option is unknown or invalid
        """
        if isinstance(options, LookupOptions):
            return options
        return self.default_options().merged(options)

    async def lookup(
        self,
        term: str,
        context: str | None = None,
        options: Mapping[str, Any] | LookupOptions | None = None,
    ) -> WordRecord:
        """Look up a single term.

        A record served from the lookup cache is committed like any other
        but is not charged again.

        Args:
            term: Word or phrase (1-5 words, at most 100 characters)
            context: Optional sentence the term was found in
            options: Lookup options overriding the session defaults

        Returns:
            The analysed WordRecord

        Raises:
            ValidationError: If the term or options are invalid
            QuotaExceededError: If the quota is used up
            ProviderError: If the analysis provider fails
        """
        normalized = self.validate_term(term)
        self.check_quota(1, held=1 if self._active_lookups else 0)
        merged = self.merge_options(options)

        self._sequence += 1
        sequence = self._sequence
        request = AnalysisRequest(
            term=normalized,
            context=normalize_term(context or "") or None,
            options=merged,
        )

        cached = self.cache.get(request) if self.cache is not None else None
        if cached is not None:
            # Already paid for when it was first committed
            logger.debug("Serving '%s' from the lookup cache", normalized)
            self._commit_latest(cached, merged, units=0)
            return cached

        if not self._active_lookups:
            self.quota_guard.reserve(1)
        self._active_lookups += 1
        try:
            record = await self.analyze(request)
        finally:
            self._active_lookups -= 1
            if not self._active_lookups:
                self.quota_guard.release(1)

        if sequence != self._sequence:
            logger.debug(
                "Discarding superseded lookup #%d for '%s' (latest is #%d)",
                sequence,
                normalized,
                self._sequence,
            )
            return record

        if self.cache is not None:
            self.cache.put(request, record)
        self._commit_latest(record, merged, units=1)
        return record

    def _commit_latest(self, record: WordRecord, options: LookupOptions, units: int) -> None:
        self.commit(record, units=units)
        self.publish(record)
        if self.integrations is not None:
            self.integrations.dispatch_in_background(
                record,
                save_to_note=options.save_to_note_service,
                save_to_flashcard=options.save_to_flashcard_service,
            )

    async def analyze(self, request: AnalysisRequest) -> WordRecord:
        """Call the provider, sharing the call with identical in-flight requests.

        Nothing is committed here.

        Raises:
            ProviderError: If the provider fails
        """
        future = self._in_flight.get(request)
        if future is None:
            future = asyncio.ensure_future(self._call_provider(request))
            self._in_flight[request] = future
            future.add_done_callback(lambda f: self._forget(request, f))
        else:
            logger.debug("Joining in-flight lookup for '%s'", request.term)
        return await asyncio.shield(future)

    def commit(self, record: WordRecord, units: int = 1) -> None:
        """Record a successful lookup: history first, then quota.

        Both updates happen synchronously so no other lookup can observe
        one without the other.
        """
        self.history.add(record)
        self.quota_guard.consume(units)
        if self.persistence is not None:
            self.persistence.schedule_flush()

    def publish(self, record: WordRecord) -> None:
        self.current_lookup = record
        for observer in self._observers:
            observer(record)

    async def _call_provider(self, request: AnalysisRequest) -> WordRecord:
        try:
            return await self.provider.analyze(request)
        except WordWizardException:
            raise
        except Exception as e:
            raise ProviderError(f"Word lookup failed: {e}") from e

    def _forget(self, request: AnalysisRequest, future: asyncio.Future) -> None:
        if self._in_flight.get(request) is future:
            del self._in_flight[request]
        if not future.cancelled():
            # Mark the exception retrieved even when every waiter has gone away
            future.exception()
