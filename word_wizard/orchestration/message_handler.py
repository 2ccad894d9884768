"""Message envelope dispatch between the host integration layer and the engine."""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from word_wizard.exceptions import ValidationError, WordWizardException
from word_wizard.models import FLASHCARD_SERVICE, NOTE_SERVICE, WordRecord
from word_wizard.orchestration.engine import WordWizardEngine

logger = logging.getLogger(__name__)

Handler = Callable[[Mapping[str, Any]], Awaitable[Any]]


class MessageHandler:
    """Turn ``{type, payload}`` requests into engine calls.

    Responses are ``{success, data, timestamp}`` on success and
    ``{success, error, error_kind, timestamp}`` on a documented failure.
    ``data`` is always JSON-compatible.
    """

    def __init__(self, engine: WordWizardEngine, clock: Callable[[], float] = time.time):
        """Initialize the message handler.

        Args:
            engine: Engine that serves the requests
            clock: Source of response timestamps (epoch seconds)
        """
        self.engine = engine
        self._clock = clock
        self._handlers: dict[str, Handler] = {
            "lookup": self._lookup,
            "batch-process": self._batch_process,
            "save-to-note-service": self._save_to_note,
            "save-to-flashcard-service": self._save_to_flashcard,
            "fetch-history": self._fetch_history,
            "update-settings": self._update_settings,
            "test-note-connection": self._test_note_connection,
            "test-flashcard-connection": self._test_flashcard_connection,
            "mark-learned": self._mark_learned,
            "add-to-review": self._add_to_review,
            "clear-history": self._clear_history,
            "clear-batch": self._clear_batch,
            "get-quota": self._get_quota,
        }

    @property
    def message_types(self) -> list[str]:
        return sorted(self._handlers)

    async def handle(self, message: Mapping[str, Any]) -> dict:
        """Dispatch one request envelope and build its response."""
        if not isinstance(message, Mapping):
            return self._failure(ValidationError("Message must be an object"))

        message_type = message.get("type")
        handler = self._handlers.get(message_type) if isinstance(message_type, str) else None
        if handler is None:
            return self._failure(ValidationError(f"Unknown message type: {message_type}"))

        payload = message.get("payload") or {}
        if not isinstance(payload, Mapping):
            return self._failure(ValidationError("Message payload must be an object"))

        try:
            data = await handler(payload)
        except WordWizardException as e:
            logger.debug("Request '%s' failed: %s", message_type, e)
            return self._failure(e)

        return {"success": True, "data": data, "timestamp": self._timestamp()}

    async def _lookup(self, payload: Mapping[str, Any]) -> dict:
        record = await self.engine.lookup(
            _require(payload, "term"),
            context=payload.get("context"),
            options=_optional_mapping(payload, "options"),
        )
        return {"record": record.to_dict(), "quota": self.engine.quota.to_dict()}

    async def _batch_process(self, payload: Mapping[str, Any]) -> dict:
        result = await self.engine.process_batch(
            _require(payload, "terms"),
            mode=payload.get("mode", "synonyms"),
            options=_optional_mapping(payload, "options"),
        )
        return result.to_dict()

    async def _save_to_note(self, payload: Mapping[str, Any]) -> dict:
        return await self._save(NOTE_SERVICE, payload)

    async def _save_to_flashcard(self, payload: Mapping[str, Any]) -> dict:
        return await self._save(FLASHCARD_SERVICE, payload)

    async def _save(self, target_name: str, payload: Mapping[str, Any]) -> dict:
        record = self._resolve_record(payload)
        result = await self.engine.integrations.save(target_name, record)
        return result.to_dict()

    async def _fetch_history(self, payload: Mapping[str, Any]) -> dict:
        mastered = payload.get("mastered")
        if mastered is not None and not isinstance(mastered, bool):
            raise ValidationError("'mastered' must be true or false")

        entries = self.engine.history.query(
            search=str(payload.get("search") or ""),
            mastered=mastered,
            difficulty=payload.get("difficulty"),
            sort=payload.get("sort", "recent"),
        )
        limit = payload.get("limit")
        if limit is not None:
            if not isinstance(limit, int) or limit < 0:
                raise ValidationError("'limit' must be a non-negative integer")
            entries = entries[:limit]

        return {
            "entries": [entry.to_dict() for entry in entries],
            "review_queue": [record.to_dict() for record in self.engine.history.review_queue],
            "stats": self.engine.history.stats().to_dict(),
        }

    async def _update_settings(self, payload: Mapping[str, Any]) -> dict:
        changes = payload.get("settings", payload)
        if not isinstance(changes, Mapping):
            raise ValidationError("'settings' must be an object")
        return self.engine.update_settings(**changes).to_dict()

    async def _test_note_connection(self, payload: Mapping[str, Any]) -> dict:
        return {"connected": await self.engine.integrations.test_connection(NOTE_SERVICE)}

    async def _test_flashcard_connection(self, payload: Mapping[str, Any]) -> dict:
        return {"connected": await self.engine.integrations.test_connection(FLASHCARD_SERVICE)}

    async def _mark_learned(self, payload: Mapping[str, Any]) -> dict:
        term = _require(payload, "term")
        return {"term": term, "found": self.engine.mark_learned(term)}

    async def _add_to_review(self, payload: Mapping[str, Any]) -> dict:
        term = _require(payload, "term")
        if not self.engine.add_to_review(term):
            raise ValidationError(f"'{term}' is not in history")
        return {"term": term, "review_queue_size": len(self.engine.history.review_queue)}

    async def _clear_history(self, payload: Mapping[str, Any]) -> dict:
        self.engine.clear_history()
        return {"cleared": True}

    async def _clear_batch(self, payload: Mapping[str, Any]) -> dict:
        self.engine.batch.clear_job()
        return {"cleared": True}

    async def _get_quota(self, payload: Mapping[str, Any]) -> dict:
        data = self.engine.quota.to_dict()
        data["low"] = self.engine.quota_guard.is_low()
        return data

    def _resolve_record(self, payload: Mapping[str, Any]) -> WordRecord:
        """Use the record given in the payload, or look the term up in history."""
        raw = payload.get("record")
        if isinstance(raw, Mapping):
            try:
                return WordRecord.from_dict(dict(raw))
            except (TypeError, ValueError) as e:
                raise ValidationError(f"Invalid record: {e}") from e

        term = _require(payload, "term")
        entry = self.engine.history.get(term)
        if entry is None:
            raise ValidationError(f"'{term}' is not in history")
        return entry.record

    def _failure(self, error: WordWizardException) -> dict:
        return {
            "success": False,
            "error": str(error),
            "error_kind": error.kind,
            "timestamp": self._timestamp(),
        }

    def _timestamp(self) -> int:
        return int(self._clock() * 1000)


def _require(payload: Mapping[str, Any], key: str) -> Any:
    value = payload.get(key)
    if value is None:
        raise ValidationError(f"Missing '{key}' in payload")
    return value


def _optional_mapping(payload: Mapping[str, Any], key: str) -> Mapping[str, Any] | None:
    value = payload.get(key)
    if value is not None and not isinstance(value, Mapping):
        raise ValidationError(f"'{key}' must be an object")
    return value
