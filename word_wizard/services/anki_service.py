"""Service for saving word records to Anki via AnkiConnect."""

import html
import logging
from collections.abc import Mapping
from typing import Any

import requests

from word_wizard.config import WordWizardConfig
from word_wizard.exceptions import AnkiConnectionError, IntegrationError
from word_wizard.models import FLASHCARD_SERVICE, SaveResult, WordRecord
from word_wizard.utils import slugify_tag

logger = logging.getLogger(__name__)

FRONT_FIELD = "Front"
BACK_FIELD = "Back"


class AnkiService:
    """Save target that creates or updates Anki notes (stateless service)."""

    name = FLASHCARD_SERVICE

    def __init__(self, config: WordWizardConfig):
        """Initialize the Anki service.

        Args:
            config: Configuration for Anki integration
        """
        self.config = config

    def check_connection(self) -> bool:
        """Check if AnkiConnect is reachable.

        Returns:
            True if AnkiConnect answered the version request
        """
        try:
            self._invoke("version", timeout=5)
            return True
        except IntegrationError:
            return False

    def save_record(
        self, record: WordRecord, target_config: Mapping[str, Any] | None = None
    ) -> SaveResult:
        """Create a note for ``record`` or update the existing one.

        Args:
            record: Word record to save
            target_config: Optional overrides; ``deck_name`` picks the deck

        Returns:
            SaveResult with the note id and whether a duplicate was updated
        """
        deck_name = (target_config or {}).get("deck_name") or self.config.anki_deck_name
        fields = self.build_fields(record)
        tags = self.build_tags(record)

        try:
            existing = self.find_existing_note(record.term, deck_name)
            if existing is not None:
                self._invoke("updateNoteFields", note={"id": existing, "fields": fields})
                self._invoke("addTags", notes=[existing], tags=" ".join(tags))
                return SaveResult(
                    target=self.name,
                    success=True,
                    identifier=str(existing),
                    duplicate_detected=True,
                )

            self.ensure_deck(deck_name)
            note_id = self._invoke(
                "addNote",
                note={
                    "deckName": deck_name,
                    "modelName": self.config.anki_note_type,
                    "fields": fields,
                    "tags": tags,
                },
            )
            return SaveResult(target=self.name, success=True, identifier=str(note_id))

        except IntegrationError as e:
            logger.warning("Failed to save '%s' to Anki: %s", record.term, e)
            return SaveResult(target=self.name, success=False, error=str(e))

    def find_existing_note(self, term: str, deck_name: str) -> int | None:
        """Find a note whose front field holds ``term``.

        The front field stores the HTML-escaped term, so that is what is searched.

        Returns:
            The note id, or None if there is no such note

        Raises:
            IntegrationError: If AnkiConnect rejects the query
        """
        query = f'"{FRONT_FIELD}:{_search_escape(html.escape(term))}"'
        if self.config.anki_duplicate_scope == "deck":
            query = f'deck:"{_search_escape(deck_name)}" {query}'

        note_ids = self._invoke("findNotes", query=query) or []
        return note_ids[0] if note_ids else None

    def ensure_deck(self, deck_name: str) -> None:
        """Create ``deck_name`` if it doesn't exist (createDeck is idempotent)."""
        self._invoke("createDeck", deck=deck_name)

    def build_fields(self, record: WordRecord) -> dict[str, str]:
        """Build note fields: the term on the front, the analysis on the back."""
        parts = [
            f'<div class="definition"><strong>Definition:</strong><br>'
            f"{html.escape(record.definition)}</div>"
        ]
        if record.phonetic:
            parts.append(f'<div class="ipa">{html.escape(record.phonetic)}</div>')
        if record.surfaced_examples:
            examples = "<br>".join(f"• {html.escape(ex)}" for ex in record.surfaced_examples)
            parts.append(f'<div class="examples"><strong>Examples:</strong><br>{examples}</div>')
        if record.synonyms:
            synonyms = ", ".join(sorted(record.synonyms)[:5])
            parts.append(
                f'<div class="synonyms"><strong>Synonyms:</strong> {html.escape(synonyms)}</div>'
            )
        if record.word_family:
            family = "<br>".join(
                f"• <em>{html.escape(item.type)}</em>: {html.escape(item.word)}"
                + (f" - {html.escape(item.definition)}" if item.definition else "")
                for item in record.word_family
            )
            parts.append(
                f'<div class="word-family"><strong>Word Family:</strong><br>{family}</div>'
            )
        if record.topic:
            parts.append(f'<div class="topic"><strong>Topic:</strong> {html.escape(record.topic)}</div>')
        if record.level:
            parts.append(
                f'<div class="level"><strong>CEFR Level:</strong> {html.escape(record.level)}</div>'
            )
        if record.image_url:
            parts.append(f'<img src="{html.escape(record.image_url)}">')

        return {FRONT_FIELD: html.escape(record.term), BACK_FIELD: "".join(parts)}

    def build_tags(self, record: WordRecord) -> list[str]:
        """Configured tags plus topic, domain and level tags, deduplicated."""
        tags = list(self.config.anki_tags)
        for label in (record.topic, record.domain, record.level):
            if label:
                tags.append(label)

        seen: dict[str, None] = {}
        for tag in tags:
            slug = slugify_tag(tag)
            if slug:
                seen.setdefault(slug, None)
        return list(seen)

    def _invoke(self, action: str, timeout: float = 30, **params) -> Any:
        """Call an AnkiConnect action and return its result.

        Raises:
            AnkiConnectionError: If AnkiConnect cannot be reached
            IntegrationError: If AnkiConnect reports an error
        """
        try:
            response = requests.post(
                self.config.ankiconnect_url,
                json={"action": action, "version": 6, "params": params},
                timeout=timeout,
            )
            result = response.json()
        except requests.exceptions.ConnectionError as e:
            raise AnkiConnectionError("Cannot connect to AnkiConnect. Is Anki running?") from e
        except (requests.RequestException, ValueError) as e:
            raise IntegrationError(f"AnkiConnect request '{action}' failed: {e}") from e

        if result.get("error"):
            raise IntegrationError(f"AnkiConnect error during {action}: {result['error']}")
        return result.get("result")


def _search_escape(text: str) -> str:
    """Escape characters that are special inside a quoted Anki search term."""
    for char in ("\\", '"', "*", "_"):
        text = text.replace(char, "\\" + char)
    return text
