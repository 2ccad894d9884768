"""Service for saving word records to a Notion database."""

import logging
from collections.abc import Mapping
from typing import Any

import requests

from word_wizard.config import WordWizardConfig
from word_wizard.exceptions import IntegrationError, NotionConnectionError
from word_wizard.models import NOTE_SERVICE, SaveResult, WordRecord

logger = logging.getLogger(__name__)

TITLE_PROPERTY = "Word"
MAX_RICH_TEXT = 2000  # Notion's limit per rich text block
MAX_MULTI_SELECT = 10


def _rich_text(text: str) -> dict:
    return {"rich_text": [{"type": "text", "text": {"content": text[:MAX_RICH_TEXT]}}]}


class NotionService:
    """Save target that creates or updates pages in a Notion database."""

    name = NOTE_SERVICE

    def __init__(self, config: WordWizardConfig):
        """Initialize the Notion service.

        Args:
            config: Configuration with the Notion token and database id
        """
        self.config = config

    def check_connection(self) -> bool:
        """Check that the configured database can be retrieved."""
        if not self.config.notion_token or not self.config.notion_database_id:
            return False
        try:
            self._request("GET", f"/databases/{self.config.notion_database_id}")
            return True
        except IntegrationError:
            return False

    def save_record(
        self, record: WordRecord, target_config: Mapping[str, Any] | None = None
    ) -> SaveResult:
        """Create a page for ``record`` or update the page with the same title.

        Args:
            record: Word record to save
            target_config: Optional overrides; ``database_id`` picks the database

        Returns:
            SaveResult with the page id and whether a duplicate was updated
        """
        database_id = (target_config or {}).get("database_id") or self.config.notion_database_id
        if not self.config.notion_token or not database_id:
            return SaveResult(
                target=self.name, success=False, error="Notion is not configured"
            )

        properties = self.build_properties(record)
        try:
            existing = self.find_existing_page(record.term, database_id)
            if existing is not None:
                self._request("PATCH", f"/pages/{existing}", {"properties": properties})
                return SaveResult(
                    target=self.name,
                    success=True,
                    identifier=existing,
                    duplicate_detected=True,
                )

            page = self._request(
                "POST",
                "/pages",
                {"parent": {"database_id": database_id}, "properties": properties},
            )
            return SaveResult(target=self.name, success=True, identifier=page.get("id"))

        except IntegrationError as e:
            logger.warning("Failed to save '%s' to Notion: %s", record.term, e)
            return SaveResult(target=self.name, success=False, error=str(e))

    def find_existing_page(self, term: str, database_id: str) -> str | None:
        """Find the page whose title equals ``term``."""
        response = self._request(
            "POST",
            f"/databases/{database_id}/query",
            {
                "filter": {"property": TITLE_PROPERTY, "title": {"equals": term}},
                "page_size": 1,
            },
        )
        results = response.get("results") or []
        return results[0].get("id") if results else None

    def build_properties(self, record: WordRecord) -> dict:
        """Map a record onto the Word Wizard database schema."""
        properties: dict[str, Any] = {
            TITLE_PROPERTY: {"title": [{"type": "text", "text": {"content": record.term}}]},
            "Definition": _rich_text(record.definition),
        }
        if record.phonetic:
            properties["Phonetic"] = _rich_text(record.phonetic)
        if record.surfaced_examples:
            properties["Examples"] = _rich_text("\n".join(record.surfaced_examples))
        if record.synonyms:
            properties["Synonyms"] = {
                "multi_select": [
                    # Commas are not allowed in select option names
                    {"name": synonym.replace(",", " ")}
                    for synonym in sorted(record.synonyms)[:MAX_MULTI_SELECT]
                ]
            }
        if record.topic:
            properties["Topic"] = {"select": {"name": record.topic.replace(",", " ")}}
        if record.level:
            properties["Level"] = {"select": {"name": record.level}}
        return properties

    def _request(self, method: str, path: str, body: dict | None = None) -> dict:
        """Send a Notion API request and return the decoded JSON body.

        Raises:
            NotionConnectionError: If the API cannot be reached
            IntegrationError: If the API answers with an error
        """
        try:
            response = requests.request(
                method,
                f"{self.config.notion_api_url}{path}",
                json=body,
                headers={
                    "Authorization": f"Bearer {self.config.notion_token}",
                    "Notion-Version": self.config.notion_api_version,
                    "Content-Type": "application/json",
                },
                timeout=30,
            )
        except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
            raise NotionConnectionError("Cannot connect to the Notion API") from e
        except requests.RequestException as e:
            raise IntegrationError(f"Notion request failed: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = {}

        if response.status_code >= 400:
            message = data.get("message") if isinstance(data, dict) else None
            raise IntegrationError(
                f"Notion API error {response.status_code}: {message or response.reason}"
            )
        return data if isinstance(data, dict) else {}
