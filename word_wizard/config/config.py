"""Configuration classes for Word Wizard."""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class WordWizardConfig:
    """Immutable configuration for the lookup engine.

    All configuration is frozen (immutable) so a single instance can be
    shared by every component of the engine without defensive copies.
    """

    # Analysis provider settings
    proxy_api_url: str = "http://localhost:3001"
    analysis_model: str = "word-wizard-optimized"
    analysis_timeout: float = 30.0  # Seconds per provider request

    # Notion (note service) settings
    notion_api_url: str = "https://api.notion.com/v1"
    notion_api_version: str = "2022-06-28"
    notion_token: str = ""
    notion_database_id: str = ""

    # Anki (flashcard service) settings
    ankiconnect_url: str = "http://127.0.0.1:8765"
    anki_deck_name: str = "Word Wizard"
    anki_note_type: str = "Basic"
    anki_tags: list[str] = field(default_factory=lambda: ["word-wizard"])
    anki_duplicate_scope: str = "deck"  # "deck" or "all"

    # Durable storage settings
    storage_path: Path = field(
        default_factory=lambda: Path.home() / ".word_wizard" / "storage.json"
    )
    flush_debounce_seconds: float = 1.0

    # History settings
    history_capacity: int = 100
    review_queue_capacity: int = 50

    # Lookup cache settings
    lookup_cache_capacity: int = 200
    lookup_cache_ttl_seconds: float = 24 * 60 * 60  # 0 disables the cache

    # Term validation settings
    max_term_length: int = 100
    max_term_tokens: int = 5

    # Batch settings
    batch_min_terms: int = 5
    batch_max_terms: int = 25
    batch_concurrency: int = 5  # Provider calls in flight per batch

    # Quota settings
    quota_low_ratio: float = 0.2
    plan_limits: dict[str, int] = field(
        default_factory=lambda: {
            "free": 100,
            "pro": 1000,
            "premium": 5000,
            "enterprise": -1,  # -1 = unlimited
        }
    )
    batch_mode_multipliers: dict[str, int] = field(
        default_factory=lambda: {
            "synonyms": 1,
            "comprehensive": 2,
        }
    )

    def __post_init__(self):
        """Convert string paths to Path objects and check numeric bounds."""
        if isinstance(self.storage_path, str):
            object.__setattr__(self, "storage_path", Path(self.storage_path))

        if self.flush_debounce_seconds < 0:
            raise ValueError("flush_debounce_seconds must not be negative")
        if self.lookup_cache_capacity < 0 or self.lookup_cache_ttl_seconds < 0:
            raise ValueError("lookup cache capacity and ttl must not be negative")
        if self.batch_concurrency < 1:
            raise ValueError("batch_concurrency must be at least 1")
        if not 1 <= self.batch_min_terms <= self.batch_max_terms:
            raise ValueError("batch_min_terms must be between 1 and batch_max_terms")
        if any(units < 1 for units in self.batch_mode_multipliers.values()):
            raise ValueError("batch_mode_multipliers must be positive integers")
