"""User settings and lookup options."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass, fields, replace
from typing import Any

from word_wizard.exceptions import ValidationError

COMPLEXITY_LEVELS = ("simple", "intermediate", "advanced")
LOOKUP_MODES = ("popup", "sidepanel")


def _option_name(name: str) -> str:
    """Accept both ``include-image`` and ``include_image`` spellings."""
    return name.replace("-", "_")


@dataclass(frozen=True)
class LookupOptions:
    """Every option a lookup recognises, with its default."""

    include_image: bool = False
    include_examples: bool = True
    include_word_family: bool = True
    complexity_level: str = "intermediate"
    save_to_note_service: bool = False
    save_to_flashcard_service: bool = False
    generate_synonyms: bool = False

    def __post_init__(self):
        if self.complexity_level not in COMPLEXITY_LEVELS:
            raise ValidationError(
                f"Invalid complexity level '{self.complexity_level}'. "
                f"Expected one of: {', '.join(COMPLEXITY_LEVELS)}"
            )

    def merged(self, overrides: Mapping[str, Any] | None = None) -> LookupOptions:
        """Return a copy with the explicitly given options applied.

        Options that are missing or None keep their current value.

        Raises:
            ValidationError: If an option name or value is not recognised
        """
        if not overrides:
            return self

        known = {f.name: f for f in fields(self)}
        changes: dict[str, Any] = {}
        for raw_name, value in overrides.items():
            name = _option_name(raw_name)
            if name not in known:
                raise ValidationError(f"Unknown lookup option: {raw_name}")
            if value is None:
                continue
            if name == "complexity_level":
                changes[name] = str(value)
            elif isinstance(value, bool):
                changes[name] = value
            else:
                raise ValidationError(f"Lookup option '{raw_name}' must be true or false")
        return replace(self, **changes)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class Settings:
    """User-facing settings persisted between sessions."""

    notion_enabled: bool = False
    notion_database_id: str = ""
    anki_enabled: bool = False
    anki_deck_name: str = ""
    auto_save_enabled: bool = True
    lookup_mode: str = "popup"
    complexity_level: str = "intermediate"
    show_image_generation: bool = False

    def __post_init__(self):
        if self.lookup_mode not in LOOKUP_MODES:
            raise ValidationError(f"Invalid lookup mode '{self.lookup_mode}'")
        if self.complexity_level not in COMPLEXITY_LEVELS:
            raise ValidationError(f"Invalid complexity level '{self.complexity_level}'")

    def default_lookup_options(self) -> LookupOptions:
        """Session defaults for lookups derived from these settings."""
        return LookupOptions(
            include_image=self.show_image_generation,
            complexity_level=self.complexity_level,
            save_to_note_service=self.notion_enabled and self.auto_save_enabled,
            save_to_flashcard_service=self.anki_enabled and self.auto_save_enabled,
        )

    def updated(self, changes: Mapping[str, Any]) -> Settings:
        """Return a copy with ``changes`` applied.

        Raises:
            ValidationError: If a setting name or value is not recognised
        """
        known = {f.name: f for f in fields(self)}
        applied: dict[str, Any] = {}
        for raw_name, value in changes.items():
            name = _option_name(raw_name)
            if name not in known:
                raise ValidationError(f"Unknown setting: {raw_name}")
            default = getattr(Settings, name)
            if not isinstance(value, type(default)):
                raise ValidationError(f"Setting '{raw_name}' has the wrong type")
            applied[name] = value
        return replace(self, **applied)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Settings:
        """Build settings from stored data, ignoring unknown keys.

        Raises:
            ValidationError: If a known setting has an invalid value
        """
        known = {f.name for f in fields(cls)}
        return cls().updated({k: v for k, v in data.items() if _option_name(k) in known})
