"""Data models for analysed words."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

PROVENANCE_PROVIDER = "provider"
PROVENANCE_USER_INPUT = "user-input"
PROVENANCE_ERROR = "error"
PROVENANCES = (PROVENANCE_PROVIDER, PROVENANCE_USER_INPUT, PROVENANCE_ERROR)

MAX_SURFACED_EXAMPLES = 3


def _str_list(value: Any) -> list[str]:
    if not isinstance(value, (list, tuple)):
        return []
    return [str(item) for item in value if item]


@dataclass(frozen=True)
class WordFamilyItem:
    """A related form of a word (noun, verb, adjective, ...)."""

    word: str
    type: str = ""
    definition: str = ""
    example: str = ""

    def to_dict(self) -> dict:
        return {
            "word": self.word,
            "type": self.type,
            "definition": self.definition,
            "example": self.example,
        }

    @classmethod
    def from_dict(cls, data: dict) -> WordFamilyItem:
        return cls(
            word=str(data.get("word", "")),
            type=str(data.get("type", "") or ""),
            definition=str(data.get("definition", "") or ""),
            example=str(data.get("example", "") or ""),
        )


@dataclass(frozen=True)
class WordRecord:
    """Enriched analysis result for a term.

    Records are immutable. A newer lookup of the same term produces a new
    record that supersedes the old one in history.
    """

    term: str
    definition: str
    phonetic: str = ""  # IPA transcription
    examples: tuple[str, ...] = ()
    synonyms: frozenset[str] = frozenset()
    antonyms: frozenset[str] = frozenset()
    word_family: tuple[WordFamilyItem, ...] = ()
    topic: str = ""
    domain: str = ""
    level: str = ""  # CEFR level, A1-C2
    image_url: str | None = None
    created_at: float = 0.0  # Epoch seconds
    provenance: str = PROVENANCE_PROVIDER
    context: str | None = None

    @property
    def surfaced_examples(self) -> tuple[str, ...]:
        """Examples shown to the learner (at most three)."""
        return self.examples[:MAX_SURFACED_EXAMPLES]

    def to_dict(self) -> dict:
        return {
            "term": self.term,
            "definition": self.definition,
            "phonetic": self.phonetic,
            "examples": list(self.examples),
            "synonyms": sorted(self.synonyms),
            "antonyms": sorted(self.antonyms),
            "word_family": [item.to_dict() for item in self.word_family],
            "topic": self.topic,
            "domain": self.domain,
            "level": self.level,
            "image_url": self.image_url,
            "created_at": self.created_at,
            "provenance": self.provenance,
            "context": self.context,
        }

    @classmethod
    def from_dict(cls, data: dict) -> WordRecord:
        """Build a record from a stored or received dictionary.

        Raises:
            ValueError: If the term is missing or blank
        """
        term = str(data.get("term") or "").strip()
        if not term:
            raise ValueError("Word record has no term")

        family = data.get("word_family")
        provenance = data.get("provenance", PROVENANCE_USER_INPUT)
        return cls(
            term=term,
            definition=str(data.get("definition") or ""),
            phonetic=str(data.get("phonetic") or ""),
            examples=tuple(_str_list(data.get("examples"))),
            synonyms=frozenset(_str_list(data.get("synonyms"))),
            antonyms=frozenset(_str_list(data.get("antonyms"))),
            word_family=tuple(
                WordFamilyItem.from_dict(item)
                for item in (family if isinstance(family, list) else [])
                if isinstance(item, dict) and item.get("word")
            ),
            topic=str(data.get("topic") or ""),
            domain=str(data.get("domain") or ""),
            level=str(data.get("level") or ""),
            image_url=data.get("image_url") or None,
            created_at=float(data.get("created_at") or 0.0),
            provenance=provenance if provenance in PROVENANCES else PROVENANCE_USER_INPUT,
            context=data.get("context") or None,
        )

    def __str__(self) -> str:
        return f"{self.term}: {self.definition[:50] if self.definition else 'No definition'}"
