"""Term normalisation utilities."""

import re

_BATCH_SEPARATORS = re.compile(r"[,\s]+")
_TAG_INVALID = re.compile(r"[^a-zA-Z0-9\-_]")


def normalize_term(text: str) -> str:
    """Trim a term and collapse internal whitespace to single spaces.

    Args:
        text: Raw term as typed or selected by the user

    Returns:
        Normalized term (may be empty)
    """
    return " ".join(str(text).split())


def count_tokens(term: str) -> int:
    """Count whitespace-separated tokens in a term."""
    return len(term.split())


def split_batch_terms(raw: str | list[str], max_terms: int) -> list[str]:
    """Split batch input into individual terms.

    Accepts a single string or a list of strings. Terms are separated by
    commas, newlines or any whitespace; empty pieces are dropped and the
    list is capped at ``max_terms``.

    Args:
        raw: Batch input
        max_terms: Maximum number of terms kept

    Returns:
        Ordered list of terms
    """
    chunks = [raw] if isinstance(raw, str) else [str(chunk) for chunk in raw]
    terms: list[str] = []
    for chunk in chunks:
        terms.extend(piece for piece in _BATCH_SEPARATORS.split(chunk) if piece)
    return terms[:max_terms]


def slugify_tag(text: str) -> str:
    """Turn a topic or label into an Anki-safe tag."""
    return _TAG_INVALID.sub("", re.sub(r"\s+", "-", text.strip().lower()))
