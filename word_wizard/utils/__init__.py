"""Utility functions for Word Wizard."""

from .scheduling import AsyncioScheduler
from .text_utils import count_tokens, normalize_term, slugify_tag, split_batch_terms

__all__ = [
    "AsyncioScheduler",
    "count_tokens",
    "normalize_term",
    "slugify_tag",
    "split_batch_terms",
]
