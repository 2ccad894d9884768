"""Custom exceptions for Word Wizard."""

from .base import WordWizardException
from .batch import BatchItemError
from .integration import AnkiConnectionError, IntegrationError, NotionConnectionError
from .provider import NetworkError, ProviderError
from .quota import QuotaExceededError
from .storage import StateNotLoadedError, StorageError
from .validation import ValidationError

__all__ = [
    "WordWizardException",
    "ValidationError",
    "QuotaExceededError",
    "ProviderError",
    "NetworkError",
    "StorageError",
    "StateNotLoadedError",
    "BatchItemError",
    "IntegrationError",
    "AnkiConnectionError",
    "NotionConnectionError",
]
