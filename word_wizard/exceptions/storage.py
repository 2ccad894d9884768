"""Durable storage exceptions."""

from .base import WordWizardException


class StorageError(WordWizardException):
    """Raised when the key-value store cannot be read or written."""

    kind = "storage"


class StateNotLoadedError(StorageError):
    """Raised when state is changed before persisted state has been loaded."""
