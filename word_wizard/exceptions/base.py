"""Base exception classes for Word Wizard."""


class WordWizardException(Exception):
    """Base exception for all Word Wizard errors.

    All custom exceptions in the word_wizard package should inherit
    from this base class for consistent error handling. ``kind`` is the
    stable identifier reported in message responses and batch results.
    """

    kind = "error"
