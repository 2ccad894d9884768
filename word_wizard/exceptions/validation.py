"""Validation-related exceptions."""

from .base import WordWizardException


class ValidationError(WordWizardException):
    """Raised when input is malformed or out of range."""

    kind = "validation"
