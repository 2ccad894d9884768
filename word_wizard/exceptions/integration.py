"""Note service and flashcard service exceptions."""

from .base import WordWizardException


class IntegrationError(WordWizardException):
    """Raised when a save target rejects a request."""

    kind = "integration"


class AnkiConnectionError(IntegrationError):
    """Raised when cannot connect to AnkiConnect."""

    pass


class NotionConnectionError(IntegrationError):
    """Raised when cannot connect to the Notion API."""

    pass
