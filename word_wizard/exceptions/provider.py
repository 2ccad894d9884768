"""Analysis provider exceptions."""

from .base import WordWizardException


class ProviderError(WordWizardException):
    """Raised when the analysis provider fails to produce a record."""

    kind = "provider"

    def __init__(self, message: str, retryable: bool = False):
        super().__init__(message)
        self.retryable = retryable


class NetworkError(ProviderError):
    """Raised when the analysis provider cannot be reached."""

    kind = "network"

    def __init__(self, message: str):
        super().__init__(message, retryable=True)
