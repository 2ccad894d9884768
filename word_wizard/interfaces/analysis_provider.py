"""Protocol for word analysis providers."""

from typing import Protocol

from word_wizard.models import AnalysisRequest, WordRecord


class AnalysisProvider(Protocol):
    """Interface for a backend that turns a term into a word record.

    The provider owns its own timeout and retry policy. The engine only
    sees a resolved record or an error.
    """

    @property
    def name(self) -> str:
        """Human-readable name for this provider (e.g., 'Word Wizard Proxy')."""
        ...

    async def analyze(self, request: AnalysisRequest) -> WordRecord:
        """Analyse a single term.

        Args:
            request: Term, optional context and merged lookup options

        Returns:
            The analysed WordRecord

        Raises:
            NetworkError: If the provider cannot be reached
            ProviderError: If the provider fails or returns an unusable answer
        """
        ...
