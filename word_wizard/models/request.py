"""Data model for analysis requests."""

from dataclasses import dataclass, field

from .settings import LookupOptions


@dataclass(frozen=True)
class AnalysisRequest:
    """What the analysis provider is asked to analyse.

    Hashable, so identical in-flight requests can be recognised.
    """

    term: str
    context: str | None = None
    options: LookupOptions = field(default_factory=LookupOptions)
