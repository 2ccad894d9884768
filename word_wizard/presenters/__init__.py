"""Progress callback implementations."""

from .logging_presenter import LoggingProgressCallback
from .null_presenter import NullProgressCallback

__all__ = ["LoggingProgressCallback", "NullProgressCallback"]
