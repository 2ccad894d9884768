"""Interface protocols for Word Wizard."""

from .analysis_provider import AnalysisProvider
from .key_value_store import KeyValueStore
from .progress import ProgressCallback
from .save_target import SaveTarget
from .scheduler import ScheduledHandle, Scheduler

__all__ = [
    "AnalysisProvider",
    "KeyValueStore",
    "ProgressCallback",
    "SaveTarget",
    "ScheduledHandle",
    "Scheduler",
]
