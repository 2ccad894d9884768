"""Business logic services for Word Wizard."""

from .anki_service import AnkiService
from .history_store import HistoryStore
from .integration_trigger import IntegrationTrigger
from .json_store import JsonFileStore, MemoryStore
from .lookup_cache import LookupCache
from .notion_service import NotionService
from .persistence_sync import PersistenceSync
from .providers import ProxyAnalysisProvider
from .quota_guard import QuotaGuard

__all__ = [
    "QuotaGuard",
    "HistoryStore",
    "PersistenceSync",
    "JsonFileStore",
    "MemoryStore",
    "LookupCache",
    "IntegrationTrigger",
    "AnkiService",
    "NotionService",
    "ProxyAnalysisProvider",
]
