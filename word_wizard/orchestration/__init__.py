"""Orchestration layer for coordinating services."""

from .batch_coordinator import BatchCoordinator
from .engine import WordWizardEngine
from .message_handler import MessageHandler
from .request_orchestrator import RequestOrchestrator

__all__ = ["RequestOrchestrator", "BatchCoordinator", "WordWizardEngine", "MessageHandler"]
