"""Configuration management for Word Wizard."""

from .config import WordWizardConfig
from .defaults import create_default_config

__all__ = ["WordWizardConfig", "create_default_config"]
