"""Default configuration values for Word Wizard."""

from .config import WordWizardConfig


def create_default_config(**overrides) -> WordWizardConfig:
    """Create a default configuration with optional overrides.

    Args:
        **overrides: Keyword arguments to override default values

    Returns:
        WordWizardConfig with defaults and overrides applied

    Example:
        config = create_default_config(
            flush_debounce_seconds=0.5,
            batch_concurrency=3
        )
    """
    return WordWizardConfig(**overrides)
