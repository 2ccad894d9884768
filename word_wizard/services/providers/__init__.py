"""Analysis provider implementations."""

from .proxy_provider import ProxyAnalysisProvider

__all__ = ["ProxyAnalysisProvider"]
