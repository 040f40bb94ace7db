"""Text-generation provider adapters."""

from .provider import ProviderRegistry, shared_registry
from .runner import LLMRequest, LLMRunner

__all__ = ["LLMRequest", "LLMRunner", "ProviderRegistry", "shared_registry"]
