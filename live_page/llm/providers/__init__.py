"""LLM provider implementations for page updates."""

from .base import CompletionProvider
from .factory import available_providers, create_provider
from .gemini import GeminiProvider
from .openai_compatible import OpenAICompatibleProvider

__all__ = [
    "CompletionProvider",
    "GeminiProvider",
    "OpenAICompatibleProvider",
    "create_provider",
    "available_providers",
]
