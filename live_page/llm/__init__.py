"""LLM prompts and provider backends."""

from .prompts import build_system_prompt, build_update_prompt
from .providers.base import CompletionProvider
from .providers.factory import available_providers, create_provider
from .providers.gemini import GeminiProvider
from .providers.openai_compatible import OpenAICompatibleProvider

__all__ = [
    "CompletionProvider",
    "GeminiProvider",
    "OpenAICompatibleProvider",
    "available_providers",
    "build_system_prompt",
    "build_update_prompt",
    "create_provider",
]
