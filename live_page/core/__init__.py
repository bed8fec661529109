"""Core types and errors shared across the refresh pipeline."""

from .errors import (
    DocumentNotFound,
    GenerationError,
    LivePageError,
    ProviderError,
    StoreUnavailable,
)
from .types import Document, Entry, GenerationContext, RefreshState

__all__ = [
    "Document",
    "DocumentNotFound",
    "Entry",
    "GenerationContext",
    "GenerationError",
    "LivePageError",
    "ProviderError",
    "RefreshState",
    "StoreUnavailable",
]
