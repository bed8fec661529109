"""Exception taxonomy for the content store and the generation path."""

from __future__ import annotations


class LivePageError(Exception):
    """Base class for all errors raised by live_page."""


class StoreUnavailable(LivePageError):
    """The persisted document could not be read or written."""


class DocumentNotFound(StoreUnavailable):
    """No document exists yet at the configured path."""


class ProviderError(LivePageError):
    """The LLM provider call failed or returned an unusable payload."""


class GenerationError(LivePageError):
    """A new entry could not be produced for this refresh cycle."""
