"""
Live Page - a self-updating web page fed by an LLM.

This package keeps a single append-only HTML document on disk, asks an LLM
provider for a fresh update at startup and then on a fixed interval, and
serves the growing document over HTTP.

Main entry point is the CLI via `live-page serve` command.

Example:
    $ live-page serve --brand "AX AI Ventures" --port 4000
"""

__all__ = [
    "__version__",
    "ContentStore",
    "ContentGenerator",
    "RefreshScheduler",
    "AppContext",
    "Entry",
    "Document",
]
__version__ = "0.1.0"

from .context import AppContext
from .core.types import Document, Entry
from .generator import ContentGenerator
from .scheduler import RefreshScheduler
from .store import ContentStore
