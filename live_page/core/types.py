"""
Core data types for the live page.

This module defines the data structures passed between the store, the
generator and the scheduler:
- Entry: One generated update, rendered as an <article> block
- Document: The full persisted page body, append-only
- GenerationContext: Inputs the generator needs to build a prompt
- RefreshState: Transient scheduler bookkeeping, never persisted
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from html import escape

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M UTC"


@dataclass(frozen=True)
class Entry:
    """One generated update.

    Attributes:
        created_at: When the provider call completed (UTC)
        body: HTML fragment returned by the provider, already normalized
    """

    created_at: datetime
    body: str

    def render(self) -> str:
        """Return the markup appended to the document for this entry."""
        stamp = self.created_at.strftime(TIMESTAMP_FORMAT)
        return (
            "<article>\n"
            f"  <h3>Update — {stamp}</h3>\n"
            f"  {self.body}\n"
            "</article>"
        )


def seed_markup(brand: str) -> str:
    """Return the welcome article written when the document is first created."""
    return (
        "<article>\n"
        f"  <h2>Welcome to {escape(brand)}</h2>\n"
        "  <p>Your AI is preparing to generate your first live update. Stay tuned!</p>\n"
        "</article>"
    )


@dataclass(frozen=True)
class Document:
    """The full persisted content.

    Attributes:
        body: Raw markup exactly as stored on disk
    """

    body: str

    @property
    def byte_length(self) -> int:
        return len(self.body.encode("utf-8"))


@dataclass(frozen=True)
class GenerationContext:
    """Inputs for a single generation call.

    Attributes:
        brand: Brand name the persona writes for
    """

    brand: str


@dataclass
class RefreshState:
    """Process-wide refresh bookkeeping owned by the scheduler.

    Attributes:
        in_flight: True while a generate+append cycle is running
        last_attempt_at: Start time of the most recent cycle
        last_success_at: Completion time of the most recent successful cycle
        last_error: Message of the most recent failure, cleared on success
        attempts: Number of cycles that actually ran
        successes: Number of cycles that appended an entry
        failures: Number of cycles that ended in an error
        skipped: Number of triggers dropped because a cycle was in flight
    """

    in_flight: bool = False
    last_attempt_at: datetime | None = None
    last_success_at: datetime | None = None
    last_error: str | None = None
    attempts: int = 0
    successes: int = 0
    failures: int = 0
    skipped: int = 0

    def snapshot(self) -> "RefreshState":
        return replace(self)
