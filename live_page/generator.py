"""
Content generation for page updates.

The generator owns the prompt and the normalization of provider output into
an appendable Entry. It performs exactly one provider call per `generate`
and never retries; the scheduler's next tick is the retry.
"""

from __future__ import annotations

from datetime import datetime, timezone
from html import escape
import logging
import re
from typing import Callable

from .core.errors import GenerationError, ProviderError
from .core.types import Entry, GenerationContext
from .llm.prompts import build_system_prompt, build_update_prompt
from .llm.providers.base import CompletionProvider
from .utils.logging import get_logger, log_event

_FENCE_RE = re.compile(r"^```[a-zA-Z0-9_-]*\s*\n(?P<body>.*?)\n?```$", re.DOTALL)
_SCRIPT_RE = re.compile(r"<(script|style)\b[^>]*>.*?</\1\s*>", re.IGNORECASE | re.DOTALL)
_TAG_RE = re.compile(r"<[a-zA-Z][^>]*>")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ContentGenerator:
    """Turns one provider completion into one Entry.

    Attributes:
        provider: Backend implementing `complete(system, user)`
        clock: Callable returning the entry timestamp
    """

    def __init__(
        self,
        provider: CompletionProvider,
        clock: Callable[[], datetime] | None = None,
        logger: logging.Logger | None = None,
    ):
        self.provider = provider
        self.clock = clock or _utcnow
        self.logger = logger or get_logger("generator")

    def generate(self, context: GenerationContext) -> Entry:
        system_prompt = build_system_prompt(context.brand)
        user_prompt = build_update_prompt(context.brand)
        try:
            raw = self.provider.complete(system_prompt, user_prompt)
        except ProviderError as exc:
            raise GenerationError(f"Provider call failed: {exc}") from exc

        body = normalize_fragment(raw or "")
        if not body:
            raise GenerationError("Provider returned empty content")

        entry = Entry(created_at=self.clock(), body=body)
        log_event(
            self.logger,
            "Generated update",
            event="entry_generated",
            chars=len(body),
            created_at=entry.created_at.isoformat(),
        )
        return entry


def normalize_fragment(raw: str) -> str:
    """Clean provider output into an HTML fragment safe to append.

    Strips surrounding whitespace and Markdown code fences, drops script and
    style blocks, and wraps tagless plain text into escaped paragraphs.
    """
    text = raw.strip()
    fenced = _FENCE_RE.match(text)
    if fenced:
        text = fenced.group("body").strip()
    text = _SCRIPT_RE.sub("", text).strip()
    if not text:
        return ""
    if _TAG_RE.search(text):
        return text
    paragraphs = [p.strip() for p in re.split(r"\n\s*\n", text) if p.strip()]
    return "\n".join(f"<p>{escape(p)}</p>" for p in paragraphs)
