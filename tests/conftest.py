"""Shared fixtures: a scripted provider and a store rooted in tmp_path."""

from __future__ import annotations

from datetime import datetime, timezone
import logging
from pathlib import Path

import pytest

from live_page.core.errors import ProviderError
from live_page.generator import ContentGenerator
from live_page.llm.providers.base import CompletionProvider
from live_page.store import ContentStore

FIXED_NOW = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)


class ScriptedProvider(CompletionProvider):
    """Provider stub returning queued responses; exceptions in the queue are raised."""

    name = "scripted"

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls: list[tuple[str, str]] = []

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        self.calls.append((system_prompt, user_prompt))
        if not self.responses:
            raise ProviderError("no scripted response left")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def logger() -> logging.Logger:
    log = logging.getLogger("tests.live_page")
    log.setLevel(logging.DEBUG)
    log.propagate = True
    return log


@pytest.fixture
def store(tmp_path: Path, logger: logging.Logger) -> ContentStore:
    return ContentStore(tmp_path / "content" / "latest.html", logger=logger)


@pytest.fixture
def make_generator(logger: logging.Logger):
    def _make(*responses) -> tuple[ContentGenerator, ScriptedProvider]:
        provider = ScriptedProvider(*responses)
        return ContentGenerator(provider, clock=lambda: FIXED_NOW, logger=logger), provider

    return _make


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def scripted_provider():
    return ScriptedProvider
