"""Tests for ContentGenerator prompt building and output normalization."""

from __future__ import annotations

import pytest

from live_page.core.errors import GenerationError, ProviderError
from live_page.core.types import GenerationContext
from live_page.generator import normalize_fragment


def test_generate_builds_two_role_prompt_with_brand(make_generator):
    generator, provider = make_generator("<p>Fresh news</p>")

    generator.generate(GenerationContext(brand="Acme Labs"))

    assert len(provider.calls) == 1
    system_prompt, user_prompt = provider.calls[0]
    assert "professional tech journalist writing for Acme Labs" in system_prompt
    assert "2-3 paragraph" in user_prompt
    assert "no markdown" in user_prompt
    assert "Acme Labs" in user_prompt


def test_generate_wraps_text_and_timestamp(make_generator, fixed_now):
    generator, _ = make_generator("  <p>Fresh news</p>\n")

    entry = generator.generate(GenerationContext(brand="Acme Labs"))

    assert entry.body == "<p>Fresh news</p>"
    assert entry.created_at == fixed_now


def test_provider_error_becomes_generation_error(make_generator):
    generator, provider = make_generator(ProviderError("quota exceeded"))

    with pytest.raises(GenerationError, match="quota exceeded") as excinfo:
        generator.generate(GenerationContext(brand="Acme Labs"))
    assert isinstance(excinfo.value.__cause__, ProviderError)
    assert len(provider.calls) == 1


@pytest.mark.parametrize("raw", ["", "   \n  ", "```html\n```", "<script>alert(1)</script>"])
def test_empty_output_is_rejected(make_generator, raw):
    generator, _ = make_generator(raw)

    with pytest.raises(GenerationError, match="empty"):
        generator.generate(GenerationContext(brand="Acme Labs"))


def test_generator_does_not_retry(make_generator):
    generator, provider = make_generator(ProviderError("down"), "<p>later</p>")

    with pytest.raises(GenerationError):
        generator.generate(GenerationContext(brand="Acme Labs"))
    assert len(provider.calls) == 1


def test_normalize_strips_code_fence():
    raw = "```html\n<p>One</p>\n<p>Two</p>\n```"
    assert normalize_fragment(raw) == "<p>One</p>\n<p>Two</p>"


def test_normalize_drops_script_blocks():
    raw = "<p>Safe</p><script type=\"text/javascript\">steal()</script>"
    assert normalize_fragment(raw) == "<p>Safe</p>"


def test_normalize_wraps_plain_text_paragraphs():
    raw = "Hello World\n\nSecond & last"
    assert normalize_fragment(raw) == "<p>Hello World</p>\n<p>Second &amp; last</p>"
