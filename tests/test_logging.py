"""Tests for logging setup and the JSONL formatter."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from live_page.config import LoggingConfig
from live_page.utils.logging import log_event, redact_text, setup_llm_logger, setup_logging, truncate_text


def _close(logger: logging.Logger) -> None:
    for handler in logger.handlers:
        handler.close()
    logger.handlers = []
    logger.propagate = True


def test_file_logging_writes_jsonl_with_extras(tmp_path: Path):
    cfg = LoggingConfig(console=False, file=True, format="jsonl", filename="run.jsonl")
    logger = setup_logging(cfg, tmp_path)
    try:
        log_event(logger, "Entry appended", event="entry_appended", bytes=42)
    finally:
        _close(logger)

    line = (tmp_path / "run.jsonl").read_text(encoding="utf-8").strip()
    payload = json.loads(line)
    assert payload["message"] == "Entry appended"
    assert payload["event"] == "entry_appended"
    assert payload["bytes"] == 42
    assert payload["level"] == "INFO"


def test_llm_logger_disabled_by_default(tmp_path: Path):
    assert setup_llm_logger(LoggingConfig(), tmp_path) is None


def test_log_event_ignores_missing_logger():
    log_event(None, "nothing happens", event="noop")


def test_redaction_modes():
    text = "see https://example.com/a for details"
    assert redact_text(text, "none") == text
    assert redact_text(text, "redact_content") == ""
    assert redact_text(text, "redact_urls") == "see [REDACTED_URL] for details"


def test_truncate_text_marks_cut():
    assert truncate_text("abcdef", max_chars=3) == "abc...(truncated)"
    assert truncate_text("abc", max_chars=3) == "abc"


def test_plain_file_format_and_repeated_setup_do_not_duplicate(tmp_path: Path):
    cfg = LoggingConfig(console=False, file=True, format="plain", filename="run.log")
    setup_logging(cfg, tmp_path)
    logger = setup_logging(cfg, tmp_path)
    try:
        assert len(logger.handlers) == 1
        log_event(logger, "Seed document created", event="store_initialized")
    finally:
        _close(logger)

    lines = (tmp_path / "run.log").read_text(encoding="utf-8").splitlines()
    assert len(lines) == 1
    assert "INFO live_page Seed document created" in lines[0]


def test_llm_logger_writes_transcript_when_enabled(tmp_path: Path):
    cfg = LoggingConfig(llm_log_enabled=True, llm_log_file="llm.jsonl")
    logger = setup_llm_logger(cfg, tmp_path)
    try:
        log_event(logger, "LLM response", provider="openai", raw_response="<p>hi</p>")
    finally:
        _close(logger)

    payload = json.loads((tmp_path / "llm.jsonl").read_text(encoding="utf-8"))
    assert payload["logger"] == "live_page.llm"
    assert payload["raw_response"] == "<p>hi</p>"


def test_jsonl_formatter_includes_exception_text(tmp_path: Path):
    cfg = LoggingConfig(console=False, file=True, format="jsonl", filename="err.jsonl")
    logger = setup_logging(cfg, tmp_path)
    try:
        try:
            raise RuntimeError("disk gone")
        except RuntimeError:
            logger.exception("Refresh failed", extra={"event": "refresh_failed"})
    finally:
        _close(logger)

    payload = json.loads((tmp_path / "err.jsonl").read_text(encoding="utf-8"))
    assert payload["event"] == "refresh_failed"
    assert "RuntimeError: disk gone" in payload["exception"]
    assert "exc_info" not in payload
