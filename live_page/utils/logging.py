"""Logging for the server process and the optional LLM transcript log.

Everything hangs off the ``live_page`` logger. Structured fields travel as
``extra=`` attributes: the rich console shows only the message, the JSONL
file keeps the fields.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
import re
from typing import Any

from rich.logging import RichHandler

from ..config import LoggingConfig


LOGGER_NAME = "live_page"
LLM_LOGGER_NAME = f"{LOGGER_NAME}.llm"

_URL_RE = re.compile(r"https?://\S+")
_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

# Attributes every LogRecord carries; anything else came in through `extra=`.
_RECORD_ATTRS = frozenset(logging.LogRecord("", logging.INFO, "", 0, "", None, None).__dict__) | {
    "message",
    "asctime",
    "taskName",
}


def get_logger(suffix: str | None = None) -> logging.Logger:
    return logging.getLogger(f"{LOGGER_NAME}.{suffix}" if suffix else LOGGER_NAME)


def setup_logging(cfg: LoggingConfig, log_dir: Path | None) -> logging.Logger:
    """Configure the process logger from the ``logging`` config section.

    Handlers are replaced on every call so repeated CLI invocations in one
    process do not duplicate output.
    """
    level = _level_from_string(cfg.level)
    logger = _reset(logging.getLogger(LOGGER_NAME), level)

    if cfg.console:
        console = RichHandler(rich_tracebacks=True, show_time=True, show_level=True)
        console.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(console)

    if cfg.file and log_dir is not None:
        formatter = JsonlFormatter() if cfg.format == "jsonl" else logging.Formatter(_PLAIN_FORMAT)
        logger.addHandler(_file_handler(log_dir / cfg.filename, formatter))

    for handler in logger.handlers:
        handler.setLevel(level)
    return logger


def setup_llm_logger(cfg: LoggingConfig, log_dir: Path | None) -> logging.Logger | None:
    """Return the transcript logger, or None when it is switched off."""
    if not cfg.llm_log_enabled or log_dir is None:
        return None
    logger = _reset(logging.getLogger(LLM_LOGGER_NAME), logging.INFO)
    logger.addHandler(_file_handler(log_dir / cfg.llm_log_file, JsonlFormatter()))
    return logger


def log_event(logger: logging.Logger | None, message: str, level: int = logging.INFO, **fields: Any) -> None:
    if logger is not None:
        logger.log(level, message, extra=fields)


def redact_text(text: str, mode: str) -> str:
    """Apply ``logging.llm_log_redaction`` to a prompt or completion."""
    if mode == "redact_content":
        return ""
    if mode == "redact_urls":
        return _URL_RE.sub("[REDACTED_URL]", text)
    return text


def truncate_text(text: str, max_chars: int = 20000) -> str:
    if len(text) > max_chars:
        return f"{text[:max_chars]}...(truncated)"
    return text


class JsonlFormatter(logging.Formatter):
    """One JSON object per line: timestamp, level, logger, message, extras."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update((key, value) for key, value in record.__dict__.items() if key not in _RECORD_ATTRS)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True, default=str)


def _reset(logger: logging.Logger, level: int) -> logging.Logger:
    for handler in logger.handlers:
        handler.close()
    logger.handlers = []
    logger.setLevel(level)
    logger.propagate = False
    return logger


def _file_handler(path: Path, formatter: logging.Formatter) -> logging.FileHandler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(formatter)
    return handler


def _level_from_string(level: str) -> int:
    return getattr(logging, level.upper(), logging.INFO)
