"""Abstract interface for text completion backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
import logging

from ...config import LoggingConfig
from ...utils.logging import log_event, redact_text, truncate_text


class CompletionProvider(ABC):
    """Provider interface for a single two-role completion."""

    name: str = "base"

    @abstractmethod
    def complete(self, system_prompt: str, user_prompt: str) -> str:
        """Return the raw completion text.

        Raises:
            ProviderError: On transport failure, non-2xx status or a payload
                without usable text.
        """
        raise NotImplementedError


def log_llm_response(
    llm_logger: logging.Logger | None,
    log_cfg: LoggingConfig,
    *,
    provider: str,
    model: str,
    status: str,
    content: str,
    prompt: str,
) -> None:
    """Write one provider exchange to the LLM log, honoring detail and redaction settings."""
    if llm_logger is None:
        return
    redaction = log_cfg.llm_log_redaction
    payload = {
        "event": "llm_update_response",
        "status": status,
        "provider": provider,
        "model": model,
    }
    if log_cfg.llm_log_detail == "prompt_response":
        payload["raw_prompt"] = truncate_text(redact_text(prompt, redaction))
    payload["raw_response"] = truncate_text(redact_text(content, redaction))
    log_event(llm_logger, "LLM response", **payload)
