"""OpenAI-compatible chat completions provider."""

from __future__ import annotations

from typing import Any

import httpx

from ...config import LoggingConfig, ProviderConfig
from ...core.errors import ProviderError
from .base import CompletionProvider, log_llm_response

DEFAULT_BASE_URL = "https://api.openai.com/v1"


class OpenAICompatibleProvider(CompletionProvider):
    """Chat-completions backend for OpenAI and API-compatible gateways."""

    name = "openai_compatible"

    def __init__(
        self,
        cfg: ProviderConfig,
        api_key: str | None,
        log_cfg: LoggingConfig,
        llm_logger,
    ):
        if not api_key:
            raise ValueError("Missing OpenAI API key")
        self.cfg = cfg
        self.api_key = api_key
        self.log_cfg = log_cfg
        self.llm_logger = llm_logger
        self.base_url = (cfg.base_url or DEFAULT_BASE_URL).rstrip("/")

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        payload = {
            "model": self.cfg.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": self.cfg.temperature,
            "max_tokens": self.cfg.max_output_tokens,
        }
        try:
            data = self._post(payload)
        except httpx.HTTPError as exc:
            self._log(status="provider_error", content=str(exc), prompt=user_prompt)
            raise ProviderError(f"{type(exc).__name__}: {exc}") from exc
        except ValueError as exc:
            self._log(status="parse_error", content=str(exc), prompt=user_prompt)
            raise ProviderError(f"Invalid JSON from provider: {exc}") from exc

        content = _extract_text(data)
        if not content.strip():
            self._log(status="empty_response", content="", prompt=user_prompt)
            raise ProviderError("Provider returned no message content")
        self._log(status="ok", content=content, prompt=user_prompt)
        return content

    def _post(self, payload: dict[str, Any]) -> dict[str, Any]:
        url = f"{self.base_url}/chat/completions"
        headers = {"Authorization": f"Bearer {self.api_key}"}
        with httpx.Client(timeout=self.cfg.timeout_seconds, trust_env=self.cfg.trust_env) as client:
            resp = client.post(url, headers=headers, json=payload)
            resp.raise_for_status()
            return resp.json()

    def _log(self, status: str, content: str, prompt: str) -> None:
        log_llm_response(
            self.llm_logger,
            self.log_cfg,
            provider=self.name,
            model=self.cfg.model,
            status=status,
            content=content,
            prompt=prompt,
        )


def _extract_text(data: dict[str, Any]) -> str:
    """Return the first choice's message text, or "" for any other shape."""
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return ""
    if isinstance(content, list):
        # Some gateways return content parts instead of a plain string.
        chunks = []
        for part in content:
            if isinstance(part, dict) and isinstance(part.get("text"), str):
                chunks.append(part["text"])
        return "".join(chunks)
    if not isinstance(content, str):
        return ""
    return content
