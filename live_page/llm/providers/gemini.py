"""Google Gemini provider for page updates."""

from __future__ import annotations

from typing import Any

import httpx

from ...config import LoggingConfig, ProviderConfig
from ...core.errors import ProviderError
from .base import CompletionProvider, log_llm_response

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"


class GeminiProvider(CompletionProvider):
    """Gemini-backed provider using `systemInstruction` for the persona."""

    name = "gemini"

    def __init__(
        self,
        cfg: ProviderConfig,
        api_key: str | None,
        log_cfg: LoggingConfig,
        llm_logger,
    ):
        if not api_key:
            raise ValueError("Missing Google API key")
        self.cfg = cfg
        self.api_key = api_key
        self.log_cfg = log_cfg
        self.llm_logger = llm_logger
        self.base_url = (cfg.base_url or DEFAULT_BASE_URL).rstrip("/")

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        payload = {
            "systemInstruction": {"parts": [{"text": system_prompt}]},
            "contents": [{"role": "user", "parts": [{"text": user_prompt}]}],
            "generationConfig": {
                "temperature": self.cfg.temperature,
                "maxOutputTokens": self.cfg.max_output_tokens,
            },
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
            raise ProviderError("Provider returned no text parts")
        self._log(status="ok", content=content, prompt=user_prompt)
        return content

    def _post(self, payload: dict[str, Any]) -> dict[str, Any]:
        url = f"{self.base_url}/v1beta/models/{self.cfg.model}:generateContent"
        params = {"key": self.api_key}
        with httpx.Client(timeout=self.cfg.timeout_seconds, trust_env=self.cfg.trust_env) as client:
            resp = client.post(url, params=params, json=payload)
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
    """Join the visible text parts of the first candidate.

    Thought parts are internal reasoning and never belong on the page.
    """
    try:
        parts = data["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError):
        return ""

    if not isinstance(parts, list):
        return ""

    chunks: list[str] = []
    for part in parts:
        if not isinstance(part, dict):
            continue
        if bool(part.get("thought")):
            continue
        text = part.get("text")
        if text:
            chunks.append(str(text))
    return "".join(chunks)
