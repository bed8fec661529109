"""Tests for YAML config loading and environment overrides."""

from __future__ import annotations

from pathlib import Path

import pytest

from live_page.config import (
    AppConfig,
    ProviderConfig,
    apply_env_overrides,
    get_api_key,
    load_config,
    validate_config,
)


def test_load_config_without_path_returns_defaults():
    cfg = load_config(None)
    assert cfg.site.brand == "AX AI Ventures"
    assert cfg.refresh.interval_hours == 6.0
    assert cfg.refresh.run_on_startup is True
    assert cfg.store.path == "content/latest.html"
    assert cfg.provider.model == "gpt-4o-mini"


def test_load_config_merges_sections_and_ignores_unknown_keys(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "site:\n"
        "  brand: Acme Labs\n"
        "refresh:\n"
        "  interval_hours: 1.5\n"
        "  bogus: 1\n"
        "unknown_section:\n"
        "  x: 1\n",
        encoding="utf-8",
    )

    cfg = load_config(str(path))

    assert cfg.site.brand == "Acme Labs"
    assert cfg.refresh.interval_hours == 1.5
    assert cfg.server.port == 4000


def test_load_config_rejects_non_positive_interval(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text("refresh:\n  interval_hours: 0\n", encoding="utf-8")

    with pytest.raises(ValueError, match="interval_hours"):
        load_config(str(path))


def test_env_overrides_apply_on_top_of_file_config():
    cfg = apply_env_overrides(
        AppConfig(),
        {
            "COMPANY_NAME": "Env Brand",
            "CONTENT_PATH": "/srv/page.html",
            "REFRESH_INTERVAL_HOURS": "12",
            "LLM_PROVIDER": "gemini",
        },
    )

    assert cfg.site.brand == "Env Brand"
    assert cfg.store.path == "/srv/page.html"
    assert cfg.refresh.interval_hours == 12.0
    assert cfg.provider.name == "gemini"


def test_empty_env_values_are_ignored():
    cfg = apply_env_overrides(AppConfig(), {"COMPANY_NAME": ""})
    assert cfg.site.brand == "AX AI Ventures"


def test_get_api_key_prefers_inline_then_named_env_then_default(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "default-key")
    monkeypatch.setenv("CUSTOM_KEY", "custom-key")

    assert get_api_key(ProviderConfig(api_key="inline")) == "inline"
    assert get_api_key(ProviderConfig(api_key_env="CUSTOM_KEY")) == "custom-key"
    assert get_api_key(ProviderConfig()) == "default-key"


def test_unknown_redaction_mode_is_rejected():
    cfg = AppConfig()
    cfg.logging.llm_log_redaction = "redact-urls"

    with pytest.raises(ValueError, match="llm_log_redaction"):
        validate_config(cfg)
