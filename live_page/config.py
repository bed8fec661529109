"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults, plus a small set of environment overrides.
Configuration sections:
- ProviderConfig: LLM provider settings
- SiteConfig: Brand and page text
- StoreConfig: Location of the persisted document
- RefreshConfig: Refresh interval and startup behavior
- ServerConfig: HTTP bind address
- LoggingConfig: Logging behavior
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
import os
from typing import Any, Mapping

import yaml

REDACTION_MODES = ("none", "redact_content", "redact_urls")


@dataclass
class ProviderConfig:
    """Configuration for the LLM provider.

    Attributes:
        name: Provider name ("openai", "openai_compatible" or "gemini")
        model: Model identifier (e.g., "gpt-4o-mini")
        api_key_env: Environment variable holding the API key (provider default when unset)
        base_url: Base URL for the provider API (provider default when unset)
        api_key: Optional inline API key (overrides env var)
        trust_env: Whether to respect system proxy settings for API requests
        timeout_seconds: Deadline for a single completion request
        temperature: Sampling temperature
        max_output_tokens: Upper bound on generated tokens
    """

    name: str = "openai"
    model: str = "gpt-4o-mini"
    api_key_env: str | None = None
    base_url: str | None = None
    api_key: str | None = None
    trust_env: bool = True
    timeout_seconds: float = 60.0
    temperature: float = 0.7
    max_output_tokens: int = 1200


@dataclass
class SiteConfig:
    """Configuration for page presentation.

    Attributes:
        brand: Brand name used in prompts, the seed entry and the page header
        tagline: Subtitle shown under the brand
    """

    brand: str = "AX AI Ventures"
    tagline: str = "Latest auto-generated insights on technology & innovation"


@dataclass
class StoreConfig:
    """Configuration for the persisted document.

    Attributes:
        path: File holding the append-only document
    """

    path: str = "content/latest.html"


@dataclass
class RefreshConfig:
    """Configuration for the refresh scheduler.

    Attributes:
        interval_hours: Hours between scheduled refresh cycles
        run_on_startup: Whether the first cycle fires immediately at startup
    """

    interval_hours: float = 6.0
    run_on_startup: bool = True


@dataclass
class ServerConfig:
    """Configuration for the HTTP server.

    Attributes:
        host: Interface to bind
        port: TCP port to listen on
    """

    host: str = "0.0.0.0"
    port: int = 4000


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        directory: Directory for log files
        filename: Name of the main log file
        llm_log_enabled: Whether to enable separate LLM interaction logging
        llm_log_detail: LLM log detail level ("response_only", "prompt_response")
        llm_log_redaction: Redaction mode for LLM logs ("none", "redact_content", "redact_urls")
        llm_log_file: Name of the LLM log file
    """

    level: str = "INFO"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    directory: str = "logs"
    filename: str = "live_page.jsonl"
    llm_log_enabled: bool = False
    llm_log_detail: str = "response_only"
    llm_log_redaction: str = "redact_urls"
    llm_log_file: str = "llm.jsonl"


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    provider: ProviderConfig = field(default_factory=ProviderConfig)
    site: SiteConfig = field(default_factory=SiteConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    refresh: RefreshConfig = field(default_factory=RefreshConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


_SECTIONS: dict[str, type] = {
    "provider": ProviderConfig,
    "site": SiteConfig,
    "store": StoreConfig,
    "refresh": RefreshConfig,
    "server": ServerConfig,
    "logging": LoggingConfig,
}


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults."""
    if not path:
        return AppConfig()

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    return _merge_config(AppConfig(), raw)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig."""
    data = _asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict):
            known = {k: v for k, v in value.items() if k in data[key]}
            data[key].update(known)
    cfg = _fromdict(data)
    validate_config(cfg)
    return cfg


def _asdict(cfg: AppConfig) -> dict[str, dict[str, Any]]:
    """Convert AppConfig to nested dictionary."""
    return {
        name: {f.name: getattr(getattr(cfg, name), f.name) for f in fields(section)}
        for name, section in _SECTIONS.items()
    }


def _fromdict(data: dict[str, dict[str, Any]]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    return AppConfig(**{name: section(**data[name]) for name, section in _SECTIONS.items()})


def apply_env_overrides(cfg: AppConfig, environ: Mapping[str, str] | None = None) -> AppConfig:
    """Apply process environment overrides on top of file config.

    Recognized variables: COMPANY_NAME, CONTENT_PATH, REFRESH_INTERVAL_HOURS,
    LLM_PROVIDER, LLM_MODEL.
    """
    env = os.environ if environ is None else environ
    if env.get("COMPANY_NAME"):
        cfg.site.brand = env["COMPANY_NAME"]
    if env.get("CONTENT_PATH"):
        cfg.store.path = env["CONTENT_PATH"]
    if env.get("REFRESH_INTERVAL_HOURS"):
        cfg.refresh.interval_hours = float(env["REFRESH_INTERVAL_HOURS"])
    if env.get("LLM_PROVIDER"):
        cfg.provider.name = env["LLM_PROVIDER"]
    if env.get("LLM_MODEL"):
        cfg.provider.model = env["LLM_MODEL"]
    validate_config(cfg)
    return cfg


def validate_config(cfg: AppConfig) -> None:
    """Reject values the scheduler or server cannot run with."""
    if cfg.refresh.interval_hours <= 0:
        raise ValueError(f"refresh.interval_hours must be positive, got {cfg.refresh.interval_hours}")
    if cfg.logging.llm_log_redaction not in REDACTION_MODES:
        raise ValueError(
            f"logging.llm_log_redaction must be one of {', '.join(REDACTION_MODES)}, "
            f"got {cfg.logging.llm_log_redaction!r}"
        )
    if not cfg.site.brand.strip():
        raise ValueError("site.brand must not be empty")


def get_api_key(cfg: ProviderConfig) -> str | None:
    """Get API key from inline config or environment variable."""
    if cfg.api_key:
        return cfg.api_key
    if cfg.api_key_env:
        return os.getenv(cfg.api_key_env)
    defaults = {
        "gemini": "GOOGLE_API_KEY",
        "openai": "OPENAI_API_KEY",
        "openai_compatible": "OPENAI_API_KEY",
        "openai-compatible": "OPENAI_API_KEY",
    }
    env_name = defaults.get(cfg.name.lower(), "OPENAI_API_KEY")
    return os.getenv(env_name)
