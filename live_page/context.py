"""Process-wide application context.

Built once at startup and handed to both the HTTP app and the refresh
scheduler, so neither reaches for module-level state.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
import logging
from pathlib import Path

from .config import AppConfig
from .generator import ContentGenerator
from .llm.providers import create_provider
from .llm.providers.base import CompletionProvider
from .scheduler import RefreshScheduler
from .store import ContentStore
from .utils.logging import get_logger, setup_llm_logger


@dataclass
class AppContext:
    """Everything a request handler or timer callback needs.

    Attributes:
        config: Effective configuration
        store: Owner of the persisted document
        generator: Wrapper around the LLM provider
        scheduler: Refresh driver; owns RefreshState
        logger: Application logger
    """

    config: AppConfig
    store: ContentStore
    generator: ContentGenerator
    scheduler: RefreshScheduler
    logger: logging.Logger

    @property
    def brand(self) -> str:
        return self.config.site.brand


def build_context(
    cfg: AppConfig,
    provider: CompletionProvider | None = None,
    logger: logging.Logger | None = None,
) -> AppContext:
    """Wire store, generator and scheduler from config.

    Raises:
        ValueError: If the provider is unknown or has no API key.
    """
    logger = logger or get_logger()
    if provider is None:
        llm_logger = setup_llm_logger(cfg.logging, Path(cfg.logging.directory))
        provider = create_provider(cfg.provider, cfg.logging, llm_logger)

    store = ContentStore(Path(cfg.store.path), logger=logger.getChild("store"))
    generator = ContentGenerator(provider, logger=logger.getChild("generator"))
    scheduler = RefreshScheduler(
        generator,
        store,
        brand=cfg.site.brand,
        interval=timedelta(hours=cfg.refresh.interval_hours),
        run_on_startup=cfg.refresh.run_on_startup,
        logger=logger.getChild("scheduler"),
    )
    return AppContext(
        config=cfg,
        store=store,
        generator=generator,
        scheduler=scheduler,
        logger=logger,
    )
