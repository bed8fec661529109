"""
Command-line interface for the Live Page server.

Uses Typer to provide `serve`, `refresh` and `init` commands with options for
the most common settings. Supports loading .env files for API key
configuration.
"""

from __future__ import annotations

from pathlib import Path

import typer
import uvicorn
from dotenv import load_dotenv
from rich.console import Console

from .config import AppConfig, apply_env_overrides, load_config, validate_config
from .context import build_context
from .core.errors import StoreUnavailable
from .server import create_app
from .store import ContentStore
from .utils.logging import setup_logging

app = typer.Typer(add_completion=False)
console = Console()


def _load(
    config: Path | None,
    brand: str | None = None,
    content_path: Path | None = None,
    log_level: str | None = None,
    api_key: str | None = None,
) -> AppConfig:
    # Load environment variables from .env if available
    load_dotenv()

    cfg = apply_env_overrides(load_config(str(config) if config else None))
    if brand:
        cfg.site.brand = brand
    if content_path is not None:
        cfg.store.path = str(content_path)
    if log_level:
        cfg.logging.level = log_level
    if api_key:
        cfg.provider.api_key = api_key
    validate_config(cfg)
    return cfg


@app.command()
def serve(
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, help="YAML config file."),
    host: str | None = typer.Option(None, "--host", help="Interface to bind."),
    port: int | None = typer.Option(None, "--port", "-p", help="Port to listen on."),
    brand: str | None = typer.Option(None, "--brand", help="Brand name (or set COMPANY_NAME)."),
    interval_hours: float | None = typer.Option(
        None, "--interval-hours", help="Hours between refresh cycles."
    ),
    content_path: Path | None = typer.Option(None, "--content-path", help="Document file path."),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    api_key: str | None = typer.Option(
        None, "--api-key", help="Override provider API key (or set OPENAI_API_KEY / .env)."
    ),
):
    """Serve the page and refresh it in the background.

    The first refresh fires immediately, then every interval.
    """
    cfg = _load(config, brand, content_path, log_level, api_key)
    if host:
        cfg.server.host = host
    if port is not None:
        cfg.server.port = port
    if interval_hours is not None:
        cfg.refresh.interval_hours = interval_hours
    validate_config(cfg)

    logger = setup_logging(cfg.logging, Path(cfg.logging.directory))
    context = build_context(cfg, logger=logger)
    console.print(f"Server running at http://{cfg.server.host}:{cfg.server.port}")
    uvicorn.run(create_app(context), host=cfg.server.host, port=cfg.server.port, log_level=cfg.logging.level.lower())


@app.command()
def refresh(
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, help="YAML config file."),
    brand: str | None = typer.Option(None, "--brand", help="Brand name (or set COMPANY_NAME)."),
    content_path: Path | None = typer.Option(None, "--content-path", help="Document file path."),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    api_key: str | None = typer.Option(None, "--api-key", help="Override provider API key."),
):
    """Run a single refresh cycle now and exit."""
    cfg = _load(config, brand, content_path, log_level, api_key)
    logger = setup_logging(cfg.logging, Path(cfg.logging.directory))
    context = build_context(cfg, logger=logger)

    context.scheduler.refresh()
    state = context.scheduler.state
    if state.last_error:
        console.print(f"[red]Refresh failed:[/red] {state.last_error}")
        raise typer.Exit(code=1)
    console.print(f"Update appended to {context.store.path}")


@app.command()
def init(
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, help="YAML config file."),
    brand: str | None = typer.Option(None, "--brand", help="Brand name (or set COMPANY_NAME)."),
    content_path: Path | None = typer.Option(None, "--content-path", help="Document file path."),
):
    """Create the seed document if it does not exist yet."""
    cfg = _load(config, brand, content_path)
    store = ContentStore(Path(cfg.store.path))
    try:
        created = store.init(cfg.site.brand)
    except StoreUnavailable as exc:
        console.print(f"[red]Cannot create document:[/red] {exc}")
        raise typer.Exit(code=1)
    if created:
        console.print(f"Seed document created at {store.path}")
    else:
        console.print(f"Document already exists at {store.path}")


if __name__ == "__main__":
    app()
