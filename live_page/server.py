"""HTTP surface: a single page that shows whatever the store holds."""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import HTMLResponse
from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

from . import __version__
from .context import AppContext
from .core.errors import DocumentNotFound, StoreUnavailable
from .core.types import TIMESTAMP_FORMAT
from .utils.logging import log_event

PLACEHOLDER = "<p>Generating first update...</p>"

_env = Environment(
    loader=FileSystemLoader(str(Path(__file__).parent / "templates")),
    autoescape=select_autoescape(["html"]),
)


def render_page(brand: str, tagline: str, content: str, checked_at: datetime | None = None) -> str:
    """Render the full page around the stored document body."""
    template = _env.get_template("page.html")
    checked_at = checked_at or datetime.now(timezone.utc)
    return template.render(
        brand=brand,
        tagline=tagline,
        content=Markup(content),
        checked_at=checked_at.strftime(TIMESTAMP_FORMAT),
    )


def load_page_content(context: AppContext) -> str:
    """Return the document body, or the placeholder when it cannot be read."""
    try:
        return context.store.read().body
    except DocumentNotFound:
        log_event(context.logger, "No document yet, serving placeholder", event="page_placeholder", reason="missing")
    except StoreUnavailable as exc:
        log_event(
            context.logger,
            f"Document unreadable, serving placeholder: {exc}",
            level=logging.WARNING,
            event="page_placeholder",
            reason="unavailable",
        )
    return PLACEHOLDER


def initialize_store(context: AppContext) -> bool:
    """Create the seed document at startup; failures are logged, not raised."""
    try:
        return context.store.init(context.brand)
    except StoreUnavailable:
        context.logger.exception(
            "Could not create the initial document; serving placeholder until a refresh succeeds",
            extra={"event": "store_init_failed", "path": str(context.store.path)},
        )
        return False


def create_app(context: AppContext, start_scheduler: bool = True) -> FastAPI:
    """Build the FastAPI app bound to one AppContext.

    The lifespan seeds the store and starts the refresh scheduler; on
    shutdown the scheduler stops taking new ticks and lets an in-flight
    cycle finish.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        initialize_store(context)
        if start_scheduler:
            context.scheduler.start()
        try:
            yield
        finally:
            if start_scheduler:
                # shutdown(wait=True) joins an in-flight cycle; keep it off the event loop.
                await run_in_threadpool(context.scheduler.shutdown, True)

    app = FastAPI(
        title=f"{context.brand} | Live Page",
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.context = context

    # Sync handler: FastAPI runs it in the threadpool, so the file read never
    # stalls the event loop.
    @app.get("/", response_class=HTMLResponse)
    def home() -> HTMLResponse:
        content = load_page_content(context)
        html = render_page(context.brand, context.config.site.tagline, content)
        return HTMLResponse(content=html, status_code=200)

    return app
