"""
Refresh scheduling for the live page.

RefreshScheduler is a two-state machine (Idle, Refreshing). A trigger that
arrives while Refreshing is dropped, not queued, so at most one
generate+append cycle runs at any time and appends land in completion order.
Timer ticks come from an APScheduler BackgroundScheduler: one job that fires
immediately at startup and then on a fixed interval.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
import logging
import threading
from typing import Callable

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .core.errors import GenerationError, StoreUnavailable
from .core.types import GenerationContext, RefreshState
from .generator import ContentGenerator
from .store import ContentStore
from .utils.logging import get_logger, log_event

JOB_ID = "live_page_refresh"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RefreshScheduler:
    """Single-flight driver of generate+append cycles."""

    def __init__(
        self,
        generator: ContentGenerator,
        store: ContentStore,
        brand: str,
        interval: timedelta = timedelta(hours=6),
        run_on_startup: bool = True,
        logger: logging.Logger | None = None,
        scheduler: BaseScheduler | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        if interval.total_seconds() <= 0:
            raise ValueError("Refresh interval must be positive")
        self.generator = generator
        self.store = store
        self.brand = brand
        self.interval = interval
        self.run_on_startup = run_on_startup
        self.logger = logger or get_logger("scheduler")
        self.clock = clock or _utcnow
        self._scheduler = scheduler or BackgroundScheduler(timezone=timezone.utc)
        self._state = RefreshState()
        self._state_lock = threading.Lock()
        self._flight = threading.Lock()
        self._stopped = threading.Event()

    @property
    def state(self) -> RefreshState:
        """Return a copy of the current refresh state."""
        with self._state_lock:
            return self._state.snapshot()

    @property
    def running(self) -> bool:
        return self._scheduler.running

    def start(self) -> None:
        """Register the interval job and start the background timer."""
        self._stopped.clear()
        first_run = self.clock() if self.run_on_startup else self.clock() + self.interval
        self._scheduler.add_job(
            self._on_tick,
            IntervalTrigger(seconds=self.interval.total_seconds(), timezone=timezone.utc),
            id=JOB_ID,
            name="Refresh live page",
            replace_existing=True,
            next_run_time=first_run,
            max_instances=1,
            coalesce=True,
            misfire_grace_time=None,
        )
        if not self._scheduler.running:
            self._scheduler.start()
        log_event(
            self.logger,
            "Refresh scheduler started",
            event="scheduler_started",
            interval_seconds=self.interval.total_seconds(),
            run_on_startup=self.run_on_startup,
        )

    def shutdown(self, wait: bool = True) -> None:
        """Stop issuing timer-driven cycles.

        A cycle already in flight is not interrupted; with `wait=True` this
        call returns after it finishes.
        """
        self._stopped.set()
        if self._scheduler.running:
            self._scheduler.shutdown(wait=wait)
        log_event(self.logger, "Refresh scheduler stopped", event="scheduler_stopped")

    def _on_tick(self) -> None:
        if self._stopped.is_set():
            return
        self.refresh()

    def refresh(self) -> bool:
        """Run one generate+append cycle unless one is already in flight.

        Returns:
            True if a cycle ran (successfully or not), False if it was skipped.
        """
        if not self._flight.acquire(blocking=False):
            with self._state_lock:
                self._state.skipped += 1
            log_event(self.logger, "Refresh already in flight, skipping", event="refresh_skipped")
            return False

        try:
            started = self.clock()
            with self._state_lock:
                self._state.in_flight = True
                self._state.last_attempt_at = started
                self._state.attempts += 1
            log_event(self.logger, "Generating new content", event="refresh_started")
            self._run_cycle()
            return True
        finally:
            with self._state_lock:
                self._state.in_flight = False
            self._flight.release()

    def _run_cycle(self) -> None:
        try:
            entry = self.generator.generate(GenerationContext(brand=self.brand))
            document = self.store.append(entry, brand=self.brand)
        except (GenerationError, StoreUnavailable) as exc:
            self._record_failure(exc)
            self.logger.error(
                "Refresh failed: %s",
                exc,
                exc_info=exc,
                extra={"event": "refresh_failed", "error_type": type(exc).__name__},
            )
            return
        except Exception as exc:
            # Unexpected errors still end the cycle as a recorded failure.
            self._record_failure(exc)
            self.logger.exception(
                "Refresh failed unexpectedly: %s",
                exc,
                extra={"event": "refresh_failed", "error_type": type(exc).__name__},
            )
            return

        with self._state_lock:
            self._state.last_error = None
            self._state.last_success_at = self.clock()
            self._state.successes += 1
        log_event(
            self.logger,
            "New update added",
            event="refresh_succeeded",
            bytes=document.byte_length,
        )

    def _record_failure(self, exc: BaseException) -> None:
        with self._state_lock:
            self._state.last_error = f"{type(exc).__name__}: {exc}"
            self._state.failures += 1
