"""Periodic refresh of the health snapshot and the catalog."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Sequence

from .catalog.loader import CatalogLoader, fallback_catalog
from .errors import CatalogFetchError
from .health.aggregator import HealthAggregator
from .metrics import CATALOG_FALLBACK_TOTAL, SCHEDULER_TICKS_TOTAL
from .models import Catalog, Endpoint, HealthSnapshot
from .sink import DisplaySink
from .state import StorefrontState
from .timers import SleepFn, TaskTimers

LOGGER = logging.getLogger(__name__)

DEFAULT_INTERVAL_SEC = 30.0
DEFAULT_FALLBACK_DELAY_SEC = 2.0


def emit(sink: DisplaySink | None, method: str, *args: Any) -> None:
    """Forward a record to ``sink``; rendering failures never reach the core."""

    if sink is None:
        return
    handler: Callable[..., Any] = getattr(sink, method)
    try:
        handler(*args)
    except Exception:
        LOGGER.exception("sink.render_failed", extra={"method": method})


class RefreshScheduler:
    """Re-run the health probe cycle and the catalog load on a fixed cadence.

    Ticks fire every ``interval_sec`` regardless of how long the previous one
    takes; a tick that fires while the previous one is still in flight is
    skipped. The first tick runs as soon as :meth:`start` is called.
    """

    def __init__(
        self,
        aggregator: HealthAggregator,
        loader: CatalogLoader,
        registry: Sequence[Endpoint],
        state: StorefrontState,
        *,
        sink: DisplaySink | None = None,
        interval_sec: float = DEFAULT_INTERVAL_SEC,
        fallback_delay_sec: float = DEFAULT_FALLBACK_DELAY_SEC,
        enabled: bool = True,
        timers: TaskTimers | None = None,
        sleep: SleepFn | None = None,
    ) -> None:
        self._aggregator = aggregator
        self._loader = loader
        self._registry = registry
        self._state = state
        self._sink = sink
        self._interval = float(interval_sec)
        self._fallback_delay = max(float(fallback_delay_sec), 0.0)
        self._enabled = enabled
        self._sleep: SleepFn = sleep or asyncio.sleep
        self._timers = timers or TaskTimers(sleep=self._sleep)
        self._task: asyncio.Task[None] | None = None
        self._inflight: asyncio.Task[Any] | None = None
        self._fallback_task: asyncio.Task[Any] | None = None
        self._fallback_generation = -1
        self._live_loads = 0
        self.ticks = 0
        self.skipped_ticks = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def timers(self) -> TaskTimers:
        return self._timers

    @property
    def current_tick(self) -> asyncio.Task[Any] | None:
        return self._inflight

    async def start(self) -> None:
        if not self._enabled:
            LOGGER.info("scheduler.disabled")
            return
        if self.running:
            return
        self._task = asyncio.create_task(self._run_loop(), name="storefront.refresh")

    async def stop(self) -> None:
        task, self._task = self._task, None
        for pending in (task, self._inflight):
            if pending is None or pending.done():
                continue
            pending.cancel()
            try:
                await pending
            except asyncio.CancelledError:  # pragma: no cover - lifecycle cleanup
                LOGGER.debug("scheduler.task_cancelled")
        self._inflight = None
        await self._timers.cancel_all()

    async def _run_loop(self) -> None:
        LOGGER.info("scheduler.start", extra={"interval": self._interval})
        try:
            while True:
                self.tick()
                await self._sleep(self._interval)
        finally:
            LOGGER.info("scheduler.stop")

    def tick(self) -> asyncio.Task[Any] | None:
        """Fire one refresh unless the previous one is still in flight."""

        if self._inflight is not None and not self._inflight.done():
            self.skipped_ticks += 1
            SCHEDULER_TICKS_TOTAL.labels(disposition="skipped").inc()
            LOGGER.warning("scheduler.tick_skipped", extra={"skipped": self.skipped_ticks})
            return None
        self.ticks += 1
        SCHEDULER_TICKS_TOTAL.labels(disposition="run").inc()
        self._inflight = asyncio.create_task(self.run_once(), name="storefront.tick")
        self._inflight.add_done_callback(_log_tick_failure)
        return self._inflight

    async def run_once(self) -> tuple[HealthSnapshot, Catalog | None]:
        snapshot, catalog = await asyncio.gather(self.refresh_health(), self.refresh_catalog())
        return snapshot, catalog

    async def refresh_health(self) -> HealthSnapshot:
        snapshot = await self._aggregator.probe_all(self._registry)
        self._state.publish_health(snapshot)
        emit(self._sink, "show_health", snapshot)
        return snapshot

    async def refresh_catalog(self) -> Catalog | None:
        """Load the live catalog; on failure report it and arm the fallback timer."""

        try:
            catalog = await self._loader.load()
        except CatalogFetchError as exc:
            message = str(exc)
            self._state.record_catalog_error(message)
            emit(self._sink, "show_error", "catalog", message)
            self._schedule_fallback()
            return None
        self._live_loads += 1
        self._state.publish_catalog(catalog)
        emit(self._sink, "show_catalog", catalog)
        return catalog

    def _schedule_fallback(self) -> None:
        pending = self._fallback_task
        generation = self._live_loads
        if pending is not None and not pending.done():
            if self._fallback_generation == generation:
                return
            # A live load landed since this timer was armed; restart the grace period.
            pending.cancel()
        self._fallback_generation = generation

        async def _apply() -> None:
            self._apply_fallback(generation)

        self._fallback_task = self._timers.call_later(
            self._fallback_delay, _apply, name="catalog.fallback"
        )

    def _apply_fallback(self, generation: int) -> None:
        if generation != self._live_loads:
            LOGGER.info("catalog.fallback_superseded")
            return
        catalog = fallback_catalog()
        self._state.publish_catalog(catalog)
        CATALOG_FALLBACK_TOTAL.inc()
        LOGGER.warning("catalog.fallback_active", extra={"items": len(catalog)})
        emit(self._sink, "show_catalog", catalog)


def _log_tick_failure(task: asyncio.Task[Any]) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        LOGGER.error("scheduler.tick_failed", extra={"error": str(exc)}, exc_info=exc)


__all__ = ["DEFAULT_FALLBACK_DELAY_SEC", "DEFAULT_INTERVAL_SEC", "RefreshScheduler", "emit"]
