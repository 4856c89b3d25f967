"""Wire the orchestration components together from configuration."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Callable

import httpx

from .catalog.explorer import ExplorerResult, InventoryExplorer
from .catalog.loader import CatalogLoader
from .checkout.submitter import TransactionSubmitter
from .config.loader import resolve_config
from .config.schema import AppConfig
from .health.aggregator import HealthAggregator
from .http import ServiceClient
from .models import HealthSnapshot, SubmissionResult
from .registry import EndpointRegistry
from .scheduler import RefreshScheduler, emit
from .sink import DisplaySink
from .state import StorefrontState, get_state
from .timers import SleepFn, TaskTimers

LOGGER = logging.getLogger(__name__)


class Storefront:
    """Own one instance of every component plus the shared coordinator state."""

    def __init__(
        self,
        config: AppConfig,
        *,
        state: StorefrontState | None = None,
        sink: DisplaySink | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: SleepFn | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self.config = config
        self.state = state if state is not None else get_state()
        self.sink = sink
        self.registry = EndpointRegistry.from_config(config)
        self.client = ServiceClient(timeout=config.http.timeout_sec, transport=transport)
        self.timers = TaskTimers(sleep=sleep)
        clock = clock or time.perf_counter

        inventory = self.registry.get(config.catalog.endpoint)
        checkout = self.registry.get(config.checkout.endpoint)

        self.aggregator = HealthAggregator(self.client, clock=clock)
        self.loader = CatalogLoader(
            self.client, inventory, products_path=config.catalog.products_path
        )
        self.explorer = InventoryExplorer(self.client, inventory, clock=clock)
        self.scheduler = RefreshScheduler(
            self.aggregator,
            self.loader,
            self.registry,
            self.state,
            sink=sink,
            interval_sec=config.scheduler.interval_sec,
            fallback_delay_sec=config.catalog.fallback_delay_sec,
            enabled=config.scheduler.enabled,
            timers=self.timers,
            sleep=sleep,
        )
        self.submitter = TransactionSubmitter(
            self.client,
            checkout,
            reload_catalog=self.scheduler.refresh_catalog,
            process_path=config.checkout.process_path,
            reload_delay_sec=config.checkout.reload_delay_sec,
            timers=self.timers,
            clock=clock,
        )

    async def start(self) -> None:
        LOGGER.info(
            "storefront.start",
            extra={"profile": self.config.profile, "endpoints": self.registry.ids()},
        )
        await self.scheduler.start()

    async def stop(self) -> None:
        await self.scheduler.stop()

    async def probe_health(self) -> HealthSnapshot:
        return await self.scheduler.refresh_health()

    async def checkout(self, item_id: str, quantity: int, payment_method: str) -> SubmissionResult:
        result = await self.submitter.submit(
            item_id, quantity, payment_method, self.state.current_catalog()
        )
        self.state.record_submission(result)
        emit(self.sink, "show_submission", result)
        return result

    async def explore(self, path: str) -> ExplorerResult:
        return await self.explorer.explore(path)


def build_storefront(
    config_path: str | Path | None = None,
    *,
    sink: DisplaySink | None = None,
    state: StorefrontState | None = None,
) -> Storefront:
    loaded = resolve_config(config_path)
    return Storefront(loaded.data, sink=sink, state=state)


__all__ = ["Storefront", "build_storefront"]
