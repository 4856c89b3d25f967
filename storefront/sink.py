"""Display sinks receiving the records produced by the orchestration core."""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from .models import Catalog, HealthSnapshot, SubmissionResult

LOGGER = logging.getLogger(__name__)


@runtime_checkable
class DisplaySink(Protocol):
    def show_health(self, snapshot: HealthSnapshot) -> None: ...

    def show_catalog(self, catalog: Catalog) -> None: ...

    def show_submission(self, result: SubmissionResult) -> None: ...

    def show_error(self, kind: str, message: str) -> None: ...


class MemorySink:
    """Keep the most recent record of each kind, plus an ordered event trail."""

    def __init__(self, *, max_events: int = 200) -> None:
        self.health: HealthSnapshot | None = None
        self.catalog: Catalog | None = None
        self.submission: SubmissionResult | None = None
        self.errors: list[tuple[str, str]] = []
        self.events: list[str] = []
        self._max_events = max(int(max_events), 1)

    def _note(self, kind: str) -> None:
        self.events.append(kind)
        if len(self.events) > self._max_events:
            del self.events[: len(self.events) - self._max_events]

    def show_health(self, snapshot: HealthSnapshot) -> None:
        self.health = snapshot
        self._note("health")

    def show_catalog(self, catalog: Catalog) -> None:
        self.catalog = catalog
        self._note("catalog:" + catalog.source.value)

    def show_submission(self, result: SubmissionResult) -> None:
        self.submission = result
        self._note("submission:" + result.outcome.value)

    def show_error(self, kind: str, message: str) -> None:
        self.errors.append((kind, message))
        if len(self.errors) > self._max_events:
            del self.errors[0]
        self._note("error:" + kind)


class LoggingSink:
    """Render records as log lines; used by the command line runner."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or LOGGER

    def show_health(self, snapshot: HealthSnapshot) -> None:
        for outcome in snapshot:
            if outcome.latency_ms is not None:
                detail = f"{outcome.latency_ms}ms"
            else:
                detail = outcome.error_detail or ""
            self._logger.info(
                "%-10s :%d %-4s %s",
                outcome.endpoint.display_label,
                outcome.endpoint.port,
                outcome.status.value,
                detail,
            )

    def show_catalog(self, catalog: Catalog) -> None:
        if not len(catalog):
            self._logger.info("No products available")
            return
        if catalog.is_fallback:
            self._logger.warning("showing offline sample data (%d items)", len(catalog))
        for item in catalog:
            reserved = f" ({item.reserved_quantity} reserved)" if item.reserved_quantity > 0 else ""
            self._logger.info(
                "%s [%s] available=%d%s total=%d %s",
                item.name,
                item.sku,
                item.available_quantity,
                reserved,
                item.total_quantity,
                item.stock_level,
            )

    def show_submission(self, result: SubmissionResult) -> None:
        if result.ok:
            self._logger.info(
                "checkout ok order=%s checkout=%s total=%s time=%dms status=%s performance=%s",
                result.order_id,
                result.transaction_id,
                result.total_amount,
                result.elapsed_ms,
                result.status,
                result.performance.value if result.performance else "-",
            )
            return
        self._logger.error(
            "checkout failed (%s): %s time=%dms status=%s",
            result.outcome.value,
            result.error_message,
            result.elapsed_ms,
            result.status,
        )

    def show_error(self, kind: str, message: str) -> None:
        self._logger.error("%s: %s", kind, message)


__all__ = ["DisplaySink", "LoggingSink", "MemorySink"]
