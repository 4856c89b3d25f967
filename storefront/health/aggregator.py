"""Concurrent fan-out/fan-in health probing across the registered services."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, Sequence

from ..errors import HttpError
from ..http import ServiceClient, decode_json
from ..metrics import ENDPOINT_UP_GAUGE, PROBE_LATENCY_SECONDS, PROBE_RESULT_TOTAL
from ..models import Endpoint, HealthOutcome, HealthSnapshot, HealthStatus

LOGGER = logging.getLogger(__name__)


class HealthAggregator:
    """Probe every endpoint concurrently and join on all of them.

    The snapshot is only assembled once every probe has settled, so a slow
    endpoint delays the snapshot but never drops a sibling's outcome. Probe
    failures of any kind become ``DOWN`` outcomes; nothing is re-raised.
    """

    def __init__(
        self,
        client: ServiceClient,
        *,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._client = client
        self._clock = clock or time.perf_counter

    async def probe_all(self, registry: Sequence[Endpoint]) -> HealthSnapshot:
        endpoints = list(registry)
        results = await asyncio.gather(
            *(self.probe(endpoint) for endpoint in endpoints),
            return_exceptions=True,
        )
        outcomes: list[HealthOutcome] = []
        for endpoint, result in zip(endpoints, results):
            if isinstance(result, BaseException):
                if isinstance(result, asyncio.CancelledError):
                    raise result
                outcome = HealthOutcome.down(endpoint, str(result) or result.__class__.__name__)
            else:
                outcome = result
            outcomes.append(outcome)
            _record_metrics(outcome)
        snapshot = HealthSnapshot(outcomes=tuple(outcomes))
        LOGGER.info(
            "health.snapshot",
            extra={"up": snapshot.up_count, "total": len(snapshot)},
        )
        return snapshot

    async def probe(self, endpoint: Endpoint) -> HealthOutcome:
        started = self._clock()
        try:
            response = await self._client.request("GET", endpoint.health_url)
            if not response.is_success:
                raise HttpError(response.status_code)
            decode_json(response)
        except Exception as exc:
            detail = str(exc) or exc.__class__.__name__
            LOGGER.warning(
                "health.probe_failed",
                extra={"endpoint": endpoint.id, "error": detail},
            )
            return HealthOutcome.down(endpoint, detail)
        latency_ms = int((self._clock() - started) * 1000)
        return HealthOutcome.up(endpoint, latency_ms)


def _record_metrics(outcome: HealthOutcome) -> None:
    endpoint_id = outcome.endpoint.id
    PROBE_RESULT_TOTAL.labels(endpoint=endpoint_id, status=outcome.status.value).inc()
    is_up = outcome.status is HealthStatus.UP
    ENDPOINT_UP_GAUGE.labels(endpoint=endpoint_id).set(1.0 if is_up else 0.0)
    if is_up and outcome.latency_ms is not None:
        PROBE_LATENCY_SECONDS.labels(endpoint=endpoint_id).observe(outcome.latency_ms / 1000.0)


__all__ = ["HealthAggregator"]
