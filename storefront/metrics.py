"""Prometheus metrics for probes, catalog loads and checkout submissions."""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

__all__ = [
    "CATALOG_FALLBACK_TOTAL",
    "CATALOG_LOAD_TOTAL",
    "ENDPOINT_UP_GAUGE",
    "PROBE_LATENCY_SECONDS",
    "PROBE_RESULT_TOTAL",
    "SCHEDULER_TICKS_TOTAL",
    "SUBMISSION_LATENCY_SECONDS",
    "SUBMISSION_TOTAL",
]

PROBE_RESULT_TOTAL = Counter(
    "storefront_probe_result_total",
    "Health probe results grouped by endpoint and status.",
    ("endpoint", "status"),
)

ENDPOINT_UP_GAUGE = Gauge(
    "storefront_endpoint_up",
    "1 when the endpoint answered its last health probe, 0 otherwise.",
    ("endpoint",),
)

PROBE_LATENCY_SECONDS = Histogram(
    "storefront_probe_latency_seconds",
    "Latency of successful health probes.",
    ("endpoint",),
)

CATALOG_LOAD_TOTAL = Counter(
    "storefront_catalog_load_total",
    "Catalog load attempts by result.",
    ("result",),
)

CATALOG_FALLBACK_TOTAL = Counter(
    "storefront_catalog_fallback_total",
    "Number of times the offline fallback catalog was substituted.",
)

SUBMISSION_TOTAL = Counter(
    "storefront_submission_total",
    "Checkout submissions by classified outcome.",
    ("outcome",),
)

SUBMISSION_LATENCY_SECONDS = Histogram(
    "storefront_submission_latency_seconds",
    "Client-side round trip of checkout submissions.",
    ("outcome",),
)

SCHEDULER_TICKS_TOTAL = Counter(
    "storefront_scheduler_ticks_total",
    "Refresh scheduler ticks by disposition (run or skipped).",
    ("disposition",),
)
