from __future__ import annotations

import logging

from storefront.catalog.loader import fallback_catalog
from storefront.models import Catalog, HealthOutcome, HealthSnapshot, SubmissionOutcome, SubmissionResult
from storefront.sink import LoggingSink, MemorySink


def test_memory_sink_keeps_bounded_event_trail():
    sink = MemorySink(max_events=3)

    for index in range(5):
        sink.show_error("catalog", f"failure {index}")

    assert sink.events == ["error:catalog"] * 3
    assert [message for _, message in sink.errors] == ["failure 2", "failure 3", "failure 4"]


def test_logging_sink_renders_each_record_kind(registry, caplog):
    sink = LoggingSink(logging.getLogger("storefront.test.sink"))
    snapshot = HealthSnapshot(
        outcomes=(
            HealthOutcome.up(registry.get("inventory"), 42),
            HealthOutcome.down(registry.get("orders"), "HTTP 503"),
        )
    )

    with caplog.at_level(logging.INFO, logger="storefront.test.sink"):
        sink.show_health(snapshot)
        sink.show_catalog(fallback_catalog())
        sink.show_catalog(Catalog(items=()))
        sink.show_submission(
            SubmissionResult(outcome=SubmissionOutcome.SUCCESS, status="COMPLETED", elapsed_ms=120, order_id="O1")
        )
        sink.show_submission(
            SubmissionResult(
                outcome=SubmissionOutcome.TRANSPORT_FAILURE,
                status="FAILED",
                elapsed_ms=5,
                error_message="connection refused",
            )
        )
        sink.show_error("catalog", "Error loading products: HTTP 500")

    text = caplog.text
    assert "Inventory" in text and "42ms" in text
    assert "HTTP 503" in text
    assert "offline sample data (3 items)" in text
    assert "(1 reserved)" in text
    assert "No products available" in text
    assert "order=O1" in text and "performance=EXCELLENT" in text
    assert "checkout failed (TRANSPORT_FAILURE): connection refused" in text
    assert "catalog: Error loading products: HTTP 500" in text
