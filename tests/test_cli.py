from __future__ import annotations

import json

import pytest

from storefront.catalog.loader import FALLBACK_ITEMS
from storefront.cli import main as cli
from storefront.config.schema import SchedulerConfig
from storefront.runtime import Storefront
from tests.conftest import CHECKOUT, INVENTORY, ORDERS, PAYMENTS, PROCESS_URL, PRODUCTS_URL, health_url


@pytest.fixture
def fake_storefront(monkeypatch, config, state, sink, backend):
    config = config.model_copy(
        update={
            "scheduler": SchedulerConfig(enabled=False, interval_sec=0.01),
            "catalog": config.catalog.model_copy(update={"fallback_delay_sec": 0.0}),
            "checkout": config.checkout.model_copy(update={"reload_delay_sec": 0.0}),
        }
    )

    storefront = Storefront(config, state=state, sink=sink, transport=backend.transport)
    monkeypatch.setattr(cli, "build_storefront", lambda *args, **kwargs: storefront)
    return state


def test_parser_requires_a_command():
    with pytest.raises(SystemExit):
        cli.main([])


def test_parser_rejects_unknown_payment_method():
    with pytest.raises(SystemExit):
        cli.main(["checkout", "--item", "x", "--quantity", "1", "--payment-method", "CASH"])


def test_health_exit_code_reflects_availability(fake_storefront, backend):
    for base in (INVENTORY, ORDERS, PAYMENTS):
        backend.json("GET", health_url(base), {"status": "UP"})

    assert cli.main(["health"]) == 1
    assert fake_storefront.health.up_count == 3

    backend.json("GET", health_url(CHECKOUT), {"status": "UP"})
    assert cli.main(["health"]) == 0


def test_catalog_falls_back_when_inventory_is_down(fake_storefront, sink):
    assert cli.main(["catalog"]) == 1

    assert fake_storefront.fallback_active
    assert sink.events == ["error:catalog", "catalog:fallback"]


def test_checkout_uses_freshly_loaded_catalog(fake_storefront, backend):
    backend.json(
        "GET",
        PRODUCTS_URL,
        [item.to_dict() for item in FALLBACK_ITEMS],
    )
    backend.json("POST", PROCESS_URL, {"success": True, "orderId": "O1", "status": "COMPLETED"})

    assert cli.main(["checkout", "--item", FALLBACK_ITEMS[1].item_id, "--quantity", "3"]) == 0
    assert fake_storefront.last_submission.order_id == "O1"
    assert backend.count("GET", PRODUCTS_URL) == 2


def test_checkout_over_available_exits_non_zero(fake_storefront, backend):
    backend.json("GET", PRODUCTS_URL, [item.to_dict() for item in FALLBACK_ITEMS])

    assert cli.main(["checkout", "--item", FALLBACK_ITEMS[2].item_id, "--quantity", "8"]) == 1
    assert backend.count("POST", PROCESS_URL) == 0


def test_explore_prints_timing_and_payload(fake_storefront, backend, capsys):
    backend.json("GET", f"{INVENTORY}/api/v1/inventory/value", {"totalValue": 10})

    assert cli.main(["explore", "/api/v1/inventory/value"]) == 0

    out = capsys.readouterr().out
    assert out.startswith("GET /api/v1/inventory/value")
    assert "Response Time:" in out
    assert "Status: 200" in out
    assert json.dumps({"totalValue": 10}, indent=2) in out


def test_explore_rejects_checkout_path(fake_storefront, backend):
    assert cli.main(["explore", "/api/v1/checkout/process"]) == 2
    assert backend.requests == []


def test_run_with_cycles_ticks_that_many_times(fake_storefront, backend):
    for base in (INVENTORY, ORDERS, PAYMENTS, CHECKOUT):
        backend.json("GET", health_url(base), {"status": "UP"})
    backend.json("GET", PRODUCTS_URL, [item.to_dict() for item in FALLBACK_ITEMS])

    assert cli.main(["run", "--cycles", "2"]) == 0
    assert backend.count("GET", PRODUCTS_URL) == 2
    assert fake_storefront.catalog is not None and not fake_storefront.fallback_active
