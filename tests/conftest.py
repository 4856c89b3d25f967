from __future__ import annotations

import os

import pytest

os.environ.pop("STOREFRONT_CONFIG", None)

from storefront.config.schema import AppConfig, default_app_config
from storefront.registry import EndpointRegistry
from storefront.sink import MemorySink
from storefront.state import StorefrontState, reset_for_tests
from tests.fakes.fake_backend import FakeBackend
from tests.fakes.fake_clock import ManualClock

INVENTORY = "http://localhost:8081"
ORDERS = "http://localhost:8082"
PAYMENTS = "http://localhost:8083"
CHECKOUT = "http://localhost:8084"
PRODUCTS_URL = f"{INVENTORY}/api/v1/inventory/products"
PROCESS_URL = f"{CHECKOUT}/api/v1/checkout/process"


def health_url(base: str) -> str:
    return f"{base}/actuator/health"


@pytest.fixture
def config() -> AppConfig:
    return default_app_config()


@pytest.fixture
def registry(config: AppConfig) -> EndpointRegistry:
    return EndpointRegistry.from_config(config)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def sink() -> MemorySink:
    return MemorySink()


@pytest.fixture
def state() -> StorefrontState:
    return reset_for_tests()


@pytest.fixture(autouse=True)
def _clear_storefront_env(monkeypatch):
    for name in (
        "STOREFRONT_CONFIG",
        "STOREFRONT_PROFILE",
        "STOREFRONT_REFRESH_INTERVAL_SEC",
        "STOREFRONT_HTTP_TIMEOUT_SEC",
        "STOREFRONT_SCHEDULER_ENABLED",
    ):
        monkeypatch.delenv(name, raising=False)
