from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List

from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_HEALTH_PATH = "/actuator/health"


class EndpointConfig(BaseModel):
    id: str = Field(..., min_length=1)
    label: str = Field(..., min_length=1)
    port: int = Field(..., ge=1, le=65535)
    base_url: str = Field(..., min_length=1)
    health_path: str = DEFAULT_HEALTH_PATH

    @field_validator("base_url")
    @classmethod
    def _strip_base_url(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        return value

    @field_validator("health_path")
    @classmethod
    def _normalise_health_path(cls, value: str) -> str:
        value = value.strip() or DEFAULT_HEALTH_PATH
        return value if value.startswith("/") else f"/{value}"


class HttpConfig(BaseModel):
    timeout_sec: float = Field(5.0, gt=0.0)


class CatalogConfig(BaseModel):
    endpoint: str = "inventory"
    products_path: str = "/api/v1/inventory/products"
    fallback_delay_sec: float = Field(2.0, ge=0.0)
    low_stock_threshold: int = Field(10, ge=0)


class CheckoutConfig(BaseModel):
    endpoint: str = "checkout"
    process_path: str = "/api/v1/checkout/process"
    reload_delay_sec: float = Field(1.0, ge=0.0)


class SchedulerConfig(BaseModel):
    enabled: bool = True
    interval_sec: float = Field(30.0, gt=0.0)


class AppConfig(BaseModel):
    profile: str = "local"
    http: HttpConfig = Field(default_factory=HttpConfig)
    endpoints: List[EndpointConfig] = Field(..., min_length=1)
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    checkout: CheckoutConfig = Field(default_factory=CheckoutConfig)
    scheduler: SchedulerConfig = Field(default_factory=SchedulerConfig)

    @model_validator(mode="after")
    def _validate_endpoint_refs(self) -> "AppConfig":
        ids = [endpoint.id for endpoint in self.endpoints]
        duplicates = sorted({value for value in ids if ids.count(value) > 1})
        if duplicates:
            raise ValueError(f"duplicate endpoint ids: {', '.join(duplicates)}")
        if self.catalog.endpoint not in ids:
            raise ValueError(f"catalog.endpoint '{self.catalog.endpoint}' is not registered")
        if self.checkout.endpoint not in ids:
            raise ValueError(f"checkout.endpoint '{self.checkout.endpoint}' is not registered")
        return self


DEFAULT_ENDPOINTS: tuple[dict[str, object], ...] = (
    {"id": "inventory", "label": "Inventory", "port": 8081, "base_url": "http://localhost:8081"},
    {"id": "orders", "label": "Orders", "port": 8082, "base_url": "http://localhost:8082"},
    {"id": "payments", "label": "Payments", "port": 8083, "base_url": "http://localhost:8083"},
    {"id": "checkout", "label": "Checkout", "port": 8084, "base_url": "http://localhost:8084"},
)


def default_app_config() -> AppConfig:
    return AppConfig.model_validate({"endpoints": [dict(entry) for entry in DEFAULT_ENDPOINTS]})


@dataclass(frozen=True)
class LoadedConfig:
    path: Path | None
    data: AppConfig


__all__ = [
    "AppConfig",
    "CatalogConfig",
    "CheckoutConfig",
    "DEFAULT_ENDPOINTS",
    "DEFAULT_HEALTH_PATH",
    "EndpointConfig",
    "HttpConfig",
    "LoadedConfig",
    "SchedulerConfig",
    "default_app_config",
]
