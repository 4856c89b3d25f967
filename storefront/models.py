"""Immutable records exchanged between the orchestration core and display sinks."""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Mapping, Sequence

from .errors import CatalogFetchError

LOW_STOCK_THRESHOLD = 10
EXCELLENT_MS = 300
GOOD_MS = 800


class HealthStatus(str, Enum):
    UP = "UP"
    DOWN = "DOWN"


class SubmissionOutcome(str, Enum):
    SUCCESS = "SUCCESS"
    REJECTED = "REJECTED"
    TRANSPORT_FAILURE = "TRANSPORT_FAILURE"


class CatalogSource(str, Enum):
    LIVE = "live"
    FALLBACK = "fallback"


class Performance(str, Enum):
    EXCELLENT = "EXCELLENT"
    GOOD = "GOOD"
    ACCEPTABLE = "ACCEPTABLE"

    @classmethod
    def rate(cls, elapsed_ms: int) -> "Performance":
        if elapsed_ms < EXCELLENT_MS:
            return cls.EXCELLENT
        if elapsed_ms < GOOD_MS:
            return cls.GOOD
        return cls.ACCEPTABLE


@dataclass(frozen=True, slots=True)
class Endpoint:
    id: str
    display_label: str
    port: int
    base_url: str
    health_path: str

    @property
    def health_url(self) -> str:
        return f"{self.base_url}{self.health_path}"


def _coerce_int(payload: Mapping[str, Any], key: str) -> int:
    value = payload.get(key)
    if isinstance(value, bool) or value is None:
        raise CatalogFetchError(f"catalog item field '{key}' is missing or not an integer")
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise CatalogFetchError(f"catalog item field '{key}' is not an integer: {value!r}") from exc
    if number != value and not isinstance(value, str):
        raise CatalogFetchError(f"catalog item field '{key}' is not an integer: {value!r}")
    return number


@dataclass(frozen=True, slots=True)
class CatalogItem:
    item_id: str
    sku: str
    name: str
    total_quantity: int
    reserved_quantity: int
    available_quantity: int

    def __post_init__(self) -> None:
        if not self.item_id:
            raise CatalogFetchError("catalog item is missing its identifier")
        if self.reserved_quantity < 0:
            raise CatalogFetchError(f"{self.item_id}: reserved quantity is negative")
        if self.available_quantity != self.total_quantity - self.reserved_quantity:
            raise CatalogFetchError(
                f"{self.item_id}: available {self.available_quantity} != "
                f"total {self.total_quantity} - reserved {self.reserved_quantity}"
            )
        if self.available_quantity < 0:
            raise CatalogFetchError(f"{self.item_id}: available quantity is negative")

    @classmethod
    def from_payload(cls, payload: Any) -> "CatalogItem":
        if not isinstance(payload, Mapping):
            raise CatalogFetchError(f"catalog item must be an object, got {type(payload).__name__}")
        total = _coerce_int(payload, "quantity")
        reserved = _coerce_int(payload, "reservedQuantity")
        if "availableQuantity" in payload:
            available = _coerce_int(payload, "availableQuantity")
        else:
            available = total - reserved
        return cls(
            item_id=str(payload.get("productId") or ""),
            sku=str(payload.get("sku") or ""),
            name=str(payload.get("productName") or ""),
            total_quantity=total,
            reserved_quantity=reserved,
            available_quantity=available,
        )

    @property
    def stock_level(self) -> str:
        return "low" if self.available_quantity < LOW_STOCK_THRESHOLD else "in_stock"

    def to_dict(self) -> dict[str, Any]:
        return {
            "productId": self.item_id,
            "sku": self.sku,
            "productName": self.name,
            "quantity": self.total_quantity,
            "reservedQuantity": self.reserved_quantity,
            "availableQuantity": self.available_quantity,
            "stockLevel": self.stock_level,
        }


@dataclass(frozen=True, slots=True)
class Catalog:
    items: tuple[CatalogItem, ...]
    source: CatalogSource = CatalogSource.LIVE
    fetched_at: float = field(default_factory=time.time)

    def __iter__(self) -> Iterator[CatalogItem]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    @property
    def is_fallback(self) -> bool:
        return self.source is CatalogSource.FALLBACK

    def find(self, item_id: str) -> CatalogItem | None:
        for item in self.items:
            if item.item_id == item_id:
                return item
        return None

    def low_stock(self, threshold: int = LOW_STOCK_THRESHOLD) -> list[CatalogItem]:
        return [item for item in self.items if item.available_quantity < threshold]

    def total_units(self) -> int:
        return sum(item.available_quantity for item in self.items)

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source.value,
            "fetched_at": self.fetched_at,
            "items": [item.to_dict() for item in self.items],
        }


@dataclass(frozen=True, slots=True)
class HealthOutcome:
    endpoint: Endpoint
    status: HealthStatus
    latency_ms: int | None = None
    error_detail: str | None = None

    def __post_init__(self) -> None:
        if self.status is HealthStatus.UP:
            if self.latency_ms is None or self.error_detail is not None:
                raise ValueError("UP outcome requires latency_ms and no error_detail")
        elif self.error_detail is None or self.latency_ms is not None:
            raise ValueError("DOWN outcome requires error_detail and no latency_ms")

    @classmethod
    def up(cls, endpoint: Endpoint, latency_ms: int) -> "HealthOutcome":
        return cls(endpoint=endpoint, status=HealthStatus.UP, latency_ms=max(int(latency_ms), 0))

    @classmethod
    def down(cls, endpoint: Endpoint, error_detail: str) -> "HealthOutcome":
        return cls(endpoint=endpoint, status=HealthStatus.DOWN, error_detail=error_detail or "unknown error")

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.endpoint.id,
            "name": self.endpoint.display_label,
            "port": self.endpoint.port,
            "status": self.status.value,
        }
        if self.status is HealthStatus.UP:
            payload["latency_ms"] = self.latency_ms
        else:
            payload["error"] = self.error_detail
        return payload


@dataclass(frozen=True, slots=True)
class HealthSnapshot:
    outcomes: tuple[HealthOutcome, ...]
    taken_at: float = field(default_factory=time.time)

    def __iter__(self) -> Iterator[HealthOutcome]:
        return iter(self.outcomes)

    def __len__(self) -> int:
        return len(self.outcomes)

    @property
    def up_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status is HealthStatus.UP)

    @property
    def down(self) -> list[HealthOutcome]:
        return [outcome for outcome in self.outcomes if outcome.status is HealthStatus.DOWN]

    @property
    def all_up(self) -> bool:
        return self.up_count == len(self.outcomes)

    def get(self, endpoint_id: str) -> HealthOutcome | None:
        for outcome in self.outcomes:
            if outcome.endpoint.id == endpoint_id:
                return outcome
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "taken_at": self.taken_at,
            "up": self.up_count,
            "total": len(self.outcomes),
            "services": [outcome.to_dict() for outcome in self.outcomes],
        }


def new_token() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True, slots=True)
class SubmissionLine:
    item_id: str
    quantity: int


@dataclass(frozen=True, slots=True)
class SubmissionRequest:
    customer_id: str
    items: tuple[SubmissionLine, ...]
    payment_method: str
    idempotency_key: str

    @classmethod
    def single(cls, item_id: str, quantity: int, payment_method: str) -> "SubmissionRequest":
        return cls(
            customer_id=new_token(),
            items=(SubmissionLine(item_id=item_id, quantity=quantity),),
            payment_method=payment_method,
            idempotency_key=new_token(),
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "customerId": self.customer_id,
            "items": [{"productId": line.item_id, "quantity": line.quantity} for line in self.items],
            "paymentMethod": self.payment_method,
            "idempotencyKey": self.idempotency_key,
        }


@dataclass(frozen=True, slots=True)
class SubmissionResult:
    outcome: SubmissionOutcome
    status: str
    elapsed_ms: int
    order_id: str | None = None
    transaction_id: str | None = None
    total_amount: float | None = None
    error_message: str | None = None
    validation_failure: bool = False
    idempotency_key: str | None = None

    @property
    def ok(self) -> bool:
        return self.outcome is SubmissionOutcome.SUCCESS

    @property
    def performance(self) -> Performance | None:
        if self.outcome is not SubmissionOutcome.SUCCESS:
            return None
        return Performance.rate(self.elapsed_ms)

    def to_dict(self) -> dict[str, Any]:
        performance = self.performance
        return {
            "outcome": self.outcome.value,
            "status": self.status,
            "elapsed_ms": self.elapsed_ms,
            "order_id": self.order_id,
            "transaction_id": self.transaction_id,
            "total_amount": self.total_amount,
            "error_message": self.error_message,
            "validation_failure": self.validation_failure,
            "performance": performance.value if performance else None,
        }


def catalog_from_payload(
    payload: Any,
    *,
    source: CatalogSource = CatalogSource.LIVE,
) -> Catalog:
    # All-or-nothing: one item breaking the stock invariant rejects the whole
    # payload, and the caller falls back to the sample catalog.
    if not isinstance(payload, Sequence) or isinstance(payload, (str, bytes)):
        raise CatalogFetchError(f"catalog payload must be a list, got {type(payload).__name__}")
    items = tuple(CatalogItem.from_payload(entry) for entry in payload)
    return Catalog(items=items, source=source)


__all__ = [
    "Catalog",
    "CatalogItem",
    "CatalogSource",
    "Endpoint",
    "HealthOutcome",
    "HealthSnapshot",
    "HealthStatus",
    "LOW_STOCK_THRESHOLD",
    "Performance",
    "SubmissionLine",
    "SubmissionOutcome",
    "SubmissionRequest",
    "SubmissionResult",
    "catalog_from_payload",
    "new_token",
]
