"""Read-only explorer for the inventory service's public endpoints."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable

from ..errors import HttpError, ValidationError
from ..http import ServiceClient, decode_json
from ..models import Endpoint

LOGGER = logging.getLogger(__name__)

EXPLORABLE_PATHS: tuple[str, ...] = (
    "/api/v1/inventory/products",
    "/api/v1/inventory/value",
    "/api/v1/inventory/low-stock",
)
CHECKOUT_PATH = "/api/v1/checkout/process"


@dataclass(frozen=True, slots=True)
class ExplorerResult:
    method: str
    path: str
    status_code: int
    response_ms: int
    payload: Any

    def to_dict(self) -> dict[str, Any]:
        return {
            "method": self.method,
            "path": self.path,
            "status_code": self.status_code,
            "response_ms": self.response_ms,
            "payload": self.payload,
        }


class InventoryExplorer:
    def __init__(
        self,
        client: ServiceClient,
        endpoint: Endpoint,
        *,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._client = client
        self._endpoint = endpoint
        self._clock = clock or time.perf_counter

    async def explore(self, path: str) -> ExplorerResult:
        path = (path or "").strip()
        if not path:
            raise ValidationError("Please select an endpoint")
        if path == CHECKOUT_PATH:
            raise ValidationError("Use the checkout command for interactive checkout testing")
        if path not in EXPLORABLE_PATHS:
            raise ValidationError(f"Endpoint not configured: {path}")
        url = f"{self._endpoint.base_url}{path}"
        started = self._clock()
        response = await self._client.request("GET", url)
        response_ms = int((self._clock() - started) * 1000)
        if not response.is_success:
            raise HttpError(response.status_code, response.reason_phrase)
        payload = decode_json(response)
        LOGGER.debug("explorer.response", extra={"path": path, "response_ms": response_ms})
        return ExplorerResult(
            method="GET",
            path=path,
            status_code=response.status_code,
            response_ms=response_ms,
            payload=payload,
        )


__all__ = ["CHECKOUT_PATH", "EXPLORABLE_PATHS", "ExplorerResult", "InventoryExplorer"]
