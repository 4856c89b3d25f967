"""Single-shot checkout submission with local validation, timing and classification."""

from __future__ import annotations

import logging
import time
from typing import Any, Awaitable, Callable, Mapping

import httpx

from ..errors import BusinessRejection, TransportError, ValidationError
from ..http import ServiceClient, decode_json
from ..metrics import SUBMISSION_LATENCY_SECONDS, SUBMISSION_TOTAL
from ..models import (
    Catalog,
    Endpoint,
    SubmissionOutcome,
    SubmissionRequest,
    SubmissionResult,
)
from ..timers import TaskTimers

LOGGER = logging.getLogger(__name__)

DEFAULT_PROCESS_PATH = "/api/v1/checkout/process"
DEFAULT_RELOAD_DELAY_SEC = 1.0
STATUS_INVALID = "INVALID"
STATUS_FAILED = "FAILED"

ReloadCallback = Callable[[], Awaitable[Any]]


def validate_submission(item_id: str, quantity: Any, catalog: Catalog | None) -> None:
    """Raise :class:`ValidationError` when the submission cannot be sent."""

    if not item_id:
        raise ValidationError("Please select a product")
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise ValidationError("Please enter a valid quantity")
    item = catalog.find(item_id) if catalog is not None else None
    if item is not None and quantity > item.available_quantity:
        raise ValidationError(
            f"Insufficient stock! Only {item.available_quantity} available."
        )


def _optional_str(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def _optional_amount(value: Any) -> float | None:
    try:
        return None if value is None else float(value)
    except (TypeError, ValueError):
        return None


def _ensure_accepted(response: httpx.Response, body: Mapping[str, Any]) -> None:
    if response.is_success and body.get("success") is True:
        return
    message = _optional_str(body.get("errorMessage")) or "Unknown error"
    status = _optional_str(body.get("status")) or STATUS_FAILED
    raise BusinessRejection(message, status=status)


class TransactionSubmitter:
    def __init__(
        self,
        client: ServiceClient,
        endpoint: Endpoint,
        *,
        reload_catalog: ReloadCallback | None = None,
        process_path: str = DEFAULT_PROCESS_PATH,
        reload_delay_sec: float = DEFAULT_RELOAD_DELAY_SEC,
        timers: TaskTimers | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._client = client
        self._endpoint = endpoint
        self._reload_catalog = reload_catalog
        self._process_path = process_path
        self._reload_delay = max(float(reload_delay_sec), 0.0)
        self._timers = timers or TaskTimers()
        self._clock = clock or time.perf_counter

    @property
    def url(self) -> str:
        return f"{self._endpoint.base_url}{self._process_path}"

    @property
    def timers(self) -> TaskTimers:
        return self._timers

    async def submit(
        self,
        item_id: str,
        quantity: int,
        payment_method: str,
        current_catalog: Catalog | None,
    ) -> SubmissionResult:
        try:
            validate_submission(item_id, quantity, current_catalog)
        except ValidationError as exc:
            LOGGER.info("checkout.validation_failed", extra={"item_id": item_id, "error": str(exc)})
            return self._finish(
                SubmissionResult(
                    outcome=SubmissionOutcome.REJECTED,
                    status=STATUS_INVALID,
                    elapsed_ms=0,
                    error_message=str(exc),
                    validation_failure=True,
                )
            )

        request = SubmissionRequest.single(item_id, quantity, payment_method)
        started = self._clock()
        try:
            response = await self._client.request("POST", self.url, json=request.to_payload())
            body = decode_json(response)
            if not isinstance(body, Mapping):
                raise TransportError(f"malformed response body from {self.url}")
        except TransportError as exc:
            elapsed_ms = self._elapsed_ms(started)
            LOGGER.warning(
                "checkout.transport_failed",
                extra={"idempotency_key": request.idempotency_key, "error": str(exc)},
            )
            return self._finish(
                SubmissionResult(
                    outcome=SubmissionOutcome.TRANSPORT_FAILURE,
                    status=STATUS_FAILED,
                    elapsed_ms=elapsed_ms,
                    error_message=str(exc),
                    idempotency_key=request.idempotency_key,
                )
            )
        elapsed_ms = self._elapsed_ms(started)

        try:
            _ensure_accepted(response, body)
        except BusinessRejection as exc:
            LOGGER.info(
                "checkout.rejected",
                extra={
                    "idempotency_key": request.idempotency_key,
                    "status_code": response.status_code,
                    "status": exc.status,
                    "error": str(exc),
                },
            )
            return self._finish(
                SubmissionResult(
                    outcome=SubmissionOutcome.REJECTED,
                    status=exc.status,
                    elapsed_ms=elapsed_ms,
                    error_message=str(exc),
                    idempotency_key=request.idempotency_key,
                )
            )

        result = SubmissionResult(
            outcome=SubmissionOutcome.SUCCESS,
            status=_optional_str(body.get("status")) or "COMPLETED",
            elapsed_ms=elapsed_ms,
            order_id=_optional_str(body.get("orderId")),
            transaction_id=_optional_str(body.get("checkoutId")),
            total_amount=_optional_amount(body.get("totalAmount")),
            idempotency_key=request.idempotency_key,
        )
        LOGGER.info(
            "checkout.succeeded",
            extra={"order_id": result.order_id, "elapsed_ms": elapsed_ms},
        )
        self._schedule_reload()
        return self._finish(result)

    def _elapsed_ms(self, started: float) -> int:
        return max(int((self._clock() - started) * 1000), 0)

    def _schedule_reload(self) -> None:
        if self._reload_catalog is None:
            return
        self._timers.call_later(
            self._reload_delay,
            self._reload_catalog,
            name="checkout.catalog_reload",
        )

    @staticmethod
    def _finish(result: SubmissionResult) -> SubmissionResult:
        SUBMISSION_TOTAL.labels(outcome=result.outcome.value).inc()
        if not result.validation_failure:
            SUBMISSION_LATENCY_SECONDS.labels(outcome=result.outcome.value).observe(
                result.elapsed_ms / 1000.0
            )
        return result


__all__ = [
    "DEFAULT_PROCESS_PATH",
    "DEFAULT_RELOAD_DELAY_SEC",
    "TransactionSubmitter",
    "validate_submission",
]
