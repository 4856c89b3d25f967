"""Thin async HTTP helper mapping httpx failures onto the storefront error taxonomy."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .errors import HttpError, TransportError

LOGGER = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SEC = 5.0


class ServiceClient:
    """Issue single requests against backend services.

    A fresh :class:`httpx.AsyncClient` is opened per call. ``transport`` lets
    tests plug an :class:`httpx.MockTransport` in place of the network.
    """

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_TIMEOUT_SEC,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.timeout = float(timeout)
        self._transport = transport

    async def request(
        self,
        method: str,
        url: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> httpx.Response:
        headers = {"Accept": "application/json"}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.request(method, url, json=json, params=params, headers=headers)
        except httpx.TimeoutException as exc:
            raise TransportError(f"timeout after {self.timeout:g}s: {method} {url}") from exc
        except httpx.HTTPError as exc:
            raise TransportError(str(exc) or exc.__class__.__name__) from exc
        return response

    async def get_json(self, url: str, *, params: dict[str, Any] | None = None) -> Any:
        response = await self.request("GET", url, params=params)
        if not response.is_success:
            raise HttpError(response.status_code, response.reason_phrase)
        return decode_json(response)


def decode_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        raise TransportError(f"malformed response body from {response.request.url}") from exc


__all__ = ["DEFAULT_TIMEOUT_SEC", "ServiceClient", "decode_json"]
