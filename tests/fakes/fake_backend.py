"""In-process stand-in for the commerce backend services."""

from __future__ import annotations

import asyncio
import json
from collections import Counter
from typing import Any, Awaitable, Callable

import httpx

Handler = Callable[[httpx.Request], httpx.Response | Awaitable[httpx.Response]]


class FakeBackend:
    """Route requests by ``(method, url)``; unknown routes refuse the connection."""

    def __init__(self) -> None:
        self._routes: dict[tuple[str, str], Handler] = {}
        self.requests: list[httpx.Request] = []
        self.hits: Counter[tuple[str, str]] = Counter()

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)

    def route(self, method: str, url: str, handler: Handler) -> None:
        self._routes[(method.upper(), url)] = handler

    def json(self, method: str, url: str, payload: Any, *, status_code: int = 200) -> None:
        self.route(method, url, lambda request: httpx.Response(status_code, json=payload))

    def text(self, method: str, url: str, body: str, *, status_code: int = 200) -> None:
        self.route(method, url, lambda request: httpx.Response(status_code, text=body))

    def refuse(self, method: str, url: str) -> None:
        def _refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        self.route(method, url, _refuse)

    def explode(self, method: str, url: str, exc: Exception) -> None:
        def _explode(request: httpx.Request) -> httpx.Response:
            raise exc

        self.route(method, url, _explode)

    def gated(self, method: str, url: str, gate: asyncio.Event, payload: Any) -> None:
        async def _wait(request: httpx.Request) -> httpx.Response:
            await gate.wait()
            return httpx.Response(200, json=payload)

        self.route(method, url, _wait)

    def delayed(self, method: str, url: str, delay: float, payload: Any) -> None:
        async def _wait(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(delay)
            return httpx.Response(200, json=payload)

        self.route(method, url, _wait)

    def count(self, method: str, url: str) -> int:
        return self.hits[(method.upper(), url)]

    def body(self, index: int = -1) -> Any:
        return json.loads(self.requests[index].content)

    def _handle(self, request: httpx.Request):
        url = request.url
        key = (request.method, f"{url.scheme}://{url.netloc.decode()}{url.path}")
        self.requests.append(request)
        self.hits[key] += 1
        handler = self._routes.get(key)
        if handler is None:
            raise httpx.ConnectError("connection refused", request=request)
        return handler(request)
