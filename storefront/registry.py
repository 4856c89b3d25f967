"""Static registry of the backend services the console talks to."""

from __future__ import annotations

from typing import Iterable, Iterator, Sequence

from .config.schema import AppConfig, EndpointConfig
from .models import Endpoint


class EndpointRegistry(Sequence[Endpoint]):
    """Ordered, immutable collection of :class:`Endpoint` entries."""

    def __init__(self, endpoints: Iterable[Endpoint]) -> None:
        self._endpoints: tuple[Endpoint, ...] = tuple(endpoints)
        self._by_id = {endpoint.id: endpoint for endpoint in self._endpoints}
        if len(self._by_id) != len(self._endpoints):
            raise ValueError("endpoint ids must be unique")

    @classmethod
    def from_config(cls, config: AppConfig) -> "EndpointRegistry":
        return cls(_endpoint_from_config(entry) for entry in config.endpoints)

    def __getitem__(self, index):  # type: ignore[override]
        return self._endpoints[index]

    def __len__(self) -> int:
        return len(self._endpoints)

    def __iter__(self) -> Iterator[Endpoint]:
        return iter(self._endpoints)

    def get(self, endpoint_id: str) -> Endpoint:
        try:
            return self._by_id[endpoint_id]
        except KeyError:
            raise KeyError(f"unknown endpoint: {endpoint_id}") from None

    def ids(self) -> list[str]:
        return [endpoint.id for endpoint in self._endpoints]


def _endpoint_from_config(entry: EndpointConfig) -> Endpoint:
    return Endpoint(
        id=entry.id,
        display_label=entry.label,
        port=entry.port,
        base_url=entry.base_url,
        health_path=entry.health_path,
    )


__all__ = ["EndpointRegistry"]
