"""Fetch the live inventory catalog, with a deterministic offline dataset for degraded mode."""

from __future__ import annotations

import logging

from ..errors import CatalogFetchError, HttpError, TransportError
from ..http import ServiceClient
from ..metrics import CATALOG_LOAD_TOTAL
from ..models import Catalog, CatalogItem, CatalogSource, Endpoint, catalog_from_payload

LOGGER = logging.getLogger(__name__)

DEFAULT_PRODUCTS_PATH = "/api/v1/inventory/products"

FALLBACK_ITEMS: tuple[CatalogItem, ...] = (
    CatalogItem(
        item_id="a1b2c3d4-e5f6-g7h8-i9j0-k1l2m3n4o5p6",
        sku="LAPTOP-001",
        name="Gaming Laptop Pro",
        total_quantity=15,
        reserved_quantity=2,
        available_quantity=13,
    ),
    CatalogItem(
        item_id="b2c3d4e5-f6g7-h8i9-j0k1-l2m3n4o5p6q7",
        sku="PHONE-001",
        name="Smartphone X",
        total_quantity=32,
        reserved_quantity=5,
        available_quantity=27,
    ),
    CatalogItem(
        item_id="c3d4e5f6-g7h8-i9j0-k1l2-m3n4o5p6q7r8",
        sku="BOOK-001",
        name="Clean Code",
        total_quantity=8,
        reserved_quantity=1,
        available_quantity=7,
    ),
)


def fallback_catalog() -> Catalog:
    return Catalog(items=FALLBACK_ITEMS, source=CatalogSource.FALLBACK)


class CatalogLoader:
    def __init__(
        self,
        client: ServiceClient,
        endpoint: Endpoint,
        *,
        products_path: str = DEFAULT_PRODUCTS_PATH,
    ) -> None:
        self._client = client
        self._endpoint = endpoint
        self._products_path = products_path

    @property
    def url(self) -> str:
        return f"{self._endpoint.base_url}{self._products_path}"

    async def load(self) -> Catalog:
        """Return a freshly fetched catalog or raise :class:`CatalogFetchError`."""

        try:
            payload = await self._client.get_json(self.url)
            catalog = catalog_from_payload(payload)
        except (TransportError, HttpError) as exc:
            CATALOG_LOAD_TOTAL.labels(result="error").inc()
            LOGGER.warning("catalog.load_failed", extra={"url": self.url, "error": str(exc)})
            raise CatalogFetchError(f"Error loading products: {exc}") from exc
        except CatalogFetchError as exc:
            CATALOG_LOAD_TOTAL.labels(result="malformed").inc()
            LOGGER.warning("catalog.payload_invalid", extra={"url": self.url, "error": str(exc)})
            raise
        CATALOG_LOAD_TOTAL.labels(result="ok").inc()
        LOGGER.info("catalog.loaded", extra={"items": len(catalog)})
        return catalog


__all__ = ["CatalogLoader", "DEFAULT_PRODUCTS_PATH", "FALLBACK_ITEMS", "fallback_catalog"]
