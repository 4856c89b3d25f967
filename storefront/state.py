"""Process-wide coordinator holding the latest published records."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Dict

from .models import Catalog, CatalogSource, HealthSnapshot, SubmissionResult

_EMPTY_CATALOG = Catalog(items=(), source=CatalogSource.LIVE, fetched_at=0.0)


@dataclass
class StorefrontState:
    catalog: Catalog | None = None
    health: HealthSnapshot | None = None
    last_submission: SubmissionResult | None = None
    last_catalog_error: str | None = None
    catalog_loads: int = 0
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)

    @property
    def fallback_active(self) -> bool:
        return bool(self.catalog is not None and self.catalog.is_fallback)

    def current_catalog(self) -> Catalog:
        catalog = self.catalog
        return catalog if catalog is not None else _EMPTY_CATALOG

    def publish_catalog(self, catalog: Catalog) -> None:
        with self._lock:
            self.catalog = catalog
            self.catalog_loads += 1
            if not catalog.is_fallback:
                self.last_catalog_error = None

    def publish_health(self, snapshot: HealthSnapshot) -> None:
        with self._lock:
            self.health = snapshot

    def record_submission(self, result: SubmissionResult) -> None:
        with self._lock:
            self.last_submission = result

    def record_catalog_error(self, message: str) -> None:
        with self._lock:
            self.last_catalog_error = message

    def as_dict(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "catalog": self.catalog.to_dict() if self.catalog else None,
                "health": self.health.to_dict() if self.health else None,
                "last_submission": self.last_submission.to_dict() if self.last_submission else None,
                "last_catalog_error": self.last_catalog_error,
                "fallback_active": self.fallback_active,
            }


_STATE_LOCK = threading.RLock()
_STATE = StorefrontState()


def get_state() -> StorefrontState:
    return _STATE


def reset_for_tests() -> StorefrontState:
    global _STATE
    with _STATE_LOCK:
        _STATE = StorefrontState()
        return _STATE


__all__ = ["StorefrontState", "get_state", "reset_for_tests"]
