"""Error taxonomy shared by the storefront orchestration layer."""

from __future__ import annotations


class StorefrontError(RuntimeError):
    """Base class for storefront failures."""


class ConfigError(StorefrontError):
    """Raised when the storefront configuration is invalid."""


class TransportError(StorefrontError):
    """Raised when a network call itself fails (DNS, refused, timeout, bad body)."""


class HttpError(StorefrontError):
    """Raised when a backend answers with a non-2xx status."""

    def __init__(self, status_code: int, reason: str = "") -> None:
        self.status_code = int(status_code)
        self.reason = reason
        detail = f"HTTP {self.status_code}"
        if reason:
            detail = f"{detail}: {reason}"
        super().__init__(detail)


class ValidationError(StorefrontError, ValueError):
    """Raised when a local precondition fails before any network call."""


class BusinessRejection(StorefrontError):
    """Raised when a backend reports a semantic failure on a successful transport."""

    def __init__(self, message: str, *, status: str = "FAILED") -> None:
        self.status = status
        super().__init__(message)


class CatalogFetchError(StorefrontError):
    """Raised when the catalog endpoint is unreachable or returns garbage."""


__all__ = [
    "BusinessRejection",
    "CatalogFetchError",
    "ConfigError",
    "HttpError",
    "StorefrontError",
    "TransportError",
    "ValidationError",
]
