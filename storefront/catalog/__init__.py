from .explorer import ExplorerResult, InventoryExplorer
from .loader import FALLBACK_ITEMS, CatalogLoader, fallback_catalog

__all__ = [
    "CatalogLoader",
    "ExplorerResult",
    "FALLBACK_ITEMS",
    "InventoryExplorer",
    "fallback_catalog",
]
