"""
Contracts (data models).

This folder defines the shapes shared by the storefront backends and services:
- Product / Kit / MediaItem catalog entries (and their cache/wire aliases)
- The uniform OperationResult returned by every adapter and controller
- Abstract backend interfaces (document store, key-value cache, blob store,
  static catalog source)

Why this exists:
- In-memory stand-ins and real backends must be interchangeable
- Local cache, remote store and static JSON all carry the same entry format
- Controllers and the API rely on stable models, not on ad-hoc dicts

Both mock and real clients should use these contracts.
"""

from .interfaces import (
    AuthSession,
    BlobStore,
    DocumentStore,
    ErrorCode,
    KeyValueStore,
    MediaKind,
    MediaUpload,
    StaticCatalogSource,
)
from .product_catalogues import (
    CatalogEntry,
    EntryId,
    Kit,
    MediaItem,
    Product,
    ProductFilter,
    filter_products,
)
from .results import OperationResult

__all__ = [
    "AuthSession",
    "BlobStore",
    "CatalogEntry",
    "DocumentStore",
    "EntryId",
    "ErrorCode",
    "KeyValueStore",
    "Kit",
    "MediaItem",
    "MediaKind",
    "MediaUpload",
    "OperationResult",
    "Product",
    "ProductFilter",
    "StaticCatalogSource",
    "filter_products",
]
