"""
Integrations layer.
This package contains all code used to communicate with external systems such as:
- the remote document store holding the products collection
- media object storage
- the persisted key-value cache and the bundled static catalog

Key rule:
- Catalog controllers MUST NOT call backends directly.
- Controllers go through the adapters under src/integrations/services.
- We use MOCK clients during development and swap to REAL_HTTP clients when backends are configured.

Switching implementations:
- The selection of mock vs real clients should happen in ONE place (src/api/main.py).
"""

from .contracts.interfaces import AuthSession, ErrorCode, MediaKind, MediaUpload
from .contracts.product_catalogues import (
    Kit,
    MediaItem,
    Product,
    ProductFilter,
    filter_products,
)
from .contracts.results import OperationResult

__all__ = [
    # interfaces
    "AuthSession", "ErrorCode", "MediaKind", "MediaUpload",
    # products
    "Kit", "MediaItem", "Product", "ProductFilter", "filter_products",
    # results
    "OperationResult",
]
