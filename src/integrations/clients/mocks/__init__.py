"""
Mock / local integration clients.

These clients serve the storefront without any external service:
- InMemoryBlobStore keeps uploaded media bytes in process memory
- BundledStaticCatalog reads the baseline catalog from data/*.json on disk

They are used when:
- No object storage / static hosting is configured
- We want to test flows end-to-end without external dependencies

Important:
- Mock clients must follow the SAME interface as real HTTP clients.
- Mock clients should return data shaped according to src/integrations/contracts/*

Switching to real:
When BLOB_STORE_URL / STATIC_CATALOG_URL are provided, src/api/main.py wires
the clients/real_http/* implementations instead.
"""

from .blob_store import InMemoryBlobStore
from .static_catalog import BundledStaticCatalog

__all__ = ["InMemoryBlobStore", "BundledStaticCatalog"]
