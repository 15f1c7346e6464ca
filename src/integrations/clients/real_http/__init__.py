"""
Real HTTP integration clients.

These clients communicate with real external systems via HTTP, e.g.:
- an object storage endpoint for product media (images / videos)
- static hosting serving the baseline products.json / kits.json

Important:
- Must implement the same interfaces as the mock clients
- Must return data shaped according to src/integrations/contracts/*

Switching:
The selection of mock vs real clients should happen in src/api/main.py only.
"""

from .blob_store import HttpBlobStore
from .static_catalog import HttpStaticCatalog

__all__ = ["HttpBlobStore", "HttpStaticCatalog"]
