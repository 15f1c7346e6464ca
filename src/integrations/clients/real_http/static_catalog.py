"""
Static Catalog HTTP Client.

Purpose:
- Fetches the baseline catalog documents (products.json, kits.json) from
  static hosting when STATIC_CATALOG_URL is configured.

Implementation notes:
- A non-2xx response raises; the reconciler treats that source as empty.
- This client should be the ONLY place that fetches the hosted baseline.
"""

from __future__ import annotations

import os
from typing import Any, Dict, List, Optional

import httpx

from src.integrations.contracts.interfaces import StaticCatalogSource


class HttpStaticCatalog(StaticCatalogSource):
    def __init__(
        self,
        base_url: Optional[str] = None,
        products_path: str = "data/products.json",
        kits_path: str = "data/kits.json",
        timeout_seconds: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = (base_url or os.getenv("STATIC_CATALOG_URL", "")).rstrip("/")
        self.products_path = products_path.lstrip("/")
        self.kits_path = kits_path.lstrip("/")
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    async def _fetch(self, path: str) -> List[Dict[str, Any]]:
        if not self.base_url:
            raise ValueError("STATIC_CATALOG_URL is not configured.")

        url = f"{self.base_url}/{path}"
        async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self._transport) as client:
            response = await client.get(url)
            response.raise_for_status()
            data = response.json() if response.content else []

        if not isinstance(data, list):
            raise ValueError(f"Expected a JSON array from {url}")
        return data

    async def fetch_products(self) -> List[Dict[str, Any]]:
        return await self._fetch(self.products_path)

    async def fetch_kits(self) -> List[Dict[str, Any]]:
        return await self._fetch(self.kits_path)
