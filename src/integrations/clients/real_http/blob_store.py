"""
Real Blob Store HTTP Client.

Used when BLOB_STORE_URL is configured. Objects are written with
PUT {base_url}/{path} and removed with DELETE {base_url}/{path}; public
URLs are {public_base_url}/{path}.
"""

from __future__ import annotations

import os
from typing import Dict, Optional
from urllib.parse import quote

import httpx

from src.integrations.contracts.interfaces import BlobStore


class HttpBlobStore(BlobStore):
    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        public_base_url: Optional[str] = None,
        timeout_seconds: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = (base_url or os.getenv("BLOB_STORE_URL", "")).rstrip("/")
        self.api_key = api_key or os.getenv("BLOB_STORE_API_KEY", "")
        self.public_base_url = (public_base_url or os.getenv("BLOB_PUBLIC_URL", "") or self.base_url).rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    def _headers(self, content_type: Optional[str] = None) -> Dict[str, str]:
        headers: Dict[str, str] = {}
        if content_type:
            headers["Content-Type"] = content_type
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _object_url(self, path: str) -> str:
        return f"{self.base_url}/{quote(path)}"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout_seconds, transport=self._transport)

    async def put(self, path: str, data: bytes, content_type: str) -> str:
        if not self.base_url:
            raise ValueError("BLOB_STORE_URL is not configured.")

        async with self._client() as client:
            response = await client.put(self._object_url(path), content=data, headers=self._headers(content_type))
            response.raise_for_status()

        return f"{self.public_base_url}/{quote(path)}"

    async def delete(self, path: str) -> None:
        if not self.base_url:
            raise ValueError("BLOB_STORE_URL is not configured.")

        async with self._client() as client:
            response = await client.delete(self._object_url(path), headers=self._headers())
            if response.status_code == 404:
                raise FileNotFoundError(path)
            response.raise_for_status()

    async def url_for(self, path: str) -> str:
        async with self._client() as client:
            response = await client.head(self._object_url(path), headers=self._headers())
            if response.status_code == 404:
                raise FileNotFoundError(path)
            response.raise_for_status()
        return f"{self.public_base_url}/{quote(path)}"
