"""
Real Redis-backed key-value cache for production when REDIS_URL is set.
Implements the same interface as src.database.redis (in-memory stub).
"""

from __future__ import annotations

from typing import Optional

import redis

from src.integrations.contracts.interfaces import KeyValueStore


class RedisCache(KeyValueStore):
    """
    Redis-backed local cache. Use when REDIS_URL is set in production.
    """

    def __init__(self, url: str, namespace: str = "storefront", client=None) -> None:
        self._client = client or redis.from_url(url, decode_responses=True)
        self._namespace = namespace

    def _key(self, key: str) -> str:
        return f"{self._namespace}:{key}" if self._namespace else key

    def get(self, key: str) -> Optional[str]:
        return self._client.get(self._key(key))

    def set(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        if ttl:
            self._client.setex(self._key(key), ttl, value)
        else:
            self._client.set(self._key(key), value)

    def delete(self, key: str) -> None:
        self._client.delete(self._key(key))

    def ping(self) -> bool:
        try:
            return bool(self._client.ping())
        except Exception:
            return False
