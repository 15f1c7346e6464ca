"""
Lightweight in-memory key-value cache replacement for local development.

This implements the KeyValueStore interface backing the local cache
(products/kits arrays, admin unlock flag, auth sessions) so the app can run
without a real Redis instance.
"""

from __future__ import annotations

import time
from typing import Dict, Optional, Tuple

from src.integrations.contracts.interfaces import KeyValueStore


class RedisCache(KeyValueStore):
    def __init__(self) -> None:
        # key -> (value, expires_at or None)
        self._data: Dict[str, Tuple[str, Optional[float]]] = {}

    def get(self, key: str) -> Optional[str]:
        entry = self._data.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and expires_at <= time.monotonic():
            self._data.pop(key, None)
            return None
        return value

    def set(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        expires_at = time.monotonic() + ttl if ttl else None
        self._data[key] = (str(value), expires_at)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def ping(self) -> bool:
        """
        FastAPI health check calls this; always return True so the API reports
        the cache as "connected" in local/dev mode.
        """
        return True
