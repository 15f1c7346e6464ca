"""Pytest fixtures for catalog, adapter and API tests."""

import json
from datetime import datetime, timedelta, timezone

import pytest

from src.catalog.events import EventBus
from src.database.postgres import ProductDocumentStore
from src.database.redis import RedisCache
from src.integrations.clients.mocks import BundledStaticCatalog, InMemoryBlobStore
from src.integrations.contracts.interfaces import AuthSession
from src.integrations.services.blob_service import BlobStoreAdapter
from src.integrations.services.local_cache import LocalCacheAdapter
from src.integrations.services.remote_store import RemoteStoreAdapter


STATIC_PRODUCTS = [
    {"id": 1, "name": "Fone", "description": "Fone bluetooth", "image": "https://img.test/fone.png",
     "shopeeLink": "https://shopee.test/p/1", "category": "eletronicos", "price": 100.0},
    {"id": 2, "name": "Garrafa", "description": "Garrafa térmica", "image": "",
     "shopeeLink": "https://shopee.test/p/2", "category": "casa", "price": 50.0},
]

STATIC_KITS = [
    {"id": 101, "name": "Kit Casa", "description": "Para casa", "image": "https://img.test/kit.png",
     "productIds": [1, 2, 999]},
]


class TickingClock:
    """Deterministic clock: every call moves forward one second."""

    def __init__(self, start=datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self):
        self.now = self.now + timedelta(seconds=1)
        return self.now


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def session():
    return AuthSession(token="tok-123", uid="admin-uid", email="admin@example.com")


@pytest.fixture
def kv_store():
    """In-memory key-value stub for tests."""
    return RedisCache()


@pytest.fixture
def doc_store():
    """In-memory document store stub for tests."""
    return ProductDocumentStore()


@pytest.fixture
def blob_store():
    return InMemoryBlobStore()


@pytest.fixture
def static_dir(tmp_path):
    (tmp_path / "products.json").write_text(json.dumps(STATIC_PRODUCTS), encoding="utf-8")
    (tmp_path / "kits.json").write_text(json.dumps(STATIC_KITS), encoding="utf-8")
    return tmp_path


@pytest.fixture
def static_source(static_dir):
    return BundledStaticCatalog(data_dir=static_dir)


@pytest.fixture
def local_cache(kv_store):
    return LocalCacheAdapter(kv_store)


@pytest.fixture
def remote_store(doc_store, clock):
    return RemoteStoreAdapter(doc_store, clock=clock)


@pytest.fixture
def blob_adapter(blob_store):
    ticks = iter(range(1_700_000_000_000, 1_800_000_000_000))
    return BlobStoreAdapter(blob_store, clock_ms=lambda: next(ticks))


@pytest.fixture
def events():
    return EventBus()
