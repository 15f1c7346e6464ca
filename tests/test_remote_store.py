from datetime import datetime, timedelta

import pytest

from src.database.postgres_real import ProductDocumentStore, _normalize_connection_string
from src.integrations.contracts.interfaces import ErrorCode
from src.integrations.contracts.product_catalogues import MediaItem
from src.integrations.services.remote_store import RemoteStoreAdapter


@pytest.fixture
def sql_store(tmp_path):
    store = ProductDocumentStore(connection_string=f"sqlite:///{tmp_path / 'products.db'}")
    store.create_tables()
    return store


@pytest.mark.asyncio
async def test_create_stamps_author_and_timestamps(remote_store, doc_store, session):
    result = await remote_store.create({"name": "P", "shopeeLink": "https://shopee.test/p"}, session)

    doc = doc_store.get(result.payload["id"])
    assert doc["createdBy"] == session.uid
    assert isinstance(doc["createdAt"], datetime)
    assert doc["createdAt"] == doc["updatedAt"]


@pytest.mark.asyncio
async def test_update_stamps_updated_by(remote_store, doc_store, session):
    created = await remote_store.create({"name": "P"}, session)
    before = doc_store.get(created.payload["id"])

    result = await remote_store.update(created.payload["id"], {"name": "Q"}, session)

    doc = doc_store.get(created.payload["id"])
    assert result.success
    assert doc["name"] == "Q"
    assert doc["updatedBy"] == session.uid
    assert doc["updatedAt"] > before["updatedAt"]
    assert doc["createdAt"] == before["createdAt"]


@pytest.mark.asyncio
async def test_writes_require_session(remote_store, doc_store):
    assert (await remote_store.create({"name": "P"}, None)).error_code == ErrorCode.UNAUTHENTICATED
    assert (await remote_store.update("x", {"name": "P"}, None)).is_unauthenticated
    assert (await remote_store.delete("x", None)).is_unauthenticated
    assert doc_store.list_all() == []


@pytest.mark.asyncio
async def test_missing_records_are_not_found(remote_store, session):
    assert (await remote_store.get("nope")).error_code == ErrorCode.NOT_FOUND
    assert (await remote_store.update("nope", {"name": "x"}, session)).error_code == ErrorCode.NOT_FOUND
    assert (await remote_store.delete("nope", session)).error_code == ErrorCode.NOT_FOUND


@pytest.mark.asyncio
async def test_get_all_is_newest_first(remote_store, session):
    for name in ("a", "b", "c"):
        await remote_store.create({"name": name}, session)

    result = await remote_store.get_all()

    assert [p.name for p in result.payload] == ["c", "b", "a"]


@pytest.mark.asyncio
async def test_get_all_skips_malformed_documents(remote_store, doc_store, session):
    await remote_store.create({"name": "ok"}, session)
    doc_store.add({"name": "bad", "media": [{"type": "audio"}]})

    result = await remote_store.get_all()

    assert [p.name for p in result.payload] == ["ok"]


@pytest.mark.asyncio
async def test_store_faults_become_failure_results(session):
    class BrokenStore:
        def add(self, data):
            raise ConnectionError("db down")

        def list_all(self):
            raise ConnectionError("db down")

    adapter = RemoteStoreAdapter(BrokenStore())

    created = await adapter.create({"name": "P"}, session)
    listed = await adapter.get_all()

    assert created.error_code == ErrorCode.STORE_FAILURE
    assert "db down" in created.error
    assert listed.error_code == ErrorCode.STORE_FAILURE
    assert listed.payload == []


@pytest.mark.asyncio
async def test_sql_store_round_trip(sql_store, session, clock):
    adapter = RemoteStoreAdapter(sql_store, clock=clock)
    media = [MediaItem(kind="image", url="https://cdn.test/a.png", path="products/x/images/1_a.png")]

    created = await adapter.create(
        {"name": "Fone", "shopeeLink": "https://shopee.test/p", "price": 10.5, "media": media, "badge": "novo"},
        session,
    )
    product = (await adapter.get(created.payload["id"])).payload

    assert product.name == "Fone"
    assert product.link == "https://shopee.test/p"
    assert product.price == 10.5
    assert product.media[0].url == "https://cdn.test/a.png"
    assert sql_store.get(created.payload["id"])["badge"] == "novo"


@pytest.mark.asyncio
async def test_sql_store_update_delete_and_order(sql_store, session, clock):
    adapter = RemoteStoreAdapter(sql_store, clock=clock)
    first = await adapter.create({"name": "first"}, session)
    await adapter.create({"name": "second"}, session)

    assert (await adapter.update(first.payload["id"], {"name": "first!"}, session)).success
    assert [p.name for p in (await adapter.get_all()).payload] == ["second", "first!"]

    assert (await adapter.delete(first.payload["id"], session)).success
    assert (await adapter.get(first.payload["id"])).error_code == ErrorCode.NOT_FOUND
    assert sql_store.ping()


def test_normalize_connection_string():
    assert _normalize_connection_string("  'postgres://u:p@h/db' ") == "postgresql+psycopg://u:p@h/db"
    assert _normalize_connection_string("psql postgresql://u@h/db") == "postgresql+psycopg://u@h/db"
    assert _normalize_connection_string("sqlite:///x.db") == "sqlite:///x.db"


@pytest.mark.asyncio
async def test_default_clock_stamps_aware_utc(doc_store, session):
    adapter = RemoteStoreAdapter(doc_store)

    created = await adapter.create({"name": "P"}, session)

    stamped = doc_store.get(created.payload["id"])["createdAt"]
    assert stamped.utcoffset() == timedelta(0)
    assert session.created_at.utcoffset() == timedelta(0)


@pytest.mark.asyncio
async def test_documents_without_timestamp_sort_last(remote_store, doc_store, session):
    doc_store.add({"name": "legacy"})
    await remote_store.create({"name": "fresh"}, session)

    result = await remote_store.get_all()

    assert [p.name for p in result.payload] == ["fresh", "legacy"]
