import pytest
from fastapi.testclient import TestClient

from src.api.main import build_services, create_app
from src.integrations.clients.mocks import InMemoryBlobStore
from src.utils.config_loader import AuthConfig, CatalogConfig, StorefrontConfig


@pytest.fixture
def services(doc_store, kv_store, static_source):
    config = StorefrontConfig(
        auth=AuthConfig(credentials="admin@example.com:s3cret", passcode="1234", max_login_attempts=3),
        catalog=CatalogConfig(cache_ttl_seconds=0),
    )
    return build_services(
        config,
        document_store=doc_store,
        key_value_store=kv_store,
        blob_store=InMemoryBlobStore(),
        static_source=static_source,
    )


@pytest.fixture
def client(services):
    return TestClient(create_app(services))


@pytest.fixture
def auth_headers(client):
    response = client.post("/api/v1/admin/login", json={"email": "admin@example.com", "password": "s3cret"})
    token = response.json()["payload"]["token"]
    return {"Authorization": f"Bearer {token}"}


LOCAL_PRODUCT = {
    "name": "Luminária",
    "description": "LED",
    "image": "https://img.test/lum.png",
    "shopeeLink": "https://shopee.test/p/lum",
}


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_public_catalog_serves_static_baseline(client):
    body = client.get("/api/v1/catalog").json()

    assert body["success"] is True
    assert [p["id"] for p in body["payload"]["products"]] == [1, 2]
    kit = body["payload"]["kits"][0]
    assert [line["found"] for line in kit["products"]] == [True, True, False]


def test_product_filters_and_lookup(client):
    filtered = client.get("/api/v1/catalog/products", params={"category": "casa"}).json()["payload"]
    found = client.get("/api/v1/catalog/products/1")
    missing = client.get("/api/v1/catalog/products/999")

    assert [p["name"] for p in filtered] == ["Garrafa"]
    assert filtered[0]["displayImage"].startswith("https://via.placeholder.com/")
    assert found.json()["payload"]["shopeeLink"] == "https://shopee.test/p/1"
    assert missing.status_code == 404
    assert missing.json()["error_code"] == "not_found"


def test_login_failures(client):
    wrong = client.post("/api/v1/admin/login", json={"email": "admin@example.com", "password": "nope"})
    assert wrong.status_code == 401
    assert wrong.json()["error_code"] == "invalid_credentials"

    for _ in range(3):
        client.post("/api/v1/admin/login", json={"email": "admin@example.com", "password": "nope"})
    throttled = client.post("/api/v1/admin/login", json={"email": "admin@example.com", "password": "s3cret"})
    assert throttled.status_code == 429


def test_create_product_requires_session(client, doc_store):
    response = client.post("/api/v1/admin/products", data={"shopeeLink": "https://shopee.test/p"})

    assert response.status_code == 401
    assert response.json()["error_code"] == "unauthenticated"
    assert doc_store.list_all() == []


def test_create_product_with_media_shows_in_catalog(client, auth_headers):
    response = client.post(
        "/api/v1/admin/products",
        data={"name": "Fone novo", "shopeeLink": "https://shopee.test/p/9", "price": "10"},
        files=[
            ("images", ("foto.png", b"png-bytes", "image/png")),
            ("videos", ("demo.mp4", b"mp4-bytes", "video/mp4")),
        ],
        headers=auth_headers,
    )

    assert response.status_code == 201
    payload = response.json()["payload"]
    assert [m["type"] for m in payload["media"]] == ["image", "video"]

    products = client.get("/api/v1/catalog/products").json()["payload"]
    created = next(p for p in products if p["id"] == payload["id"])
    assert created["displayImage"] == payload["media"][0]["url"]
    assert created["category"] == "geral"


def test_update_delete_and_remove_media(client, auth_headers):
    created = client.post(
        "/api/v1/admin/products",
        data={"shopeeLink": "https://shopee.test/p/9"},
        files=[("images", ("a.png", b"a", "image/png")), ("images", ("b.png", b"b", "image/png"))],
        headers=auth_headers,
    ).json()["payload"]
    product_id = created["id"]

    updated = client.put(f"/api/v1/admin/products/{product_id}", data={"name": "Renomeado"}, headers=auth_headers)
    assert updated.status_code == 200
    assert len(updated.json()["payload"]["media"]) == 2

    path = created["media"][0]["path"]
    removed = client.delete(f"/api/v1/admin/products/{product_id}/media", params={"path": path}, headers=auth_headers)
    assert removed.status_code == 200
    assert [m["path"] for m in removed.json()["payload"]["media"]] == [created["media"][1]["path"]]

    assert client.delete(f"/api/v1/admin/products/{product_id}", headers=auth_headers).status_code == 200
    assert client.delete(f"/api/v1/admin/products/{product_id}", headers=auth_headers).status_code == 404


def test_local_catalog_requires_session(client):
    response = client.post("/api/v1/admin/local/products", json=LOCAL_PRODUCT)

    assert response.status_code == 401
    assert response.json()["success"] is False


def test_local_product_lifecycle_and_export(client, auth_headers):
    assert client.get("/api/v1/admin/export/products", headers=auth_headers).status_code == 422

    added = client.post("/api/v1/admin/local/products", json=LOCAL_PRODUCT, headers=auth_headers)
    assert added.status_code == 201
    local_id = added.json()["payload"]["id"]

    names = [p["name"] for p in client.get("/api/v1/catalog").json()["payload"]["products"]]
    assert names[0] == "Luminária"

    exported = client.get("/api/v1/admin/export/products", headers=auth_headers)
    assert exported.status_code == 200
    assert 'filename="products.json"' in exported.headers["content-disposition"]
    assert exported.json()[0]["id"] == local_id

    invalid = client.put(f"/api/v1/admin/local/products/{local_id}", json={"shopeeLink": "nope"}, headers=auth_headers)
    assert invalid.status_code == 422
    assert "shopeeLink" in invalid.json()["payload"]["field_errors"]

    assert client.delete(f"/api/v1/admin/local/products/{local_id}", headers=auth_headers).status_code == 200


def test_static_entries_are_overridable_not_deletable(client, auth_headers):
    edited = client.put("/api/v1/admin/local/products/1", json={"name": "Fone editado"}, headers=auth_headers)
    assert edited.status_code == 200
    assert client.get("/api/v1/catalog/products/1").json()["payload"]["name"] == "Fone editado"

    assert client.delete("/api/v1/admin/local/products/2", headers=auth_headers).status_code == 422

    assert client.delete("/api/v1/admin/local/products/1", headers=auth_headers).status_code == 200
    assert client.get("/api/v1/catalog/products/1").json()["payload"]["name"] == "Fone"


def test_local_kits(client, auth_headers):
    kit = {"name": "Kit", "description": "Combo", "image": "https://img.test/k.png", "productIds": "1,2"}

    added = client.post("/api/v1/admin/local/kits", json=kit, headers=auth_headers)
    assert added.status_code == 201
    kit_id = added.json()["payload"]["id"]

    kits = client.get("/api/v1/catalog/kits").json()["payload"]
    assert [k["id"] for k in kits] == [kit_id, 101]

    assert client.delete(f"/api/v1/admin/local/kits/{kit_id}", headers=auth_headers).status_code == 200


def test_unlock_gate(client):
    assert client.get("/api/v1/admin/unlock").json() == {"unlocked": False}
    assert client.post("/api/v1/admin/unlock", json={"passcode": "bad"}).status_code == 401
    assert client.post("/api/v1/admin/unlock", json={"passcode": "1234"}).status_code == 200
    assert client.get("/api/v1/admin/unlock").json() == {"unlocked": True}
    assert client.post("/api/v1/admin/lock").status_code == 200
    assert client.get("/api/v1/admin/unlock").json() == {"unlocked": False}


def test_logout_ends_session(client, auth_headers):
    assert client.post("/api/v1/admin/logout", headers=auth_headers).status_code == 200

    response = client.post("/api/v1/admin/local/kits", json={}, headers=auth_headers)
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_catalog_cache_is_invalidated_by_changes(services, session):
    services.catalog_cache.ttl_seconds = 3600
    before = await services.catalog_cache.get()

    await services.products.create({"shopeeLink": "https://shopee.test/p/new"}, session=session)
    after = await services.catalog_cache.get()

    assert len(after.products) == len(before.products) + 1
