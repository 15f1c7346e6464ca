import pytest

from src.catalog.controllers.local_catalog_controller import LocalCatalogController
from src.catalog.events import CatalogChanged
from src.catalog.reconciler import CatalogReconciler
from src.integrations.contracts.interfaces import ErrorCode


PRODUCT = {
    "name": "Luminária",
    "description": "LED",
    "image": "https://img.test/lum.png",
    "shopeeLink": "https://shopee.test/p/lum",
}


@pytest.fixture
def controller(local_cache, static_source, events):
    ticks = iter([1_700_000_000_000, 1_700_000_000_000, 1_700_000_000_000])
    return LocalCatalogController(local_cache, static_source=static_source, events=events, clock_ms=lambda: next(ticks))


@pytest.fixture
def reconciler(local_cache, static_source):
    return CatalogReconciler(local_cache=local_cache, static_source=static_source)


@pytest.mark.asyncio
async def test_add_product_assigns_unique_timestamp_ids(controller, local_cache):
    first = await controller.add_product(PRODUCT)
    second = await controller.add_product({**PRODUCT, "name": "Outra"})

    assert first.success and second.success
    assert first.payload.id == 1_700_000_000_000
    assert second.payload.id == 1_700_000_000_001
    assert [p.name for p in local_cache.products()] == ["Luminária", "Outra"]


@pytest.mark.asyncio
async def test_add_product_requires_all_fields(controller, local_cache):
    result = await controller.add_product({"name": "Só nome", "image": "ftp://x", "shopeeLink": "nope"})

    assert result.error_code == ErrorCode.VALIDATION
    assert set(result.payload["field_errors"]) == {"description", "image", "shopeeLink"}
    assert local_cache.products() == []


@pytest.mark.asyncio
async def test_round_trip_through_local_cache(controller, local_cache):
    added = await controller.add_product({**PRODUCT, "category": "casa", "price": "42.5"})

    stored = local_cache.products()[0]

    assert stored.to_document() == added.payload.to_document()
    assert stored.link == PRODUCT["shopeeLink"]
    assert stored.price == 42.5


@pytest.mark.asyncio
async def test_update_local_product(controller, local_cache):
    added = await controller.add_product(PRODUCT)

    result = await controller.update_product(str(added.payload.id), {"name": "Luminária nova"})

    assert result.success
    assert local_cache.products()[0].name == "Luminária nova"
    assert local_cache.products()[0].id == added.payload.id


@pytest.mark.asyncio
async def test_editing_static_entry_creates_winning_override(controller, local_cache, reconciler):
    result = await controller.update_product("1", {"name": "Fone editado"})

    assert result.success
    assert local_cache.products()[0].id == 1
    products = await reconciler.load_products()
    assert [p.name for p in products] == ["Fone editado", "Garrafa"]


@pytest.mark.asyncio
async def test_static_only_entry_cannot_be_deleted(controller):
    result = await controller.delete_product(1)

    assert not result.success
    assert result.error_code == ErrorCode.VALIDATION


@pytest.mark.asyncio
async def test_deleting_override_restores_baseline(controller, reconciler):
    await controller.update_product(1, {"name": "Fone editado"})

    result = await controller.delete_product(1)

    assert result.success
    products = await reconciler.load_products()
    assert products[0].name == "Fone"


@pytest.mark.asyncio
async def test_unknown_entries_are_not_found(controller):
    assert (await controller.update_product(555, {"name": "x"})).error_code == ErrorCode.NOT_FOUND
    assert (await controller.delete_product(555)).error_code == ErrorCode.NOT_FOUND
    assert (await controller.delete_kit(555)).error_code == ErrorCode.NOT_FOUND


@pytest.mark.asyncio
async def test_add_kit_parses_product_id_string(controller, local_cache):
    result = await controller.add_kit({
        "name": "Kit",
        "description": "Combo",
        "image": "https://img.test/kit.png",
        "productIds": "1, 2, abc, 3",
    })

    assert result.success
    assert local_cache.kits()[0].product_ids == [1, 2, 3]


@pytest.mark.asyncio
async def test_add_kit_needs_one_valid_id(controller):
    result = await controller.add_kit({
        "name": "Kit",
        "description": "Combo",
        "image": "https://img.test/kit.png",
        "productIds": "abc, ,",
    })

    assert result.error_code == ErrorCode.VALIDATION
    assert "productIds" in result.payload["field_errors"]


@pytest.mark.asyncio
async def test_kit_override_and_delete(controller, local_cache):
    updated = await controller.update_kit(101, {"productIds": [2]})
    assert updated.success
    assert local_cache.kits()[0].product_ids == [2]

    assert (await controller.delete_kit(101)).success
    assert (await controller.delete_kit(101)).error_code == ErrorCode.VALIDATION


@pytest.mark.asyncio
async def test_local_mutations_publish_events(controller, events):
    seen = []
    events.subscribe(CatalogChanged, seen.append)

    added = await controller.add_product(PRODUCT)
    await controller.delete_product(added.payload.id)

    assert [(e.action, e.source) for e in seen] == [("created", "local"), ("deleted", "local")]


@pytest.mark.asyncio
async def test_local_product_accepts_link_attribute_name(controller, local_cache):
    data = {k: v for k, v in PRODUCT.items() if k != "shopeeLink"}

    added = await controller.add_product({**data, "link": "https://shopee.test/p/alias"})
    updated = await controller.update_product(added.payload.id, {"link": "https://shopee.test/p/alias2"})

    assert added.success and updated.success
    assert local_cache.products()[0].link == "https://shopee.test/p/alias2"
