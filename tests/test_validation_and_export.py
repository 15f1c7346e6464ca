import json

import pytest

from src.catalog.export import export_entries
from src.catalog.validation import (
    CatalogValidationError,
    is_valid_url,
    parse_product_ids,
    validate_admin_product,
    validate_kit,
    validate_local_product,
)
from src.error_handler import ErrorHandler
from src.integrations.contracts.interfaces import ErrorCode
from src.integrations.contracts.product_catalogues import Kit, Product


def test_is_valid_url():
    assert is_valid_url("https://shopee.com.br/x")
    assert is_valid_url("http://a.b")
    assert not is_valid_url("shopee.com.br/x")
    assert not is_valid_url("javascript:alert(1)")
    assert not is_valid_url("")


def test_admin_product_defaults():
    cleaned = validate_admin_product({"shopeeLink": " https://shopee.test/p "})

    assert cleaned == {
        "name": "Produto sem nome",
        "description": "Sem descrição disponível",
        "image": "",
        "shopeeLink": "https://shopee.test/p",
        "category": "geral",
        "price": 0,
    }


def test_admin_product_rejects_bad_values():
    with pytest.raises(CatalogValidationError) as exc:
        validate_admin_product({"shopeeLink": "https://shopee.test/p", "image": "nope", "price": "-3"})

    assert set(exc.value.field_errors) == {"image", "price"}


def test_admin_product_accepts_data_uri_image():
    cleaned = validate_admin_product({"shopeeLink": "https://shopee.test/p", "image": "data:image/png;base64,AA=="})

    assert cleaned["image"].startswith("data:image/png")


def test_local_product_keeps_optional_fields_only_when_given():
    base = {"name": "n", "description": "d", "image": "https://i.test/a.png", "shopeeLink": "https://s.test/p"}

    assert "category" not in validate_local_product(base)
    assert validate_local_product({**base, "category": "casa", "price": "10"})["price"] == 10.0


def test_parse_product_ids_variants():
    errors = {}
    assert parse_product_ids([1, "2", "x"], errors) == [1, 2]
    assert parse_product_ids("3,4, 5 ", errors) == [3, 4, 5]
    assert errors == {}

    parse_product_ids(None, errors)
    assert "productIds" in errors


def test_validate_kit_requires_fields():
    with pytest.raises(CatalogValidationError) as exc:
        validate_kit({"productIds": [1]})

    assert set(exc.value.field_errors) == {"name", "description", "image"}


def test_error_handler_maps_validation_and_faults():
    handler = ErrorHandler()

    invalid = handler.handle_exception(CatalogValidationError(field_errors={"name": "required"}))
    fault = handler.handle_exception(Exception("boom"), context={"k": "v"})

    assert invalid.error_code == ErrorCode.VALIDATION
    assert invalid.payload == {"field_errors": {"name": "required"}}
    assert fault.error_code == ErrorCode.STORE_FAILURE
    assert "internal error" in fault.message.lower()
    assert fault.error == "boom"


def test_export_products_as_indented_json():
    products = [Product(id=1, name="Fone", shopeeLink="https://s.test/p")]

    result = export_entries("products", products)

    assert result.payload["filename"] == "products.json"
    assert result.payload["content"].startswith("[\n    {")
    assert json.loads(result.payload["content"])[0]["shopeeLink"] == "https://s.test/p"


def test_export_kits_filename():
    result = export_entries("kits", [Kit(id=1, product_ids=[2])])

    assert result.payload["filename"] == "kits.json"


def test_empty_or_unknown_export_is_rejected():
    assert export_entries("products", []).error_code == ErrorCode.VALIDATION
    assert export_entries("orders", [Product(id=1)]).error_code == ErrorCode.VALIDATION
