"""
Public catalog endpoints (no authentication).
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import AppServices, get_services, result_response
from src.catalog.reconciler import to_card
from src.integrations.contracts.interfaces import ErrorCode
from src.integrations.contracts.product_catalogues import ProductFilter, filter_products
from src.integrations.contracts.results import OperationResult

router = APIRouter()


@router.get("/catalog", tags=["Catalog"])
async def get_catalog(services: AppServices = Depends(get_services)):
    snapshot = await services.catalog_cache.get()
    cards = services.reconciler.cards(snapshot)
    return result_response(OperationResult.ok(cards, f"{len(cards['products'])} products, {len(cards['kits'])} kits"))


@router.get("/catalog/products", tags=["Catalog"])
async def list_products(
    category: Optional[str] = None,
    max_price: Optional[float] = Query(default=None, ge=0),
    search: Optional[str] = None,
    services: AppServices = Depends(get_services),
):
    snapshot = await services.catalog_cache.get()
    products = filter_products(snapshot.products, ProductFilter(category=category, max_price=max_price, search=search))
    placeholder = services.reconciler.placeholder_image
    cards = [to_card(p, placeholder=placeholder) for p in products]
    return result_response(OperationResult.ok(cards, f"{len(cards)} products found"))


@router.get("/catalog/products/{product_id}", tags=["Catalog"])
async def get_product(product_id: str, services: AppServices = Depends(get_services)):
    snapshot = await services.catalog_cache.get()
    product = next((p for p in snapshot.products if str(p.id) == product_id), None)
    if product is None:
        return result_response(OperationResult.fail(ErrorCode.NOT_FOUND, "Product does not exist"))
    card = to_card(product, placeholder=services.reconciler.placeholder_image)
    return result_response(OperationResult.ok(card, "Product found"))


@router.get("/catalog/kits", tags=["Catalog"])
async def list_kits(services: AppServices = Depends(get_services)):
    snapshot = await services.catalog_cache.get()
    cards = services.reconciler.cards(snapshot)["kits"]
    return result_response(OperationResult.ok(cards, f"{len(cards)} kits found"))
