"""
Product catalogue contracts.

Defines the structure of catalog entries shared by every source:
- the local cache (JSON arrays under the "products" / "kits" keys)
- the remote document store (products collection)
- the static bundled JSON baseline (data/products.json, data/kits.json)

Field aliases follow the stored/wire format (shopeeLink, productIds, createdAt ...)
so that a write/read round-trip through any source is lossless.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .interfaces import MediaKind

EntryId = Union[int, str]


class MediaItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    kind: MediaKind = Field(alias="type")
    url: str
    path: str = ""


class CatalogEntry(BaseModel):
    """Fields common to products and kits."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: EntryId
    name: str = ""
    description: str = ""
    image: str = ""

    @classmethod
    def from_document(cls, doc: Dict[str, Any]):
        return cls.model_validate(doc)

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


class Product(CatalogEntry):
    link: str = Field(default="", alias="shopeeLink")
    category: Optional[str] = None
    price: Optional[float] = None
    media: List[MediaItem] = Field(default_factory=list)
    created_by: Optional[str] = Field(default=None, alias="createdBy")
    updated_by: Optional[str] = Field(default=None, alias="updatedBy")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")


class Kit(CatalogEntry):
    product_ids: List[EntryId] = Field(default_factory=list, alias="productIds")


# ---------------------------------------------------------------------------
# Filtering
# ---------------------------------------------------------------------------

class ProductFilter(BaseModel):
    """Optional filters when querying the public catalog."""

    category: Optional[str] = None
    max_price: Optional[float] = None
    search: Optional[str] = None


def filter_products(products: List[Product], f: ProductFilter) -> List[Product]:
    """Apply a ProductFilter to a list of products and return matching ones."""
    result = products

    if f.category:
        wanted = f.category.strip().lower()
        result = [p for p in result if (p.category or "").lower() == wanted]
    if f.max_price is not None:
        result = [p for p in result if p.price is not None and p.price <= f.max_price]
    if f.search:
        needle = f.search.strip().lower()
        result = [p for p in result if needle in p.name.lower() or needle in p.description.lower()]

    return result
