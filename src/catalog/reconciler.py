"""
Catalog reconciliation.

Merges the local cache, the remote store and the static bundled JSON into one
ordered, de-duplicated product list (and kit list), and resolves what a
renderer should display for each entry.

Priority order is local cache > remote store > static fallback: local edits
show up before any network round trip completes, and on an id collision the
first occurrence in that order wins. A source that is missing or fails is an
empty list, never an error.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, TypeVar

from pydantic import ValidationError

from src.integrations.contracts.interfaces import StaticCatalogSource
from src.integrations.contracts.product_catalogues import CatalogEntry, EntryId, Kit, Product
from src.integrations.services.local_cache import LocalCacheAdapter
from src.integrations.services.remote_store import RemoteStoreAdapter

logger = logging.getLogger(__name__)

DEFAULT_PLACEHOLDER_IMAGE = "https://via.placeholder.com/400x250?text=Sem+Imagem"
NOT_FOUND_LABEL = "Produto não encontrado"

E = TypeVar("E", bound=CatalogEntry)


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------

def reconcile(*sources: Optional[Iterable[E]]) -> List[E]:
    """Concatenate sources in priority order, keeping the first entry per id (5 and "5" are one id)."""
    seen = set()
    merged: List[E] = []
    for source in sources:
        for entry in source or ():
            key = str(entry.id)
            if key in seen:
                continue
            seen.add(key)
            merged.append(entry)
    return merged


def resolve_image(entry: CatalogEntry, placeholder: str = DEFAULT_PLACEHOLDER_IMAGE) -> str:
    """Explicit image, else the first media URL, else the placeholder."""
    if entry.image:
        return entry.image
    media = getattr(entry, "media", None) or []
    if media and media[0].url:
        return media[0].url
    return placeholder


@dataclass
class KitLine:
    product_id: EntryId
    product: Optional[Product] = None

    @property
    def found(self) -> bool:
        return self.product is not None

    @property
    def label(self) -> str:
        return self.product.name if self.product else NOT_FOUND_LABEL


def resolve_kit_products(kit: Kit, products: Sequence[Product]) -> List[KitLine]:
    """One line per referenced id, in kit order; dangling ids become not-found lines."""
    by_id = {p.id: p for p in products}
    lines = []
    for product_id in kit.product_ids:
        product = by_id.get(product_id)
        if product is None and isinstance(product_id, str) and product_id.isdigit():
            product = by_id.get(int(product_id))
        elif product is None and isinstance(product_id, int):
            product = by_id.get(str(product_id))
        lines.append(KitLine(product_id=product_id, product=product))
    return lines


def to_card(entry: CatalogEntry, products: Sequence[Product] = (), placeholder: str = DEFAULT_PLACEHOLDER_IMAGE) -> Dict[str, Any]:
    """Renderer-facing view of an entry: stored fields plus displayImage (and kit lines)."""
    card = entry.to_document()
    card["displayImage"] = resolve_image(entry, placeholder)
    if isinstance(entry, Kit):
        card["products"] = [
            {"id": line.product_id, "name": line.label, "found": line.found}
            for line in resolve_kit_products(entry, products)
        ]
    return card


def _parse(docs: Iterable[Dict[str, Any]], model, label: str) -> List[Any]:
    entries = []
    for doc in docs or ():
        try:
            entries.append(model.from_document(doc))
        except ValidationError as exc:
            logger.warning("Skipping malformed %s entry: %s", label, exc)
    return entries


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------

@dataclass
class CatalogSnapshot:
    products: List[Product] = field(default_factory=list)
    kits: List[Kit] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.products and not self.kits

    def product(self, entry_id: EntryId) -> Optional[Product]:
        return next((p for p in self.products if p.id == entry_id), None)


class CatalogReconciler:
    def __init__(
        self,
        local_cache: Optional[LocalCacheAdapter] = None,
        remote_store: Optional[RemoteStoreAdapter] = None,
        static_source: Optional[StaticCatalogSource] = None,
        placeholder_image: str = DEFAULT_PLACEHOLDER_IMAGE,
    ):
        self.local_cache = local_cache
        self.remote_store = remote_store
        self.static_source = static_source
        self.placeholder_image = placeholder_image

    async def local_products(self) -> List[Product]:
        if self.local_cache is None:
            return []
        result = self.local_cache.read_products()
        return result.payload if result.success else []

    async def remote_products(self) -> List[Product]:
        if self.remote_store is None:
            return []
        result = await self.remote_store.get_all()
        if not result.success:
            logger.warning("Remote products unavailable: %s", result.message)
            return []
        return result.payload or []

    async def static_products(self) -> List[Product]:
        if self.static_source is None:
            return []
        try:
            return _parse(await self.static_source.fetch_products(), Product, "static product")
        except Exception as exc:
            logger.warning("Static products unavailable: %s", exc)
            return []

    async def static_kits(self) -> List[Kit]:
        if self.static_source is None:
            return []
        try:
            return _parse(await self.static_source.fetch_kits(), Kit, "static kit")
        except Exception as exc:
            logger.warning("Static kits unavailable: %s", exc)
            return []

    async def load_products(self) -> List[Product]:
        products = reconcile(
            await self.local_products(),
            await self.remote_products(),
            await self.static_products(),
        )
        logger.info("Catalog reconciled: %d products", len(products))
        return products

    async def load_kits(self) -> List[Kit]:
        local = self.local_cache.read_kits().payload if self.local_cache is not None else []
        return reconcile(local or [], await self.static_kits())

    async def load_catalog(self) -> CatalogSnapshot:
        return CatalogSnapshot(products=await self.load_products(), kits=await self.load_kits())

    def cards(self, snapshot: CatalogSnapshot) -> Dict[str, List[Dict[str, Any]]]:
        return {
            "products": [to_card(p, placeholder=self.placeholder_image) for p in snapshot.products],
            "kits": [to_card(k, snapshot.products, self.placeholder_image) for k in snapshot.kits],
        }
