"""
Local Cache Adapter

JSON-serialized arrays under fixed keys in the persisted key-value store:
- "products": array of Product documents
- "kits": array of Kit documents

An absent key (or an unreadable value) is equivalent to an empty array.
There is no locking: concurrent writers race and the last write wins.
"""

import json
import logging
from typing import List, Sequence, Type

from pydantic import ValidationError

from src.error_handler import error_handler
from src.integrations.contracts.interfaces import KeyValueStore
from src.integrations.contracts.product_catalogues import CatalogEntry, Kit, Product
from src.integrations.contracts.results import OperationResult

logger = logging.getLogger(__name__)

PRODUCTS_KEY = "products"
KITS_KEY = "kits"


class LocalCacheAdapter:
    def __init__(self, store: KeyValueStore, products_key: str = PRODUCTS_KEY, kits_key: str = KITS_KEY):
        self.store = store
        self.products_key = products_key
        self.kits_key = kits_key

    # --- Generic helpers ------------------------------------------------------

    def _read(self, key: str, model: Type[CatalogEntry]) -> OperationResult:
        try:
            raw = self.store.get(key)
        except Exception as exc:
            result = error_handler.handle_exception(exc, f"Error reading {key} from local cache", {"key": key})
            result.payload = []
            return result

        if not raw:
            return OperationResult.ok([], f"No {key} in local cache")
        try:
            items = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Local cache key %s holds invalid JSON; treating as empty", key)
            return OperationResult.ok([], f"No {key} in local cache")
        if not isinstance(items, list):
            logger.warning("Local cache key %s is not a JSON array; treating as empty", key)
            return OperationResult.ok([], f"No {key} in local cache")

        entries = []
        for item in items:
            try:
                entries.append(model.from_document(item))
            except ValidationError as exc:
                logger.warning("Skipping malformed %s entry in local cache: %s", key, exc)
        return OperationResult.ok(entries, f"{len(entries)} {key} loaded from local cache")

    def _write(self, key: str, entries: Sequence[CatalogEntry]) -> OperationResult:
        try:
            payload = json.dumps([e.to_document() for e in entries], ensure_ascii=False)
            self.store.set(key, payload)
            return OperationResult.ok(list(entries), f"{len(entries)} {key} saved to local cache")
        except Exception as exc:
            return error_handler.handle_exception(exc, f"Error writing {key} to local cache", {"key": key})

    # --- Products / kits ------------------------------------------------------

    def read_products(self) -> OperationResult:
        return self._read(self.products_key, Product)

    def write_products(self, products: Sequence[Product]) -> OperationResult:
        return self._write(self.products_key, products)

    def read_kits(self) -> OperationResult:
        return self._read(self.kits_key, Kit)

    def write_kits(self, kits: Sequence[Kit]) -> OperationResult:
        return self._write(self.kits_key, kits)

    def products(self) -> List[Product]:
        return self.read_products().payload or []

    def kits(self) -> List[Kit]:
        return self.read_kits().payload or []

    # --- Flags ----------------------------------------------------------------

    def get_flag(self, key: str) -> bool:
        try:
            return self.store.get(key) == "true"
        except Exception as exc:
            logger.warning("Could not read flag %s: %s", key, exc)
            return False

    def set_flag(self, key: str) -> OperationResult:
        try:
            self.store.set(key, "true")
            return OperationResult.ok({key: True})
        except Exception as exc:
            return error_handler.handle_exception(exc, f"Error setting {key}", {"key": key})

    def clear_flag(self, key: str) -> OperationResult:
        try:
            self.store.delete(key)
            return OperationResult.ok({key: False})
        except Exception as exc:
            return error_handler.handle_exception(exc, f"Error clearing {key}", {"key": key})
