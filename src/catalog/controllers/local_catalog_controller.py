"""Controller for the local-cache catalog (products and kits edited in place).

Entries that exist only in the static baseline are read-only. Editing one
writes a copy with the same id to the local cache, which then shadows the
baseline entry during reconciliation. Deleting a baseline-only entry is
rejected; deleting a local copy brings the baseline entry back.
"""
from typing import Any, Callable, Dict, List, Optional, Sequence, Type
import logging
import time

from src.catalog.events import CatalogChanged, EventBus
from src.catalog.reconciler import CatalogReconciler
from src.catalog.validation import CatalogValidationError, normalize_link, validate_kit, validate_local_product
from src.error_handler import error_handler
from src.integrations.contracts.interfaces import ErrorCode, StaticCatalogSource
from src.integrations.contracts.product_catalogues import CatalogEntry, EntryId, Kit, Product
from src.integrations.contracts.results import OperationResult
from src.integrations.services.local_cache import LocalCacheAdapter

logger = logging.getLogger(__name__)

BASELINE_READ_ONLY = "Entries from the bundled catalog cannot be deleted"


def _now_ms() -> int:
    return int(time.time() * 1000)


def same_id(a: EntryId, b: EntryId) -> bool:
    return str(a) == str(b)


def find_entry(entries: Sequence[CatalogEntry], entry_id: EntryId) -> Optional[int]:
    for index, entry in enumerate(entries):
        if same_id(entry.id, entry_id):
            return index
    return None


class LocalCatalogController:
    def __init__(
        self,
        local_cache: LocalCacheAdapter,
        static_source: Optional[StaticCatalogSource] = None,
        events: Optional[EventBus] = None,
        clock_ms: Callable[[], int] = _now_ms,
    ):
        self.local_cache = local_cache
        self.baseline = CatalogReconciler(static_source=static_source)
        self.events = events or EventBus()
        self.clock_ms = clock_ms

    def _next_id(self, taken: Sequence[CatalogEntry]) -> int:
        used = {str(e.id) for e in taken}
        candidate = self.clock_ms()
        while str(candidate) in used:
            candidate += 1
        return candidate

    async def _changed(self, entity: str, action: str, entry_id: EntryId) -> None:
        await self.events.publish(CatalogChanged(entity=entity, action=action, entry_id=entry_id, source="local"))

    # --- Generic operations ----------------------------------------------------

    async def _add(self, entity: str, data: Dict[str, Any], validator, model: Type[CatalogEntry], read, write, baseline) -> OperationResult:
        try:
            cleaned = validator(data)
            current = read().payload or []
            entry = model.from_document({**cleaned, "id": self._next_id(list(current) + await baseline())})
            saved = write(list(current) + [entry])
            if not saved.success:
                return saved
            logger.info("Local %s added: %s", entity, entry.id)
            await self._changed(entity, "created", entry.id)
            return OperationResult.ok(entry, f"{entity.capitalize()} added successfully")
        except Exception as exc:
            return error_handler.handle_exception(exc, f"Error adding {entity}", {"op": "add", "entity": entity})

    async def _update(self, entity: str, entry_id: EntryId, data: Dict[str, Any], validator, model: Type[CatalogEntry], read, write, baseline) -> OperationResult:
        try:
            current: List[CatalogEntry] = list(read().payload or [])
            index = find_entry(current, entry_id)
            if index is not None:
                existing = current[index]
            else:
                statics = await baseline()
                static_index = find_entry(statics, entry_id)
                if static_index is None:
                    return OperationResult.fail(ErrorCode.NOT_FOUND, f"{entity.capitalize()} does not exist")
                existing = statics[static_index]
                logger.info("Creating local override for baseline %s %s", entity, entry_id)

            merged = {**existing.to_document(), **normalize_link(data)}
            cleaned = validator(merged)
            extra = {k: v for k, v in existing.to_document().items() if k not in cleaned}
            entry = model.from_document({**extra, **cleaned, "id": existing.id})

            if index is not None:
                current[index] = entry
            else:
                current.append(entry)
            saved = write(current)
            if not saved.success:
                return saved
            await self._changed(entity, "updated", entry.id)
            return OperationResult.ok(entry, f"{entity.capitalize()} updated successfully")
        except Exception as exc:
            return error_handler.handle_exception(exc, f"Error updating {entity}", {"op": "update", "id": entry_id})

    async def _delete(self, entity: str, entry_id: EntryId, read, write, baseline) -> OperationResult:
        try:
            current: List[CatalogEntry] = list(read().payload or [])
            index = find_entry(current, entry_id)
            if index is None:
                if find_entry(await baseline(), entry_id) is not None:
                    raise CatalogValidationError(field_errors={"id": BASELINE_READ_ONLY}, message=BASELINE_READ_ONLY)
                return OperationResult.fail(ErrorCode.NOT_FOUND, f"{entity.capitalize()} does not exist")

            removed = current.pop(index)
            saved = write(current)
            if not saved.success:
                return saved
            await self._changed(entity, "deleted", removed.id)
            return OperationResult.ok({"id": removed.id}, f"{entity.capitalize()} deleted successfully")
        except Exception as exc:
            return error_handler.handle_exception(exc, f"Error deleting {entity}", {"op": "delete", "id": entry_id})

    # --- Products ----------------------------------------------------------

    async def add_product(self, data: Dict[str, Any]) -> OperationResult:
        return await self._add(
            "product", data, validate_local_product, Product,
            self.local_cache.read_products, self.local_cache.write_products, self.baseline.static_products,
        )

    async def update_product(self, product_id: EntryId, data: Dict[str, Any]) -> OperationResult:
        return await self._update(
            "product", product_id, data, validate_local_product, Product,
            self.local_cache.read_products, self.local_cache.write_products, self.baseline.static_products,
        )

    async def delete_product(self, product_id: EntryId) -> OperationResult:
        return await self._delete(
            "product", product_id,
            self.local_cache.read_products, self.local_cache.write_products, self.baseline.static_products,
        )

    # --- Kits --------------------------------------------------------------

    async def add_kit(self, data: Dict[str, Any]) -> OperationResult:
        return await self._add(
            "kit", data, validate_kit, Kit,
            self.local_cache.read_kits, self.local_cache.write_kits, self.baseline.static_kits,
        )

    async def update_kit(self, kit_id: EntryId, data: Dict[str, Any]) -> OperationResult:
        return await self._update(
            "kit", kit_id, data, validate_kit, Kit,
            self.local_cache.read_kits, self.local_cache.write_kits, self.baseline.static_kits,
        )

    async def delete_kit(self, kit_id: EntryId) -> OperationResult:
        return await self._delete(
            "kit", kit_id,
            self.local_cache.read_kits, self.local_cache.write_kits, self.baseline.static_kits,
        )
