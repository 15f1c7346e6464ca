"""Controller for remote-backed product persistence and media."""
from typing import Any, Dict, List, Optional, Sequence
import logging

from src.catalog.events import CatalogChanged, EventBus
from src.catalog.flows.media_saga import MediaSaga
from src.catalog.validation import CatalogValidationError, normalize_link, validate_admin_product
from src.error_handler import error_handler
from src.integrations.contracts.interfaces import AuthSession, MediaUpload
from src.integrations.contracts.product_catalogues import Product
from src.integrations.contracts.results import OperationResult
from src.integrations.services.blob_service import BlobStoreAdapter
from src.integrations.services.remote_store import RemoteStoreAdapter, require_auth

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("name", "description", "image", "shopeeLink", "category", "price")


class ProductController:
    def __init__(
        self,
        remote_store: RemoteStoreAdapter,
        blob_adapter: BlobStoreAdapter,
        events: Optional[EventBus] = None,
        patch_attempts: int = 2,
    ):
        self.remote_store = remote_store
        self.blob_adapter = blob_adapter
        self.events = events or EventBus()
        self.patch_attempts = patch_attempts

    async def _changed(self, action: str, product_id: Any) -> None:
        await self.events.publish(CatalogChanged(entity="product", action=action, entry_id=product_id))

    # Reads
    async def list(self) -> OperationResult:
        return await self.remote_store.get_all()

    async def get(self, product_id: str) -> OperationResult:
        return await self.remote_store.get(product_id)

    # Writes
    async def create(
        self,
        data: Dict[str, Any],
        media_files: Optional[Sequence[MediaUpload]] = None,
        session: Optional[AuthSession] = None,
    ) -> OperationResult:
        denied = require_auth(session)
        if denied:
            return denied
        try:
            cleaned = validate_admin_product(data)
            saga = MediaSaga(self.remote_store, self.blob_adapter, session, patch_attempts=self.patch_attempts)
            result = await saga.run(cleaned, media_files or ())
            if saga.record_id is not None:
                await self._changed("created", saga.record_id)
            return result
        except Exception as exc:
            return error_handler.handle_exception(exc, "Error creating product", {"op": "create"})

    async def update(
        self,
        product_id: str,
        data: Dict[str, Any],
        new_media_files: Optional[Sequence[MediaUpload]] = None,
        session: Optional[AuthSession] = None,
    ) -> OperationResult:
        denied = require_auth(session)
        if denied:
            return denied
        try:
            current = await self.remote_store.get(product_id)
            if not current.success:
                return current
            product: Product = current.payload

            merged = product.to_document()
            merged.update({k: v for k, v in normalize_link(data).items() if k in EDITABLE_FIELDS})
            cleaned = validate_admin_product(merged)

            media = list(product.media)
            if new_media_files:
                media.extend(await self.blob_adapter.upload_many(new_media_files, product_id))
            cleaned["media"] = media

            result = await self.remote_store.update(product_id, cleaned, session)
            if not result.success:
                return result
            await self._changed("updated", product_id)
            return OperationResult.ok({"id": product_id, "media": media}, "Product updated successfully")
        except Exception as exc:
            return error_handler.handle_exception(exc, "Error updating product", {"op": "update", "id": product_id})

    async def delete(self, product_id: str, session: Optional[AuthSession] = None) -> OperationResult:
        denied = require_auth(session)
        if denied:
            return denied
        try:
            current = await self.remote_store.get(product_id)
            if not current.success:
                return current

            failed_paths: List[str] = []
            for item in current.payload.media:
                if not item.path:
                    continue
                removed = await self.blob_adapter.delete_file(item.path)
                if not removed.success:
                    logger.warning("Could not delete media %s of product %s: %s", item.path, product_id, removed.error)
                    failed_paths.append(item.path)

            result = await self.remote_store.delete(product_id, session)
            if not result.success:
                return result
            await self._changed("deleted", product_id)
            return OperationResult.ok(
                {"id": product_id, "failed_media": failed_paths},
                "Product deleted successfully",
            )
        except Exception as exc:
            return error_handler.handle_exception(exc, "Error deleting product", {"op": "delete", "id": product_id})

    async def remove_media_item(self, product_id: str, path: str, session: Optional[AuthSession] = None) -> OperationResult:
        denied = require_auth(session)
        if denied:
            return denied
        try:
            owner = await self.remote_store.get(product_id)
            if not owner.success:
                return owner
            if not any(item.path == path for item in owner.payload.media):
                raise CatalogValidationError(
                    field_errors={"path": "Media item does not belong to this product"},
                    message="Media item not found on product",
                )

            removed = await self.blob_adapter.delete_file(path)
            if not removed.success:
                return removed

            current = await self.remote_store.get(product_id)
            if not current.success:
                return current
            media = [item for item in current.payload.media if item.path != path]

            result = await self.remote_store.update(product_id, {"media": media}, session)
            if not result.success:
                return result
            await self._changed("media_removed", product_id)
            return OperationResult.ok({"id": product_id, "media": media}, "Media removed successfully")
        except Exception as exc:
            return error_handler.handle_exception(exc, "Error removing media", {"op": "remove_media", "id": product_id})
