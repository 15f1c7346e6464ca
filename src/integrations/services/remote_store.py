"""
Remote Store Adapter

Wraps create/read/update/delete against the remote "products" collection:
- stamps createdAt/updatedAt and the authenticated author (createdBy/updatedBy)
- rejects writes without an authenticated session (reads stay public)
- translates store faults into the uniform OperationResult shape
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, ValidationError

from src.error_handler import error_handler
from src.integrations.contracts.interfaces import AuthSession, DocumentStore, ErrorCode, utcnow
from src.integrations.contracts.product_catalogues import Product
from src.integrations.contracts.results import OperationResult

logger = logging.getLogger(__name__)

UNAUTHENTICATED_MESSAGE = "You must be logged in to perform this operation"


def _storable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True, mode="json", exclude_none=True)
    if isinstance(value, list):
        return [_storable(v) for v in value]
    if isinstance(value, dict):
        return {k: _storable(v) for k, v in value.items()}
    return value


def require_auth(session: Optional[AuthSession]) -> Optional[OperationResult]:
    """Return an unauthenticated failure when no session is present, else None."""
    if session is None:
        return OperationResult.fail(ErrorCode.UNAUTHENTICATED, UNAUTHENTICATED_MESSAGE)
    return None


class RemoteStoreAdapter:
    def __init__(self, store: DocumentStore, clock: Callable[[], datetime] = utcnow):
        self.store = store
        self.clock = clock

    # ------------------------------------------------------------------ #
    # Writes (authenticated)
    # ------------------------------------------------------------------ #
    async def create(self, data: Dict[str, Any], session: Optional[AuthSession]) -> OperationResult:
        denied = require_auth(session)
        if denied:
            return denied
        try:
            now = self.clock()
            doc = _storable({k: v for k, v in data.items() if k != "id"})
            doc.update({"createdBy": session.uid, "createdAt": now, "updatedAt": now})
            doc_id = self.store.add(doc)
            logger.info("Product created with id %s", doc_id)
            return OperationResult.ok({"id": doc_id}, "Product created successfully")
        except Exception as exc:
            return error_handler.handle_exception(exc, "Error creating product", {"op": "create"})

    async def update(self, product_id: str, data: Dict[str, Any], session: Optional[AuthSession]) -> OperationResult:
        denied = require_auth(session)
        if denied:
            return denied
        try:
            changes = _storable({k: v for k, v in data.items() if k != "id"})
            changes.update({"updatedBy": session.uid, "updatedAt": self.clock()})
            if not self.store.update(str(product_id), changes):
                return OperationResult.fail(ErrorCode.NOT_FOUND, "Product does not exist")
            logger.info("Product updated: %s", product_id)
            return OperationResult.ok({"id": product_id}, "Product updated successfully")
        except Exception as exc:
            return error_handler.handle_exception(exc, "Error updating product", {"op": "update", "id": product_id})

    async def delete(self, product_id: str, session: Optional[AuthSession]) -> OperationResult:
        denied = require_auth(session)
        if denied:
            return denied
        try:
            if not self.store.delete(str(product_id)):
                return OperationResult.fail(ErrorCode.NOT_FOUND, "Product does not exist")
            logger.info("Product deleted: %s", product_id)
            return OperationResult.ok({"id": product_id}, "Product deleted successfully")
        except Exception as exc:
            return error_handler.handle_exception(exc, "Error deleting product", {"op": "delete", "id": product_id})

    # ------------------------------------------------------------------ #
    # Reads (public)
    # ------------------------------------------------------------------ #
    async def get_all(self) -> OperationResult:
        try:
            products: List[Product] = []
            for doc in self.store.list_all():
                try:
                    products.append(Product.from_document(doc))
                except ValidationError as exc:
                    logger.warning("Skipping malformed product document %s: %s", doc.get("id"), exc)
            logger.info("Products fetched: %d", len(products))
            return OperationResult.ok(products, f"{len(products)} products found")
        except Exception as exc:
            result = error_handler.handle_exception(exc, "Error fetching products", {"op": "get_all"})
            result.payload = []
            return result

    async def get(self, product_id: str) -> OperationResult:
        try:
            doc = self.store.get(str(product_id))
            if doc is None:
                return OperationResult.fail(ErrorCode.NOT_FOUND, "Product does not exist")
            return OperationResult.ok(Product.from_document(doc), "Product found")
        except Exception as exc:
            return error_handler.handle_exception(exc, "Error fetching product", {"op": "get", "id": product_id})
