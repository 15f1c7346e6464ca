"""
Lightweight in-memory document store replacement for local development.

This provides the same interface as `src.database.postgres_real` so the
storefront can run (and be tested) without a real database. It is NOT
intended for production use.
"""

from __future__ import annotations

import copy
import itertools
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from src.integrations.contracts.interfaces import DocumentStore


class ProductDocumentStore(DocumentStore):
    """
    In-memory stand-in for the remote "products" collection.

    Documents are plain dicts keyed by the stored field names (shopeeLink,
    createdAt ...). Returned documents are copies; callers cannot mutate state.
    """

    def __init__(self) -> None:
        self._docs: Dict[str, Dict[str, Any]] = {}
        self._seq: Dict[str, int] = {}
        self._counter = itertools.count()

    # ------------------------------------------------------------------ #
    # Schema / lifecycle
    # ------------------------------------------------------------------ #
    def create_tables(self) -> None:
        """
        No-op for the in-memory implementation. Kept for compatibility
        with the startup hook in `src/api/main.py`.
        """
        return None

    # ------------------------------------------------------------------ #
    # Documents
    # ------------------------------------------------------------------ #
    def add(self, data: Dict[str, Any]) -> str:
        doc_id = str(uuid.uuid4())
        doc = copy.deepcopy(data)
        doc.pop("id", None)
        self._docs[doc_id] = doc
        self._seq[doc_id] = next(self._counter)
        return doc_id

    def get(self, doc_id: str) -> Optional[Dict[str, Any]]:
        doc = self._docs.get(str(doc_id))
        if doc is None:
            return None
        return {"id": str(doc_id), **copy.deepcopy(doc)}

    def update(self, doc_id: str, updates: Dict[str, Any]) -> bool:
        doc = self._docs.get(str(doc_id))
        if doc is None:
            return False
        changes = copy.deepcopy(updates)
        changes.pop("id", None)
        doc.update(changes)
        return True

    def delete(self, doc_id: str) -> bool:
        self._seq.pop(str(doc_id), None)
        return self._docs.pop(str(doc_id), None) is not None

    def list_all(self) -> List[Dict[str, Any]]:
        def _order(doc_id: str):
            created = self._docs[doc_id].get("createdAt")
            stamp = created.timestamp() if isinstance(created, datetime) else float("-inf")
            return (stamp, self._seq.get(doc_id, 0))

        ordered = sorted(self._docs, key=_order, reverse=True)
        return [self.get(doc_id) for doc_id in ordered]

    def ping(self) -> bool:
        return True
