"""
Real SQL-backed document store for production when DATABASE_URL is set.
Implements the same interface as src.database.postgres (in-memory stub).
"""

from __future__ import annotations

import re
from contextlib import contextmanager
from typing import Any, Dict, List, Optional
from uuid import uuid4

from sqlalchemy import create_engine, select
from sqlalchemy.orm import Session, sessionmaker

from src.database.models import DOCUMENT_FIELDS, Base, ProductDocument
from src.integrations.contracts.interfaces import DocumentStore


def _normalize_connection_string(s: str) -> str:
    """Strip common mistakes: 'psql \'...\'', extra quotes, whitespace."""
    s = s.strip()
    if re.match(r"^psql\s+", s, re.IGNORECASE):
        s = re.sub(r"^psql\s+", "", s, flags=re.IGNORECASE).strip()
    if len(s) >= 2 and s[0] == s[-1] and s[0] in ("'", '"'):
        s = s[1:-1].strip()
    if s.startswith("postgres://"):
        s = "postgresql+psycopg://" + s[len("postgres://"):]
    elif s.startswith("postgresql://"):
        s = "postgresql+psycopg://" + s[len("postgresql://"):]
    return s


def _apply(row: ProductDocument, data: Dict[str, Any]) -> None:
    extra = dict(row.extra or {})
    for key, value in data.items():
        if key == "id":
            continue
        attr = DOCUMENT_FIELDS.get(key)
        if attr is None:
            extra[key] = value
        else:
            setattr(row, attr, value)
    row.extra = extra


def _to_document(row: ProductDocument) -> Dict[str, Any]:
    doc: Dict[str, Any] = dict(row.extra or {})
    for key, attr in DOCUMENT_FIELDS.items():
        value = getattr(row, attr)
        if value is not None:
            doc[key] = value
    doc["id"] = row.id
    return doc


class ProductDocumentStore(DocumentStore):
    """
    Products collection using SQLAlchemy. Use when DATABASE_URL is set.
    """

    def __init__(self, connection_string: str) -> None:
        connection_string = _normalize_connection_string(connection_string)
        if connection_string.startswith("sqlite"):
            self.engine = create_engine(connection_string, pool_pre_ping=True)
        else:
            self.engine = create_engine(connection_string, pool_pre_ping=True, pool_size=5, max_overflow=10)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine, expire_on_commit=False)

    def create_tables(self) -> None:
        Base.metadata.create_all(bind=self.engine)

    @contextmanager
    def _session(self) -> Session:
        s = self.SessionLocal()
        try:
            yield s
            s.commit()
        except Exception:
            s.rollback()
            raise
        finally:
            s.close()

    # ------------------------------------------------------------------ #
    # Documents
    # ------------------------------------------------------------------ #
    def add(self, data: Dict[str, Any]) -> str:
        with self._session() as s:
            row = ProductDocument(id=str(uuid4()), media=[], extra={})
            _apply(row, data)
            s.add(row)
            s.flush()
            return row.id

    def get(self, doc_id: str) -> Optional[Dict[str, Any]]:
        with self._session() as s:
            row = s.get(ProductDocument, str(doc_id))
            return _to_document(row) if row else None

    def update(self, doc_id: str, updates: Dict[str, Any]) -> bool:
        with self._session() as s:
            row = s.get(ProductDocument, str(doc_id))
            if row is None:
                return False
            _apply(row, updates)
            return True

    def delete(self, doc_id: str) -> bool:
        with self._session() as s:
            row = s.get(ProductDocument, str(doc_id))
            if row is None:
                return False
            s.delete(row)
            return True

    def list_all(self) -> List[Dict[str, Any]]:
        with self._session() as s:
            stmt = select(ProductDocument).order_by(ProductDocument.created_at.desc())
            return [_to_document(row) for row in s.execute(stmt).scalars().all()]

    def ping(self) -> bool:
        try:
            with self.engine.connect():
                return True
        except Exception:
            return False
