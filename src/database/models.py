"""
SQLAlchemy models for the remote products collection.
Used by postgres_real when DATABASE_URL is set.
"""
from __future__ import annotations
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import uuid4
from sqlalchemy import JSON, DateTime, Float, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class ProductDocument(Base):
    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    name: Mapped[str] = mapped_column(String(256), default="", nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    image: Mapped[str] = mapped_column(Text, default="", nullable=False)  # URL or data URI
    shopee_link: Mapped[str] = mapped_column(Text, default="", nullable=False)
    category: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    price: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    media: Mapped[list] = mapped_column(JSON, default=list, nullable=False)  # list[{type, url, path}]
    extra: Mapped[Dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)

    created_by: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    updated_by: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)


# Stored document field name -> column attribute
DOCUMENT_FIELDS: Dict[str, str] = {
    "name": "name",
    "description": "description",
    "image": "image",
    "shopeeLink": "shopee_link",
    "category": "category",
    "price": "price",
    "media": "media",
    "createdBy": "created_by",
    "updatedBy": "updated_by",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}
