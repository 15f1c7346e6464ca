from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class MediaKind(str, Enum):
    IMAGE = "image"
    VIDEO = "video"

    @property
    def folder(self) -> str:
        """Storage subfolder for this kind ("images" / "videos")."""
        return f"{self.value}s"


class ErrorCode(str, Enum):
    NOT_FOUND = "not_found"
    UNAUTHENTICATED = "unauthenticated"
    VALIDATION = "validation"
    STORE_FAILURE = "store_failure"
    INVALID_CREDENTIALS = "invalid_credentials"
    TOO_MANY_REQUESTS = "too_many_requests"


# ---------------------------------------------------------------------------
# Shared data models
# ---------------------------------------------------------------------------

@dataclass
class MediaUpload:
    """A file handed to the controller for upload."""
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"
    kind: Optional[MediaKind] = None     # inferred from content_type when omitted

    def resolved_kind(self) -> MediaKind:
        if self.kind is not None:
            return self.kind
        if (self.content_type or "").startswith("video/"):
            return MediaKind.VIDEO
        return MediaKind.IMAGE


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class AuthSession:
    token: str
    uid: str
    email: str
    created_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "token": self.token,
            "uid": self.uid,
            "email": self.email,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AuthSession":
        created = data.get("created_at")
        return cls(
            token=data["token"],
            uid=data["uid"],
            email=data.get("email", ""),
            created_at=datetime.fromisoformat(created) if created else utcnow(),
        )


# ---------------------------------------------------------------------------
# Abstract backend interfaces
# ---------------------------------------------------------------------------

class DocumentStore(ABC):
    """Products collection of the remote document database."""

    @abstractmethod
    def add(self, data: Dict[str, Any]) -> str:
        """Insert a document and return its generated id."""

    @abstractmethod
    def get(self, doc_id: str) -> Optional[Dict[str, Any]]:
        """Fetch a document (with its id) or None."""

    @abstractmethod
    def update(self, doc_id: str, updates: Dict[str, Any]) -> bool:
        """Merge fields into a document. False when the document is missing."""

    @abstractmethod
    def delete(self, doc_id: str) -> bool:
        """Remove a document. False when the document is missing."""

    @abstractmethod
    def list_all(self) -> List[Dict[str, Any]]:
        """All documents, newest createdAt first."""


class KeyValueStore(ABC):
    """Persisted string key-value storage (the local cache)."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored string or None."""

    @abstractmethod
    def set(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        """Store a string, optionally expiring after ttl seconds."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a key (no-op when absent)."""

    def ping(self) -> bool:
        return True


class BlobStore(ABC):
    """Binary media storage."""

    @abstractmethod
    async def put(self, path: str, data: bytes, content_type: str) -> str:
        """Store bytes under path and return the public URL."""

    @abstractmethod
    async def delete(self, path: str) -> None:
        """Delete the object at path. Raises when it cannot be deleted."""

    @abstractmethod
    async def url_for(self, path: str) -> str:
        """Public URL of an existing object."""


class StaticCatalogSource(ABC):
    """Read-only baseline catalog (bundled products.json / kits.json)."""

    @abstractmethod
    async def fetch_products(self) -> List[Dict[str, Any]]:
        """Raw product documents."""

    @abstractmethod
    async def fetch_kits(self) -> List[Dict[str, Any]]:
        """Raw kit documents."""
