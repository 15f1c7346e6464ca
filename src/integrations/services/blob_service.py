"""
Blob Store Adapter

Uploads and deletes product media under a per-product path:

    products/{product_id}/{images|videos}/{timestamp_ms}_{filename}

Each call returns an OperationResult; multi-file uploads run sequentially and
skip (but log) individual failures so callers can accept partial media sets.
"""

import logging
import re
import time
from typing import Callable, Iterable, List, Optional

from src.error_handler import error_handler
from src.integrations.contracts.interfaces import BlobStore, ErrorCode, MediaKind, MediaUpload
from src.integrations.contracts.product_catalogues import MediaItem
from src.integrations.contracts.results import OperationResult

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def _now_ms() -> int:
    return int(time.time() * 1000)


def safe_filename(name: str) -> str:
    cleaned = _UNSAFE_CHARS.sub("_", (name or "").strip()).strip("._")
    return cleaned or "file"


def media_path(product_id: str, kind: MediaKind, filename: str, timestamp_ms: int) -> str:
    return f"products/{product_id}/{kind.folder}/{timestamp_ms}_{safe_filename(filename)}"


class BlobStoreAdapter:
    def __init__(self, store: BlobStore, clock_ms: Callable[[], int] = _now_ms):
        self.store = store
        self.clock_ms = clock_ms

    async def upload_file(self, upload: MediaUpload, product_id: str, kind: Optional[MediaKind] = None) -> OperationResult:
        kind = kind or upload.resolved_kind()
        path = media_path(str(product_id), kind, upload.filename, self.clock_ms())
        try:
            url = await self.store.put(path, upload.content, upload.content_type)
            logger.info("File uploaded: %s", path)
            return OperationResult.ok(MediaItem(kind=kind, url=url, path=path), "File uploaded successfully")
        except Exception as exc:
            return error_handler.handle_exception(exc, "Error uploading file", {"path": path})

    async def upload_many(self, uploads: Iterable[MediaUpload], product_id: str) -> List[MediaItem]:
        """Upload each file in order; failed uploads are logged and left out."""
        uploaded: List[MediaItem] = []
        for upload in uploads:
            result = await self.upload_file(upload, product_id)
            if result.success:
                uploaded.append(result.payload)
            else:
                logger.warning("Skipping media %s for product %s: %s", upload.filename, product_id, result.error)
        return uploaded

    async def delete_file(self, path: str) -> OperationResult:
        if not path:
            return OperationResult.fail(ErrorCode.VALIDATION, "A storage path is required")
        try:
            await self.store.delete(path)
            logger.info("File deleted: %s", path)
            return OperationResult.ok({"path": path}, "File deleted successfully")
        except FileNotFoundError:
            return OperationResult.fail(ErrorCode.NOT_FOUND, "File does not exist", error=path)
        except Exception as exc:
            return error_handler.handle_exception(exc, "Error deleting file", {"path": path})

    async def get_file_url(self, path: str) -> OperationResult:
        try:
            url = await self.store.url_for(path)
            return OperationResult.ok({"url": url, "path": path}, "File URL resolved")
        except FileNotFoundError:
            return OperationResult.fail(ErrorCode.NOT_FOUND, "File does not exist", error=path)
        except Exception as exc:
            return error_handler.handle_exception(exc, "Error resolving file URL", {"path": path})
