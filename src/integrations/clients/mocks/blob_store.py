"""
In-memory Blob Store (Mock/Local).

Purpose:
- Stands in for hosted media storage while developing or testing.
- Does NOT make network calls; bytes live in a dict keyed by storage path.

Behavior guidelines:
- put(...) returns a stable public URL built from base_url + path
- delete(...) raises FileNotFoundError for unknown paths, like a real object store
- Individual paths can be marked as failing to exercise partial-failure handling

Swap:
Replace with clients/real_http/blob_store.py once object storage is configured.
"""

import logging
from typing import Dict, Iterable, Optional, Tuple

from src.integrations.contracts.interfaces import BlobStore

logger = logging.getLogger(__name__)


class InMemoryBlobStore(BlobStore):
    def __init__(
        self,
        base_url: str = "memory://media",
        fail_uploads_for: Optional[Iterable[str]] = None,
        fail_deletes_for: Optional[Iterable[str]] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.objects: Dict[str, Tuple[bytes, str]] = {}
        # Filenames / paths matching these substrings fail, for partial-failure scenarios
        self.fail_uploads_for = set(fail_uploads_for or ())
        self.fail_deletes_for = set(fail_deletes_for or ())

    def _matches(self, path: str, patterns) -> bool:
        return any(p in path for p in patterns)

    async def put(self, path: str, data: bytes, content_type: str) -> str:
        if self._matches(path, self.fail_uploads_for):
            raise IOError(f"Simulated upload failure for {path}")
        self.objects[path] = (bytes(data), content_type)
        logger.debug("Stored %d bytes at %s", len(data), path)
        return f"{self.base_url}/{path}"

    async def delete(self, path: str) -> None:
        if self._matches(path, self.fail_deletes_for):
            raise IOError(f"Simulated delete failure for {path}")
        if path not in self.objects:
            raise FileNotFoundError(path)
        del self.objects[path]

    async def url_for(self, path: str) -> str:
        if path not in self.objects:
            raise FileNotFoundError(path)
        return f"{self.base_url}/{path}"
