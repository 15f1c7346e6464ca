"""
Media saga - create a product record together with its media.

Steps run in a fixed order:

    PENDING -> RECORD_WRITTEN -> MEDIA_UPLOADED -> RECORD_PATCHED -> COMPLETED
                                                                  \\-> FAILED

The record is written first to obtain an id (failure aborts immediately),
media is uploaded under that id (per-file failures are logged and skipped),
and the record's media field is patched only when at least one upload
produced a URL. The patch writes the full media list, so re-applying it is
idempotent and `retry_patch()` can be called after a transient failure.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from src.integrations.contracts.interfaces import AuthSession, ErrorCode, MediaUpload
from src.integrations.contracts.product_catalogues import MediaItem
from src.integrations.contracts.results import OperationResult
from src.integrations.services.blob_service import BlobStoreAdapter
from src.integrations.services.remote_store import RemoteStoreAdapter

logger = logging.getLogger(__name__)


class SagaStep(str, Enum):
    PENDING = "pending"
    RECORD_WRITTEN = "record_written"
    MEDIA_UPLOADED = "media_uploaded"
    RECORD_PATCHED = "record_patched"
    COMPLETED = "completed"
    FAILED = "failed"


class MediaSaga:
    def __init__(
        self,
        remote_store: RemoteStoreAdapter,
        blob_adapter: BlobStoreAdapter,
        session: Optional[AuthSession],
        patch_attempts: int = 2,
    ):
        self.remote_store = remote_store
        self.blob_adapter = blob_adapter
        self.session = session
        self.patch_attempts = max(1, patch_attempts)

        self.step = SagaStep.PENDING
        self.history: List[SagaStep] = [SagaStep.PENDING]
        self.record_id: Optional[str] = None
        self.media: List[MediaItem] = []
        self.last_error: Optional[OperationResult] = None

    def _advance(self, step: SagaStep) -> None:
        self.step = step
        self.history.append(step)
        logger.debug("Media saga %s -> %s", self.record_id, step.value)

    def _fail(self, result: OperationResult) -> OperationResult:
        self.last_error = result
        self._advance(SagaStep.FAILED)
        return result

    def _done(self) -> OperationResult:
        self._advance(SagaStep.COMPLETED)
        return OperationResult.ok(
            {"id": self.record_id, "media": list(self.media)},
            "Product created successfully",
        )

    @property
    def completed(self) -> bool:
        return self.step == SagaStep.COMPLETED

    async def run(self, data: Dict[str, Any], media_files: Sequence[MediaUpload] = ()) -> OperationResult:
        if self.step != SagaStep.PENDING:
            raise RuntimeError(f"Media saga already ran (step={self.step.value})")

        created = await self.remote_store.create({**data, "media": []}, self.session)
        if not created.success:
            return self._fail(created)
        self.record_id = created.payload["id"]
        self._advance(SagaStep.RECORD_WRITTEN)

        if media_files:
            self.media = await self.blob_adapter.upload_many(media_files, self.record_id)
            if len(self.media) < len(media_files):
                logger.warning(
                    "Product %s created with %d of %d media files",
                    self.record_id, len(self.media), len(media_files),
                )
        self._advance(SagaStep.MEDIA_UPLOADED)

        if not self.media:
            return self._done()
        return await self.retry_patch()

    async def retry_patch(self) -> OperationResult:
        """(Re)apply the media patch. Safe to call repeatedly."""
        if self.record_id is None:
            return OperationResult.fail(ErrorCode.VALIDATION, "No record was written; nothing to patch")
        if self.completed:
            return OperationResult.ok({"id": self.record_id, "media": list(self.media)}, "Product created successfully")

        result = None
        for attempt in range(1, self.patch_attempts + 1):
            result = await self.remote_store.update(self.record_id, {"media": self.media}, self.session)
            if result.success:
                self._advance(SagaStep.RECORD_PATCHED)
                return self._done()
            if result.error_code in (ErrorCode.UNAUTHENTICATED, ErrorCode.NOT_FOUND):
                break
            logger.warning("Media patch attempt %d/%d failed for %s: %s", attempt, self.patch_attempts, self.record_id, result.error)
        return self._fail(result)
