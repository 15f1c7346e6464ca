"""JSON export of catalog entries (products.json / kits.json downloads)."""
import json
import logging
from typing import Sequence

from src.integrations.contracts.interfaces import ErrorCode
from src.integrations.contracts.product_catalogues import CatalogEntry
from src.integrations.contracts.results import OperationResult

logger = logging.getLogger(__name__)

EXPORT_FILENAMES = {"products": "products.json", "kits": "kits.json"}


def export_entries(kind: str, entries: Sequence[CatalogEntry], indent: int = 4) -> OperationResult:
    """Serialize entries for download. Payload: {"filename", "content"}."""
    filename = EXPORT_FILENAMES.get(kind)
    if filename is None:
        return OperationResult.fail(ErrorCode.VALIDATION, f"Unknown export type: {kind}")
    if not entries:
        return OperationResult.fail(ErrorCode.VALIDATION, f"No {kind} to export")

    content = json.dumps([e.to_document() for e in entries], indent=indent, ensure_ascii=False)
    logger.info("Exported %d %s", len(entries), kind)
    return OperationResult.ok({"filename": filename, "content": content}, f"{len(entries)} {kind} exported")
