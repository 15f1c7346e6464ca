"""
Bundled Static Catalog Client (Mock/Local).

Purpose:
- Serves the read-only baseline catalog from the JSON files bundled with the
  app (data/products.json and data/kits.json).
- Used when no STATIC_CATALOG_URL is configured.

A missing file reads as an empty list; malformed JSON raises so the
reconciler can log it and degrade to an empty source.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from src.integrations.contracts.interfaces import StaticCatalogSource

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path(__file__).parent.parent.parent.parent.parent / "data"


class BundledStaticCatalog(StaticCatalogSource):
    def __init__(
        self,
        data_dir: Optional[Path] = None,
        products_file: str = "products.json",
        kits_file: str = "kits.json",
    ) -> None:
        self.data_dir = Path(data_dir) if data_dir else DEFAULT_DATA_DIR
        self.products_file = products_file
        self.kits_file = kits_file

    def _read(self, name: str) -> List[Dict[str, Any]]:
        path = self.data_dir / name
        if not path.exists():
            logger.info("Static catalog file not found: %s", path)
            return []
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, list):
            raise ValueError(f"{path} must contain a JSON array")
        return data

    async def fetch_products(self) -> List[Dict[str, Any]]:
        return self._read(self.products_file)

    async def fetch_kits(self) -> List[Dict[str, Any]]:
        return self._read(self.kits_file)
