#!/usr/bin/env python3
"""
Copy the bundled static products (data/products.json) into the remote
products collection, so they become editable through the admin API.

Uses DATABASE_URL. Products whose name and link already exist remotely are
skipped. Run with --dry-run to only list what would be created.
"""

from __future__ import annotations
import argparse
import asyncio
import os
import sys
from pathlib import Path

from dotenv import load_dotenv
load_dotenv()

sys.path.insert(0, str(Path(__file__).parent.parent))

from src.catalog.reconciler import CatalogReconciler
from src.database.postgres_real import ProductDocumentStore
from src.integrations.clients.mocks import BundledStaticCatalog
from src.integrations.contracts.interfaces import AuthSession
from src.integrations.services.remote_store import RemoteStoreAdapter

SEED_SESSION = AuthSession(token="seed", uid="seed-script", email="seed@localhost")


async def seed(dry_run: bool) -> int:
    store = ProductDocumentStore(connection_string=os.environ["DATABASE_URL"])
    store.create_tables()
    remote = RemoteStoreAdapter(store)

    existing = await remote.get_all()
    if not existing.success:
        print(f"Could not read remote products: {existing.message}", file=sys.stderr)
        return 2
    known = {(p.name, p.link) for p in existing.payload}

    created = 0
    for product in await CatalogReconciler(static_source=BundledStaticCatalog()).static_products():
        if (product.name, product.link) in known:
            print(f"skip   {product.name}")
            continue
        if dry_run:
            print(f"would create {product.name}")
            continue
        data = product.to_document()
        data.pop("id", None)
        result = await remote.create(data, SEED_SESSION)
        if not result.success:
            print(f"failed {product.name}: {result.message}", file=sys.stderr)
            continue
        created += 1
        print(f"create {product.name} -> {result.payload['id']}")

    print(f"{created} products created")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--dry-run", action="store_true")
    args = parser.parse_args()

    if not os.environ.get("DATABASE_URL"):
        print("DATABASE_URL is not set", file=sys.stderr)
        return 1
    return asyncio.run(seed(args.dry_run))


if __name__ == "__main__":
    sys.exit(main())
