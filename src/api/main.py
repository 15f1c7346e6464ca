"""
FastAPI application - Main entry point
"""

from dotenv import load_dotenv

load_dotenv()

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware

from src.api.admin_router import router as admin_router
from src.api.catalog_router import router as catalog_router
from src.api.dependencies import AppServices, CatalogCache, result_response
from src.catalog.controllers.local_catalog_controller import LocalCatalogController
from src.catalog.controllers.product_controller import ProductController
from src.catalog.events import CatalogChanged, EventBus
from src.catalog.gate import AdminGate
from src.catalog.reconciler import CatalogReconciler
from src.integrations.contracts.interfaces import BlobStore, DocumentStore, ErrorCode, KeyValueStore, StaticCatalogSource
from src.integrations.contracts.results import OperationResult
from src.integrations.services.auth_service import AuthService, parse_credentials
from src.integrations.services.blob_service import BlobStoreAdapter
from src.integrations.services.local_cache import LocalCacheAdapter
from src.integrations.services.remote_store import RemoteStoreAdapter
from src.utils.config_loader import StorefrontConfig, load_storefront_config
from src.utils.rate_limiter import RateLimiter

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


# ============================================================================
# BACKEND SELECTION
# ============================================================================

def build_document_store(config: StorefrontConfig) -> DocumentStore:
    # Use real Postgres (SQLAlchemy) when DATABASE_URL is set, else the in-memory stub
    if config.database_url:
        from src.database.postgres_real import ProductDocumentStore

        store = ProductDocumentStore(connection_string=config.database_url)
    else:
        from src.database.postgres import ProductDocumentStore

        store = ProductDocumentStore()
    store.create_tables()
    return store


def build_key_value_store(config: StorefrontConfig) -> KeyValueStore:
    if config.redis_url:
        from src.database.redis_real import RedisCache

        return RedisCache(url=config.redis_url)
    from src.database.redis import RedisCache

    return RedisCache()


def build_blob_store(config: StorefrontConfig) -> BlobStore:
    if config.blob.base_url:
        from src.integrations.clients.real_http import HttpBlobStore

        return HttpBlobStore(
            base_url=config.blob.base_url,
            api_key=config.blob.api_key,
            public_base_url=config.blob.public_base_url,
            timeout_seconds=config.blob.timeout_seconds,
        )
    from src.integrations.clients.mocks import InMemoryBlobStore

    return InMemoryBlobStore()


def build_static_source(config: StorefrontConfig) -> StaticCatalogSource:
    if config.static.base_url:
        from src.integrations.clients.real_http import HttpStaticCatalog

        return HttpStaticCatalog(
            base_url=config.static.base_url,
            products_path=f"data/{config.static.products_file}",
            kits_path=f"data/{config.static.kits_file}",
            timeout_seconds=config.static.timeout_seconds,
        )
    from src.integrations.clients.mocks import BundledStaticCatalog

    data_dir = Path(config.static.data_dir) if config.static.data_dir else None
    return BundledStaticCatalog(
        data_dir=data_dir,
        products_file=config.static.products_file,
        kits_file=config.static.kits_file,
    )


def build_services(
    config: StorefrontConfig,
    document_store: Optional[DocumentStore] = None,
    key_value_store: Optional[KeyValueStore] = None,
    blob_store: Optional[BlobStore] = None,
    static_source: Optional[StaticCatalogSource] = None,
) -> AppServices:
    """Wire adapters and controllers. Explicit backends override the configured ones."""
    if document_store is None:
        document_store = build_document_store(config)
    if key_value_store is None:
        key_value_store = build_key_value_store(config)
    if blob_store is None:
        blob_store = build_blob_store(config)
    if static_source is None:
        static_source = build_static_source(config)

    events = EventBus()
    local_cache = LocalCacheAdapter(key_value_store)
    remote_store = RemoteStoreAdapter(document_store)
    reconciler = CatalogReconciler(
        local_cache=local_cache,
        remote_store=remote_store,
        static_source=static_source,
        placeholder_image=config.catalog.placeholder_image,
    )
    catalog_cache = CatalogCache(reconciler, ttl_seconds=config.catalog.cache_ttl_seconds)
    events.subscribe(CatalogChanged, catalog_cache.invalidate)

    auth = AuthService(
        key_value_store,
        credentials=parse_credentials(config.auth.credentials),
        session_ttl=config.auth.session_ttl_seconds,
        rate_limiter=RateLimiter(config.auth.max_login_attempts, config.auth.login_window_seconds),
    )

    def health() -> dict:
        checks = {}
        for name, backend in (("document_store", document_store), ("key_value_store", key_value_store)):
            try:
                checks[name] = bool(backend.ping())
            except Exception as exc:
                logger.warning("Health check failed for %s: %s", name, exc)
                checks[name] = False
        return checks

    return AppServices(
        config=config,
        events=events,
        local_cache=local_cache,
        reconciler=reconciler,
        catalog_cache=catalog_cache,
        products=ProductController(
            remote_store,
            BlobStoreAdapter(blob_store),
            events=events,
            patch_attempts=config.media_patch_attempts,
        ),
        local_catalog=LocalCatalogController(local_cache, static_source=static_source, events=events),
        auth=auth,
        gate=AdminGate(local_cache, passcode=config.auth.passcode),
        health=health,
    )


# ============================================================================
# APPLICATION
# ============================================================================

def create_app(services: Optional[AppServices] = None) -> FastAPI:
    if services is None:
        services = build_services(load_storefront_config())

    app = FastAPI(
        title="Affiliate Storefront API",
        description="Public product/kit catalog and admin catalog management",
        version="1.0.0",
    )
    app.state.services = services

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=services.config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(HTTPException)
    async def _unauthenticated_as_result(request: Request, exc: HTTPException):
        if exc.status_code == status.HTTP_401_UNAUTHORIZED:
            return result_response(OperationResult.fail(ErrorCode.UNAUTHENTICATED, str(exc.detail)))
        return await http_exception_handler(request, exc)

    @app.get("/", tags=["Health"])
    async def root():
        return {"service": "affiliate-storefront", "docs": "/docs"}

    @app.get("/health", tags=["Health"])
    async def health_check():
        checks = services.health()
        return {
            "status": "healthy" if all(checks.values()) else "degraded",
            "checks": checks,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    app.include_router(catalog_router, prefix="/api/v1")
    app.include_router(admin_router, prefix="/api/v1")
    return app


app = create_app()
