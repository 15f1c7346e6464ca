"""
Request dependencies for the storefront API.

`AppServices` holds every adapter/controller built for one app instance; it is
stored on `app.state.services` and handed to routes through `get_services`.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from fastapi import Depends, Header, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from src.catalog.controllers.local_catalog_controller import LocalCatalogController
from src.catalog.controllers.product_controller import ProductController
from src.catalog.events import CatalogChanged, EventBus
from src.catalog.gate import AdminGate
from src.catalog.reconciler import CatalogReconciler, CatalogSnapshot
from src.integrations.contracts.interfaces import AuthSession, ErrorCode
from src.integrations.contracts.results import OperationResult
from src.integrations.services.auth_service import AuthService
from src.integrations.services.local_cache import LocalCacheAdapter
from src.utils.config_loader import StorefrontConfig

logger = logging.getLogger(__name__)

STATUS_BY_ERROR = {
    ErrorCode.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.VALIDATION: 422,
    ErrorCode.TOO_MANY_REQUESTS: status.HTTP_429_TOO_MANY_REQUESTS,
    ErrorCode.STORE_FAILURE: status.HTTP_502_BAD_GATEWAY,
}


class CatalogCache:
    """Reconciled catalog kept in-process until a CatalogChanged event or TTL expiry (ttl 0: events only)."""

    def __init__(self, reconciler: CatalogReconciler, ttl_seconds: float = 60, clock: Callable[[], float] = time.monotonic):
        self.reconciler = reconciler
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._snapshot: Optional[CatalogSnapshot] = None
        self._loaded_at = 0.0

    def invalidate(self, event: Optional[CatalogChanged] = None) -> None:
        if event is not None:
            logger.debug("Catalog cache invalidated by %s", event)
        self._snapshot = None

    async def get(self) -> CatalogSnapshot:
        expired = self.ttl_seconds > 0 and self.clock() - self._loaded_at > self.ttl_seconds
        if self._snapshot is None or expired:
            self._snapshot = await self.reconciler.load_catalog()
            self._loaded_at = self.clock()
        return self._snapshot


@dataclass
class AppServices:
    config: StorefrontConfig
    events: EventBus
    local_cache: LocalCacheAdapter
    reconciler: CatalogReconciler
    catalog_cache: CatalogCache
    products: ProductController
    local_catalog: LocalCatalogController
    auth: AuthService
    gate: AdminGate
    health: Callable[[], dict]


def get_services(request: Request) -> AppServices:
    return request.app.state.services


def bearer_token(authorization: Optional[str] = Header(default=None)) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def optional_session(
    token: Optional[str] = Depends(bearer_token),
    services: AppServices = Depends(get_services),
) -> Optional[AuthSession]:
    return services.auth.current_session(token)


def require_session(session: Optional[AuthSession] = Depends(optional_session)) -> AuthSession:
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="You must be logged in to perform this operation",
        )
    return session


def result_response(result: OperationResult, success_status: int = status.HTTP_200_OK) -> JSONResponse:
    """Render an OperationResult as JSON with the status its error code maps to."""
    if result.success:
        code = success_status
    else:
        code = STATUS_BY_ERROR.get(result.error_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
    body = {
        "success": result.success,
        "payload": jsonable_encoder(result.payload, by_alias=True),
        "message": result.message,
        "error_code": result.error_code.value if result.error_code else None,
        "error": result.error,
    }
    return JSONResponse(status_code=code, content=body)
