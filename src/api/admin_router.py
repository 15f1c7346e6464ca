"""
Admin endpoints: sign-in, unlock gate, remote product management (multipart
with media files) and the local-cache catalog editor.

Remote product writes take the session as optional and let the controller
reject anonymous calls; local-cache writes require a session up front.
"""
from typing import Any, Dict, List, Optional
import logging

from fastapi import APIRouter, Body, Depends, File, Form, Query, UploadFile, status
from fastapi.responses import Response
from pydantic import BaseModel

from src.api.dependencies import (
    AppServices,
    bearer_token,
    get_services,
    optional_session,
    require_session,
    result_response,
)
from src.catalog.export import export_entries
from src.integrations.contracts.interfaces import AuthSession, MediaKind, MediaUpload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin")


class LoginRequest(BaseModel):
    email: str
    password: str


class UnlockRequest(BaseModel):
    passcode: str


async def _uploads(files: Optional[List[UploadFile]], kind: MediaKind) -> List[MediaUpload]:
    uploads = []
    for f in files or []:
        if not f.filename:
            continue
        uploads.append(MediaUpload(
            filename=f.filename,
            content=await f.read(),
            content_type=f.content_type or "application/octet-stream",
            kind=kind,
        ))
    return uploads


def _form_fields(**fields: Optional[str]) -> Dict[str, Any]:
    """Drop fields the client did not send."""
    return {k: v for k, v in fields.items() if v is not None}


# --------------------------------------------------------------------------- #
# Session
# --------------------------------------------------------------------------- #
@router.post("/login", tags=["Admin"])
async def login(request: LoginRequest, services: AppServices = Depends(get_services)):
    return result_response(services.auth.login(request.email, request.password))


@router.post("/logout", tags=["Admin"])
async def logout(token: Optional[str] = Depends(bearer_token), services: AppServices = Depends(get_services)):
    return result_response(services.auth.logout(token))


# --------------------------------------------------------------------------- #
# Unlock gate
# --------------------------------------------------------------------------- #
@router.get("/unlock", tags=["Admin"])
async def unlock_state(services: AppServices = Depends(get_services)):
    return {"unlocked": services.gate.is_unlocked()}


@router.post("/unlock", tags=["Admin"])
async def unlock(request: UnlockRequest, services: AppServices = Depends(get_services)):
    return result_response(services.gate.unlock(request.passcode))


@router.post("/lock", tags=["Admin"])
async def lock(services: AppServices = Depends(get_services)):
    return result_response(services.gate.lock())


# --------------------------------------------------------------------------- #
# Remote products
# --------------------------------------------------------------------------- #
@router.post("/products", tags=["Admin Products"])
async def create_product(
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    image: Optional[str] = Form(None),
    shopeeLink: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    images: Optional[List[UploadFile]] = File(None),
    videos: Optional[List[UploadFile]] = File(None),
    session: Optional[AuthSession] = Depends(optional_session),
    services: AppServices = Depends(get_services),
):
    data = _form_fields(
        name=name, description=description, image=image,
        shopeeLink=shopeeLink, category=category, price=price,
    )
    media = await _uploads(images, MediaKind.IMAGE) + await _uploads(videos, MediaKind.VIDEO)
    result = await services.products.create(data, media, session=session)
    return result_response(result, success_status=status.HTTP_201_CREATED)


@router.put("/products/{product_id}", tags=["Admin Products"])
async def update_product(
    product_id: str,
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    image: Optional[str] = Form(None),
    shopeeLink: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    images: Optional[List[UploadFile]] = File(None),
    videos: Optional[List[UploadFile]] = File(None),
    session: Optional[AuthSession] = Depends(optional_session),
    services: AppServices = Depends(get_services),
):
    data = _form_fields(
        name=name, description=description, image=image,
        shopeeLink=shopeeLink, category=category, price=price,
    )
    media = await _uploads(images, MediaKind.IMAGE) + await _uploads(videos, MediaKind.VIDEO)
    result = await services.products.update(product_id, data, media, session=session)
    return result_response(result)


@router.delete("/products/{product_id}", tags=["Admin Products"])
async def delete_product(
    product_id: str,
    session: Optional[AuthSession] = Depends(optional_session),
    services: AppServices = Depends(get_services),
):
    return result_response(await services.products.delete(product_id, session=session))


@router.delete("/products/{product_id}/media", tags=["Admin Products"])
async def remove_product_media(
    product_id: str,
    path: str = Query(..., min_length=1),
    session: Optional[AuthSession] = Depends(optional_session),
    services: AppServices = Depends(get_services),
):
    return result_response(await services.products.remove_media_item(product_id, path, session=session))


# --------------------------------------------------------------------------- #
# Local cache catalog
# --------------------------------------------------------------------------- #
@router.post("/local/products", tags=["Admin Local Catalog"])
async def add_local_product(
    payload: dict = Body(...),
    _: AuthSession = Depends(require_session),
    services: AppServices = Depends(get_services),
):
    result = await services.local_catalog.add_product(payload)
    return result_response(result, success_status=status.HTTP_201_CREATED)


@router.put("/local/products/{product_id}", tags=["Admin Local Catalog"])
async def update_local_product(
    product_id: str,
    payload: dict = Body(...),
    _: AuthSession = Depends(require_session),
    services: AppServices = Depends(get_services),
):
    return result_response(await services.local_catalog.update_product(product_id, payload))


@router.delete("/local/products/{product_id}", tags=["Admin Local Catalog"])
async def delete_local_product(
    product_id: str,
    _: AuthSession = Depends(require_session),
    services: AppServices = Depends(get_services),
):
    return result_response(await services.local_catalog.delete_product(product_id))


@router.post("/local/kits", tags=["Admin Local Catalog"])
async def add_local_kit(
    payload: dict = Body(...),
    _: AuthSession = Depends(require_session),
    services: AppServices = Depends(get_services),
):
    result = await services.local_catalog.add_kit(payload)
    return result_response(result, success_status=status.HTTP_201_CREATED)


@router.put("/local/kits/{kit_id}", tags=["Admin Local Catalog"])
async def update_local_kit(
    kit_id: str,
    payload: dict = Body(...),
    _: AuthSession = Depends(require_session),
    services: AppServices = Depends(get_services),
):
    return result_response(await services.local_catalog.update_kit(kit_id, payload))


@router.delete("/local/kits/{kit_id}", tags=["Admin Local Catalog"])
async def delete_local_kit(
    kit_id: str,
    _: AuthSession = Depends(require_session),
    services: AppServices = Depends(get_services),
):
    return result_response(await services.local_catalog.delete_kit(kit_id))


# --------------------------------------------------------------------------- #
# Export
# --------------------------------------------------------------------------- #
@router.get("/export/{kind}", tags=["Admin Local Catalog"])
async def export_local_catalog(
    kind: str,
    _: AuthSession = Depends(require_session),
    services: AppServices = Depends(get_services),
):
    if kind == "products":
        entries = services.local_cache.products()
    elif kind == "kits":
        entries = services.local_cache.kits()
    else:
        entries = []
    result = export_entries(kind, entries, indent=services.config.catalog.export_indent)
    if not result.success:
        return result_response(result)
    return Response(
        content=result.payload["content"],
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{result.payload["filename"]}"'},
    )
