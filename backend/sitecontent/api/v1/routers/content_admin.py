# backend/sitecontent/api/v1/routers/content_admin.py
"""
Content editing endpoints.

Editors browse the declared modules and change the values of a group's
html, image and metadata areas. Area structure is owned by the content
declaration and cannot be changed here.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from ....core.content.module import ContentModule
from ....core.content.package import ContentPackageContext
from ....core.errors import ContentNotFoundError
from ....dependencies import get_content_context, get_content_module, require_content_editor
from ....models import (
    ContentGroupResponse,
    ContentModuleListResponse,
    ContentModuleResponse,
    HtmlUpdateRequest,
    ImageUpdateRequest,
    MetadataUpdateRequest,
)

logger = logging.getLogger("sitecontent.api.content_admin")

router = APIRouter(prefix="/content-admin", dependencies=[Depends(require_content_editor)])


@router.get("/modules", response_model=ContentModuleListResponse, tags=["Content Admin"])
async def list_modules(context: ContentPackageContext = Depends(get_content_context)):
    """List declared content modules and their group structure."""
    return ContentModuleListResponse(
        modules=[ContentModuleResponse.from_schema(module) for module in context.schema]
    )


@router.get("/modules/{module}", response_model=ContentModuleResponse, tags=["Content Admin"])
async def get_module(module: ContentModule = Depends(get_content_module)):
    return ContentModuleResponse.from_schema(module.schema)


@router.get(
    "/modules/{module}/groups/{group}",
    response_model=ContentGroupResponse,
    tags=["Content Admin"],
)
async def get_group(group: str, module: ContentModule = Depends(get_content_module)):
    """Stored values of a group; unsaved groups are returned empty."""
    try:
        stored = await module.find_group(group)
        if stored is not None:
            return ContentGroupResponse.from_group(stored)
        return ContentGroupResponse.from_group(await module.get_group(group), persisted=False)
    except ContentNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put(
    "/modules/{module}/groups/{group}/html/{area}",
    response_model=ContentGroupResponse,
    tags=["Content Admin"],
)
async def update_html(
    group: str,
    area: str,
    request: HtmlUpdateRequest,
    module: ContentModule = Depends(get_content_module),
):
    try:
        updated = await module.update_html(group, area, request.html)
    except ContentNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return ContentGroupResponse.from_group(updated)


@router.put(
    "/modules/{module}/groups/{group}/metadata/{item}",
    response_model=ContentGroupResponse,
    tags=["Content Admin"],
)
async def update_metadata(
    group: str,
    item: str,
    request: MetadataUpdateRequest,
    module: ContentModule = Depends(get_content_module),
):
    try:
        updated = await module.update_metadata(group, item, request.value)
    except ContentNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return ContentGroupResponse.from_group(updated)


@router.put(
    "/modules/{module}/groups/{group}/images/{area}",
    response_model=ContentGroupResponse,
    tags=["Content Admin"],
)
async def update_image(
    group: str,
    area: str,
    request: ImageUpdateRequest,
    module: ContentModule = Depends(get_content_module),
):
    try:
        updated = await module.update_image(
            group,
            area,
            image_path=request.image_path,
            client_file_name=request.client_file_name,
            alt_text=request.alt_text,
        )
    except ContentNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return ContentGroupResponse.from_group(updated)


@router.post(
    "/modules/{module}/groups/{group}/images/{area}/upload",
    response_model=ContentGroupResponse,
    tags=["Content Admin"],
)
async def upload_image(
    group: str,
    area: str,
    file: UploadFile = File(...),
    alt_text: Optional[str] = Form(default=None),
    module: ContentModule = Depends(get_content_module),
):
    """Upload an image file into the content image storage and assign it."""
    if not file.filename:
        raise HTTPException(status_code=400, detail="Uploaded file has no name")

    content_type = file.content_type or ""
    if not content_type.startswith("image/"):
        raise HTTPException(status_code=400, detail=f"Unsupported content type: {content_type or 'unknown'}")

    data = await file.read()
    try:
        updated = await module.store_image(group, area, file.filename, data, alt_text=alt_text)
    except ContentNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return ContentGroupResponse.from_group(updated)
