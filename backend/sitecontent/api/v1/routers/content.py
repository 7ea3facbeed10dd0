# backend/sitecontent/api/v1/routers/content.py
"""Public read endpoints for site content."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from ....core.content.loader_service import ContentLoaderService
from ....core.errors import InvalidContentKeyError
from ....dependencies import get_content_loader
from ....models import LoadedContentGroupResponse

logger = logging.getLogger("sitecontent.api.content")

router = APIRouter()


@router.get("/content/{key}", response_model=LoadedContentGroupResponse, tags=["Content"])
async def load_content_group(
    key: str,
    loader: ContentLoaderService = Depends(get_content_loader),
):
    """
    Load a content group by its "namespace.name" key.

    Groups that have not been stored yet load empty rather than 404.
    """
    try:
        loaded = await loader.load(key)
    except InvalidContentKeyError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return LoadedContentGroupResponse.from_loaded(loaded)
