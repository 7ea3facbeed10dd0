# backend/sitecontent/dependencies.py
"""
FastAPI dependency injection functions for the content API.

The booted ContentPackageContext lives on ``app.state.content``. Each request
rebinds it to a repository over the request's database session, so the
loader and editing modules always work inside the request transaction.

Key Dependencies:
    - get_content_repository: Repository over the request session
    - get_content_context: Booted content rebound to the request repository
    - get_content_loader: ContentLoaderService for the request
    - get_content_module: ContentModule named by the ``module`` path parameter
    - require_content_editor: X-API-Key check for editing endpoints

Usage:
    @router.get("/content/{key}")
    async def load(key: str, loader: ContentLoaderService = Depends(get_content_loader)):
        ...
"""

import logging
import secrets
from typing import Optional

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from .config import settings
from .core.content.loader_service import ContentLoaderService
from .core.content.module import ContentModule
from .core.content.package import ContentPackageContext
from .core.content.repository import ContentGroupRepository, SqlAlchemyContentGroupRepository
from .core.database.base import get_db

logger = logging.getLogger("sitecontent.dependencies")


async def get_content_repository(db: AsyncSession = Depends(get_db)) -> ContentGroupRepository:
    return SqlAlchemyContentGroupRepository(db)


async def get_content_context(
    request: Request,
    repository: ContentGroupRepository = Depends(get_content_repository),
) -> ContentPackageContext:
    """
    Return the booted content package bound to the request repository.

    Raises 503 if no content package has been booted.
    """
    context: Optional[ContentPackageContext] = getattr(request.app.state, "content", None)
    if context is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="No content package is configured",
        )
    return context.rebind(repository)


async def get_content_loader(
    context: ContentPackageContext = Depends(get_content_context),
) -> ContentLoaderService:
    return context.loader


async def get_content_module(
    module: str,
    context: ContentPackageContext = Depends(get_content_context),
) -> ContentModule:
    content_module = context.modules.get(module)
    if content_module is None:
        raise HTTPException(status_code=404, detail=f"Content module '{module}' not found")
    return content_module


async def require_content_editor(
    x_api_key: Optional[str] = Header(default=None, alias="X-API-Key"),
) -> None:
    """
    Guard editing endpoints.

    Open when ``content_admin_api_key`` is not configured; otherwise the
    X-API-Key header must match it.
    """
    expected = settings.content_admin_api_key
    if not expected:
        return

    if not x_api_key or not secrets.compare_digest(x_api_key, expected):
        logger.warning("Rejected content edit request with missing or invalid API key")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API key",
            headers={"WWW-Authenticate": "ApiKey"},
        )
