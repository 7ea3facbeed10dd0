# backend/sitecontent/api/v1/routers/system.py
from datetime import datetime

from fastapi import APIRouter, Request

from ....config import settings
from ....core.shared.database_service import database_service
from ....models import HealthStatus

router = APIRouter()


@router.get("/health", response_model=HealthStatus, tags=["System"])
async def health_check(request: Request):
    """Health check endpoint."""
    database = await database_service.health_check()
    context = getattr(request.app.state, "content", None)

    return HealthStatus(
        status="healthy" if database["status"] == "healthy" else "degraded",
        timestamp=datetime.now(),
        version=settings.api_version,
        database=database,
        content_package=context.package_name if context else None,
    )
