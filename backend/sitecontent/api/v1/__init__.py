from fastapi import APIRouter

# Aggregate all v1 routers here
from .routers import content, content_admin, system

api_router = APIRouter()
api_router.include_router(system.router)
api_router.include_router(content.router)
api_router.include_router(content_admin.router)

__all__ = ["api_router"]
