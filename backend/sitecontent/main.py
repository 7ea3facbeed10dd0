# ============================================================================
# Site Content - FastAPI Application Entry Point
# ============================================================================
"""
Main FastAPI application module for the site content service.

This module sets up the FastAPI application with:
- CORS middleware configuration
- Startup: table creation, content package boot and schema sync
- Error handling with a consistent ErrorResponse envelope
- API router integration
- Public serving of stored content images

Usage:
    Direct: python -m sitecontent.main
    Server: uvicorn sitecontent.main:app --host 0.0.0.0 --port 8000

    The content package to boot is read from CONTENT_PACKAGE
    ("module.path:ClassName"), or passed to create_app() directly.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Dict, Optional, Type

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError

from .api.v1 import api_router
from .config import settings
from .core.clock import Clock, SystemClock
from .core.content.package import ContentPackage, ContentPackageContext, load_content_package_class
from .core.content.repository import SqlAlchemyContentGroupRepository
from .core.errors import ContentNotFoundError, InvalidContentKeyError
from .core.shared.database_service import database_service
from .models import ErrorResponse

logger = logging.getLogger("sitecontent.main")


async def boot_content_package(
    app: FastAPI,
    package_cls: Type[ContentPackage],
    clock: Optional[Clock] = None,
) -> ContentPackageContext:
    """
    Boot ``package_cls`` inside a database session and publish it on app.state.

    The schema sync commits with the session; any failure rolls it back and
    aborts startup.
    """
    async with database_service.get_session() as session:
        package = package_cls(SqlAlchemyContentGroupRepository(session), clock or SystemClock())
        context = await package.boot()

    app.state.content = context

    base_url = context.config.image_base_url
    if base_url.startswith("/"):
        app.mount(
            base_url,
            StaticFiles(directory=context.config.image_storage_base_path, check_dir=False),
            name="content-images",
        )

    if context.sync_plan is not None:
        logger.info(f"Content package {context.package_name} ready: {context.sync_plan.summary()}")
    return context


def create_app(
    package_cls: Optional[Type[ContentPackage]] = None,
    clock: Optional[Clock] = None,
    init_db: bool = True,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        package_cls: Content package to boot; defaults to settings.content_package
        clock: Clock used to stamp content (SystemClock by default)
        init_db: Create missing tables on startup
    """
    logging.getLogger("sitecontent").setLevel(settings.log_level.upper())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting {settings.api_title} {settings.api_version} (debug={settings.debug})")
        if init_db:
            await database_service.init_db()

        resolved = package_cls
        if resolved is None and settings.content_package:
            resolved = load_content_package_class(settings.content_package)

        if resolved is None:
            logger.warning("No content package configured; content endpoints will return 503")
        else:
            await boot_content_package(app, resolved, clock)

        yield

        logger.info("Shutting down")
        await database_service.close()

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description="Declarative site content: schema sync, content loading and editing.",
        lifespan=lifespan,
    )
    app.state.content = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    _register_exception_handlers(app)

    app.include_router(api_router, prefix="/api/v1")

    @app.get("/", tags=["root"])
    async def root() -> Dict[str, Any]:
        return {
            "name": settings.api_title,
            "version": settings.api_version,
            "status": "running",
            "docs_url": "/docs",
            "health_check": "/api/v1/health",
            "timestamp": datetime.now(),
        }

    return app


# ============================================================================
# ERROR HANDLERS
# ============================================================================

def _error(status_code: int, error: str, detail: str) -> JSONResponse:
    body = ErrorResponse(error=error, detail=detail, timestamp=datetime.now())
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def validation_exception_handler(request: Request, exc: ValidationError) -> JSONResponse:
        return _error(422, "Validation Error", str(exc))

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        response = _error(exc.status_code, f"HTTP {exc.status_code}", str(exc.detail))
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(InvalidContentKeyError)
    async def invalid_key_handler(request: Request, exc: InvalidContentKeyError) -> JSONResponse:
        return _error(400, "Invalid Content Key", str(exc))

    @app.exception_handler(ContentNotFoundError)
    async def not_found_handler(request: Request, exc: ContentNotFoundError) -> JSONResponse:
        return _error(404, "Content Not Found", str(exc))

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
        detail = str(exc) if settings.debug else "An unexpected error occurred"
        return _error(500, "Internal Server Error", detail)


app = create_app()


# ============================================================================
# DEVELOPMENT SERVER
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=settings.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run("sitecontent.main:app", host="0.0.0.0", port=8000, reload=True, log_level="info")
