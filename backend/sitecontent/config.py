# ============================================================================
# Site Content - Application Configuration
# ============================================================================
"""
Application configuration module using Pydantic Settings.

This module defines all configuration parameters for the site content service,
including:
- API/CORS settings
- Database connection and pooling
- Content image storage location and public URL
- Content package selection and editing credentials

Environment Variables:
    Every field can be supplied through the environment (case-insensitive)
    or a ``.env`` file, e.g. ``DATABASE_URL`` or ``CONTENT_IMAGE_BASE_URL``.

Usage:
    from sitecontent.config import settings
    images_dir = settings.content_image_storage_path
"""

from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # =========================================================================
    # API SETTINGS
    # =========================================================================
    api_title: str = "Site Content API"
    api_version: str = "1.0.0"
    debug: bool = Field(default=False, description="Enable verbose logging & SQL echo")
    log_level: str = Field(default="INFO", description="Root log level for sitecontent loggers")

    # =========================================================================
    # CORS SETTINGS
    # =========================================================================
    cors_origins: List[str] = Field(
        default=["http://localhost:3000", "http://127.0.0.1:3000"],
        description="Allowed origins for CORS",
    )

    # =========================================================================
    # DATABASE
    # =========================================================================
    database_url: str = Field(
        default="sqlite+aiosqlite:///./data/sitecontent.db",
        description="SQLAlchemy async database URL",
    )
    db_pool_size: int = Field(default=20, description="PostgreSQL pool size")
    db_max_overflow: int = Field(default=40, description="PostgreSQL pool overflow")
    db_pool_recycle: int = Field(default=3600, description="Seconds before pooled connections recycle")

    # =========================================================================
    # CONTENT
    # =========================================================================
    content_image_storage_path: str = Field(
        default="./files/content/images",
        description="Directory where uploaded content images are stored",
    )
    content_image_base_url: str = Field(
        default="/content/images",
        description="Public URL the image storage directory is served under",
    )
    content_package: Optional[str] = Field(
        default=None,
        description="Content package class to boot, as 'module.path:ClassName'",
    )
    content_admin_api_key: Optional[str] = Field(
        default=None,
        description="X-API-Key required by the content editing endpoints (disabled when unset)",
    )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


# Global settings instance (imported elsewhere)
settings = Settings()
