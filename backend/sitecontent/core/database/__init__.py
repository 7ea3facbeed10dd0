# backend/sitecontent/core/database/__init__.py
"""
Database package for site content.

Provides SQLAlchemy models, base classes, and the session dependency.
"""

from .base import Base, get_db
from .models import (
    ContentGroup,
    ContentMetadata,
    HtmlContentArea,
    ImageContentArea,
)

__all__ = [
    "Base",
    "get_db",
    "ContentGroup",
    "ContentMetadata",
    "HtmlContentArea",
    "ImageContentArea",
]
