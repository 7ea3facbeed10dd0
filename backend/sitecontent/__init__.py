# backend/sitecontent/__init__.py
"""Site Content - declarative content management for FastAPI sites."""

__version__ = "1.0.0"
__title__ = "Site Content API"
__description__ = "Declare editable site content and keep its stored schema in sync"
