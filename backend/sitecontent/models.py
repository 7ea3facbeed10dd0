# ============================================================================
# Site Content - Pydantic API Models
# ============================================================================
"""
Pydantic request and response models for the site content API.

Response models are built from ORM/domain objects through their
``from_*`` classmethods so routers stay free of mapping code.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .core.content.definition import ContentGroupSchema, ContentModuleSchema
from .core.content.loader_service import LoadedContentGroup
from .core.database.models import ContentGroup


# ============================================================================
# SCHEMA MODELS
# ============================================================================

class AreaSchemaResponse(BaseModel):
    name: str
    label: str
    selector: Optional[str] = Field(default=None, description="CSS selector of the html area on its page")
    placeholder: Optional[str] = Field(default=None, description="Suggested metadata value")


class ContentGroupSchemaResponse(BaseModel):
    name: str
    label: str
    type: str = Field(description="group, page or email")
    url: Optional[str] = None
    html_areas: List[AreaSchemaResponse] = Field(default_factory=list)
    images: List[AreaSchemaResponse] = Field(default_factory=list)
    metadata: List[AreaSchemaResponse] = Field(default_factory=list)

    @classmethod
    def from_schema(cls, schema: ContentGroupSchema) -> "ContentGroupSchemaResponse":
        return cls(
            name=schema.name,
            label=schema.label,
            type=schema.kind,
            url=schema.url,
            html_areas=[
                AreaSchemaResponse(name=a.name, label=a.label, selector=a.selector)
                for a in schema.html_areas.values()
            ],
            images=[AreaSchemaResponse(name=a.name, label=a.label) for a in schema.images.values()],
            metadata=[
                AreaSchemaResponse(name=m.name, label=m.label, placeholder=m.placeholder)
                for m in schema.metadata.values()
            ],
        )


class ContentModuleResponse(BaseModel):
    name: str
    icon: str
    groups: List[ContentGroupSchemaResponse] = Field(default_factory=list)

    @classmethod
    def from_schema(cls, schema: ContentModuleSchema) -> "ContentModuleResponse":
        return cls(
            name=schema.name,
            icon=schema.icon,
            groups=[ContentGroupSchemaResponse.from_schema(g) for g in schema.groups.values()],
        )


class ContentModuleListResponse(BaseModel):
    modules: List[ContentModuleResponse] = Field(default_factory=list)


# ============================================================================
# CONTENT MODELS
# ============================================================================

class ImageContentResponse(BaseModel):
    url: str = Field(default="", description="Public URL, empty when no image is set")
    alt_text: str = ""
    file_name: Optional[str] = None


class LoadedContentGroupResponse(BaseModel):
    """Content group as rendered for sites and templates."""

    namespace: str
    name: str
    html: Dict[str, str] = Field(default_factory=dict)
    images: Dict[str, ImageContentResponse] = Field(default_factory=dict)
    metadata: Dict[str, str] = Field(default_factory=dict)
    metadata_html: str = ""

    @classmethod
    def from_loaded(cls, loaded: LoadedContentGroup) -> "LoadedContentGroupResponse":
        group = loaded.content_group
        return cls(
            namespace=loaded.namespace,
            name=loaded.name,
            html={a.name: loaded.get_html(a.name) for a in group.html_content_areas},
            images={
                a.name: ImageContentResponse(
                    url=loaded.get_image_url(a.name),
                    alt_text=loaded.get_image_alt_text(a.name),
                    file_name=a.image.file_name or None,
                )
                for a in group.image_content_areas
            },
            metadata={m.name: loaded.get_metadata(m.name) for m in group.metadata_items},
            metadata_html=loaded.render_metadata_as_html(),
        )


class ImageAreaValue(BaseModel):
    name: str
    image_path: str = ""
    client_file_name: Optional[str] = None
    alt_text: str = ""


class NamedValue(BaseModel):
    name: str
    value: str = ""


class ContentGroupResponse(BaseModel):
    """Stored values of a content group, as seen by editors."""

    namespace: str
    name: str
    persisted: bool = Field(description="False until the group has been saved")
    html_areas: List[NamedValue] = Field(default_factory=list)
    images: List[ImageAreaValue] = Field(default_factory=list)
    metadata: List[NamedValue] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_group(cls, group: ContentGroup, persisted: bool = True) -> "ContentGroupResponse":
        return cls(
            namespace=group.namespace,
            name=group.name,
            persisted=persisted,
            html_areas=[NamedValue(name=a.name, value=a.html or "") for a in group.html_content_areas],
            images=[
                ImageAreaValue(
                    name=a.name,
                    image_path=a.image_path or "",
                    client_file_name=a.client_file_name,
                    alt_text=a.alt_text or "",
                )
                for a in group.image_content_areas
            ],
            metadata=[NamedValue(name=m.name, value=m.value or "") for m in group.metadata_items],
            created_at=group.created_at,
            updated_at=group.updated_at,
        )


# ============================================================================
# REQUEST MODELS
# ============================================================================

class HtmlUpdateRequest(BaseModel):
    html: str = Field(default="", description="New rich-text value")


class MetadataUpdateRequest(BaseModel):
    value: str = Field(default="", description="New metadata value")


class ImageUpdateRequest(BaseModel):
    image_path: Optional[str] = Field(
        default=None,
        description="Stored image path; empty string clears the image, omitted keeps it",
    )
    client_file_name: Optional[str] = None
    alt_text: Optional[str] = Field(default=None, description="Omitted keeps the current alt text")


# ============================================================================
# SYSTEM MODELS
# ============================================================================

class HealthStatus(BaseModel):
    status: str
    timestamp: datetime
    version: str
    database: Dict[str, Any] = Field(default_factory=dict)
    content_package: Optional[str] = None


class ErrorResponse(BaseModel):
    """
    Standard error response model for API errors.

    Attributes:
        error: Error category or type
        detail: Detailed error message
        timestamp: When the error occurred
    """
    error: str = Field(description="Error category or type")
    detail: Optional[str] = Field(default=None, description="Detailed error message")
    timestamp: datetime = Field(default_factory=datetime.now, description="Timestamp when error occurred")
