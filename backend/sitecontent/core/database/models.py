# backend/sitecontent/core/database/models.py
"""
SQLAlchemy ORM models for persisted site content.

Models:
    - ContentGroup: A named bundle of content areas identified by (namespace, name)
    - HtmlContentArea: A named rich-text area within a group
    - ImageContentArea: A named image area (file reference + alt text) within a group
    - ContentMetadata: A named metadata value within a group

Each group owns three ordered collections. Entries keep insertion order through
a ``position`` column and names are unique within a collection.
"""

from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    TypeDecorator,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import relationship

from ..clock import Clock
from ..content.values import Html, Image
from ..errors import ContentError
from .base import Base


# UUID type that works with both SQLite and PostgreSQL
class UUID(TypeDecorator):
    """Platform-independent UUID type.

    Uses PostgreSQL's UUID type when available, otherwise uses String(36).
    """
    impl = String
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == 'postgresql':
            return dialect.type_descriptor(PG_UUID(as_uuid=True))
        return dialect.type_descriptor(String(36))

    def process_bind_param(self, value, dialect):
        if value is None:
            return value
        return str(value)

    def process_result_value(self, value, dialect):
        if value is None or isinstance(value, uuid.UUID):
            return value
        return uuid.UUID(value)


class ContentGroup(Base):
    """
    Content group model.

    A group is created when the declared content schema names it and removed
    once no module declares it anymore. Editors change the values of its
    areas; schema sync only adds or drops areas.

    Attributes:
        id: Unique group identifier
        namespace: Name of the content module the group belongs to
        name: Group name, unique within its namespace
        created_at: When the group was first created
        updated_at: When the group's areas or values last changed

    Relationships:
        html_content_areas: Ordered HtmlContentArea entries
        image_content_areas: Ordered ImageContentArea entries
        metadata_items: Ordered ContentMetadata entries
    """

    __tablename__ = "content_groups"

    id = Column(UUID(), primary_key=True, default=uuid.uuid4)
    namespace = Column(String(255), nullable=False, index=True)
    name = Column(String(255), nullable=False)

    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    html_content_areas = relationship(
        "HtmlContentArea",
        back_populates="group",
        order_by="HtmlContentArea.position",
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    image_content_areas = relationship(
        "ImageContentArea",
        back_populates="group",
        order_by="ImageContentArea.position",
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    metadata_items = relationship(
        "ContentMetadata",
        back_populates="group",
        order_by="ContentMetadata.position",
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (
        UniqueConstraint("namespace", "name", name="uq_content_groups_namespace_name"),
    )

    @classmethod
    def create(cls, namespace: str, name: str, clock: Clock) -> "ContentGroup":
        now = clock.now()
        return cls(id=uuid.uuid4(), namespace=namespace, name=name, created_at=now, updated_at=now)

    @property
    def key(self) -> str:
        return f"{self.namespace}.{self.name}"

    def touch(self, clock: Clock) -> None:
        self.updated_at = clock.now()

    # -------- Lookups --------

    def html_area(self, name: str) -> Optional["HtmlContentArea"]:
        return next((a for a in self.html_content_areas if a.name == name), None)

    def image_area(self, name: str) -> Optional["ImageContentArea"]:
        return next((a for a in self.image_content_areas if a.name == name), None)

    def metadata_item(self, name: str) -> Optional["ContentMetadata"]:
        return next((m for m in self.metadata_items if m.name == name), None)

    # -------- Additions (unique by name) --------

    def add_html_area(self, area: "HtmlContentArea") -> "HtmlContentArea":
        if self.html_area(area.name) is not None:
            raise ContentError(f"Html area '{area.name}' already exists in {self.key}")
        self.html_content_areas.append(area)
        return area

    def add_image_area(self, area: "ImageContentArea") -> "ImageContentArea":
        if self.image_area(area.name) is not None:
            raise ContentError(f"Image area '{area.name}' already exists in {self.key}")
        self.image_content_areas.append(area)
        return area

    def add_metadata(self, item: "ContentMetadata") -> "ContentMetadata":
        if self.metadata_item(item.name) is not None:
            raise ContentError(f"Metadata '{item.name}' already exists in {self.key}")
        self.metadata_items.append(item)
        return item

    def __repr__(self) -> str:
        return f"<ContentGroup(namespace={self.namespace}, name={self.name})>"


class HtmlContentArea(Base):
    """Rich-text content area; value defaults to an empty fragment."""

    __tablename__ = "content_html_areas"
    __table_args__ = (UniqueConstraint("group_id", "name", name="uq_content_html_areas_group_id_name"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    group_id = Column(UUID(), ForeignKey("content_groups.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    name = Column(String(255), nullable=False)
    html = Column(Text, nullable=False, default="")

    group = relationship("ContentGroup", back_populates="html_content_areas")

    def __init__(self, name: str, html: str = "", **kwargs):
        super().__init__(name=name, html=str(html), **kwargs)

    @property
    def value(self) -> Html:
        return Html(self.html or "")

    def __repr__(self) -> str:
        return f"<HtmlContentArea(name={self.name})>"


class ImageContentArea(Base):
    """Image content area referencing a stored file and its alt text."""

    __tablename__ = "content_image_areas"
    __table_args__ = (UniqueConstraint("group_id", "name", name="uq_content_image_areas_group_id_name"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    group_id = Column(UUID(), ForeignKey("content_groups.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    name = Column(String(255), nullable=False)
    image_path = Column(String(1024), nullable=False, default="")
    client_file_name = Column(String(255), nullable=True)
    alt_text = Column(String(1024), nullable=False, default="")

    group = relationship("ContentGroup", back_populates="image_content_areas")

    def __init__(self, name: str, image: Optional[Image] = None, alt_text: str = "", **kwargs):
        image = image or Image()
        super().__init__(
            name=name,
            image_path=image.path,
            client_file_name=image.client_file_name,
            alt_text=alt_text,
            **kwargs,
        )

    @property
    def image(self) -> Image:
        return Image(self.image_path or "", self.client_file_name)

    @image.setter
    def image(self, image: Image) -> None:
        self.image_path = image.path
        self.client_file_name = image.client_file_name

    def __repr__(self) -> str:
        return f"<ImageContentArea(name={self.name}, image_path={self.image_path})>"


class ContentMetadata(Base):
    """Named metadata value (page title, description, keywords, ...)."""

    __tablename__ = "content_metadata"
    __table_args__ = (UniqueConstraint("group_id", "name", name="uq_content_metadata_group_id_name"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    group_id = Column(UUID(), ForeignKey("content_groups.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    name = Column(String(255), nullable=False)
    value = Column(Text, nullable=False, default="")

    group = relationship("ContentGroup", back_populates="metadata_items")

    def __init__(self, name: str, value: str = "", **kwargs):
        super().__init__(name=name, value=value, **kwargs)

    def __repr__(self) -> str:
        return f"<ContentMetadata(name={self.name})>"
