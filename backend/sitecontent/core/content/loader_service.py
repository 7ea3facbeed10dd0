"""
Content loader service: the read path for site content.

Templates and API handlers load a content group by its "namespace.name" key
and read values through typed accessors with caller-supplied defaults:

    group = await content_loader.load("pages.home")
    group.get_html("info")
    group.get_image_url("banner", "/static/placeholder.png")
    group.render_metadata_as_html()

A group that has not been persisted yet loads as an empty, unsaved group so
pages render with their defaults before the first sync or edit.
"""

import html
import logging
import os
from typing import Dict, Iterable, Tuple

from ..clock import Clock
from ..database.models import ContentGroup
from ..errors import InvalidContentKeyError
from .config import ContentConfig
from .definition import KEY_SEPARATOR
from .repository import ContentGroupRepository

logger = logging.getLogger("sitecontent.content.loader")


def parse_content_key(key: str) -> Tuple[str, str]:
    """Split "namespace.name" into its parts, raising InvalidContentKeyError."""
    parts = key.split(KEY_SEPARATOR) if isinstance(key, str) else []
    if len(parts) != 2 or not all(parts):
        raise InvalidContentKeyError(
            f"Invalid content group key {key!r}: expecting 'namespace{KEY_SEPARATOR}name'"
        )
    return parts[0], parts[1]


class LoadedContentGroup:
    """Read-only view over a content group with default fallbacks."""

    def __init__(self, config: ContentConfig, content_group: ContentGroup):
        self._config = config
        self._group = content_group

    @property
    def content_group(self) -> ContentGroup:
        return self._group

    @property
    def namespace(self) -> str:
        return self._group.namespace

    @property
    def name(self) -> str:
        return self._group.name

    def has_html(self, name: str) -> bool:
        return self._group.html_area(name) is not None

    def has_image(self, name: str) -> bool:
        return self._group.image_area(name) is not None

    def has_metadata(self, name: str) -> bool:
        return self._group.metadata_item(name) is not None

    def get_html(self, name: str, default: str = "") -> str:
        area = self._group.html_area(name)
        if area is None:
            return default
        return area.value.value

    def get_image_url(self, name: str, default: str = "") -> str:
        area = self._group.image_area(name)
        if area is None or area.image.is_empty:
            return default

        relative_path = area.image.relative_to(self._config.image_storage_base_path)
        if relative_path is None:
            logger.warning(
                f"Image '{name}' of {self._group.key} is outside the image storage path: {area.image_path}"
            )
            return default

        return f"{self._config.image_base_url}/{relative_path}"

    def get_image_alt_text(self, name: str, default: str = "") -> str:
        area = self._group.image_area(name)
        if area is None:
            return default
        return area.alt_text or ""

    def get_metadata(self, name: str, default: str = "") -> str:
        item = self._group.metadata_item(name)
        if item is None:
            return default
        return item.value or ""

    def render_metadata_as_html(self) -> str:
        """
        Render metadata as head tags.

        Each entry becomes ``<meta name="K" content="V" />`` in collection
        order, except ``title`` which becomes ``<title>V</title>``.
        """
        tags = []
        for item in self._group.metadata_items:
            value = html.escape(item.value or "")
            if item.name == "title":
                tags.append(f"<title>{value}</title>")
            else:
                tags.append(f'<meta name="{html.escape(item.name)}" content="{value}" />')
        return os.linesep.join(tags)

    def __repr__(self) -> str:
        return f"<LoadedContentGroup(key={self._group.key})>"


class ContentLoaderService:
    """Loads content groups by key from a ContentGroupRepository."""

    def __init__(self, config: ContentConfig, repository: ContentGroupRepository, clock: Clock):
        self.config = config
        self.repository = repository
        self.clock = clock

    async def load(self, key: str) -> LoadedContentGroup:
        """
        Load the group identified by ``key``.

        Raises:
            InvalidContentKeyError: If key is not "namespace.name"
        """
        namespace, name = parse_content_key(key)

        group = await self.repository.find(namespace, name)
        if group is None:
            logger.debug(f"Content group {key} not found, using empty group")
            group = ContentGroup.create(namespace, name, self.clock)

        return LoadedContentGroup(self.config, group)

    async def load_many(self, keys: Iterable[str]) -> Dict[str, LoadedContentGroup]:
        return {key: await self.load(key) for key in keys}
