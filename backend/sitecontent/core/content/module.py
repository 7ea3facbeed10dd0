"""
Editing surface of one declared content module.

Each declared module ("pages", "emails", ...) is exposed to the host
application as a ContentModule. Editors list its groups and change area
values; they never add or remove areas, which stays the job of schema sync.
"""

import logging
import uuid
from pathlib import Path
from typing import List, Optional

from ..clock import Clock
from ..database.models import ContentGroup, ContentMetadata, HtmlContentArea, ImageContentArea
from ..errors import ContentNotFoundError
from .config import ContentConfig
from .definition import ContentGroupSchema, ContentModuleSchema
from .repository import ContentGroupRepository
from .schema_sync import build_content_group
from .values import Image

logger = logging.getLogger("sitecontent.content.module")


class ContentModule:
    """
    Editing operations for the groups of one content module.

    Attributes:
        schema: Declared structure of the module
        repository: Where the module's groups are persisted
        config: Image storage settings used for uploads
        clock: Stamps updated_at on every change
    """

    def __init__(
        self,
        schema: ContentModuleSchema,
        repository: ContentGroupRepository,
        config: ContentConfig,
        clock: Clock,
    ):
        self.schema = schema
        self.repository = repository
        self.config = config
        self.clock = clock

    @property
    def name(self) -> str:
        return self.schema.name

    @property
    def icon(self) -> str:
        return self.schema.icon

    def group_schemas(self) -> List[ContentGroupSchema]:
        return list(self.schema.groups.values())

    def group_schema(self, group_name: str) -> ContentGroupSchema:
        group_schema = self.schema.group(group_name)
        if group_schema is None:
            raise ContentNotFoundError(f"Content group '{group_name}' is not declared in module '{self.name}'")
        return group_schema

    # =========================================================================
    # READ
    # =========================================================================

    async def list_groups(self) -> List[ContentGroup]:
        """Persisted groups of this module, in schema declaration order."""
        persisted = {group.name: group for group in await self.repository.get_all_in_namespace(self.name)}
        return [persisted[name] for name in self.schema.groups if name in persisted]

    async def find_group(self, group_name: str) -> Optional[ContentGroup]:
        """Persisted group, or None if it has not been saved yet."""
        self.group_schema(group_name)
        return await self.repository.find(self.name, group_name)

    async def get_group(self, group_name: str) -> ContentGroup:
        """
        Return the persisted group, or an unsaved empty one built from the schema.

        Raises:
            ContentNotFoundError: If the group is not declared in this module
        """
        group_schema = self.group_schema(group_name)
        group = await self.repository.find(self.name, group_name)
        if group is None:
            group = build_content_group(self.name, group_schema, self.clock)
        return group

    # =========================================================================
    # UPDATE
    # =========================================================================

    async def update_html(self, group_name: str, area_name: str, html: str) -> ContentGroup:
        group = await self.get_group(group_name)
        if area_name not in self.group_schema(group_name).html_areas:
            raise ContentNotFoundError(f"Html area '{area_name}' is not declared in {group.key}")

        area = group.html_area(area_name) or group.add_html_area(HtmlContentArea(area_name))
        area.html = html
        return await self._save(group, f"html area '{area_name}'")

    async def update_metadata(self, group_name: str, item_name: str, value: str) -> ContentGroup:
        group = await self.get_group(group_name)
        if item_name not in self.group_schema(group_name).metadata:
            raise ContentNotFoundError(f"Metadata '{item_name}' is not declared in {group.key}")

        item = group.metadata_item(item_name) or group.add_metadata(ContentMetadata(item_name))
        item.value = value
        return await self._save(group, f"metadata '{item_name}'")

    async def update_image(
        self,
        group_name: str,
        area_name: str,
        image_path: Optional[str] = None,
        client_file_name: Optional[str] = None,
        alt_text: Optional[str] = None,
    ) -> ContentGroup:
        """
        Change an image area. ``image_path``/``alt_text`` left as None keep
        their current values; an empty ``image_path`` clears the image.
        """
        group = await self.get_group(group_name)
        if area_name not in self.group_schema(group_name).images:
            raise ContentNotFoundError(f"Image area '{area_name}' is not declared in {group.key}")

        area = group.image_area(area_name) or group.add_image_area(ImageContentArea(area_name))
        if image_path is not None:
            area.image = Image(image_path, client_file_name or None)
        if alt_text is not None:
            area.alt_text = alt_text
        return await self._save(group, f"image area '{area_name}'")

    async def store_image(
        self,
        group_name: str,
        area_name: str,
        file_name: str,
        data: bytes,
        alt_text: Optional[str] = None,
    ) -> ContentGroup:
        """Write uploaded image bytes under the image storage path and assign them."""
        if area_name not in self.group_schema(group_name).images:
            raise ContentNotFoundError(f"Image area '{area_name}' is not declared in {self.name}.{group_name}")

        client_file_name = Path(file_name).name
        stored_name = f"{uuid.uuid4().hex}{Path(client_file_name).suffix.lower()}"
        target = self.config.image_storage_path / self.name / stored_name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        logger.info(f"Stored content image {target} ({len(data)} bytes)")

        try:
            return await self.update_image(
                group_name,
                area_name,
                image_path=str(target),
                client_file_name=client_file_name,
                alt_text=alt_text,
            )
        except Exception as e:
            target.unlink(missing_ok=True)
            logger.error(f"Removed content image {target} after failed save: {str(e)}")
            raise

    async def _save(self, group: ContentGroup, what: str) -> ContentGroup:
        group.touch(self.clock)
        await self.repository.save(group)
        logger.info(f"Updated {what} of content group {group.key}")
        return group

    def __repr__(self) -> str:
        return f"<ContentModule(name={self.name}, groups={len(self.schema.groups)})>"
