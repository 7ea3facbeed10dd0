"""
Content configuration.

ContentConfig tells the loader where content images are stored on disk and
which public URL that directory is served under. It is built either through
ContentConfigDefinition (inside a ContentPackage) or from application settings.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from ..errors import ContentDefinitionError


@dataclass(frozen=True)
class ContentConfig:
    """
    Attributes:
        image_storage_base_path: Directory holding stored content images
        image_base_url: Public URL of that directory (no trailing slash)
    """

    image_storage_base_path: str
    image_base_url: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "image_base_url", self.image_base_url.rstrip("/"))

    @property
    def image_storage_path(self) -> Path:
        return Path(self.image_storage_base_path)

    @classmethod
    def from_settings(cls, settings) -> "ContentConfig":
        return cls(
            image_storage_base_path=settings.content_image_storage_path,
            image_base_url=settings.content_image_base_url,
        )


class ContentConfigDefinition:
    """
    Builder for ContentConfig.

    Example::

        config.with_images_stored_under("public/content/images") \\
              .mapped_to_url("/content/images")
    """

    def __init__(self):
        self._image_storage_path: Optional[str] = None
        self._image_base_url: Optional[str] = None

    def with_images_stored_under(self, path: Union[str, Path]) -> "ContentConfigDefinition":
        self._image_storage_path = str(path)
        return self

    def mapped_to_url(self, url: str) -> "ContentConfigDefinition":
        self._image_base_url = url
        return self

    def finalize(self) -> ContentConfig:
        if not self._image_storage_path:
            raise ContentDefinitionError(
                "Content config is missing the image storage path: call with_images_stored_under()"
            )
        if self._image_base_url is None:
            raise ContentDefinitionError(
                "Content config is missing the image base url: call mapped_to_url()"
            )
        return ContentConfig(self._image_storage_path, self._image_base_url)
