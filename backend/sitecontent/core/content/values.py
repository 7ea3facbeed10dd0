"""
Immutable value objects held by content areas.

Html wraps a rich-text fragment; Image references a stored file together with
the file name the client originally uploaded it as.
"""

from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import Optional, Union


@dataclass(frozen=True)
class Html:
    value: str = ""

    @property
    def is_empty(self) -> bool:
        return self.value == ""

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Image:
    """
    Reference to an image file on disk.

    Attributes:
        path: Stored file path ("" when no image has been set)
        client_file_name: Name the file was uploaded as, if known
    """

    path: str = ""
    client_file_name: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.path == ""

    @property
    def file_name(self) -> str:
        if self.client_file_name:
            return self.client_file_name
        return PurePath(self.path).name

    def exists(self) -> bool:
        return not self.is_empty and Path(self.path).is_file()

    def relative_to(self, base: Union[str, Path]) -> Optional[str]:
        """Posix path of the image relative to ``base``, or None if outside it."""
        if self.is_empty:
            return None
        try:
            relative = Path(self.path).resolve().relative_to(Path(base).resolve())
        except ValueError:
            return None
        return relative.as_posix()
