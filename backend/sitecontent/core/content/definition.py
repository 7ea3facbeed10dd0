"""
Content definition DSL.

A site declares its content structure as modules containing groups, pages and
emails, each with named html, image and metadata areas:

    content = ContentPackageDefinition(config)

    def define_pages(module: ContentModuleDefinition) -> None:
        module.group("template", "Template") \\
            .with_image("banner", "Banner") \\
            .with_html("header", "Header") \\
            .with_html("footer", "Footer")

        module.page("home", "Home", "/") \\
            .with_html("info", "Info", "#info") \\
            .with_metadata("title", "Title")

    content.module("pages", "file-text", define_pages)
    content.module("emails", "envelope", lambda m: m.email("welcome", "Welcome").with_html("body", "Body"))

    schema = content.finalize()

The definitions are mutable while the callbacks run; ``finalize()`` validates
them and produces the frozen ContentSchema consumed by schema sync, the
loader and the editing modules.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Dict, Iterator, List, Optional, Tuple

from ..errors import ContentDefinitionError
from .config import ContentConfig

if TYPE_CHECKING:
    from .module import ContentModule

KEY_SEPARATOR = "."

GROUP_KINDS = ("group", "page", "email")


# =========================================================================
# SCHEMA (frozen result of a definition)
# =========================================================================


@dataclass(frozen=True)
class HtmlAreaDefinition:
    name: str
    label: str
    selector: Optional[str] = None


@dataclass(frozen=True)
class ImageAreaDefinition:
    name: str
    label: str


@dataclass(frozen=True)
class MetadataDefinition:
    name: str
    label: str
    placeholder: Optional[str] = None


@dataclass(frozen=True)
class ContentGroupSchema:
    """
    Declared structure of one content group.

    The three area maps are keyed by area name and ordered by declaration.
    """

    name: str
    label: str
    kind: str = "group"
    url: Optional[str] = None
    html_areas: Dict[str, HtmlAreaDefinition] = field(default_factory=dict)
    images: Dict[str, ImageAreaDefinition] = field(default_factory=dict)
    metadata: Dict[str, MetadataDefinition] = field(default_factory=dict)

    def field_names(self) -> Dict[str, Tuple[str, ...]]:
        return {
            "html_areas": tuple(self.html_areas),
            "images": tuple(self.images),
            "metadata": tuple(self.metadata),
        }


@dataclass(frozen=True)
class ContentModuleSchema:
    name: str
    icon: str
    groups: Dict[str, ContentGroupSchema] = field(default_factory=dict)

    def group(self, name: str) -> Optional[ContentGroupSchema]:
        return self.groups.get(name)


@dataclass(frozen=True)
class ContentSchema:
    """Declared modules keyed by name, in declaration order."""

    modules: Dict[str, ContentModuleSchema] = field(default_factory=dict)

    def __iter__(self) -> Iterator[ContentModuleSchema]:
        return iter(self.modules.values())

    def __len__(self) -> int:
        return len(self.modules)

    def module_names(self) -> List[str]:
        return list(self.modules)

    def module(self, name: str) -> Optional[ContentModuleSchema]:
        return self.modules.get(name)

    def group(self, namespace: str, name: str) -> Optional[ContentGroupSchema]:
        module = self.modules.get(namespace)
        return module.group(name) if module else None

    def as_dict(self) -> Dict[str, Dict[str, Dict[str, Tuple[str, ...]]]]:
        """Plain mapping: module name -> group name -> field kind -> area names."""
        return {
            module.name: {group.name: group.field_names() for group in module.groups.values()}
            for module in self
        }


# =========================================================================
# DEFINITION BUILDERS
# =========================================================================


def _validate_name(what: str, name: str) -> None:
    if not isinstance(name, str) or not name.strip():
        raise ContentDefinitionError(f"Invalid {what} name {name!r}: must be a non-empty string")
    if KEY_SEPARATOR in name:
        raise ContentDefinitionError(
            f"Invalid {what} name {name!r}: must not contain '{KEY_SEPARATOR}'"
        )


def _index_unique(what: str, group: str, definitions: list) -> dict:
    indexed = {}
    for definition in definitions:
        _validate_name(what, definition.name)
        if definition.name in indexed:
            raise ContentDefinitionError(
                f"Duplicate {what} '{definition.name}' declared in group '{group}'"
            )
        indexed[definition.name] = definition
    return indexed


class ContentGroupDefinition:
    """Chainable declaration of one group's content areas."""

    def __init__(self, name: str, label: str, kind: str = "group", url: Optional[str] = None):
        self.name = name
        self.label = label
        self.kind = kind
        self.url = url
        self._html_areas: List[HtmlAreaDefinition] = []
        self._images: List[ImageAreaDefinition] = []
        self._metadata: List[MetadataDefinition] = []

    def with_html(self, name: str, label: str, selector: Optional[str] = None) -> "ContentGroupDefinition":
        self._html_areas.append(HtmlAreaDefinition(name, label, selector))
        return self

    def with_image(self, name: str, label: str) -> "ContentGroupDefinition":
        self._images.append(ImageAreaDefinition(name, label))
        return self

    def with_metadata(self, name: str, label: str, value: Optional[str] = None) -> "ContentGroupDefinition":
        self._metadata.append(MetadataDefinition(name, label, value))
        return self

    def finalize(self) -> ContentGroupSchema:
        _validate_name("group", self.name)
        if self.kind not in GROUP_KINDS:
            raise ContentDefinitionError(f"Unknown group type {self.kind!r} for group '{self.name}'")
        return ContentGroupSchema(
            name=self.name,
            label=self.label,
            kind=self.kind,
            url=self.url,
            html_areas=_index_unique("html area", self.name, self._html_areas),
            images=_index_unique("image area", self.name, self._images),
            metadata=_index_unique("metadata", self.name, self._metadata),
        )


class ContentModuleDefinition:
    """Declares the groups, pages and emails of one content module."""

    def __init__(self, name: str, icon: str, config: Optional[ContentConfig] = None):
        self.name = name
        self.icon = icon
        self.config = config
        self._groups: Dict[str, ContentGroupDefinition] = {}

    def group(self, name: str, label: str) -> ContentGroupDefinition:
        return self._add(ContentGroupDefinition(name, label))

    def page(self, name: str, label: str, url: str) -> ContentGroupDefinition:
        return self._add(ContentGroupDefinition(name, label, kind="page", url=url))

    def email(self, name: str, label: str) -> ContentGroupDefinition:
        return self._add(ContentGroupDefinition(name, label, kind="email"))

    def _add(self, definition: ContentGroupDefinition) -> ContentGroupDefinition:
        self._groups[definition.name] = definition
        return definition

    def finalize(self) -> ContentModuleSchema:
        _validate_name("module", self.name)
        return ContentModuleSchema(
            name=self.name,
            icon=self.icon,
            groups={name: group.finalize() for name, group in self._groups.items()},
        )


class ContentPackageDefinition:
    """
    Top-level content declaration.

    ``module()`` runs its callback immediately. Declaring a module name twice
    replaces the earlier declaration.
    """

    def __init__(self, config: ContentConfig):
        self.config = config
        self._modules: Dict[str, ContentModuleDefinition] = {}

    def module(
        self,
        name: str,
        icon: str,
        definition_callback: Callable[[ContentModuleDefinition], None],
    ) -> ContentModuleDefinition:
        definition = ContentModuleDefinition(name, icon, self.config)
        definition_callback(definition)
        self._modules[name] = definition
        return definition

    def module_names(self) -> List[str]:
        return list(self._modules)

    def modules(self) -> List[ContentModuleDefinition]:
        return list(self._modules.values())

    def finalize(self) -> ContentSchema:
        return ContentSchema(
            modules={name: module.finalize() for name, module in self._modules.items()}
        )

    def load_package(
        self,
        module_factory: Callable[[ContentModuleSchema], "ContentModule"],
    ) -> Dict[str, Callable[[], "ContentModule"]]:
        """
        Build the module name -> loader map handed to the host application.

        Loaders are lazy: the ContentModule is only constructed when the host
        calls the loader.
        """
        schema = self.finalize()

        def _loader(module_schema: ContentModuleSchema) -> Callable[[], "ContentModule"]:
            return lambda: module_factory(module_schema)

        return {name: _loader(module_schema) for name, module_schema in schema.modules.items()}
