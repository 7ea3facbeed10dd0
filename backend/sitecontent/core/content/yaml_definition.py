"""
YAML content declarations.

Sites that prefer configuration files over Python classes can declare their
content in YAML; the file is replayed through the same definition DSL:

    config:
      image_storage_path: public/content/images
      image_base_url: /content/images

    modules:
      pages:
        icon: file-text
        groups:
          template:
            label: Template
            html:
              header: Header
              footer: Footer
          home:
            type: page
            label: Home
            url: /
            html:
              info: {label: Info, selector: "#info"}
            images:
              banner: Banner
            metadata:
              title: {label: Title, value: "Welcome"}

Area entries are either a label string or a mapping with ``label`` plus
``selector`` (html) or ``value`` (metadata). The ``config`` section is
optional; application settings fill it in when absent.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from ...config import settings
from ..errors import ContentDefinitionError
from .config import ContentConfig, ContentConfigDefinition
from .definition import ContentGroupDefinition, ContentModuleDefinition, ContentPackageDefinition
from .package import ContentPackage

logger = logging.getLogger("sitecontent.content.yaml")


def read_yaml_definition(source: Union[str, Path, Mapping[str, Any]]) -> Dict[str, Any]:
    """Load a YAML declaration from a file path, or pass a mapping through."""
    if isinstance(source, Mapping):
        return dict(source)

    path = Path(source)
    if not path.exists():
        raise ContentDefinitionError(f"Content definition file not found: {path}")

    with open(path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ContentDefinitionError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ContentDefinitionError(f"Content definition {path} must be a mapping")
    return data


def _mapping(value: Any, where: str) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ContentDefinitionError(f"'{where}' must be a mapping, got {type(value).__name__}")
    return value


def _area(value: Any, name: str, where: str) -> Dict[str, Any]:
    if value is None:
        return {"label": name}
    if isinstance(value, str):
        return {"label": value}
    if isinstance(value, dict):
        return {"label": name, **value}
    raise ContentDefinitionError(f"Area '{where}.{name}' must be a label or a mapping")


def _define_group(module: ContentModuleDefinition, name: str, data: Dict[str, Any]) -> ContentGroupDefinition:
    kind = data.get("type", "group")
    label = data.get("label", name)

    if kind == "group":
        group = module.group(name, label)
    elif kind == "page":
        group = module.page(name, label, data.get("url", ""))
    elif kind == "email":
        group = module.email(name, label)
    else:
        raise ContentDefinitionError(f"Unknown group type {kind!r} for '{module.name}.{name}'")

    where = f"{module.name}.{name}"
    for area_name, area in _mapping(data.get("html"), f"{where}.html").items():
        area = _area(area, area_name, where)
        group.with_html(area_name, area["label"], area.get("selector"))

    for area_name, area in _mapping(data.get("images"), f"{where}.images").items():
        area = _area(area, area_name, where)
        group.with_image(area_name, area["label"])

    for item_name, item in _mapping(data.get("metadata"), f"{where}.metadata").items():
        item = _area(item, item_name, where)
        group.with_metadata(item_name, item["label"], item.get("value"))

    return group


def apply_yaml_definition(content: ContentPackageDefinition, data: Mapping[str, Any]) -> ContentPackageDefinition:
    """Replay the ``modules`` section of a YAML declaration onto ``content``."""
    modules = _mapping(data.get("modules"), "modules")

    for module_name, module_data in modules.items():
        module_data = _mapping(module_data, f"modules.{module_name}")
        groups = _mapping(module_data.get("groups"), f"modules.{module_name}.groups")

        def define(module: ContentModuleDefinition, groups=groups) -> None:
            for group_name, group_data in groups.items():
                _define_group(module, group_name, _mapping(group_data, f"{module.name}.{group_name}"))

        content.module(module_name, module_data.get("icon", "cubes"), define)

    logger.debug(f"Applied YAML content definition: {', '.join(content.module_names()) or 'no modules'}")
    return content


def apply_yaml_config(config: ContentConfigDefinition, data: Mapping[str, Any]) -> ContentConfigDefinition:
    section = _mapping(data.get("config"), "config")
    config.with_images_stored_under(section.get("image_storage_path", settings.content_image_storage_path))
    config.mapped_to_url(section.get("image_base_url", settings.content_image_base_url))
    return config


def load_definition_from_yaml(
    source: Union[str, Path, Mapping[str, Any]],
    config: Optional[ContentConfig] = None,
) -> ContentPackageDefinition:
    """
    Build a ContentPackageDefinition from a YAML file or parsed mapping.

    Args:
        source: Path to the YAML file, or an already parsed mapping
        config: ContentConfig to attach; built from the file's ``config``
            section (or settings) when omitted
    """
    data = read_yaml_definition(source)
    if config is None:
        config = apply_yaml_config(ContentConfigDefinition(), data).finalize()
    return apply_yaml_definition(ContentPackageDefinition(config), data)


class YamlContentPackage(ContentPackage):
    """
    Content package declared by a YAML file.

    Subclass and set ``definition_path``, or point ``CONTENT_PACKAGE`` at a
    subclass defined in the site's code.
    """

    definition_path: Optional[str] = None

    @classmethod
    def _data(cls) -> Dict[str, Any]:
        if not cls.definition_path:
            raise NotImplementedError(
                f"Invalid content package class {cls.__qualname__}: definition_path must be set"
            )
        return read_yaml_definition(cls.definition_path)

    @classmethod
    def define_config(cls, config: ContentConfigDefinition) -> None:
        apply_yaml_config(config, cls._data())

    def define_content(self, content: ContentPackageDefinition) -> None:
        apply_yaml_definition(content, self._data())
