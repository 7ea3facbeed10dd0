"""
Content package base class.

The content structure differs for every site, so there is no concrete
content package. A site subclasses ContentPackage, states where images are
stored and declares its modules; booting the package syncs the database with
that declaration and wires the loader and editing modules:

    class SiteContent(ContentPackage):
        @classmethod
        def define_config(cls, config: ContentConfigDefinition) -> None:
            config.with_images_stored_under("public/content/images") \\
                  .mapped_to_url("/content/images")

        def define_content(self, content: ContentPackageDefinition) -> None:
            def pages(module: ContentModuleDefinition) -> None:
                module.group("template", "Template") \\
                    .with_image("banner", "Banner") \\
                    .with_html("header", "Header") \\
                    .with_html("footer", "Footer")

                module.page("home", "Home", "/") \\
                    .with_html("info", "Info", "#info") \\
                    .with_image("banner", "Banner")

            content.module("pages", "file-text", pages)
            content.module("emails", "envelope",
                           lambda m: m.email("home", "Home").with_html("info", "Info"))

    async with database_service.get_session() as session:
        package = SiteContent(SqlAlchemyContentGroupRepository(session), SystemClock())
        context = await package.boot()
        group = await context.loader.load("pages.home")

Collaborators are passed in explicitly; there is no global container.
"""

import importlib
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Type

from ..clock import Clock
from ..errors import ContentDefinitionError, ContentNotFoundError
from .config import ContentConfig, ContentConfigDefinition
from .definition import ContentModuleSchema, ContentPackageDefinition, ContentSchema
from .loader_service import ContentLoaderService
from .module import ContentModule
from .repository import ContentGroupRepository
from .schema_sync import ContentSchemaSynchronizer, SchemaSyncPlan

logger = logging.getLogger("sitecontent.content.package")


@dataclass
class ContentPackageContext:
    """Everything a booted content package provides to the application."""

    config: ContentConfig
    schema: ContentSchema
    clock: Clock
    loader: ContentLoaderService
    modules: Dict[str, ContentModule] = field(default_factory=dict)
    sync_plan: Optional[SchemaSyncPlan] = None
    package_name: Optional[str] = None

    def module(self, name: str) -> ContentModule:
        try:
            return self.modules[name]
        except KeyError:
            raise ContentNotFoundError(f"Content module '{name}' is not declared") from None

    def rebind(self, repository: ContentGroupRepository) -> "ContentPackageContext":
        """Same content wired to another repository (e.g. a request-scoped session)."""
        return ContentPackageContext(
            config=self.config,
            schema=self.schema,
            clock=self.clock,
            loader=ContentLoaderService(self.config, repository, self.clock),
            modules={
                name: ContentModule(module_schema, repository, self.config, self.clock)
                for name, module_schema in self.schema.modules.items()
            },
            sync_plan=self.sync_plan,
            package_name=self.package_name,
        )


class ContentPackage(ABC):
    """
    Base class for a site's content package.

    Subclasses must override ``define_config`` and ``define_content``.
    """

    name = "content"
    icon = "cubes"

    def __init__(
        self,
        repository: ContentGroupRepository,
        clock: Clock,
        config: Optional[ContentConfig] = None,
    ):
        self.repository = repository
        self.clock = clock
        self._config = config
        self._definition: Optional[ContentPackageDefinition] = None

    # =========================================================================
    # DEFINITION HOOKS
    # =========================================================================

    @classmethod
    def define_config(cls, config: ContentConfigDefinition) -> None:
        """
        Define the image storage location of the content package.

        Raises:
            NotImplementedError: Always, unless overridden
        """
        raise NotImplementedError(
            f"Invalid content package class {cls.__module__}.{cls.__qualname__}: "
            f"the define_config classmethod must be overridden"
        )

    @abstractmethod
    def define_content(self, content: ContentPackageDefinition) -> None:
        """Declare the content modules of the site."""

    # =========================================================================
    # BUILD
    # =========================================================================

    @classmethod
    def build_config(cls) -> ContentConfig:
        definition = ContentConfigDefinition()
        cls.define_config(definition)
        return definition.finalize()

    @property
    def config(self) -> ContentConfig:
        if self._config is None:
            self._config = self.build_config()
        return self._config

    @property
    def definition(self) -> ContentPackageDefinition:
        if self._definition is None:
            definition = ContentPackageDefinition(self.config)
            self.define_content(definition)
            self._definition = definition
        return self._definition

    def build_schema(self) -> ContentSchema:
        return self.definition.finalize()

    def create_module(self, schema: ContentModuleSchema) -> ContentModule:
        return ContentModule(schema, self.repository, self.config, self.clock)

    def module_loaders(self) -> Dict[str, Callable[[], ContentModule]]:
        """Module name -> lazy ContentModule loader, for the host application."""
        return self.definition.load_package(self.create_module)

    def create_loader(self) -> ContentLoaderService:
        return ContentLoaderService(self.config, self.repository, self.clock)

    # =========================================================================
    # BOOT
    # =========================================================================

    async def sync_schema(self, schema: Optional[ContentSchema] = None) -> SchemaSyncPlan:
        if schema is None:
            schema = self.build_schema()
        return await ContentSchemaSynchronizer(self.repository, self.clock).sync(schema)

    async def boot(self) -> ContentPackageContext:
        """
        Build config and schema, sync the repository and wire services.

        Raises:
            NotImplementedError: If define_config is not overridden
            ContentDefinitionError: If the declared content is invalid
        """
        schema = self.build_schema()
        logger.info(
            f"Booting content package {type(self).__name__} "
            f"({len(schema)} modules: {', '.join(schema.module_names()) or 'none'})"
        )

        plan = await self.sync_schema(schema)

        return ContentPackageContext(
            config=self.config,
            schema=schema,
            clock=self.clock,
            loader=self.create_loader(),
            modules={name: loader() for name, loader in self.module_loaders().items()},
            sync_plan=plan,
            package_name=type(self).__name__,
        )


def load_content_package_class(path: str) -> Type[ContentPackage]:
    """
    Resolve a ``"module.path:ClassName"`` reference to a ContentPackage subclass.

    Raises:
        ContentDefinitionError: If the reference is malformed or does not name
            a ContentPackage subclass
    """
    module_name, _, attr = path.partition(":")
    if not module_name or not attr:
        raise ContentDefinitionError(f"Invalid content package reference {path!r}: expecting 'module:Class'")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ContentDefinitionError(f"Cannot import content package module {module_name!r}: {e}") from e

    package_cls = getattr(module, attr, None)
    if not isinstance(package_cls, type) or not issubclass(package_cls, ContentPackage):
        raise ContentDefinitionError(f"{path!r} is not a ContentPackage subclass")
    return package_cls
