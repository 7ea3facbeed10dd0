"""
Unit tests for ContentPackage boot and package class resolution.
"""

import pytest

from sitecontent.config import settings
from sitecontent.core.content.config import ContentConfig
from sitecontent.core.content.module import ContentModule
from sitecontent.core.content.package import load_content_package_class
from sitecontent.core.content.repository import InMemoryContentGroupRepository
from sitecontent.core.database.models import ContentGroup
from sitecontent.core.errors import ContentDefinitionError, ContentNotFoundError

from sample_content import SampleContent, UnconfiguredContent


class TestContentPackageConfig:
    def test_define_config_must_be_overridden(self, repository, clock):
        """Test that a missing define_config raises NotImplementedError."""
        with pytest.raises(NotImplementedError, match="define_config"):
            UnconfiguredContent(repository, clock).config

    def test_config_from_define_config(self, repository, clock):
        """Test that define_config provides the package config."""
        config = SampleContent(repository, clock).config

        assert config.image_storage_base_path == settings.content_image_storage_path
        assert config.image_base_url == "/content/images"

    def test_explicit_config_wins(self, repository, clock, content_config):
        """Test that a config passed to the constructor is used as is."""
        assert SampleContent(repository, clock, content_config).config is content_config


class TestContentPackageBoot:
    """Test boot: schema build, sync and service wiring."""

    @pytest.mark.asyncio
    async def test_boot_syncs_and_wires(self, repository, clock):
        """Test that boot syncs the repository and wires loader and modules."""
        context = await SampleContent(repository, clock).boot()

        assert context.package_name == "SampleContent"
        assert context.schema.module_names() == ["pages", "emails"]
        assert context.sync_plan.summary()["created"] == 3
        assert len(repository) == 3
        assert set(context.modules) == {"pages", "emails"}
        assert isinstance(context.module("emails"), ContentModule)

        loaded = await context.loader.load("emails.welcome")
        assert loaded.has_html("body")

    @pytest.mark.asyncio
    async def test_boot_without_define_config_raises(self, repository, clock):
        """Test that boot aborts before writing when define_config is missing."""
        with pytest.raises(NotImplementedError):
            await UnconfiguredContent(repository, clock).boot()
        assert len(repository) == 0

    @pytest.mark.asyncio
    async def test_boot_removes_undeclared_groups(self, clock):
        """Test that boot removes groups of undeclared modules."""
        repository = InMemoryContentGroupRepository([ContentGroup.create("blog", "post", clock)])

        context = await SampleContent(repository, clock).boot()

        assert await repository.find("blog", "post") is None
        assert context.sync_plan.summary()["removed"] == 1

    @pytest.mark.asyncio
    async def test_unknown_module_raises(self, repository, clock):
        """Test that context.module raises for an undeclared module."""
        context = await SampleContent(repository, clock).boot()

        with pytest.raises(ContentNotFoundError):
            context.module("blog")

    @pytest.mark.asyncio
    async def test_rebind_uses_new_repository(self, repository, clock):
        """Test that a rebound context writes to the new repository only."""
        context = await SampleContent(repository, clock).boot()
        other = InMemoryContentGroupRepository()

        rebound = context.rebind(other)
        await rebound.module("pages").update_html("home", "info", "<p>Hi</p>")

        assert rebound.schema is context.schema
        assert rebound.sync_plan is context.sync_plan
        assert rebound.loader.repository is other
        assert len(other) == 1
        assert (await repository.find("pages", "home")).html_area("info").html == ""

    def test_module_loaders_are_lazy(self, repository, clock):
        """Test that module_loaders returns callables building ContentModules."""
        package = SampleContent(repository, clock, ContentConfig("images", "/images"))

        loaders = package.module_loaders()

        assert list(loaders) == ["pages", "emails"]
        module = loaders["pages"]()
        assert isinstance(module, ContentModule)
        assert module.repository is repository


class TestLoadContentPackageClass:
    def test_resolves_reference(self):
        """Test that a module:Class reference resolves."""
        assert load_content_package_class("sample_content:SampleContent") is SampleContent

    @pytest.mark.parametrize(
        "reference",
        [
            "sample_content",
            "sample_content:define_pages",
            "sample_content:Missing",
            "no_such_module_here:Content",
        ],
    )
    def test_invalid_reference_raises(self, reference):
        """Test that malformed or wrong references raise ContentDefinitionError."""
        with pytest.raises(ContentDefinitionError):
            load_content_package_class(reference)
