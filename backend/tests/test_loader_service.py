"""
Unit tests for ContentLoaderService and LoadedContentGroup.
"""

import os
from pathlib import Path

import pytest

from sitecontent.core.content.config import ContentConfig
from sitecontent.core.content.loader_service import (
    ContentLoaderService,
    LoadedContentGroup,
    parse_content_key,
)
from sitecontent.core.content.values import Image
from sitecontent.core.database.models import (
    ContentGroup,
    ContentMetadata,
    HtmlContentArea,
    ImageContentArea,
)
from sitecontent.core.errors import InvalidContentKeyError

TESTS_DIR = Path(__file__).resolve().parent


@pytest.fixture
def config():
    return ContentConfig(image_storage_base_path=str(TESTS_DIR), image_base_url="/some/url")


@pytest.fixture
def home(clock):
    group = ContentGroup.create("pages", "home", clock)
    group.add_html_area(HtmlContentArea("info", "<p>Some info</p>"))
    group.add_image_area(ImageContentArea("banner", Image(__file__, "banner.png"), "Banner alt"))
    group.add_metadata(ContentMetadata("key", "val"))
    group.add_metadata(ContentMetadata("title", "Some Title"))
    return group


@pytest.fixture
def loader(config, repository, clock):
    return ContentLoaderService(config, repository, clock)


class TestParseContentKey:
    def test_valid_key(self):
        """Test that a valid key splits into namespace and name."""
        assert parse_content_key("pages.home") == ("pages", "home")

    @pytest.mark.parametrize("key", ["invalid_group_name", "a.b.c", ".home", "pages.", ""])
    def test_invalid_keys(self, key):
        """Test that keys without exactly one separator are rejected."""
        with pytest.raises(InvalidContentKeyError):
            parse_content_key(key)


class TestContentLoaderService:
    """Test loading groups by key."""

    @pytest.mark.asyncio
    async def test_load(self, loader, repository, home):
        """Test that a stored group loads with its values."""
        await repository.save(home)

        loaded = await loader.load("pages.home")

        assert loaded.content_group is home
        assert loaded.namespace == "pages"
        assert loaded.name == "home"
        assert loaded.get_html("info") == "<p>Some info</p>"
        assert loaded.get_image_url("banner") == "/some/url/" + os.path.basename(__file__)
        assert loaded.get_image_alt_text("banner") == "Banner alt"
        assert loaded.get_metadata("key") == "val"

    @pytest.mark.asyncio
    async def test_load_non_existent(self, loader, repository, clock):
        """Test that a missing group loads empty without being saved."""
        loaded = await loader.load("pages.missing")

        group = loaded.content_group
        assert group.key == "pages.missing"
        assert group.created_at == clock.now()
        assert list(group.html_content_areas) == []
        assert len(repository) == 0

    @pytest.mark.asyncio
    async def test_invalid_group_name(self, loader):
        """Test that load rejects a key without a separator."""
        with pytest.raises(InvalidContentKeyError):
            await loader.load("invalid_group_name")

    @pytest.mark.asyncio
    async def test_load_many(self, loader, repository, home):
        """Test that several keys load in order."""
        await repository.save(home)

        loaded = await loader.load_many(["pages.home", "pages.about"])

        assert list(loaded) == ["pages.home", "pages.about"]
        assert loaded["pages.home"].get_html("info") == "<p>Some info</p>"
        assert loaded["pages.about"].get_html("info", "fallback") == "fallback"


class TestLoadedContentGroup:
    """Test accessors and their defaults."""

    def test_defaults(self, config, clock):
        """Test that every accessor falls back to the given default."""
        loaded = LoadedContentGroup(config, ContentGroup.create("pages", "empty", clock))

        assert loaded.get_html("info") == ""
        assert loaded.get_html("info", "default") == "default"
        assert loaded.get_image_url("banner") == ""
        assert loaded.get_image_url("banner", "default") == "default"
        assert loaded.get_image_alt_text("banner", "default") == "default"
        assert loaded.get_metadata("title", "default") == "default"
        assert loaded.render_metadata_as_html() == ""

    def test_has_accessors(self, config, home):
        """Test the has_* lookups."""
        loaded = LoadedContentGroup(config, home)

        assert loaded.has_html("info")
        assert loaded.has_image("banner")
        assert loaded.has_metadata("title")
        assert not loaded.has_html("banner")

    def test_existing_empty_values_ignore_default(self, config, clock):
        """Test that existing empty areas return "" rather than the default."""
        group = ContentGroup.create("pages", "home", clock)
        group.add_html_area(HtmlContentArea("info"))
        group.add_metadata(ContentMetadata("title"))
        loaded = LoadedContentGroup(config, group)

        assert loaded.get_html("info", "default") == ""
        assert loaded.get_metadata("title", "default") == ""

    def test_empty_image_uses_default(self, config, clock):
        """Test that an unset image returns the default URL."""
        group = ContentGroup.create("pages", "home", clock)
        group.add_image_area(ImageContentArea("banner", alt_text="Alt"))
        loaded = LoadedContentGroup(config, group)

        assert loaded.get_image_url("banner", "/placeholder.png") == "/placeholder.png"
        assert loaded.get_image_alt_text("banner", "default") == "Alt"

    def test_image_outside_storage_uses_default(self, clock, home):
        """Test that an image outside the storage path returns the default."""
        config = ContentConfig(image_storage_base_path=str(TESTS_DIR / "elsewhere"), image_base_url="/some/url")
        loaded = LoadedContentGroup(config, home)

        assert loaded.get_image_url("banner", "default") == "default"

    def test_image_in_subdirectory(self, clock, tmp_path):
        """Test that subdirectories become part of the image URL."""
        image = tmp_path / "pages" / "banner.png"
        image.parent.mkdir()
        image.write_bytes(b"png")
        group = ContentGroup.create("pages", "home", clock)
        group.add_image_area(ImageContentArea("banner", Image(str(image))))
        loaded = LoadedContentGroup(ContentConfig(str(tmp_path), "/images/"), group)

        assert loaded.get_image_url("banner") == "/images/pages/banner.png"

    def test_render_metadata_as_html(self, config, home):
        """Test that title renders as a title tag and the rest as meta tags."""
        loaded = LoadedContentGroup(config, home)

        assert loaded.render_metadata_as_html() == (
            '<meta name="key" content="val" />' + os.linesep + "<title>Some Title</title>"
        )

    def test_render_metadata_escapes_values(self, config, clock):
        """Test that metadata values are HTML escaped."""
        group = ContentGroup.create("pages", "home", clock)
        group.add_metadata(ContentMetadata("description", 'Fish "&" chips'))
        group.add_metadata(ContentMetadata("title", "<Home>"))
        loaded = LoadedContentGroup(config, group)

        assert loaded.render_metadata_as_html() == (
            '<meta name="description" content="Fish &quot;&amp;&quot; chips" />'
            + os.linesep
            + "<title>&lt;Home&gt;</title>"
        )
