"""
Tests for YAML content declarations.
"""

import textwrap

import pytest

from sitecontent.config import settings
from sitecontent.core.content.config import ContentConfig
from sitecontent.core.content.yaml_definition import (
    YamlContentPackage,
    load_definition_from_yaml,
    read_yaml_definition,
)
from sitecontent.core.errors import ContentDefinitionError

SITE_YAML = textwrap.dedent(
    """
    config:
      image_storage_path: public/content/images
      image_base_url: /content/images/

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
              title: {label: Title, value: Welcome}
      emails:
        groups:
          welcome:
            type: email
            html:
              body:
    """
)


@pytest.fixture
def site_yaml(tmp_path):
    path = tmp_path / "content.yml"
    path.write_text(SITE_YAML, encoding="utf-8")
    return path


class TestLoadDefinitionFromYaml:
    def test_modules_and_groups(self, site_yaml):
        """Test that modules, groups and areas are read from YAML."""
        schema = load_definition_from_yaml(site_yaml).finalize()

        assert schema.module_names() == ["pages", "emails"]
        assert schema.module("pages").icon == "file-text"
        assert schema.module("emails").icon == "cubes"

        home = schema.group("pages", "home")
        assert home.kind == "page"
        assert home.url == "/"
        assert home.html_areas["info"].selector == "#info"
        assert home.images["banner"].label == "Banner"
        assert home.metadata["title"].placeholder == "Welcome"

        welcome = schema.group("emails", "welcome")
        assert welcome.kind == "email"
        assert welcome.label == "welcome"
        assert welcome.html_areas["body"].label == "body"

    def test_config_section(self, site_yaml):
        """Test that the config section builds the ContentConfig."""
        definition = load_definition_from_yaml(site_yaml)
        assert definition.config == ContentConfig("public/content/images", "/content/images")

    def test_config_falls_back_to_settings(self):
        """Test that settings fill in a missing config section."""
        definition = load_definition_from_yaml({"modules": {}})
        assert definition.config.image_storage_base_path == settings.content_image_storage_path

    def test_explicit_config(self, site_yaml, content_config):
        """Test that an explicit config overrides the YAML one."""
        assert load_definition_from_yaml(site_yaml, content_config).config is content_config

    def test_unknown_group_type(self):
        """Test that an unknown group type is rejected."""
        data = {"modules": {"pages": {"groups": {"home": {"type": "banner"}}}}}

        with pytest.raises(ContentDefinitionError, match="Unknown group type"):
            load_definition_from_yaml(data)

    def test_area_must_be_label_or_mapping(self):
        """Test that list-valued areas are rejected."""
        data = {"modules": {"pages": {"groups": {"home": {"html": {"info": ["a", "b"]}}}}}}

        with pytest.raises(ContentDefinitionError):
            load_definition_from_yaml(data)


class TestReadYamlDefinition:
    def test_missing_file(self, tmp_path):
        """Test that a missing file raises ContentDefinitionError."""
        with pytest.raises(ContentDefinitionError, match="not found"):
            read_yaml_definition(tmp_path / "missing.yml")

    def test_invalid_yaml(self, tmp_path):
        """Test that unparsable YAML raises ContentDefinitionError."""
        path = tmp_path / "broken.yml"
        path.write_text("modules: [unclosed", encoding="utf-8")

        with pytest.raises(ContentDefinitionError, match="Invalid YAML"):
            read_yaml_definition(path)

    def test_top_level_must_be_mapping(self, tmp_path):
        """Test that a non-mapping document is rejected."""
        path = tmp_path / "list.yml"
        path.write_text("- pages\n- emails\n", encoding="utf-8")

        with pytest.raises(ContentDefinitionError, match="must be a mapping"):
            read_yaml_definition(path)


class TestYamlContentPackage:
    @pytest.mark.asyncio
    async def test_boot_from_yaml(self, site_yaml, repository, clock):
        """Test that a YAML package boots and syncs."""
        class SiteContent(YamlContentPackage):
            definition_path = str(site_yaml)

        context = await SiteContent(repository, clock).boot()

        assert context.config.image_base_url == "/content/images"
        assert len(repository) == 3
        home = await repository.find("pages", "home")
        assert [m.name for m in home.metadata_items] == ["title"]
        assert home.metadata_item("title").value == ""

    def test_missing_definition_path(self, repository, clock):
        """Test that definition_path is required."""
        class SiteContent(YamlContentPackage):
            pass

        with pytest.raises(NotImplementedError, match="definition_path"):
            SiteContent(repository, clock).config
