from datetime import datetime

import pytest

from sitecontent.core.clock import FixedClock
from sitecontent.core.content.values import Html, Image
from sitecontent.core.database.models import ContentGroup, HtmlContentArea, ImageContentArea
from sitecontent.core.errors import ContentError


def test_html_defaults_to_empty():
    """Test that Html defaults to an empty fragment."""
    assert Html().is_empty
    assert str(Html("<p>x</p>")) == "<p>x</p>"


def test_image_file_name_prefers_client_name():
    """Test that the client file name wins over the stored name."""
    assert Image("/store/abc123.png", "Photo.png").file_name == "Photo.png"
    assert Image("/store/abc123.png").file_name == "abc123.png"
    assert Image().file_name == ""


def test_image_relative_to(tmp_path):
    """Test image paths relative to a storage root."""
    image = Image(str(tmp_path / "pages" / "a.png"))

    assert image.relative_to(tmp_path) == "pages/a.png"
    assert image.relative_to(tmp_path / "other") is None
    assert Image().relative_to(tmp_path) is None


def test_image_exists(tmp_path):
    """Test that exists() checks the file on disk."""
    path = tmp_path / "a.png"
    assert not Image(str(path)).exists()
    path.write_bytes(b"png")
    assert Image(str(path)).exists()
    assert not Image().exists()


def test_clock_advance():
    """Test that FixedClock only moves when advanced."""
    clock = FixedClock(datetime(2026, 1, 1))
    start = clock.now()
    clock.advance(days=1)
    assert (clock.now() - start).days == 1


class TestContentGroup:
    def test_duplicate_area_names_rejected(self, clock):
        """Test that add_html_area rejects a duplicate name."""
        group = ContentGroup.create("pages", "home", clock)
        group.add_html_area(HtmlContentArea("info"))

        with pytest.raises(ContentError, match="already exists"):
            group.add_html_area(HtmlContentArea("info"))

    def test_image_setter(self, clock):
        """Test that assigning an Image updates both columns."""
        area = ImageContentArea("banner")
        area.image = Image("/img/a.png", "a.png")

        assert area.image_path == "/img/a.png"
        assert area.client_file_name == "a.png"

    def test_positions_follow_insertion(self, clock):
        """Test that positions follow insertion order."""
        group = ContentGroup.create("pages", "home", clock)
        group.add_html_area(HtmlContentArea("a"))
        group.add_html_area(HtmlContentArea("b"))

        assert [a.position for a in group.html_content_areas] == [0, 1]
        assert group.key == "pages.home"
