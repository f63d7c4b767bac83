"""
Tests for utils.render module.
"""

import pytest
from PIL import Image
from unittest.mock import Mock

from pagelist_toolkit.backends.pymupdf import FitzDocument
from pagelist_toolkit.utils.render import (
    _trim_whitespace,
    extract_text,
    get_page_dimensions,
    render_page,
)


class TestRenderPage:
    """Tests for render_page() function."""

    def test_render_page_when_mocked_pixmap_then_returns_grayscale_image(self):
        # Arrange
        mock_page = Mock()
        mock_pixmap = Mock()
        mock_pixmap.width = 100
        mock_pixmap.height = 50
        mock_pixmap.samples = bytes([255] * 100 * 50)
        mock_page.load.return_value.get_pixmap.return_value = mock_pixmap

        # Act
        image = render_page(mock_page, dpi=72)

        # Assert
        assert isinstance(image, Image.Image)
        assert image.mode == "L"
        assert image.size == (100, 50)

    def test_render_page_when_real_page_then_size_follows_dpi(self):
        with FitzDocument.new() as doc:
            page = doc.new_page(width=200, height=100, text="A")

            image = render_page(page, dpi=144)

        assert image.size == (400, 200)

    def test_render_page_when_zero_dpi_then_raises(self):
        with pytest.raises(ValueError, match="dpi"):
            render_page(Mock(), dpi=0)


class TestExtractText:
    """Tests for extract_text() function."""

    def test_extract_text_when_page_has_text_then_returns_it(self):
        with FitzDocument.new() as doc:
            page = doc.new_page(text="Hello")

            assert extract_text(page).strip() == "Hello"

    def test_extract_text_when_error_then_returns_empty(self):
        mock_page = Mock()
        mock_page.load.return_value.get_text.side_effect = RuntimeError("broken")

        assert extract_text(mock_page) == ""


class TestGetPageDimensions:

    def test_get_page_dimensions_when_72_dpi_then_points(self):
        with FitzDocument.new() as doc:
            page = doc.new_page(width=595, height=842)

            assert get_page_dimensions(page, dpi=72) == (595, 842)


class TestTrimWhitespace:
    """Tests for _trim_whitespace() helper."""

    def test_trim_when_block_of_content_then_crops_with_padding(self):
        # Arrange
        image = Image.new("L", (400, 400), 255)
        image.paste(0, (100, 150, 300, 250))

        # Act
        cropped, offset = _trim_whitespace(image, padding=12)

        # Assert
        assert offset == (88, 138)
        assert cropped.size == (223, 123)

    def test_trim_when_narrow_content_then_keeps_full_width(self):
        image = Image.new("L", (400, 400), 255)
        image.paste(0, (190, 150, 210, 250))

        cropped, offset = _trim_whitespace(image, padding=12)

        assert offset[0] == 0
        assert cropped.width == 400

    def test_trim_when_all_white_then_unchanged(self):
        image = Image.new("L", (50, 50), 255)

        cropped, offset = _trim_whitespace(image)

        assert cropped is image
        assert offset == (0, 0)
