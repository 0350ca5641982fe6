"""
Tests for page encoding, saving, PDF bundling and marker drawing.
"""

from io import BytesIO

import pytest
from PIL import Image, ImageDraw

from panel_toolkit.output import (
    calculate_center_position,
    draw_marker,
    encode_bitmap,
    load_font,
    save_bitmap,
    write_pages_pdf,
)


@pytest.fixture
def page():
    return Image.new("RGB", (80, 120), (200, 30, 30))


class TestEncodeBitmap:

    def test_default_encoding_is_png(self, page):
        data = encode_bitmap(page)
        assert data.startswith(b"\x89PNG\r\n\x1a\n")
        assert Image.open(BytesIO(data)).size == (80, 120)

    def test_jpeg_when_rgba_then_converted(self):
        rgba = Image.new("RGBA", (10, 10), (0, 255, 0, 128))
        data = encode_bitmap(rgba, format="JPEG")
        assert Image.open(BytesIO(data)).mode == "RGB"


class TestSaveBitmap:

    def test_save_creates_missing_directories(self, page, tmp_path):
        path = save_bitmap(page, tmp_path / "book" / "pages" / "p1.png")

        assert path.exists()
        assert Image.open(path).size == (80, 120)

    def test_save_picks_format_from_extension(self, page, tmp_path):
        path = save_bitmap(page, tmp_path / "p1.jpg")
        assert Image.open(path).format == "JPEG"


class TestWritePagesPdf:

    def test_pdf_written_for_pages(self, page, tmp_path):
        out = write_pages_pdf([page, page.copy()], tmp_path / "out" / "book.pdf")

        data = out.read_bytes()
        assert data.startswith(b"%PDF")
        assert b"/Count 2" in data

    def test_pdf_when_no_pages_then_raises(self, tmp_path):
        with pytest.raises(ValueError):
            write_pages_pdf([], tmp_path / "empty.pdf")


class TestMarkers:

    def test_marker_fills_box_and_leaves_outside(self):
        image = Image.new("RGBA", (60, 60), (255, 255, 255, 255))
        draw = ImageDraw.Draw(image)

        draw_marker(draw, "3", (20, 20, 40, 40), fill=(0, 0, 255, 255), text_color=(0, 0, 255, 255))

        assert image.getpixel((21, 30)) == (0, 0, 255, 255)
        assert image.getpixel((5, 5)) == (255, 255, 255, 255)

    def test_center_position_places_text_inside_box(self):
        image = Image.new("RGB", (100, 100))
        draw = ImageDraw.Draw(image)
        font = load_font(12)

        x, y = calculate_center_position((0, 0, 100, 100), "7", font, draw)
        left, top, right, bottom = draw.textbbox((x, y), "7", font=font)

        assert abs((left + right) / 2 - 50) <= 1
        assert abs((top + bottom) / 2 - 50) <= 1

    def test_load_font_is_cached(self):
        assert load_font(14) is load_font(14)
