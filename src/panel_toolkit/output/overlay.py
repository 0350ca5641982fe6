"""
Module: output.overlay

Purpose:
    Draw panel number markers and other small text badges onto PIL
    images. Markers are a rounded, semi-transparent box with the panel
    number centred inside.

Key Functions:
    - draw_marker(): Rounded badge with centred label
    - calculate_center_position(): Centred text position in a box
    - load_font(): Best available TrueType font

Dependencies:
    - PIL: Image drawing

Used By:
    - compositor.rasterizer: Centroid markers
    - catalog.preview: Panel numbers on layout thumbnails
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Tuple

from PIL import ImageDraw, ImageFont

logger = logging.getLogger(__name__)

# Default settings
DEFAULT_FONT_SIZE = 12
DEFAULT_MARKER_FILL = (0, 0, 0, 153)
DEFAULT_TEXT_COLOR = "white"


def draw_marker(
    draw: ImageDraw.ImageDraw,
    label: str,
    box: Tuple[float, float, float, float],
    *,
    font_size: int = DEFAULT_FONT_SIZE,
    fill=DEFAULT_MARKER_FILL,
    text_color=DEFAULT_TEXT_COLOR,
    radius: float = 4,
) -> None:
    """
    Draw a rounded marker box with a centred label.

    Args:
        draw: ImageDraw bound to an RGBA image
        label: Text to display (panel number)
        box: (x1, y1, x2, y2) of the marker
        font_size: Label font size in pixels
        fill: Box fill colour
        text_color: Label colour
        radius: Corner radius in pixels
    """
    draw.rounded_rectangle(box, radius=radius, fill=fill)

    font = load_font(max(1, int(round(font_size))))
    text_x, text_y = calculate_center_position(box, label, font, draw)
    draw.text((text_x, text_y), label, fill=text_color, font=font)


def calculate_center_position(
    bbox: Tuple[float, float, float, float],
    text: str,
    font: ImageFont.FreeTypeFont,
    draw: ImageDraw.ImageDraw,
) -> Tuple[float, float]:
    """
    Calculate position to center text in bounding box.

    Args:
        bbox: Bounding box (x1, y1, x2, y2)
        text: Text to center
        font: Font to use for sizing
        draw: ImageDraw object for text metrics

    Returns:
        (x, y) position for the text origin
    """
    x1, y1, x2, y2 = bbox

    # textbbox includes the font's top bearing, so offset by its origin
    left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
    text_x = x1 + ((x2 - x1) - (right - left)) / 2 - left
    text_y = y1 + ((y2 - y1) - (bottom - top)) / 2 - top

    return text_x, text_y


@lru_cache(maxsize=32)
def load_font(size: int) -> ImageFont.ImageFont:
    """
    Load a bold font for marker text.

    Falls back to Pillow's built-in font if no TrueType font is found.

    Args:
        size: Font size in pixels

    Returns:
        Font object
    """
    font_options = [
        "arialbd.ttf",      # Arial Bold (Windows)
        "Arial Bold.ttf",   # Arial Bold (Mac)
        "DejaVuSans-Bold.ttf",
        "arial.ttf",
        "Arial.ttf",
        "DejaVuSans.ttf",
    ]

    for font_name in font_options:
        try:
            return ImageFont.truetype(font_name, size)
        except (IOError, OSError):
            continue

    logger.warning("Could not load TrueType font, using default")
    return ImageFont.load_default(size=size)
