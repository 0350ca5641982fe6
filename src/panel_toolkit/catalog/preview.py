"""
Module: catalog.preview

Purpose:
    Thumbnail helpers for the layout picker. Work directly in template
    percentage space; no canvas geometry or gutter is involved.

Key Functions:
    - to_preview_path(): SVG path data for one panel
    - to_preview_svg(): Complete SVG document for a template
    - render_layout_thumbnail(): PIL thumbnail with numbered panels

Dependencies:
    - PIL: Thumbnail rasterization
    - output.overlay: Font loading and centred text

Used By:
    - gui.widgets.layout_picker: Layout selection buttons
    - cli: `layouts --thumbnails`
"""

from __future__ import annotations

from PIL import Image, ImageDraw

from panel_toolkit.core.models import LayoutTemplate, Panel
from panel_toolkit.geometry import bounding_box, centroid
from panel_toolkit.output.overlay import calculate_center_position, load_font

THUMBNAIL_WIDTH = 80
THUMBNAIL_HEIGHT = 120  # 2:3 like the page
THUMBNAIL_BACKGROUND = "#2b2b3b"
THUMBNAIL_ACCENT = (124, 92, 255)
THUMBNAIL_TEXT = "#f0f0f0"


def _fmt(value: float) -> str:
    return f"{value:g}"


def to_preview_path(panel: Panel) -> str:
    """
    SVG path data outlining a panel, in percentage coordinates.

    Example:
        >>> to_preview_path(Panel(0, ((0, 0), (100, 0), (100, 50))))
        'M 0 0 L 100 0 L 100 50 Z'
    """
    (x0, y0), *rest = panel.points
    segments = [f"M {_fmt(x0)} {_fmt(y0)}"]
    segments.extend(f"L {_fmt(x)} {_fmt(y)}" for x, y in rest)
    segments.append("Z")
    return " ".join(segments)


def panel_label_size(panel: Panel) -> float:
    """Label font size in percentage units, scaled to the panel's short side."""
    min_x, min_y, max_x, max_y = bounding_box(panel.points)
    return max(min(max_x - min_x, max_y - min_y) * 0.35, 8)


def to_preview_svg(
    template: LayoutTemplate,
    width: int = THUMBNAIL_WIDTH,
    height: int = THUMBNAIL_HEIGHT,
) -> str:
    """Standalone SVG thumbnail (viewBox 0 0 100 100 stretched to width x height)."""
    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" '
        f'viewBox="0 0 100 100" preserveAspectRatio="none">',
        f'<rect x="0" y="0" width="100" height="100" fill="{THUMBNAIL_BACKGROUND}"/>',
    ]
    accent = "rgb({},{},{})".format(*THUMBNAIL_ACCENT)
    for panel in template.panels:
        cx, cy = centroid(panel.points)
        parts.append(
            f'<path d="{to_preview_path(panel)}" fill="{accent}" fill-opacity="0.3" '
            f'stroke="{accent}" stroke-width="1.5"/>'
        )
        parts.append(
            f'<text x="{_fmt(cx)}" y="{_fmt(cy)}" text-anchor="middle" '
            f'dominant-baseline="middle" fill="{THUMBNAIL_TEXT}" '
            f'font-size="{_fmt(panel_label_size(panel))}" font-weight="bold">'
            f"{panel.index + 1}</text>"
        )
    parts.append("</svg>")
    return "".join(parts)


def render_layout_thumbnail(
    template: LayoutTemplate,
    width: int = THUMBNAIL_WIDTH,
    height: int = THUMBNAIL_HEIGHT,
) -> Image.Image:
    """
    Rasterize a layout preview: translucent panels, outlines and numbers.

    Args:
        template: Template to preview
        width: Thumbnail width in pixels
        height: Thumbnail height in pixels

    Returns:
        RGBA image of size (width, height)
    """
    sx, sy = width / 100, height / 100
    image = Image.new("RGBA", (width, height), THUMBNAIL_BACKGROUND)
    layer = Image.new("RGBA", (width, height), (0, 0, 0, 0))
    draw = ImageDraw.Draw(layer)

    for panel in template.panels:
        outline = [(x * sx, y * sy) for x, y in panel.points]
        draw.polygon(outline, fill=THUMBNAIL_ACCENT + (77,), outline=THUMBNAIL_ACCENT + (255,))

    for panel in template.panels:
        cx, cy = centroid(panel.points)
        font = load_font(max(6, int(panel_label_size(panel) * min(sx, sy))))
        label = str(panel.index + 1)
        box = (cx * sx, cy * sy, cx * sx, cy * sy)
        draw.text(calculate_center_position(box, label, font, draw), label, fill=THUMBNAIL_TEXT, font=font)

    return Image.alpha_composite(image, layer)
