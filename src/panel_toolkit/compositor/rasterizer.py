"""
Module: compositor.rasterizer

Purpose:
    Rasterize a Scene with PIL. The output surface scale is
    display_scale * pixel_ratio; every coordinate is derived from
    logical values with that single factor, so two scenes that differ
    only in display width produce the same bitmap when exported at the
    same target width.

Key Functions:
    - rasterize_scene(): Scene -> RGB bitmap
    - effective_scale(): Logical -> output pixels factor
    - panel_coverage(): Where a panel's image is actually visible

Dependencies:
    - PIL: Drawing, resampling, compositing
    - output.overlay: Marker drawing

Used By:
    - compositor.renderer: Preview bitmaps, visible-content bounds
    - compositor.export: Export bitmaps
"""

from __future__ import annotations

import logging
import math
from typing import Optional, Sequence, Tuple

from PIL import Image, ImageChops, ImageDraw

from panel_toolkit.output.overlay import draw_marker

from .scene import MarkerRecord, PanelDrawRecord, Scene

logger = logging.getLogger(__name__)

RESAMPLE = Image.Resampling.BILINEAR

Box = Tuple[int, int, int, int]


def effective_scale(display_scale: float, pixel_ratio: float) -> float:
    """Logical-to-output factor, rounded so equal products rasterize identically."""
    if display_scale <= 0 or pixel_ratio <= 0:
        raise ValueError(f"scale must be positive: {display_scale} x {pixel_ratio}")
    return round(display_scale * pixel_ratio, 9)


def output_size(scene: Scene, pixel_ratio: float = 1.0) -> Tuple[int, int]:
    k = effective_scale(scene.display_scale, pixel_ratio)
    return max(1, round(scene.canvas_width * k)), max(1, round(scene.canvas_height * k))


def rasterize_scene(
    scene: Scene,
    pixel_ratio: float = 1.0,
    *,
    show_markers: Optional[bool] = None,
) -> Image.Image:
    """
    Draw a scene to an RGB bitmap.

    Args:
        scene: Scene to draw
        pixel_ratio: Extra factor on top of the scene's display scale
        show_markers: Override the scene's marker visibility

    Returns:
        RGB image of size output_size(scene, pixel_ratio)
    """
    k = effective_scale(scene.display_scale, pixel_ratio)
    size = output_size(scene, pixel_ratio)
    page = Image.new("RGB", size, scene.background)

    for record in scene.panels:
        _draw_panel(page, record, k)

    markers_on = scene.markers_visible if show_markers is None else show_markers
    if markers_on and scene.markers:
        page = _draw_markers(page, scene.markers, k)

    logger.debug(f"Rasterized {len(scene.panels)} panels at {size[0]}x{size[1]} (k={k})")
    return page


def panel_coverage(record: PanelDrawRecord, size: Tuple[int, int], k: float = 1.0) -> Image.Image:
    """
    Mask ("L") of output pixels where the panel's image shows through
    its clip polygon, including the image's own transparency.
    """
    coverage = Image.new("L", size, 0)
    if record.is_placeholder:
        return coverage

    clip_box, clip_mask = _clip_mask(record, size, k)
    if clip_box is None:
        return coverage

    placed = _resample_visible(record, clip_box, k)
    if placed is None:
        return coverage

    dest_box, _, alpha = placed
    mask = _crop_to(clip_mask, clip_box, dest_box)
    if alpha is not None:
        mask = ImageChops.multiply(mask, alpha)
    coverage.paste(mask, dest_box[:2])
    return coverage


# ─────────────────────────────────────────────────────────────────────────────
# Panels
# ─────────────────────────────────────────────────────────────────────────────


def _draw_panel(page: Image.Image, record: PanelDrawRecord, k: float) -> None:
    clip_box, clip_mask = _clip_mask(record, page.size, k)
    if clip_box is None:
        logger.debug(f"Panel {record.index}: clip region is off the page")
        return

    if record.is_placeholder:
        page.paste(record.fill, clip_box, clip_mask)
        return

    placed = _resample_visible(record, clip_box, k)
    if placed is None:
        logger.debug(f"Panel {record.index}: image is fully clipped")
        return

    dest_box, pixels, alpha = placed
    mask = _crop_to(clip_mask, clip_box, dest_box)
    if alpha is not None:
        mask = ImageChops.multiply(mask, alpha)
    page.paste(pixels, dest_box[:2], mask)


def _clip_mask(
    record: PanelDrawRecord, size: Tuple[int, int], k: float
) -> Tuple[Optional[Box], Optional[Image.Image]]:
    """Polygon mask covering only the clip polygon's bounding box."""
    polygon = [(x * k, y * k) for x, y in record.clip_polygon]
    xs = [p[0] for p in polygon]
    ys = [p[1] for p in polygon]

    left = max(0, math.floor(min(xs)))
    top = max(0, math.floor(min(ys)))
    right = min(size[0], math.ceil(max(xs)))
    bottom = min(size[1], math.ceil(max(ys)))
    if right <= left or bottom <= top:
        return None, None

    mask = Image.new("L", (right - left, bottom - top), 0)
    ImageDraw.Draw(mask).polygon([(x - left, y - top) for x, y in polygon], fill=255)
    return (left, top, right, bottom), mask


def _resample_visible(
    record: PanelDrawRecord, clip_box: Box, k: float
) -> Optional[Tuple[Box, Image.Image, Optional[Image.Image]]]:
    """
    Resample only the part of the image that lands inside clip_box.

    Returns:
        (dest_box, rgb_pixels, alpha_or_None), or None if the image
        rectangle misses the clip box
    """
    image = record.image
    rx, ry, sx, sy = record.image_transform(k)
    rw = image.width * sx
    rh = image.height * sy

    left = max(clip_box[0], math.floor(rx))
    top = max(clip_box[1], math.floor(ry))
    right = min(clip_box[2], math.ceil(rx + rw))
    bottom = min(clip_box[3], math.ceil(ry + rh))
    if right <= left or bottom <= top:
        return None

    src_box = (
        max(0.0, (left - rx) / sx),
        max(0.0, (top - ry) / sy),
        min(float(image.width), (right - rx) / sx),
        min(float(image.height), (bottom - ry) / sy),
    )
    if src_box[2] <= src_box[0] or src_box[3] <= src_box[1]:
        return None

    resized = image.handle.resize((right - left, bottom - top), RESAMPLE, box=src_box)
    alpha = resized.getchannel("A") if resized.mode == "RGBA" else None
    return (left, top, right, bottom), resized.convert("RGB"), alpha


def _crop_to(mask: Image.Image, mask_box: Box, dest_box: Box) -> Image.Image:
    ox, oy = mask_box[0], mask_box[1]
    return mask.crop((dest_box[0] - ox, dest_box[1] - oy, dest_box[2] - ox, dest_box[3] - oy))


# ─────────────────────────────────────────────────────────────────────────────
# Markers
# ─────────────────────────────────────────────────────────────────────────────


def _draw_markers(page: Image.Image, markers: Sequence[MarkerRecord], k: float) -> Image.Image:
    layer = Image.new("RGBA", page.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(layer)
    for marker in markers:
        draw_marker(
            draw,
            marker.label,
            marker.box(k),
            font_size=max(1, round(marker.font_size * k)),
            fill=marker.fill,
            text_color=marker.text_color,
            radius=marker.corner_radius * k,
        )
    return Image.alpha_composite(page.convert("RGBA"), layer).convert("RGB")
