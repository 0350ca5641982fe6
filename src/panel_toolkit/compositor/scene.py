"""
Module: compositor.scene

Purpose:
    Backend-agnostic description of one page: what is drawn, clipped to
    what, and where. Both the PIL rasterizer and the Qt preview widget
    consume the same Scene, so the preview and the export cannot drift
    apart.

    All coordinates are logical canvas pixels. A consumer presents the
    scene at display_scale (times any device pixel ratio).

Key Classes:
    - PanelDrawRecord: One clipped panel (image or placeholder)
    - MarkerRecord: One numbered centroid marker
    - Scene: Full page

Dependencies:
    - compositor.placement: DrawRect
    - compositor.images: PanelImage

Used By:
    - compositor.renderer: Produces scenes
    - compositor.rasterizer: PIL backend
    - gui.widgets.preview_widget: QPainter backend
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from panel_toolkit.core.models import Point

from .images import PanelImage
from .placement import DrawRect


@dataclass(frozen=True)
class PanelDrawRecord:
    """
    One panel as drawn: either an image clipped to the inset polygon,
    or a placeholder fill of the same polygon.

    Attributes:
        index: Panel index
        clip_polygon: Inset polygon (logical px)
        image: Image to draw, None for a placeholder
        rect: Image draw rectangle (logical px), None for a placeholder
        fill: Placeholder colour, None when an image is drawn
    """

    index: int
    clip_polygon: Tuple[Point, ...]
    image: Optional[PanelImage] = None
    rect: Optional[DrawRect] = None
    fill: Optional[str] = None

    def __post_init__(self) -> None:
        if (self.image is None) != (self.rect is None):
            raise ValueError("image and rect must be given together")
        if self.image is None and self.fill is None:
            raise ValueError("placeholder panel needs a fill colour")

    @property
    def is_placeholder(self) -> bool:
        return self.image is None

    def image_transform(self, factor: float = 1.0) -> Tuple[float, float, float, float]:
        """
        Affine mapping image pixels onto the output surface.

        Returns:
            (translate_x, translate_y, scale_x, scale_y) at the given
            presentation factor
        """
        if self.image is None or self.rect is None:
            raise ValueError(f"Panel {self.index} has no image")
        return (
            self.rect.x * factor,
            self.rect.y * factor,
            self.rect.width * factor / self.image.width,
            self.rect.height * factor / self.image.height,
        )


@dataclass(frozen=True)
class MarkerRecord:
    """Numbered badge centred on a panel centroid (logical px)."""

    index: int
    label: str
    center: Point
    size: float
    fill: Tuple[int, int, int, int]
    text_color: str
    font_size: float
    corner_radius: float = 4

    def box(self, factor: float = 1.0) -> Tuple[float, float, float, float]:
        half = self.size / 2
        cx, cy = self.center
        return (
            (cx - half) * factor,
            (cy - half) * factor,
            (cx + half) * factor,
            (cy + half) * factor,
        )


@dataclass(frozen=True)
class Scene:
    """
    Everything needed to draw a page.

    Attributes:
        canvas_width: Logical canvas width
        canvas_height: Logical canvas height
        display_scale: Logical to display factor (S)
        background: Gutter colour filling everything outside the panels
        panels: Draw records in panel order (later panels on top)
        markers: Marker records, drawn above all panels
        markers_visible: Whether the marker group is shown
    """

    canvas_width: int
    canvas_height: int
    display_scale: float
    background: str
    panels: Tuple[PanelDrawRecord, ...]
    markers: Tuple[MarkerRecord, ...] = ()
    markers_visible: bool = True

    @property
    def display_size(self) -> Tuple[float, float]:
        return (self.canvas_width * self.display_scale, self.canvas_height * self.display_scale)
