"""
Module: compositor.renderer

Purpose:
    Interactive page renderer. Geometry is computed once per (template,
    gutter width) in logical space and presented at a uniform display
    scale S = display_width / canvas_width. Drags arrive in display
    pixels and are stored in logical pixels, so the same gesture means
    the same placement at any on-screen size.

Key Classes:
    - InteractiveRenderer: Scene building, hit testing, drag handling

Dependencies:
    - geometry: Canvas geometry, hit testing, content bounds
    - compositor.placement: PlacementMap, draw_rect
    - compositor.rasterizer: PIL rendering

Used By:
    - compositor.export: Shares scenes for WYSIWYG export
    - compositor.session: Owner
    - gui.widgets.preview_widget: Painting and mouse handling
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Sequence, Tuple

from PIL import Image

from panel_toolkit.core.models import ContentBounds, GutterStyle, LayoutTemplate, PanelPlacement
from panel_toolkit.geometry import (
    PanelGeometry,
    bounds_of_visible_content,
    compute_canvas_geometry,
    point_in_polygon,
)

from .config import CanvasConfig
from .images import ImageLoadFailure, PanelImage
from .placement import PlacementMap, draw_rect
from .rasterizer import panel_coverage, rasterize_scene
from .scene import MarkerRecord, PanelDrawRecord, Scene

logger = logging.getLogger(__name__)


class InteractiveRenderer:
    """
    Draws a layout with its panel images and turns pointer input into
    placement changes.

    Attributes:
        config: Canvas configuration
        placements: Placement state written by drags
        markers_visible: Whether numbered centroid markers are drawn
        interactive: False locks pointer input (e.g. during export)

    Example:
        >>> renderer = InteractiveRenderer(template, PlacementMap())
        >>> renderer.set_display_width(400)
        >>> renderer.display_scale
        0.5
        >>> renderer.apply_drag(0, 10, 0).offset_x
        20.0
    """

    def __init__(
        self,
        template: LayoutTemplate,
        placements: PlacementMap,
        *,
        config: Optional[CanvasConfig] = None,
        gutter: Optional[GutterStyle] = None,
        images: Sequence[PanelImage | ImageLoadFailure | None] = (),
        display_width: Optional[float] = None,
    ) -> None:
        self.config = config or CanvasConfig()
        self.placements = placements
        self.markers_visible = self.config.markers_visible
        self.interactive = True

        self._template = template
        self._gutter = gutter or GutterStyle()
        self._images: Dict[int, PanelImage] = {}
        self._display_width = float(self.config.max_display_width)
        self._drag: Optional[Tuple[int, float, float]] = None

        self.set_images(images)
        if display_width is not None:
            self.set_display_width(display_width)

    # ─────────────────────────────────────────────────────────────────────────
    # Page content
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def template(self) -> LayoutTemplate:
        return self._template

    def set_template(self, template: LayoutTemplate) -> None:
        """Switch layouts. Images stay assigned by index; placements are the caller's."""
        self._template = template
        self._drag = None
        self.set_images([self._images.get(i) for i in range(max(self._images, default=-1) + 1)])

    @property
    def gutter(self) -> GutterStyle:
        return self._gutter

    def set_gutter(self, gutter: GutterStyle) -> None:
        self._gutter = gutter

    @property
    def images(self) -> Dict[int, PanelImage]:
        return dict(self._images)

    def set_images(self, images: Sequence[PanelImage | ImageLoadFailure | None]) -> None:
        """
        Assign images to the first N panels in order.

        Extra images are ignored and missing ones leave placeholders.
        Failed loads and None entries also render placeholders.
        """
        panel_count = self._template.panel_count
        if images and len(images) != panel_count:
            logger.info(
                f"{len(images)} images for {panel_count} panels in {self._template.id}; "
                f"filling the first {min(len(images), panel_count)}"
            )

        self._images = {
            index: image
            for index, image in enumerate(images[:panel_count])
            if isinstance(image, PanelImage)
        }

    def has_image(self, panel_index: int) -> bool:
        return panel_index in self._images

    @property
    def geometry(self) -> Tuple[PanelGeometry, ...]:
        return compute_canvas_geometry(
            self._template,
            float(self._gutter.width_px),
            self.config.canvas_width,
            self.config.canvas_height,
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Display size
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def display_width(self) -> float:
        return self._display_width

    @property
    def display_scale(self) -> float:
        return self._display_width / self.config.canvas_width

    @property
    def display_height(self) -> float:
        return self.config.canvas_height * self.display_scale

    def set_display_width(self, width: float) -> None:
        if width <= 0:
            raise ValueError(f"display width must be positive: {width}")
        self._display_width = float(width)

    def fit_to(self, available_width: float) -> float:
        """Use the available width, capped at the configured maximum."""
        self.set_display_width(min(float(available_width), float(self.config.max_display_width)))
        return self._display_width

    # ─────────────────────────────────────────────────────────────────────────
    # Pointer input (display pixels)
    # ─────────────────────────────────────────────────────────────────────────

    def panel_at(self, x: float, y: float) -> Optional[int]:
        """Topmost panel holding an image whose clip polygon contains the point."""
        scale = self.display_scale
        point = (x / scale, y / scale)
        for geometry in reversed(self.geometry):
            if geometry.index in self._images and point_in_polygon(point, geometry.inner):
                return geometry.index
        return None

    def press(self, x: float, y: float) -> Optional[int]:
        if not self.interactive:
            return None
        index = self.panel_at(x, y)
        self._drag = None if index is None else (index, x, y)
        if index is not None:
            logger.debug(f"Drag started on panel {index}")
        return index

    def move(self, x: float, y: float) -> Optional[PanelPlacement]:
        if self._drag is None or not self.interactive:
            return None
        index, last_x, last_y = self._drag
        self._drag = (index, x, y)
        return self.apply_drag(index, x - last_x, y - last_y)

    def release(self) -> Optional[int]:
        index = self._drag[0] if self._drag else None
        self._drag = None
        return index

    @property
    def dragging(self) -> Optional[int]:
        return self._drag[0] if self._drag else None

    def apply_drag(self, panel_index: int, dx_display: float, dy_display: float) -> PanelPlacement:
        """Convert a display-pixel delta to logical pixels and store it."""
        scale = self.display_scale
        return self.placements.adjust_offset(panel_index, dx_display / scale, dy_display / scale)

    # ─────────────────────────────────────────────────────────────────────────
    # Drawing
    # ─────────────────────────────────────────────────────────────────────────

    def build_scene(self) -> Scene:
        config = self.config
        panels = []
        markers = []

        for geometry in self.geometry:
            image = self._images.get(geometry.index)
            if image is None:
                record = PanelDrawRecord(
                    index=geometry.index,
                    clip_polygon=geometry.inner,
                    fill=config.placeholder_color,
                )
            else:
                rect = draw_rect(
                    self.placements.get(geometry.index),
                    image.width,
                    image.height,
                    config.canvas_width,
                    config.canvas_height,
                )
                record = PanelDrawRecord(
                    index=geometry.index,
                    clip_polygon=geometry.inner,
                    image=image,
                    rect=rect,
                )
            panels.append(record)
            markers.append(
                MarkerRecord(
                    index=geometry.index,
                    label=str(geometry.index + 1),
                    center=geometry.centroid,
                    size=config.marker_size,
                    fill=config.marker_fill,
                    text_color=config.marker_text_color,
                    font_size=config.marker_font_size,
                )
            )

        return Scene(
            canvas_width=config.canvas_width,
            canvas_height=config.canvas_height,
            display_scale=self.display_scale,
            background=self._gutter.color,
            panels=tuple(panels),
            markers=tuple(markers),
            markers_visible=self.markers_visible,
        )

    def render(self, pixel_ratio: float = 1.0) -> Image.Image:
        """Rasterize the current scene at display size times pixel_ratio."""
        return rasterize_scene(self.build_scene(), pixel_ratio)

    def visible_image_bounds(self, panel_index: int) -> Optional[ContentBounds]:
        """
        Logical-pixel rectangle of a panel's image that survives clipping.

        Returns:
            ContentBounds, or None when the panel has no image or the
            image has been dragged entirely out of its panel
        """
        scene = self.build_scene()
        record = next((r for r in scene.panels if r.index == panel_index), None)
        if record is None or record.is_placeholder:
            return None

        size = (scene.canvas_width, scene.canvas_height)
        coverage = panel_coverage(record, size)
        return bounds_of_visible_content(coverage.tobytes(), size[0], size[1])
