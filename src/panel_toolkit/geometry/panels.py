"""
Module: geometry.panels

Purpose:
    Derive canvas geometry (outer polygon, inset clip polygon, marker
    centroid) for every panel of a layout template. Geometry is always
    computed in logical canvas space; display scaling happens later,
    uniformly, so preview and export share one source of truth.

Key Functions:
    - compute_panel_geometry(): One panel
    - compute_canvas_geometry(): Whole template (cached)

Key Classes:
    - PanelGeometry: Derived, never persisted

Dependencies:
    - geometry.mapping, geometry.offset, geometry.metrics

Used By:
    - compositor.renderer: Scene building and hit testing
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Tuple

from panel_toolkit.core.models import GutterStyle, LayoutTemplate, Panel, Point

from .mapping import DEFAULT_CANVAS_HEIGHT, DEFAULT_CANVAS_WIDTH, percent_to_logical, scale_points
from .metrics import centroid
from .offset import inset_polygon

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PanelGeometry:
    """
    Derived geometry of one panel in logical canvas space.

    Attributes:
        index: Panel index within the template
        outer: Template polygon mapped to logical pixels
        inner: Outer polygon inset by half the gutter width (clip region)
        centroid: Vertex average of the inner polygon (marker anchor)
    """

    index: int
    outer: Tuple[Point, ...]
    inner: Tuple[Point, ...]
    centroid: Point

    def scaled(self, factor: float) -> PanelGeometry:
        """Same geometry presented at a uniform scale."""
        return PanelGeometry(
            index=self.index,
            outer=scale_points(self.outer, factor),
            inner=scale_points(self.inner, factor),
            centroid=(self.centroid[0] * factor, self.centroid[1] * factor),
        )


def compute_panel_geometry(
    panel: Panel,
    inset_amount: float,
    canvas_w: float = DEFAULT_CANVAS_WIDTH,
    canvas_h: float = DEFAULT_CANVAS_HEIGHT,
) -> PanelGeometry:
    outer = percent_to_logical(panel.points, canvas_w, canvas_h)
    inner = tuple(inset_polygon(outer, inset_amount))
    return PanelGeometry(
        index=panel.index,
        outer=outer,
        inner=inner,
        centroid=centroid(inner),
    )


@lru_cache(maxsize=64)
def compute_canvas_geometry(
    template: LayoutTemplate,
    gutter_width: float,
    canvas_w: float = DEFAULT_CANVAS_WIDTH,
    canvas_h: float = DEFAULT_CANVAS_HEIGHT,
) -> Tuple[PanelGeometry, ...]:
    """
    Geometry of every panel of a template.

    Args:
        template: Layout template (percentage space)
        gutter_width: Gutter width in logical pixels; panels are inset
            by half of it
        canvas_w: Logical canvas width
        canvas_h: Logical canvas height

    Returns:
        PanelGeometry per panel, in panel order
    """
    inset_amount = GutterStyle(width_px=max(0.0, float(gutter_width))).inset_amount
    geometry = tuple(
        compute_panel_geometry(panel, inset_amount, canvas_w, canvas_h)
        for panel in template.panels
    )
    logger.debug(
        f"Computed geometry for {template.id} ({len(geometry)} panels, inset {inset_amount})"
    )
    return geometry
