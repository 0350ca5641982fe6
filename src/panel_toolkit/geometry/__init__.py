"""
Module: geometry

Purpose:
    Geometry engine for panel layouts: coordinate mapping, polygon
    inset for gutters, centroids, hit testing and content bounds.

Key Functions:
    - percent_to_logical(): Template space -> logical canvas
    - inset_polygon(): Gutter inset with degenerate fallback
    - centroid(): Vertex-average marker anchor
    - bounds_of_visible_content(): Alpha buffer scan
    - compute_canvas_geometry(): All panels of a template

Dependencies:
    - shapely: Polygon offsetting
    - numpy: Alpha scans

Used By:
    - compositor: Renderers and session
"""

from .mapping import (
    DEFAULT_CANVAS_HEIGHT,
    DEFAULT_CANVAS_WIDTH,
    percent_to_logical,
    scale_points,
)
from .offset import inset_polygon, offset_polygon
from .metrics import bounding_box, centroid, point_in_polygon, polygon_area
from .content import alpha_mask_of, bounds_of_visible_content
from .panels import PanelGeometry, compute_canvas_geometry, compute_panel_geometry

__all__ = [
    "DEFAULT_CANVAS_WIDTH",
    "DEFAULT_CANVAS_HEIGHT",
    "percent_to_logical",
    "scale_points",
    "offset_polygon",
    "inset_polygon",
    "centroid",
    "polygon_area",
    "point_in_polygon",
    "bounding_box",
    "alpha_mask_of",
    "bounds_of_visible_content",
    "PanelGeometry",
    "compute_panel_geometry",
    "compute_canvas_geometry",
]
