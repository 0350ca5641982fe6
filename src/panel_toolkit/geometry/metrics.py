"""
Module: geometry.metrics

Purpose:
    Scalar and point measurements of panel polygons.

Key Functions:
    - centroid(): Vertex-average centre (marker placement)
    - polygon_area(): Enclosed area
    - point_in_polygon(): Hit testing (boundary counts as inside)
    - bounding_box(): (min_x, min_y, max_x, max_y)

Dependencies:
    - shapely: Area and containment

Used By:
    - geometry.offset: Picking the largest inset ring
    - geometry.panels: Marker centre
    - compositor.renderer: Drag target hit testing
"""

from __future__ import annotations

from typing import Sequence, Tuple

from shapely.geometry import Point as ShapelyPoint, Polygon

from panel_toolkit.core.models import Point


def centroid(points: Sequence[Sequence[float]]) -> Point:
    """
    Arithmetic mean of the polygon vertices.

    This is not the area-weighted centroid. For the quads and gently
    slanted shapes the templates use the two are close; markedly
    non-convex panels can mis-centre the panel marker.

    Raises:
        ValueError: If points is empty
    """
    n = len(points)
    if n == 0:
        raise ValueError("centroid of an empty polygon")
    sum_x = sum(p[0] for p in points)
    sum_y = sum(p[1] for p in points)
    return (sum_x / n, sum_y / n)


def polygon_area(points: Sequence[Sequence[float]]) -> float:
    """Absolute enclosed area; 0.0 for fewer than 3 points."""
    if len(points) < 3:
        return 0.0
    return abs(Polygon(points).area)


def point_in_polygon(point: Sequence[float], polygon: Sequence[Sequence[float]]) -> bool:
    if len(polygon) < 3:
        return False
    return Polygon(polygon).covers(ShapelyPoint(point[0], point[1]))


def bounding_box(points: Sequence[Sequence[float]]) -> Tuple[float, float, float, float]:
    """(min_x, min_y, max_x, max_y) of a non-empty polygon."""
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    return (min(xs), min(ys), max(xs), max(ys))
