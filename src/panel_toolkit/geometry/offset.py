"""
Module: geometry.offset

Purpose:
    Polygon offsetting for panel gutters. The offsetting algorithm sits
    behind offset_polygon() so it can be swapped without touching
    callers; inset_polygon() layers the gutter policy on top.

Key Functions:
    - offset_polygon(): Raw round-join offset, may return 0..n rings
    - inset_polygon(): Shrink a panel polygon, never fails

Dependencies:
    - shapely: Buffer operation

Used By:
    - geometry.panels: Inner (clip) polygon of each panel
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from shapely.geometry import GeometryCollection, MultiPolygon, Polygon

from panel_toolkit.core.models import Point

from .metrics import polygon_area

logger = logging.getLogger(__name__)

# Segments per quarter circle on round joins (~0.25px deviation at gutter sizes)
DEFAULT_QUAD_SEGS = 8

# Rings smaller than this are treated as collapsed
MIN_RING_AREA = 1e-6


def _polygons_of(geometry) -> List[Polygon]:
    """Flatten a buffer result into its polygon parts."""
    if geometry.is_empty:
        return []
    if isinstance(geometry, Polygon):
        return [geometry]
    if isinstance(geometry, (MultiPolygon, GeometryCollection)):
        parts: List[Polygon] = []
        for part in geometry.geoms:
            parts.extend(_polygons_of(part))
        return parts
    return []


def offset_polygon(
    points: Sequence[Sequence[float]],
    distance: float,
    *,
    quad_segs: int = DEFAULT_QUAD_SEGS,
) -> List[List[Point]]:
    """
    Offset a closed polygon by a signed distance with rounded joins.

    Negative distances shrink the polygon, positive distances grow it.

    Args:
        points: Polygon vertices (closing edge implicit)
        distance: Signed offset distance
        quad_segs: Segments per quarter circle for round joins

    Returns:
        Exterior rings of every resulting polygon (closing vertex not
        repeated). Empty when the polygon collapses.
    """
    if len(points) < 3:
        return []

    polygon = Polygon(points)
    if not polygon.is_valid:
        polygon = polygon.buffer(0)

    result = polygon.buffer(distance, quad_segs=quad_segs, join_style="round")
    return [
        [(float(x), float(y)) for x, y in part.exterior.coords[:-1]]
        for part in _polygons_of(result)
    ]


def inset_polygon(points: Sequence[Sequence[float]], inset_amount: float):
    """
    Shrink a panel polygon inward by inset_amount.

    Policy:
    - inset_amount <= 0: points returned unchanged
    - fewer than 3 points: points returned unchanged
    - collapsed or degenerate result: points returned unchanged
    - several disjoint results: the one with the largest area

    Args:
        points: Polygon in logical pixels
        inset_amount: Inward offset distance

    Returns:
        Inset polygon as a list of (x, y), or the original points

    Example:
        A 100x50 rectangle inset by 5 becomes the 90x40 rectangle spanning
        (5, 5)-(95, 45); vertex order follows the offsetting backend.
    """
    if not inset_amount or inset_amount <= 0:
        return points
    if not points or len(points) < 3:
        return points

    rings = [
        ring for ring in offset_polygon(points, -inset_amount)
        if len(ring) >= 3 and polygon_area(ring) > MIN_RING_AREA
    ]
    if not rings:
        logger.debug(f"Inset of {inset_amount} collapses polygon, keeping original")
        return points

    if len(rings) > 1:
        logger.debug(f"Inset split polygon into {len(rings)} parts, keeping largest")
    return max(rings, key=polygon_area)
