"""
Module: geometry.mapping

Purpose:
    Coordinate mapping between the three spaces the compositor uses:
    percentage space (templates), logical canvas space (all placement
    state and geometry) and display space (logical * display scale).

Key Functions:
    - percent_to_logical(): Percentage polygon -> logical pixels
    - scale_points(): Uniform scale of a polygon

Dependencies:
    - None (pure functions)

Used By:
    - geometry.panels: Canvas geometry computation
    - compositor.scene: Display-space presentation
"""

from __future__ import annotations

from typing import Sequence, Tuple

from panel_toolkit.core.models import Point

# Logical canvas, 2:3 portrait page
DEFAULT_CANVAS_WIDTH = 800
DEFAULT_CANVAS_HEIGHT = 1200


def percent_to_logical(
    points: Sequence[Sequence[float]],
    canvas_w: float = DEFAULT_CANVAS_WIDTH,
    canvas_h: float = DEFAULT_CANVAS_HEIGHT,
) -> Tuple[Point, ...]:
    """
    Scale percentage coordinates (0-100) to logical canvas pixels.

    Args:
        points: Polygon in percentage space
        canvas_w: Logical canvas width
        canvas_h: Logical canvas height

    Returns:
        Polygon in logical pixel space

    Example:
        >>> percent_to_logical([(50, 50), (100, 25)])
        ((400.0, 600.0), (800.0, 300.0))
    """
    return tuple((x * canvas_w / 100, y * canvas_h / 100) for x, y in points)


def scale_points(points: Sequence[Sequence[float]], factor: float) -> Tuple[Point, ...]:
    """Scale every coordinate of a polygon by the same factor."""
    return tuple((x * factor, y * factor) for x, y in points)
