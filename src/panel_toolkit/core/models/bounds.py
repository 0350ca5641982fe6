"""
Module: bounds

Purpose:
    Provides the ContentBounds dataclass - the pixel rectangle enclosing
    the visible (non-transparent) content of a rendered alpha buffer.
    Used to position auxiliary overlays relative to a painted region.

Key Functions:
    - ContentBounds.center: Centre point of the rectangle
    - ContentBounds.contains(x, y): Point membership
    - ContentBounds.as_tuple(): (left, top, right, bottom) for PIL

Dependencies:
    - dataclasses (std)

Used By:
    - geometry.content: bounds_of_visible_content()
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ContentBounds:
    """
    Pixel region of visible content.

    The region is defined as [left, right) x [top, bottom):
    - left/top are inclusive
    - right/bottom are exclusive

    Attributes:
        left: X of the first column containing content
        top: Y of the first row containing content
        right: One past the last column containing content
        bottom: One past the last row containing content

    Invariants:
        - left >= 0, top >= 0
        - right > left, bottom > top

    Example:
        >>> bounds = ContentBounds(left=10, top=20, right=30, bottom=60)
        >>> bounds.center
        (20.0, 40.0)
    """

    left: int
    top: int
    right: int
    bottom: int

    def __post_init__(self) -> None:
        """Validate bounds on construction."""
        if self.left < 0:
            raise ValueError(f"left must be >= 0: {self.left}")
        if self.top < 0:
            raise ValueError(f"top must be >= 0: {self.top}")
        if self.right <= self.left:
            raise ValueError(f"right must be > left: {self.right} <= {self.left}")
        if self.bottom <= self.top:
            raise ValueError(f"bottom must be > top: {self.bottom} <= {self.top}")

    @property
    def width(self) -> int:
        return self.right - self.left

    @property
    def height(self) -> int:
        return self.bottom - self.top

    @property
    def center(self) -> tuple[float, float]:
        """Centre of the rectangle in pixel coordinates."""
        return ((self.left + self.right) / 2, (self.top + self.bottom) / 2)

    def contains(self, x: float, y: float) -> bool:
        return self.left <= x < self.right and self.top <= y < self.bottom

    def as_tuple(self) -> tuple[int, int, int, int]:
        """Get as (left, top, right, bottom) tuple for PIL."""
        return (self.left, self.top, self.right, self.bottom)

    def __repr__(self) -> str:
        return f"ContentBounds({self.left}, {self.top}, {self.right}, {self.bottom})"
