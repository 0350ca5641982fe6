"""
Module: placement

Purpose:
    Provides the PanelPlacement and GutterStyle dataclasses. A placement
    is the offset/scale transform applied to a panel's image before it
    is clipped into the panel polygon. All values are in logical canvas
    units, never display pixels.

Key Functions:
    - PanelPlacement.moved(dx, dy): New placement with offset added
    - PanelPlacement.with_scale(scale): New placement with scale replaced
    - PanelPlacement.to_dict() / from_dict(): JSON serialization
    - GutterStyle.inset_amount: Polygon inset derived from gutter width

Dependencies:
    - dataclasses (std)

Used By:
    - compositor.placement: PlacementMap storage
    - compositor.session: Page gutter configuration
"""

from __future__ import annotations

from dataclasses import dataclass, replace

DEFAULT_GUTTER_COLOR = "#000000"


@dataclass(frozen=True, slots=True)
class PanelPlacement:
    """
    Pan/zoom state for a single panel image (immutable).

    Scale is relative to the full canvas width and offsets are relative
    to a canvas-centred placement, not to the panel polygon.

    Attributes:
        offset_x: Horizontal offset in logical pixels
        offset_y: Vertical offset in logical pixels
        scale: Image width as a fraction of the canvas width

    Example:
        >>> PanelPlacement().moved(10, -5)
        PanelPlacement(offset_x=10.0, offset_y=-5.0, scale=1.0)
    """

    offset_x: float = 0.0
    offset_y: float = 0.0
    scale: float = 1.0

    @property
    def is_default(self) -> bool:
        """True when the placement equals the untouched {0, 0, 1} state."""
        return self.offset_x == 0 and self.offset_y == 0 and self.scale == 1.0

    def moved(self, dx: float, dy: float) -> PanelPlacement:
        return replace(self, offset_x=self.offset_x + dx, offset_y=self.offset_y + dy)

    def with_scale(self, scale: float) -> PanelPlacement:
        return replace(self, scale=scale)

    def to_dict(self) -> dict:
        return {"offsetX": self.offset_x, "offsetY": self.offset_y, "scale": self.scale}

    @classmethod
    def from_dict(cls, data: dict) -> PanelPlacement:
        return cls(
            offset_x=float(data.get("offsetX", 0.0)),
            offset_y=float(data.get("offsetY", 0.0)),
            scale=float(data.get("scale", 1.0)),
        )


@dataclass(frozen=True, slots=True)
class GutterStyle:
    """
    Page-wide divider style between panels.

    The gutter is realized as an inward offset of every panel polygon by
    half the width, so two neighbouring panels leave a gap of the full
    width filled with the gutter colour.

    Attributes:
        color: Any colour string Pillow and Qt understand ("#rrggbb", "white")
        width_px: Gutter width in logical pixels

    Example:
        >>> GutterStyle(width_px=8).inset_amount
        4.0
    """

    color: str = DEFAULT_GUTTER_COLOR
    width_px: float = 0.0

    def __post_init__(self) -> None:
        """Validate width on construction."""
        if self.width_px < 0:
            raise ValueError(f"width_px must be >= 0: {self.width_px}")

    @property
    def inset_amount(self) -> float:
        return max(0.0, self.width_px / 2)
