"""
Module: compositor.placement

Purpose:
    Mutable per-panel placement state and the single authoritative
    image placement formula shared by preview and export.

Key Functions:
    - draw_rect(): Where a panel image is drawn on the logical canvas

Key Classes:
    - PlacementMap: Placements keyed by panel index, created lazily
    - DrawRect: Image rectangle in logical pixels

Dependencies:
    - core.models: PanelPlacement

Used By:
    - compositor.renderer: Scene building, drag handling
    - compositor.session: Owner of the map
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, Mapping, Tuple

from panel_toolkit.core.models import PanelPlacement

from .config import DEFAULT_MAX_SCALE, DEFAULT_MIN_SCALE

logger = logging.getLogger(__name__)

DEFAULT_PLACEMENT = PanelPlacement()


@dataclass(frozen=True)
class DrawRect:
    """Image rectangle on the logical canvas (top-left origin)."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def scaled(self, factor: float) -> DrawRect:
        return DrawRect(self.x * factor, self.y * factor, self.width * factor, self.height * factor)


def draw_rect(
    placement: PanelPlacement,
    image_width: float,
    image_height: float,
    canvas_width: float,
    canvas_height: float,
) -> DrawRect:
    """
    Rectangle a panel image occupies on the logical canvas.

    Scale is relative to the full canvas width and the image starts
    centred on the canvas; offsets move it from there. The panel
    polygon plays no part, clipping happens at render time.

    Args:
        placement: Panel placement (offset, scale)
        image_width: Natural image width
        image_height: Natural image height
        canvas_width: Logical canvas width (CW)
        canvas_height: Logical canvas height (CH)

    Returns:
        DrawRect in logical pixels

    Example:
        >>> draw_rect(PanelPlacement(scale=1.2), 1000, 1500, 800, 1200)
        DrawRect(x=-80.0, y=-120.0, width=960.0, height=1440.0)
    """
    if image_width <= 0 or image_height <= 0:
        raise ValueError(f"image size must be positive: {image_width}x{image_height}")

    width = canvas_width * placement.scale
    height = width * (image_height / image_width)
    base_x = (canvas_width - width) / 2
    base_y = (canvas_height - height) / 2
    return DrawRect(
        x=base_x + placement.offset_x,
        y=base_y + placement.offset_y,
        width=width,
        height=height,
    )


class PlacementMap:
    """
    Placement state for every panel of the active layout.

    Entries are created lazily on first interaction; unknown panels
    report the default {0, 0, 1}. Offsets are unclamped: an image may be
    dragged until it is clipped away entirely, visibility is purely a
    render-time concern.

    Example:
        >>> placements = PlacementMap()
        >>> placements.set_scale(0, 5.0).scale
        2.0
        >>> placements.adjust_offset(0, 12, -4)
        PanelPlacement(offset_x=12.0, offset_y=-4.0, scale=2.0)
    """

    def __init__(
        self,
        min_scale: float = DEFAULT_MIN_SCALE,
        max_scale: float = DEFAULT_MAX_SCALE,
    ) -> None:
        self.min_scale = min_scale
        self.max_scale = max_scale
        self._entries: Dict[int, PanelPlacement] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._entries))

    def __contains__(self, panel_index: object) -> bool:
        return panel_index in self._entries

    def get(self, panel_index: int) -> PanelPlacement:
        return self._entries.get(panel_index, DEFAULT_PLACEMENT)

    def set_scale(self, panel_index: int, value: float) -> PanelPlacement:
        """Clamp value to the scale range; offsets are left untouched."""
        clamped = min(self.max_scale, max(self.min_scale, value))
        if clamped != value:
            logger.debug(f"Panel {panel_index}: scale {value} clamped to {clamped}")
        placement = self.get(panel_index).with_scale(clamped)
        self._entries[panel_index] = placement
        return placement

    def adjust_offset(self, panel_index: int, dx: float, dy: float) -> PanelPlacement:
        """Add (dx, dy) logical pixels to the panel offset."""
        placement = self.get(panel_index).moved(dx, dy)
        self._entries[panel_index] = placement
        return placement

    def set_offset(self, panel_index: int, offset_x: float, offset_y: float) -> PanelPlacement:
        current = self.get(panel_index)
        placement = PanelPlacement(offset_x=offset_x, offset_y=offset_y, scale=current.scale)
        self._entries[panel_index] = placement
        return placement

    def reset_panel(self, panel_index: int) -> PanelPlacement:
        """Drop the panel entry; it reads back as the default."""
        self._entries.pop(panel_index, None)
        return DEFAULT_PLACEMENT

    def reset_all(self) -> None:
        self._entries.clear()

    def snapshot(self) -> Mapping[int, PanelPlacement]:
        """Copy of the current entries (values are immutable)."""
        return dict(self._entries)

    def items(self) -> Iterator[Tuple[int, PanelPlacement]]:
        for index in sorted(self._entries):
            yield index, self._entries[index]

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> dict:
        """Serialize as {"<index>": {"offsetX", "offsetY", "scale"}}."""
        return {str(index): placement.to_dict() for index, placement in self.items()}

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, dict],
        min_scale: float = DEFAULT_MIN_SCALE,
        max_scale: float = DEFAULT_MAX_SCALE,
    ) -> PlacementMap:
        placements = cls(min_scale=min_scale, max_scale=max_scale)
        for key, value in data.items():
            index = int(key)
            placement = PanelPlacement.from_dict(value)
            placements.set_offset(index, placement.offset_x, placement.offset_y)
            placements.set_scale(index, placement.scale)
        return placements
