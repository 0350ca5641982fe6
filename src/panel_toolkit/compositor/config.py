"""
Module: compositor.config

Purpose:
    Configuration for the compositing engine. Everything the renderers
    need (canvas resolution, scale range, gutter bound, marker style) is
    passed explicitly through this object; there is no global state.

Key Classes:
    - CanvasConfig: Immutable compositor configuration

Dependencies:
    - dataclasses (std)

Used By:
    - compositor.placement: Scale clamping range
    - compositor.renderer / compositor.export: Canvas size, markers
    - compositor.session: Gutter bound
"""

from __future__ import annotations

from dataclasses import dataclass

from panel_toolkit.geometry import DEFAULT_CANVAS_HEIGHT, DEFAULT_CANVAS_WIDTH

DEFAULT_MIN_SCALE = 0.2
DEFAULT_MAX_SCALE = 2.0
DEFAULT_MAX_GUTTER_WIDTH = 12
DEFAULT_MAX_DISPLAY_WIDTH = 400


@dataclass(frozen=True)
class CanvasConfig:
    """
    Configuration for the compositor (immutable).

    Attributes:
        canvas_width: Logical canvas width (all placement state uses it)
        canvas_height: Logical canvas height
        min_scale: Lowest panel image scale
        max_scale: Highest panel image scale
        max_gutter_width: Upper bound for the gutter width
        max_display_width: Widest on-screen preview
        placeholder_color: Fill for panels without an image
        marker_size: Side of the square panel-number marker (logical px)
        marker_font_size: Marker label size (logical px)
        marker_fill: Marker box RGBA fill
        marker_text_color: Marker label colour
        markers_visible: Initial marker visibility

    Example:
        >>> config = CanvasConfig()
        >>> config.aspect_ratio
        1.5
    """

    # Logical canvas
    canvas_width: int = DEFAULT_CANVAS_WIDTH
    canvas_height: int = DEFAULT_CANVAS_HEIGHT

    # Placement
    min_scale: float = DEFAULT_MIN_SCALE
    max_scale: float = DEFAULT_MAX_SCALE

    # Gutter
    max_gutter_width: float = DEFAULT_MAX_GUTTER_WIDTH

    # Preview
    max_display_width: int = DEFAULT_MAX_DISPLAY_WIDTH
    placeholder_color: str = "#1a1a2e"

    # Panel-number markers
    marker_size: float = 20
    marker_font_size: float = 12
    marker_fill: tuple[int, int, int, int] = (0, 0, 0, 153)
    marker_text_color: str = "#ffffff"
    markers_visible: bool = True

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.canvas_width <= 0:
            raise ValueError(f"canvas_width must be positive: {self.canvas_width}")
        if self.canvas_height <= 0:
            raise ValueError(f"canvas_height must be positive: {self.canvas_height}")
        if not 0 < self.min_scale <= self.max_scale:
            raise ValueError(
                f"scale range must satisfy 0 < min <= max: {self.min_scale}..{self.max_scale}"
            )
        if self.max_gutter_width < 0:
            raise ValueError(f"max_gutter_width must be >= 0: {self.max_gutter_width}")
        if self.max_display_width <= 0:
            raise ValueError(f"max_display_width must be positive: {self.max_display_width}")

    @property
    def aspect_ratio(self) -> float:
        """Height / width of the logical canvas."""
        return self.canvas_height / self.canvas_width

    def clamp_gutter(self, width: float) -> float:
        return min(self.max_gutter_width, max(0.0, width))
