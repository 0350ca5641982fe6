"""
Module: templates

Purpose:
    Provides the Panel and LayoutTemplate dataclasses - the static,
    versionable description of a page layout. Panel polygons are stored
    in percentage coordinates (0-100) of the page so a template is
    independent of any canvas resolution.

Key Functions:
    - Panel.from_dict(data, index): Deserialize one panel
    - LayoutTemplate.from_dict(data): Deserialize one template
    - LayoutTemplate.to_dict(): Serialize for JSON

Dependencies:
    - dataclasses (std)

Used By:
    - catalog.loader: Builds templates from the JSON catalog
    - geometry.panels: Converts templates into canvas geometry
    - compositor.session: Active layout of an editing session
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

Point = Tuple[float, float]

PERCENT_MIN = 0.0
PERCENT_MAX = 100.0


@dataclass(frozen=True, slots=True)
class Panel:
    """
    One closed polygon region of a page layout.

    Attributes:
        index: Position of the panel within its template (0-indexed)
        points: Ordered polygon vertices as (x_pct, y_pct); the closing
            edge from the last vertex back to the first is implicit

    Invariants:
        - at least 3 points
        - every coordinate within [0, 100]

    Example:
        >>> panel = Panel(0, ((0, 0), (100, 0), (100, 50), (0, 50)))
        >>> panel.vertex_count
        4
    """

    index: int
    points: tuple[Point, ...]

    def __post_init__(self) -> None:
        """Validate polygon on construction."""
        if self.index < 0:
            raise ValueError(f"index must be >= 0: {self.index}")
        if len(self.points) < 3:
            raise ValueError(
                f"panel {self.index} needs at least 3 points, got {len(self.points)}"
            )
        for x, y in self.points:
            if not (PERCENT_MIN <= x <= PERCENT_MAX and PERCENT_MIN <= y <= PERCENT_MAX):
                raise ValueError(
                    f"panel {self.index} point ({x}, {y}) outside percentage space"
                )

    @property
    def vertex_count(self) -> int:
        """Number of polygon vertices."""
        return len(self.points)

    def to_dict(self) -> dict:
        return {"points": [[x, y] for x, y in self.points]}

    @classmethod
    def from_dict(cls, data: dict, index: int) -> Panel:
        return cls(
            index=index,
            points=tuple((float(x), float(y)) for x, y in data["points"]),
        )


@dataclass(frozen=True, slots=True)
class LayoutTemplate:
    """
    A named, fixed set of panel polygons for a specific panel count.

    Panels are assumed to partition the page without material overlap.
    That is a property of template authoring and is not checked here.

    Attributes:
        id: Stable identifier (e.g. "3-diagonal-split")
        name: Display name
        panel_count: Declared number of panels
        panels: Panels ordered by reading order

    Example:
        >>> template = LayoutTemplate.from_dict({
        ...     "id": "1-full", "name": "Full Page", "panelCount": 1,
        ...     "panels": [{"points": [[0, 0], [100, 0], [100, 100], [0, 100]]}],
        ... })
        >>> template.panel_count
        1
    """

    id: str
    name: str
    panel_count: int
    panels: tuple[Panel, ...]

    def __post_init__(self) -> None:
        """Validate declared panel count on construction."""
        if not self.id:
            raise ValueError("template id must not be empty")
        if self.panel_count != len(self.panels):
            raise ValueError(
                f"template {self.id!r} declares {self.panel_count} panels "
                f"but defines {len(self.panels)}"
            )
        for expected, panel in enumerate(self.panels):
            if panel.index != expected:
                raise ValueError(
                    f"template {self.id!r} panel at position {expected} has index {panel.index}"
                )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "panelCount": self.panel_count,
            "panels": [panel.to_dict() for panel in self.panels],
        }

    @classmethod
    def from_dict(cls, data: dict) -> LayoutTemplate:
        panels = tuple(
            Panel.from_dict(panel_data, index)
            for index, panel_data in enumerate(data["panels"])
        )
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            panel_count=data.get("panelCount", len(panels)),
            panels=panels,
        )

    def __repr__(self) -> str:
        return f"LayoutTemplate({self.id!r}, panels={self.panel_count})"
