"""
Core Models Package

Immutable, validated data models shared across the toolkit.

All models in this package are frozen dataclasses. Mutable editing
state (the per-panel placement map) lives in the compositor and only
ever stores these immutable values.
"""

from .templates import Panel, LayoutTemplate, Point
from .placement import PanelPlacement, GutterStyle
from .bounds import ContentBounds

__all__ = [
    "Point",
    "Panel",
    "LayoutTemplate",
    "PanelPlacement",
    "GutterStyle",
    "ContentBounds",
]
