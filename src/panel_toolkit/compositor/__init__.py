"""
Module: compositor

Purpose:
    Panel compositing engine: placement state, image loading, scene
    building, PIL rasterization, WYSIWYG export and the page editing
    session.

Key Classes:
    - CanvasConfig: Engine configuration
    - PlacementMap: Per-panel pan/zoom state
    - InteractiveRenderer: Preview and drag handling
    - ExportRenderer: Fixed-resolution export
    - EditingSession: Page state machine
"""

from .config import CanvasConfig
from .placement import DrawRect, PlacementMap, draw_rect
from .images import (
    ImageLoadFailure,
    PanelImage,
    decode_image,
    load_panel_image,
    load_panel_images,
)
from .scene import MarkerRecord, PanelDrawRecord, Scene
from .rasterizer import effective_scale, panel_coverage, rasterize_scene
from .renderer import InteractiveRenderer
from .export import ExportError, ExportRenderer, export_pages
from .session import (
    EditingSession,
    SessionBusyError,
    SessionState,
    SessionStateError,
    export_all,
)

__all__ = [
    "CanvasConfig",
    "DrawRect",
    "PlacementMap",
    "draw_rect",
    "PanelImage",
    "ImageLoadFailure",
    "decode_image",
    "load_panel_image",
    "load_panel_images",
    "PanelDrawRecord",
    "MarkerRecord",
    "Scene",
    "effective_scale",
    "panel_coverage",
    "rasterize_scene",
    "InteractiveRenderer",
    "ExportRenderer",
    "ExportError",
    "export_pages",
    "EditingSession",
    "SessionState",
    "SessionBusyError",
    "SessionStateError",
    "export_all",
]
