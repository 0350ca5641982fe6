"""
Module: compositor.export

Purpose:
    Export a page at a fixed target resolution from the same scene the
    preview draws. The pixel ratio is target_width / display_width, so
    the output depends only on the logical state, never on how large the
    preview happened to be.

Key Functions:
    - export_pages(): Sequential multi-page export

Key Classes:
    - ExportRenderer: Single page export with marker hiding
    - ExportError: Recoverable export failure

Dependencies:
    - compositor.renderer: Scene source
    - compositor.rasterizer: PIL backend

Used By:
    - compositor.session: export() / export_async()
    - cli: compose command
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from PIL import Image

from .rasterizer import rasterize_scene
from .renderer import InteractiveRenderer

logger = logging.getLogger(__name__)


class ExportError(Exception):
    """Rasterizing the page failed. Placement state is unchanged; retry is safe."""
    pass


class ExportRenderer:
    """
    Renders a page for export.

    Markers are hidden for the duration of the export and the previous
    visibility is restored afterwards, whether or not the export
    succeeded. Pointer input is locked meanwhile.

    Example:
        >>> bitmap = ExportRenderer(renderer).export()
        >>> bitmap.size
        (800, 1200)
    """

    def __init__(self, renderer: InteractiveRenderer, target_width: Optional[int] = None) -> None:
        self.renderer = renderer
        self.target_width = target_width or renderer.config.canvas_width
        if self.target_width <= 0:
            raise ValueError(f"target_width must be positive: {self.target_width}")

    @property
    def pixel_ratio(self) -> float:
        return self.target_width / self.renderer.display_width

    @property
    def target_size(self) -> tuple[int, int]:
        config = self.renderer.config
        return self.target_width, round(self.target_width * config.canvas_height / config.canvas_width)

    def export(self) -> Image.Image:
        """
        Rasterize the page at the target width.

        Returns:
            RGB bitmap of target_size

        Raises:
            ExportError: If rasterization fails for any reason
        """
        renderer = self.renderer
        markers_were_visible = renderer.markers_visible
        was_interactive = renderer.interactive

        renderer.markers_visible = False
        renderer.interactive = False
        try:
            bitmap = rasterize_scene(renderer.build_scene(), self.pixel_ratio)
        except Exception as e:
            logger.warning(f"Export of {renderer.template.id} failed: {e}")
            raise ExportError(f"Failed to export {renderer.template.id}: {e}") from e
        finally:
            renderer.markers_visible = markers_were_visible
            renderer.interactive = was_interactive

        logger.info(f"Exported {renderer.template.id} at {bitmap.width}x{bitmap.height}")
        return bitmap


def export_pages(
    renderers: Sequence[InteractiveRenderer],
    target_width: Optional[int] = None,
) -> list[Image.Image]:
    """
    Export several pages strictly one after another.

    Raises:
        ExportError: On the first page that fails; earlier pages are lost
    """
    bitmaps = []
    for page_number, renderer in enumerate(renderers, start=1):
        logger.debug(f"Exporting page {page_number}/{len(renderers)}")
        bitmaps.append(ExportRenderer(renderer, target_width).export())
    return bitmaps
