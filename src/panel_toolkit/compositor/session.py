"""
Module: compositor.session

Purpose:
    Editing session for one page: layout selection, panel images,
    placement edits, gutter, export and the accept/reject decision.

    NO_LAYOUT_SELECTED -> LAYOUT_SELECTED -> PREVIEWING -> EXPORT_PENDING
    -> ACCEPTED | REJECTED

    Edits are refused while an export is in flight (busy flag) and once
    the page has been accepted. Placement state survives failed exports.

Key Functions:
    - export_all(): Sequential export of several sessions

Key Classes:
    - EditingSession: Page editing state machine
    - SessionState: States
    - SessionBusyError / SessionStateError: Misuse

Dependencies:
    - catalog: Template lookup
    - compositor.renderer / compositor.export: Drawing and export
    - output.writer: PNG encoding for persistence

Used By:
    - gui.widgets.editor: Page editor
    - cli: compose command
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any, Callable, Optional, Sequence, Union

from PIL import Image

from panel_toolkit.catalog import LayoutCatalog, default_catalog
from panel_toolkit.core.models import GutterStyle, LayoutTemplate, PanelPlacement
from panel_toolkit.output.writer import encode_bitmap

from .config import CanvasConfig
from .export import ExportError, ExportRenderer
from .images import ImageLoadFailure, ImageSource, PanelImage, load_panel_images
from .placement import PlacementMap
from .renderer import InteractiveRenderer

logger = logging.getLogger(__name__)

PanelImageResult = Union[PanelImage, ImageLoadFailure, None]


class SessionState(str, Enum):
    NO_LAYOUT_SELECTED = "no_layout_selected"
    LAYOUT_SELECTED = "layout_selected"
    PREVIEWING = "previewing"
    EXPORT_PENDING = "export_pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class SessionBusyError(Exception):
    """An edit or export was requested while an export is running."""
    pass


class SessionStateError(Exception):
    """Operation not allowed in the session's current state."""
    pass


class EditingSession:
    """
    State machine around one page.

    Attributes:
        config: Canvas configuration shared with the renderer
        placements: Placement state (reset on every layout change)

    Example:
        >>> session = EditingSession()
        >>> session.select_layout("4-grid")
        >>> session.set_scale(0, 1.5)
        >>> bitmap = session.export()
        >>> session.accept(lambda png: Path("page.png").write_bytes(png))
    """

    def __init__(
        self,
        catalog: Optional[LayoutCatalog] = None,
        config: Optional[CanvasConfig] = None,
        gutter: Optional[GutterStyle] = None,
    ) -> None:
        self.config = config or CanvasConfig()
        self.placements = PlacementMap(self.config.min_scale, self.config.max_scale)

        self._catalog = catalog
        self._gutter = gutter or GutterStyle()
        self._images: list[PanelImageResult] = []
        self._renderer: Optional[InteractiveRenderer] = None
        self._state = SessionState.NO_LAYOUT_SELECTED
        self._busy = False
        self._closed = False
        self._pending: Optional[Image.Image] = None

    # ─────────────────────────────────────────────────────────────────────────
    # State
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def editable(self) -> bool:
        """True when placement edits would be accepted right now."""
        return (
            not self._closed
            and not self._busy
            and self._renderer is not None
            and self._state not in (SessionState.EXPORT_PENDING, SessionState.ACCEPTED)
        )

    @property
    def catalog(self) -> LayoutCatalog:
        if self._catalog is None:
            self._catalog = default_catalog()
        return self._catalog

    @property
    def template(self) -> Optional[LayoutTemplate]:
        return self._renderer.template if self._renderer else None

    @property
    def renderer(self) -> InteractiveRenderer:
        if self._renderer is None:
            raise SessionStateError("No layout selected")
        return self._renderer

    @property
    def gutter(self) -> GutterStyle:
        return self._gutter

    @property
    def pending_bitmap(self) -> Optional[Image.Image]:
        return self._pending

    def _check_open(self) -> None:
        if self._closed:
            raise SessionStateError("Session is closed")
        if self._busy:
            raise SessionBusyError("An export is in progress")
        if self._state is SessionState.ACCEPTED:
            raise SessionStateError("Page has already been accepted")

    def _check_editable(self) -> None:
        self._check_open()
        if self._renderer is None:
            raise SessionStateError("No layout selected")
        if self._state is SessionState.EXPORT_PENDING:
            raise SessionStateError("Accept or reject the pending export first")

    def _edited(self) -> None:
        if self._state is not SessionState.PREVIEWING:
            logger.debug(f"Session {self._state.value} -> previewing")
        self._state = SessionState.PREVIEWING

    # ─────────────────────────────────────────────────────────────────────────
    # Layout and images
    # ─────────────────────────────────────────────────────────────────────────

    def select_layout(self, layout: Union[LayoutTemplate, str]) -> LayoutTemplate:
        """
        Make a template active. Always clears every placement.

        Raises:
            TemplateNotFoundError: Unknown template id
        """
        self._check_open()
        if self._state is SessionState.EXPORT_PENDING:
            raise SessionStateError("Accept or reject the pending export first")

        template = self.catalog.get(layout) if isinstance(layout, str) else layout

        self.placements.reset_all()
        if self._renderer is None:
            self._renderer = InteractiveRenderer(
                template,
                self.placements,
                config=self.config,
                gutter=self._gutter,
                images=self._images,
            )
        else:
            self._renderer.set_template(template)
            self._renderer.set_images(self._images)

        self._state = SessionState.LAYOUT_SELECTED
        logger.info(f"Selected layout {template.id} ({template.panel_count} panels)")
        return template

    def set_images(self, images: Sequence[PanelImageResult]) -> None:
        """Assign images to panels in order; failures render placeholders."""
        self._check_open()
        if self._state is SessionState.EXPORT_PENDING:
            raise SessionStateError("Accept or reject the pending export first")

        self._images = list(images)
        failures = sum(isinstance(image, ImageLoadFailure) for image in self._images)
        if failures:
            logger.warning(f"{failures} panel image(s) failed to load; using placeholders")

        if self._renderer is not None:
            self._renderer.set_images(self._images)
            self._edited()

    async def load_images(self, sources: Sequence[ImageSource]) -> list[PanelImageResult]:
        """Decode sources off the event loop and assign the results."""
        results = await load_panel_images(sources)
        self.set_images(results)
        return results

    # ─────────────────────────────────────────────────────────────────────────
    # Edits
    # ─────────────────────────────────────────────────────────────────────────

    def set_scale(self, panel_index: int, value: float) -> PanelPlacement:
        self._check_editable()
        placement = self.placements.set_scale(panel_index, value)
        self._edited()
        return placement

    def drag(self, panel_index: int, dx_display: float, dy_display: float) -> PanelPlacement:
        """Move a panel image by a display-pixel delta."""
        self._check_editable()
        placement = self._renderer.apply_drag(panel_index, dx_display, dy_display)
        self._edited()
        return placement

    def adjust_offset(self, panel_index: int, dx: float, dy: float) -> PanelPlacement:
        """Move a panel image by a logical-pixel delta."""
        self._check_editable()
        placement = self.placements.adjust_offset(panel_index, dx, dy)
        self._edited()
        return placement

    def begin_drag(self, x: float, y: float) -> Optional[int]:
        """Pointer pressed at display (x, y); returns the grabbed panel."""
        self._check_editable()
        return self._renderer.press(x, y)

    def drag_to(self, x: float, y: float) -> Optional[PanelPlacement]:
        self._check_editable()
        placement = self._renderer.move(x, y)
        if placement is not None:
            self._edited()
        return placement

    def end_drag(self) -> Optional[int]:
        if self._renderer is None:
            return None
        return self._renderer.release()

    def reset_panel(self, panel_index: int) -> PanelPlacement:
        self._check_editable()
        placement = self.placements.reset_panel(panel_index)
        self._edited()
        return placement

    def reset_all(self) -> None:
        self._check_editable()
        self.placements.reset_all()
        self._edited()

    def set_gutter(self, width: Optional[float] = None, color: Optional[str] = None) -> GutterStyle:
        """Change gutter width (clamped to the configured maximum) and/or colour."""
        self._check_editable()
        new_width = self._gutter.width_px if width is None else self.config.clamp_gutter(width)
        new_color = self._gutter.color if color is None else color
        self._gutter = GutterStyle(color=new_color, width_px=new_width)
        self._renderer.set_gutter(self._gutter)
        self._edited()
        return self._gutter

    # ─────────────────────────────────────────────────────────────────────────
    # Export
    # ─────────────────────────────────────────────────────────────────────────

    def _start_export(self, target_width: Optional[int]) -> ExportRenderer:
        self._check_open()
        if self._renderer is None:
            raise SessionStateError("No layout selected")
        if self._state is SessionState.EXPORT_PENDING:
            raise SessionStateError("Accept or reject the pending export first")
        exporter = ExportRenderer(self._renderer, target_width)
        self._busy = True
        return exporter

    def _export_failed(self, error: ExportError) -> None:
        self._pending = None
        self._state = SessionState.REJECTED
        logger.warning(f"Export failed, placements kept: {error}")

    def _export_done(self, bitmap: Image.Image) -> None:
        self._pending = bitmap
        self._state = SessionState.EXPORT_PENDING

    def export(self, target_width: Optional[int] = None) -> Image.Image:
        """
        Export the page and hold it for accept/reject.

        Raises:
            ExportError: Rasterization failed (session -> REJECTED)
            SessionBusyError: Another export is running
            SessionStateError: No layout, closed or already accepted, or an
                earlier export still awaits accept/reject
        """
        exporter = self._start_export(target_width)
        try:
            bitmap = exporter.export()
        except ExportError as e:
            self._export_failed(e)
            raise
        finally:
            self._busy = False

        self._export_done(bitmap)
        return bitmap

    async def export_async(self, target_width: Optional[int] = None) -> Optional[Image.Image]:
        """
        Export off the event loop thread.

        Returns:
            The bitmap, or None if the session was closed before the
            export finished (the result is discarded)
        """
        exporter = self._start_export(target_width)
        try:
            bitmap = await asyncio.to_thread(exporter.export)
        except ExportError as e:
            if self._closed:
                logger.info(f"Session closed during export; discarding failure: {e}")
                return None
            self._export_failed(e)
            raise
        finally:
            self._busy = False

        if self._closed:
            logger.info("Session closed during export; discarding result")
            return None

        self._export_done(bitmap)
        return bitmap

    def accept(self, persist: Callable[[bytes], Any]) -> Any:
        """
        Hand the pending export to persistence as PNG bytes.

        Args:
            persist: External callback receiving the encoded page

        Returns:
            Whatever persist returns
        """
        if self._closed:
            raise SessionStateError("Session is closed")
        if self._state is not SessionState.EXPORT_PENDING or self._pending is None:
            raise SessionStateError(f"Nothing to accept in state {self._state.value}")

        result = persist(encode_bitmap(self._pending))
        self._state = SessionState.ACCEPTED
        self._pending = None
        logger.info(f"Accepted page {self.template.id}")
        return result

    def reject(self) -> None:
        if self._closed:
            raise SessionStateError("Session is closed")
        if self._state is not SessionState.EXPORT_PENDING:
            raise SessionStateError(f"Nothing to reject in state {self._state.value}")
        self._pending = None
        self._state = SessionState.REJECTED
        logger.info("Export rejected")

    def close(self) -> None:
        """Close the session; an in-flight export result will be dropped."""
        self._closed = True
        self._pending = None
        if self._renderer is not None:
            self._renderer.release()


async def export_all(
    sessions: Sequence[EditingSession],
    target_width: Optional[int] = None,
) -> list[Optional[Image.Image]]:
    """Export pages one at a time, in order."""
    bitmaps = []
    for session in sessions:
        bitmaps.append(await session.export_async(target_width))
    logger.info(f"Exported {len(bitmaps)} pages")
    return bitmaps
