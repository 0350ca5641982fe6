"""
Interactive page preview.

Paints the session's Scene with QPainter (clip paths per panel) and
routes mouse drags to the session. Geometry comes from the same scene
the exporter rasterizes, so what is shown is what gets exported.
"""
from __future__ import annotations

from typing import Dict, Optional

from PySide6.QtCore import QPointF, QRectF, QSize, Qt, Signal
from PySide6.QtGui import QColor, QFont, QImage, QPainter, QPainterPath, QPen, QPolygonF
from PySide6.QtWidgets import QSizePolicy, QWidget

from panel_toolkit.compositor import EditingSession, PanelImage, Scene

from .layout_picker import pil_to_qimage

EMPTY_BACKGROUND = "#2b2b3b"
SELECTION_COLOR = "#7c5cff"


class PanelPreviewWidget(QWidget):
    """
    Draws the active page and lets the user drag panel images.

    Signals:
        placementChanged(int): A panel's placement was changed by a drag
        panelSelected(int): A panel with an image was pressed
    """

    placementChanged = Signal(int)
    panelSelected = Signal(int)

    def __init__(self, session: EditingSession, parent=None):
        super().__init__(parent)
        self._session = session
        self._qimages: Dict[int, QImage] = {}
        self._selected: Optional[int] = None

        self.setMouseTracking(False)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Preferred)
        self.setMinimumSize(120, 180)

    @property
    def session(self) -> EditingSession:
        return self._session

    @property
    def selected_panel(self) -> Optional[int]:
        return self._selected

    def set_selected_panel(self, panel_index: Optional[int]) -> None:
        self._selected = panel_index
        self.update()

    def refresh(self) -> None:
        """Re-fit to the current width and repaint (after layout or image changes)."""
        self._qimages.clear()
        if self._session.template is not None:
            self._session.renderer.fit_to(max(1, self.width()))
        self.updateGeometry()
        self.update()

    # ─────────────────────────────────────────────────────────────────────────
    # Sizing
    # ─────────────────────────────────────────────────────────────────────────

    def sizeHint(self) -> QSize:
        config = self._session.config
        width = config.max_display_width
        return QSize(width, round(width * config.aspect_ratio))

    def hasHeightForWidth(self) -> bool:
        return True

    def heightForWidth(self, width: int) -> int:
        config = self._session.config
        return round(min(width, config.max_display_width) * config.aspect_ratio)

    def resizeEvent(self, event):
        if self._session.template is not None:
            self._session.renderer.fit_to(max(1, event.size().width()))
        super().resizeEvent(event)

    # ─────────────────────────────────────────────────────────────────────────
    # Painting
    # ─────────────────────────────────────────────────────────────────────────

    def _qimage_for(self, image: PanelImage) -> QImage:
        key = id(image.handle)
        if key not in self._qimages:
            self._qimages[key] = pil_to_qimage(image.handle)
        return self._qimages[key]

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)

        if self._session.template is None:
            painter.fillRect(self.rect(), QColor(EMPTY_BACKGROUND))
            painter.setPen(QColor("#f0f0f0"))
            painter.drawText(self.rect(), Qt.AlignmentFlag.AlignCenter, "Select a layout")
            painter.end()
            return

        self.paint_scene(painter, self._session.renderer.build_scene())
        painter.end()

    def paint_scene(self, painter: QPainter, scene: Scene) -> None:
        s = scene.display_scale
        width, height = scene.display_size
        painter.fillRect(QRectF(0, 0, width, height), QColor(scene.background))

        for record in scene.panels:
            path = QPainterPath()
            path.addPolygon(QPolygonF([QPointF(x * s, y * s) for x, y in record.clip_polygon]))
            path.closeSubpath()

            if record.is_placeholder:
                painter.fillPath(path, QColor(record.fill))
                continue

            tx, ty, sx, sy = record.image_transform(s)
            target = QRectF(tx, ty, record.image.width * sx, record.image.height * sy)
            painter.save()
            painter.setClipPath(path)
            painter.drawImage(target, self._qimage_for(record.image))
            painter.restore()

        if self._selected is not None:
            bounds = self._session.renderer.visible_image_bounds(self._selected)
            if bounds is not None:
                pen = QPen(QColor(SELECTION_COLOR), 1, Qt.PenStyle.DashLine)
                painter.setPen(pen)
                painter.setBrush(Qt.BrushStyle.NoBrush)
                painter.drawRect(QRectF(bounds.left * s, bounds.top * s, bounds.width * s, bounds.height * s))

        if scene.markers_visible:
            for marker in scene.markers:
                x1, y1, x2, y2 = marker.box(s)
                box = QRectF(x1, y1, x2 - x1, y2 - y1)
                painter.setPen(Qt.PenStyle.NoPen)
                painter.setBrush(QColor(*marker.fill))
                painter.drawRoundedRect(box, marker.corner_radius * s, marker.corner_radius * s)

                font = QFont()
                font.setBold(True)
                font.setPixelSize(max(1, round(marker.font_size * s)))
                painter.setFont(font)
                painter.setPen(QColor(marker.text_color))
                painter.drawText(box, Qt.AlignmentFlag.AlignCenter, marker.label)

    # ─────────────────────────────────────────────────────────────────────────
    # Mouse
    # ─────────────────────────────────────────────────────────────────────────

    def _can_edit(self) -> bool:
        return self._session.editable

    def mousePressEvent(self, event):
        if event.button() != Qt.MouseButton.LeftButton or not self._can_edit():
            return
        pos = event.position()
        index = self._session.begin_drag(pos.x(), pos.y())
        if index is not None:
            self._selected = index
            self.setCursor(Qt.CursorShape.ClosedHandCursor)
            self.panelSelected.emit(index)
            self.update()

    def mouseMoveEvent(self, event):
        if not self._can_edit():
            return
        dragging = self._session.renderer.dragging
        if dragging is None:
            return
        pos = event.position()
        if self._session.drag_to(pos.x(), pos.y()) is not None:
            self.placementChanged.emit(dragging)
            self.update()

    def mouseReleaseEvent(self, event):
        if event.button() != Qt.MouseButton.LeftButton:
            return
        self._session.end_drag()
        self.unsetCursor()
