"""
Page editor: layout picker, interactive preview and placement controls
around one EditingSession.
"""
from __future__ import annotations

import logging
from pathlib import Path
from queue import Queue
from typing import Any, Callable, Optional

from PySide6.QtCore import Qt, QTimer, Signal, Slot
from PySide6.QtWidgets import (
    QCheckBox,
    QFileDialog,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QSlider,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from panel_toolkit.catalog import MAX_PANELS, MIN_PANELS
from panel_toolkit.compositor import EditingSession, ExportError, SessionState
from panel_toolkit.gui.utils.logging_utils import attach_queue_handler, detach_queue_handler, drain_queue

from .layout_picker import LayoutPicker
from .preview_widget import PanelPreviewWidget

logger = logging.getLogger(__name__)

STATUS_POLL_MS = 200


def save_with_dialog(parent: QWidget) -> Callable[[bytes], Optional[Path]]:
    """Persistence callback asking the user where to write the PNG."""

    def persist(png: bytes) -> Optional[Path]:
        filename, _ = QFileDialog.getSaveFileName(parent, "Save Page", "page.png", "PNG Images (*.png)")
        if not filename:
            return None
        path = Path(filename)
        path.write_bytes(png)
        return path

    return persist


class PageEditor(QWidget):
    """
    Editor for one page.

    Signals:
        exported(object): Export finished; carries the PIL bitmap
        exportFailed(str): Export failed; placements are unchanged
        accepted(object): Page accepted; carries the persist result
    """

    exported = Signal(object)
    exportFailed = Signal(str)
    accepted = Signal(object)

    def __init__(
        self,
        session: Optional[EditingSession] = None,
        persist: Optional[Callable[[bytes], Any]] = None,
        parent=None,
    ):
        super().__init__(parent)
        self.session = session or EditingSession()
        self._persist = persist or save_with_dialog(self)

        self._build_ui()

        # Engine logs go to the status line
        self._log_queue: Queue = Queue()
        self._log_handler = attach_queue_handler(self._log_queue)
        self._status_timer = QTimer(self)
        self._status_timer.timeout.connect(self._poll_status)
        self._status_timer.start(STATUS_POLL_MS)
        handler = self._log_handler
        self.destroyed.connect(lambda *_: detach_queue_handler(handler))

        self.picker.set_panel_count(self.panel_count_spin.value())
        if self.session.template is not None:
            self.picker.set_selected(self.session.template.id)
        self._update_controls()

    def _build_ui(self) -> None:
        config = self.session.config
        layout = QHBoxLayout(self)

        # Left: layout choice
        left = QVBoxLayout()
        self.panel_count_spin = QSpinBox()
        self.panel_count_spin.setRange(MIN_PANELS, MAX_PANELS)
        self.panel_count_spin.setValue(
            self.session.template.panel_count if self.session.template else 4
        )
        self.panel_count_spin.valueChanged.connect(self._on_panel_count_changed)
        left.addWidget(QLabel("Panels"))
        left.addWidget(self.panel_count_spin)
        self.picker = LayoutPicker(self.session.catalog)
        self.picker.layoutSelected.connect(self._on_layout_selected)
        left.addWidget(self.picker)
        left.addStretch()
        layout.addLayout(left)

        # Centre: preview
        self.preview = PanelPreviewWidget(self.session)
        self.preview.panelSelected.connect(self._on_panel_selected)
        self.preview.placementChanged.connect(self._on_placement_changed)
        layout.addWidget(self.preview, 1)

        # Right: controls
        right = QVBoxLayout()
        form = QFormLayout()

        self.scale_slider = QSlider(Qt.Orientation.Horizontal)
        self.scale_slider.setRange(round(config.min_scale * 100), round(config.max_scale * 100))
        self.scale_slider.setValue(100)
        self.scale_slider.valueChanged.connect(self._on_scale_changed)
        form.addRow("Scale %", self.scale_slider)

        self.gutter_spin = QSpinBox()
        self.gutter_spin.setRange(0, int(config.max_gutter_width))
        self.gutter_spin.setValue(int(self.session.gutter.width_px))
        self.gutter_spin.valueChanged.connect(self._on_gutter_changed)
        form.addRow("Gutter", self.gutter_spin)

        self.markers_check = QCheckBox("Show panel numbers")
        self.markers_check.setChecked(config.markers_visible)
        self.markers_check.toggled.connect(self._on_markers_toggled)
        form.addRow(self.markers_check)
        right.addLayout(form)

        self.reset_panel_btn = QPushButton("Reset Panel")
        self.reset_panel_btn.clicked.connect(self._on_reset_panel)
        self.reset_all_btn = QPushButton("Reset All")
        self.reset_all_btn.clicked.connect(self._on_reset_all)
        self.export_btn = QPushButton("Export")
        self.export_btn.clicked.connect(self._on_export)
        self.accept_btn = QPushButton("Accept")
        self.accept_btn.clicked.connect(self._on_accept)
        self.reject_btn = QPushButton("Reject")
        self.reject_btn.clicked.connect(self._on_reject)
        for button in (self.reset_panel_btn, self.reset_all_btn, self.export_btn, self.accept_btn, self.reject_btn):
            right.addWidget(button)

        self.status_label = QLabel("")
        self.status_label.setWordWrap(True)
        right.addWidget(self.status_label)
        right.addStretch()
        layout.addLayout(right)

    # ─────────────────────────────────────────────────────────────────────────
    # State
    # ─────────────────────────────────────────────────────────────────────────

    def _update_controls(self) -> None:
        session = self.session
        editable = session.editable
        has_panel = editable and self.preview.selected_panel is not None
        pending = session.state is SessionState.EXPORT_PENDING and not session.busy

        self.picker.setEnabled(not session.busy and not pending and session.state is not SessionState.ACCEPTED)
        self.panel_count_spin.setEnabled(self.picker.isEnabled())
        self.scale_slider.setEnabled(has_panel)
        self.reset_panel_btn.setEnabled(has_panel)
        self.gutter_spin.setEnabled(editable)
        self.reset_all_btn.setEnabled(editable)
        self.export_btn.setEnabled(
            session.template is not None and not session.busy and not session.closed
            and session.state not in (SessionState.EXPORT_PENDING, SessionState.ACCEPTED)
        )
        self.accept_btn.setEnabled(pending)
        self.reject_btn.setEnabled(pending)

    def _sync_scale_slider(self) -> None:
        index = self.preview.selected_panel
        if index is None:
            return
        self.scale_slider.blockSignals(True)
        self.scale_slider.setValue(round(self.session.placements.get(index).scale * 100))
        self.scale_slider.blockSignals(False)

    @Slot()
    def _poll_status(self) -> None:
        for message, level in drain_queue(self._log_queue):
            self.status_label.setText(message if level == "INFO" else f"{level.title()}: {message}")

    # ─────────────────────────────────────────────────────────────────────────
    # Handlers
    # ─────────────────────────────────────────────────────────────────────────

    @Slot(int)
    def _on_panel_count_changed(self, panel_count: int) -> None:
        self.picker.set_panel_count(panel_count)

    @Slot(str)
    def _on_layout_selected(self, template_id: str) -> None:
        self.session.select_layout(template_id)
        self.session.renderer.markers_visible = self.markers_check.isChecked()
        self.preview.set_selected_panel(None)
        self.preview.refresh()
        self._update_controls()

    @Slot(int)
    def _on_panel_selected(self, index: int) -> None:
        self._sync_scale_slider()
        self._update_controls()

    @Slot(int)
    def _on_placement_changed(self, index: int) -> None:
        self._update_controls()

    @Slot(int)
    def _on_scale_changed(self, value: int) -> None:
        index = self.preview.selected_panel
        if index is None or not self.session.editable:
            return
        self.session.set_scale(index, value / 100)
        self.preview.update()

    @Slot(int)
    def _on_gutter_changed(self, value: int) -> None:
        if not self.session.editable:
            return
        self.session.set_gutter(width=value)
        self.preview.update()

    @Slot(bool)
    def _on_markers_toggled(self, checked: bool) -> None:
        if self.session.template is not None:
            self.session.renderer.markers_visible = checked
            self.preview.update()

    @Slot()
    def _on_reset_panel(self) -> None:
        index = self.preview.selected_panel
        if index is None:
            return
        self.session.reset_panel(index)
        self._sync_scale_slider()
        self.preview.update()

    @Slot()
    def _on_reset_all(self) -> None:
        self.session.reset_all()
        self._sync_scale_slider()
        self.preview.update()

    @Slot()
    def _on_export(self) -> None:
        try:
            bitmap = self.session.export()
        except ExportError as e:
            self.status_label.setText(f"Export failed: {e}")
            self.exportFailed.emit(str(e))
        else:
            self.exported.emit(bitmap)
        finally:
            self._update_controls()
            self.preview.update()

    @Slot()
    def _on_accept(self) -> None:
        result = self.session.accept(self._persist)
        self.accepted.emit(result)
        self._update_controls()

    @Slot()
    def _on_reject(self) -> None:
        self.session.reject()
        self._update_controls()
