"""
Layout picker: one thumbnail button per template for a panel count.
"""
from __future__ import annotations

from typing import Dict, Optional

from PySide6.QtCore import QSize, Qt, Signal
from PySide6.QtGui import QIcon, QImage, QPixmap
from PySide6.QtWidgets import QGridLayout, QLabel, QToolButton, QVBoxLayout, QWidget

from panel_toolkit.catalog import (
    LayoutCatalog,
    default_catalog,
    render_layout_thumbnail,
)

COLUMNS = 4


def pil_to_qimage(image) -> QImage:
    """Copy a PIL image into a QImage (RGBA8888)."""
    rgba = image.convert("RGBA")
    data = rgba.tobytes("raw", "RGBA")
    qimage = QImage(data, rgba.width, rgba.height, rgba.width * 4, QImage.Format.Format_RGBA8888)
    return qimage.copy()


class LayoutPicker(QWidget):
    """Grid of layout thumbnails; clicking one emits layoutSelected(template_id)."""

    layoutSelected = Signal(str)

    def __init__(self, catalog: Optional[LayoutCatalog] = None, parent=None):
        super().__init__(parent)
        self._catalog = catalog or default_catalog()
        self._buttons: Dict[str, QToolButton] = {}
        self._panel_count = 0

        self._layout = QVBoxLayout(self)
        self.summary_label = QLabel()
        self._layout.addWidget(self.summary_label)
        self._grid = QGridLayout()
        self._layout.addLayout(self._grid)
        self.empty_label = QLabel()
        self.empty_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._layout.addWidget(self.empty_label)

    @property
    def buttons(self) -> Dict[str, QToolButton]:
        return dict(self._buttons)

    def set_panel_count(self, panel_count: int) -> None:
        """Show the templates available for panel_count."""
        templates = self._catalog.templates_for_panel_count(panel_count)
        self._panel_count = panel_count

        for button in self._buttons.values():
            self._grid.removeWidget(button)
            button.deleteLater()
        self._buttons.clear()

        for position, template in enumerate(templates):
            button = QToolButton(self)
            button.setCheckable(True)
            button.setAutoExclusive(True)
            button.setToolButtonStyle(Qt.ToolButtonStyle.ToolButtonTextUnderIcon)
            button.setIcon(QIcon(QPixmap.fromImage(pil_to_qimage(render_layout_thumbnail(template)))))
            button.setIconSize(QSize(80, 120))
            button.setText(template.name)
            button.setToolTip(template.id)
            button.clicked.connect(lambda _checked=False, tid=template.id: self._on_clicked(tid))
            self._grid.addWidget(button, position // COLUMNS, position % COLUMNS)
            self._buttons[template.id] = button

        self.summary_label.setText(f"{len(templates)} layouts available for {panel_count} panels")
        self.empty_label.setText("" if templates else f"No layouts available for {panel_count} panels.")
        self.empty_label.setVisible(not templates)

    def set_selected(self, template_id: str) -> None:
        button = self._buttons.get(template_id)
        if button is not None:
            button.setChecked(True)

    def _on_clicked(self, template_id: str) -> None:
        self.layoutSelected.emit(template_id)
