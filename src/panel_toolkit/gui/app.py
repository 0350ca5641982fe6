"""
Entry point for the PySide6 page editor.
"""
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

logger = logging.getLogger(__name__)


def run(image_paths: Optional[Sequence[str]] = None, layout_id: Optional[str] = None):
    """
    Main entry point for the GUI application.

    Args:
        image_paths: Panel images to open with
        layout_id: Template to select on startup
    """
    from PySide6.QtWidgets import QApplication, QMainWindow

    from panel_toolkit import __version__
    from panel_toolkit.compositor import EditingSession
    from panel_toolkit.gui.widgets.editor import PageEditor

    logging.basicConfig(level=logging.INFO, format="%(message)s")

    app = QApplication(sys.argv)
    app.setApplicationName("Panel Toolkit")
    app.setApplicationDisplayName("Panel Toolkit")

    session = EditingSession()
    if image_paths:
        asyncio.run(session.load_images([Path(p) for p in image_paths]))
    if layout_id:
        session.select_layout(layout_id)

    window = QMainWindow()
    window.setWindowTitle(f"Panel Toolkit v{__version__}")
    window.setCentralWidget(PageEditor(session))
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    run(sys.argv[1:])
