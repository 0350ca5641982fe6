"""Tests for the interactive preview widget."""

import pytest
from PySide6.QtCore import QEvent, QPointF, Qt
from PySide6.QtGui import QMouseEvent

from panel_toolkit.compositor import EditingSession, SessionState
from panel_toolkit.gui.widgets.preview_widget import PanelPreviewWidget


def _mouse(kind, x, y, button=Qt.MouseButton.LeftButton):
    point = QPointF(x, y)
    buttons = Qt.MouseButton.NoButton if kind == QEvent.Type.MouseButtonRelease else Qt.MouseButton.LeftButton
    return QMouseEvent(kind, point, point, button, buttons, Qt.KeyboardModifier.NoModifier)


def _drag(widget, start, end):
    widget.mousePressEvent(_mouse(QEvent.Type.MouseButtonPress, *start))
    widget.mouseMoveEvent(_mouse(QEvent.Type.MouseMove, *end, button=Qt.MouseButton.NoButton))
    widget.mouseReleaseEvent(_mouse(QEvent.Type.MouseButtonRelease, *end))


@pytest.fixture
def session(panel_image):
    session = EditingSession()
    session.set_images([panel_image] * 4)
    session.select_layout("4-grid")
    session.renderer.set_display_width(400)
    return session


@pytest.fixture
def widget(qtbot, session):
    widget = PanelPreviewWidget(session)
    qtbot.addWidget(widget)
    return widget


class TestPreviewDrag:

    def test_drag_moves_pressed_panel(self, widget, session):
        _drag(widget, (100, 100), (110, 95))

        assert session.placements.get(0).offset_x == pytest.approx(20)
        assert session.placements.get(0).offset_y == pytest.approx(-10)
        assert session.state is SessionState.PREVIEWING

    def test_press_selects_panel_and_emits(self, widget, qtbot):
        with qtbot.waitSignal(widget.panelSelected, timeout=1000) as blocker:
            widget.mousePressEvent(_mouse(QEvent.Type.MouseButtonPress, 300, 450))

        assert blocker.args == [3]
        assert widget.selected_panel == 3

    def test_move_emits_placement_changed(self, widget, qtbot):
        widget.mousePressEvent(_mouse(QEvent.Type.MouseButtonPress, 300, 100))

        with qtbot.waitSignal(widget.placementChanged, timeout=1000) as blocker:
            widget.mouseMoveEvent(_mouse(QEvent.Type.MouseMove, 305, 100, button=Qt.MouseButton.NoButton))

        assert blocker.args == [1]

    def test_right_button_does_not_drag(self, widget, session):
        widget.mousePressEvent(_mouse(QEvent.Type.MouseButtonPress, 100, 100, button=Qt.MouseButton.RightButton))
        widget.mouseMoveEvent(_mouse(QEvent.Type.MouseMove, 150, 100, button=Qt.MouseButton.NoButton))

        assert session.placements.get(0).is_default

    def test_drag_ignored_while_export_pending(self, widget, session):
        session.export()

        _drag(widget, (100, 100), (140, 100))

        assert session.placements.get(0).is_default
        assert session.state is SessionState.EXPORT_PENDING

    def test_drag_ignored_while_busy(self, widget, session):
        session._busy = True

        _drag(widget, (100, 100), (140, 100))

        assert session.placements.get(0).is_default


class TestPreviewPaint:

    def test_paint_without_layout(self, qtbot):
        widget = PanelPreviewWidget(EditingSession())
        qtbot.addWidget(widget)
        widget.resize(200, 300)

        assert not widget.grab().isNull()

    def test_paint_with_selection_and_markers(self, widget):
        widget.resize(400, 600)
        widget.set_selected_panel(0)

        assert not widget.grab().isNull()

    def test_height_for_width_keeps_page_aspect(self, widget):
        assert widget.heightForWidth(200) == 300
        assert widget.heightForWidth(1000) == 600

    def test_refresh_fits_renderer_to_widget(self, widget, session):
        widget.resize(300, 450)
        widget.refresh()

        assert session.renderer.display_width == 300
