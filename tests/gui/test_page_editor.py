"""Tests for the page editor widget."""

import logging

import pytest

from panel_toolkit.compositor import EditingSession, SessionState
from panel_toolkit.compositor import export as export_module
from panel_toolkit.gui.widgets.editor import PageEditor


@pytest.fixture
def stored():
    return []


@pytest.fixture
def editor(qtbot, stored, panel_image):
    session = EditingSession()
    session.set_images([panel_image] * 4)
    editor = PageEditor(session, persist=lambda png: stored.append(png) or "saved")
    qtbot.addWidget(editor)
    return editor


def _select(editor, template_id="4-grid"):
    editor.picker.buttons[template_id].click()


class TestLayoutChoice:

    def test_initial_controls_without_layout(self, editor):
        assert editor.session.state is SessionState.NO_LAYOUT_SELECTED
        assert not editor.export_btn.isEnabled()
        assert not editor.gutter_spin.isEnabled()
        assert "4-grid" in editor.picker.buttons

    def test_picking_layout_selects_it_in_session(self, editor):
        _select(editor)

        assert editor.session.template.id == "4-grid"
        assert editor.export_btn.isEnabled()
        assert editor.gutter_spin.isEnabled()

    def test_panel_count_change_refreshes_picker(self, editor):
        editor.panel_count_spin.setValue(2)
        assert "2-stacked" in editor.picker.buttons
        assert "4-grid" not in editor.picker.buttons

    def test_scale_controls_need_a_selected_panel(self, editor):
        _select(editor)
        assert not editor.scale_slider.isEnabled()

        editor.preview.set_selected_panel(1)
        editor._on_panel_selected(1)

        assert editor.scale_slider.isEnabled()
        editor.scale_slider.setValue(150)
        assert editor.session.placements.get(1).scale == pytest.approx(1.5)

    def test_gutter_spin_updates_session(self, editor):
        _select(editor)
        editor.gutter_spin.setValue(6)
        assert editor.session.gutter.width_px == 6

    def test_markers_checkbox_toggles_renderer(self, editor):
        _select(editor)
        editor.markers_check.setChecked(False)
        assert editor.session.renderer.markers_visible is False

    def test_markers_unchecked_before_layout_stay_hidden(self, editor):
        editor.markers_check.setChecked(False)

        _select(editor)

        assert editor.session.renderer.markers_visible is False

    def test_marker_choice_survives_layout_change(self, editor):
        _select(editor)
        editor.markers_check.setChecked(False)

        _select(editor, "4-rows")

        assert editor.session.renderer.markers_visible is False


class TestExportFlow:

    def test_export_then_accept_persists_png(self, editor, qtbot, stored):
        _select(editor)

        with qtbot.waitSignal(editor.exported, timeout=1000) as exported:
            editor.export_btn.click()
        assert exported.args[0].size == (800, 1200)
        assert editor.accept_btn.isEnabled()
        assert not editor.export_btn.isEnabled()
        assert not editor.gutter_spin.isEnabled()

        with qtbot.waitSignal(editor.accepted, timeout=1000) as accepted:
            editor.accept_btn.click()

        assert accepted.args == ["saved"]
        assert stored[0].startswith(b"\x89PNG")
        assert editor.session.state is SessionState.ACCEPTED
        assert not editor.export_btn.isEnabled()
        assert not editor.picker.isEnabled()

    def test_reject_reenables_editing(self, editor):
        _select(editor)
        editor.export_btn.click()

        editor.reject_btn.click()

        assert editor.session.state is SessionState.REJECTED
        assert editor.gutter_spin.isEnabled()
        assert not editor.accept_btn.isEnabled()
        assert editor.export_btn.isEnabled()

    def test_export_failure_reports_and_keeps_editing(self, editor, qtbot, monkeypatch):
        _select(editor)

        def fail(*args, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr(export_module, "rasterize_scene", fail)

        with qtbot.waitSignal(editor.exportFailed, timeout=1000) as failed:
            editor.export_btn.click()

        assert "boom" in failed.args[0]
        assert editor.status_label.text().startswith("Export failed")
        assert editor.session.state is SessionState.REJECTED
        assert editor.gutter_spin.isEnabled()

    def test_busy_session_disables_controls(self, editor):
        _select(editor)
        editor.session._busy = True

        editor._update_controls()

        assert not editor.export_btn.isEnabled()
        assert not editor.gutter_spin.isEnabled()
        assert not editor.reset_all_btn.isEnabled()
        assert not editor.picker.isEnabled()


class TestStatusLine:

    def test_engine_logs_reach_status_label(self, editor, caplog):
        caplog.set_level(logging.INFO, logger="panel_toolkit")

        _select(editor)
        editor._poll_status()

        assert "Selected layout 4-grid" in editor.status_label.text()

    def test_warnings_are_prefixed(self, editor, caplog):
        caplog.set_level(logging.INFO, logger="panel_toolkit")

        logging.getLogger("panel_toolkit.compositor").warning("disk nearly full")
        editor._poll_status()

        assert editor.status_label.text() == "Warning: disk nearly full"
