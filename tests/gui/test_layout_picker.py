"""Tests for the layout picker widget."""

from PIL import Image

from panel_toolkit.catalog import LayoutCatalog, default_catalog
from panel_toolkit.gui.widgets.layout_picker import LayoutPicker, pil_to_qimage


class TestLayoutPicker:

    def test_set_panel_count_shows_one_button_per_template(self, qtbot):
        picker = LayoutPicker()
        qtbot.addWidget(picker)

        picker.set_panel_count(4)

        expected = [t.id for t in default_catalog().templates_for_panel_count(4)]
        assert list(picker.buttons) == expected
        assert picker.summary_label.text() == f"{len(expected)} layouts available for 4 panels"
        assert picker.empty_label.isHidden()

    def test_changing_panel_count_replaces_buttons(self, qtbot):
        picker = LayoutPicker()
        qtbot.addWidget(picker)

        picker.set_panel_count(4)
        picker.set_panel_count(2)

        assert "4-grid" not in picker.buttons
        assert "2-stacked" in picker.buttons

    def test_no_templates_shows_empty_message(self, qtbot):
        only_full = LayoutCatalog([default_catalog().get("1-full")])
        picker = LayoutPicker(only_full)
        qtbot.addWidget(picker)

        picker.set_panel_count(3)

        assert picker.buttons == {}
        assert picker.empty_label.text() == "No layouts available for 3 panels."

    def test_click_emits_template_id(self, qtbot):
        picker = LayoutPicker()
        qtbot.addWidget(picker)
        picker.set_panel_count(2)

        with qtbot.waitSignal(picker.layoutSelected, timeout=1000) as blocker:
            picker.buttons["2-diagonal"].click()

        assert blocker.args == ["2-diagonal"]

    def test_set_selected_checks_button(self, qtbot):
        picker = LayoutPicker()
        qtbot.addWidget(picker)
        picker.set_panel_count(4)

        picker.set_selected("4-rows")

        assert picker.buttons["4-rows"].isChecked()
        assert not picker.buttons["4-grid"].isChecked()


def test_pil_to_qimage_keeps_size_and_colour():
    qimage = pil_to_qimage(Image.new("RGB", (7, 5), (10, 20, 30)))

    assert (qimage.width(), qimage.height()) == (7, 5)
    color = qimage.pixelColor(3, 2)
    assert (color.red(), color.green(), color.blue()) == (10, 20, 30)
