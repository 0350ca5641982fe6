"""
Tests for WYSIWYG export.
"""

import numpy as np
import pytest

from panel_toolkit.compositor import (
    ExportError,
    ExportRenderer,
    InteractiveRenderer,
    PlacementMap,
    export_pages,
)
from panel_toolkit.core.models import GutterStyle

PLACEHOLDER_RGB = (0x1A, 0x1A, 0x2E)


def _edited_renderer(template, images, display_width) -> InteractiveRenderer:
    placements = PlacementMap()
    placements.set_scale(0, 1.3)
    placements.adjust_offset(0, 25, -40)
    placements.set_scale(1, 0.6)
    placements.adjust_offset(1, -120, 33.5)
    return InteractiveRenderer(
        template,
        placements,
        images=images,
        gutter=GutterStyle("#f4f0e6", 8),
        display_width=display_width,
    )


class TestExportRenderer:

    def test_export_when_default_then_logical_canvas_size(self, grid_template):
        renderer = InteractiveRenderer(grid_template, PlacementMap(), display_width=400)
        exporter = ExportRenderer(renderer)

        assert exporter.pixel_ratio == 2.0
        assert exporter.export().size == (800, 1200)

    def test_export_when_target_width_then_aspect_kept(self, grid_template):
        renderer = InteractiveRenderer(grid_template, PlacementMap(), display_width=300)
        exporter = ExportRenderer(renderer, target_width=1600)

        assert exporter.target_size == (1600, 2400)
        assert exporter.export().size == (1600, 2400)

    def test_export_is_independent_of_display_width(self, grid_template, panel_image):
        images = [panel_image, panel_image]
        at_400 = ExportRenderer(_edited_renderer(grid_template, images, 400)).export()
        at_300 = ExportRenderer(_edited_renderer(grid_template, images, 300)).export()

        a = np.asarray(at_400, dtype=np.int16)
        b = np.asarray(at_300, dtype=np.int16)
        assert a.shape == b.shape
        assert np.abs(a - b).max() <= 1

    def test_export_hides_markers_and_restores_them(self, full_template):
        renderer = InteractiveRenderer(full_template, PlacementMap(), display_width=400)
        assert renderer.markers_visible

        bitmap = ExportRenderer(renderer).export()

        assert bitmap.getpixel((392, 600)) == PLACEHOLDER_RGB
        assert renderer.markers_visible
        assert renderer.interactive

    def test_export_keeps_markers_hidden_if_they_were_hidden(self, full_template):
        renderer = InteractiveRenderer(full_template, PlacementMap())
        renderer.markers_visible = False

        ExportRenderer(renderer).export()

        assert renderer.markers_visible is False

    def test_export_when_some_panels_empty_then_placeholders(self, grid_template, panel_image):
        renderer = InteractiveRenderer(grid_template, PlacementMap(), images=[panel_image, panel_image])

        bitmap = ExportRenderer(renderer).export()

        assert bitmap.getpixel((200, 900)) == PLACEHOLDER_RGB
        assert bitmap.getpixel((600, 900)) == PLACEHOLDER_RGB

    def test_export_when_rasterizer_fails_then_export_error_and_state_restored(
        self, grid_template, panel_image, monkeypatch
    ):
        renderer = _edited_renderer(grid_template, [panel_image], 400)
        before = renderer.placements.snapshot()

        def fail(*args, **kwargs):
            raise MemoryError("canvas too large")

        monkeypatch.setattr("panel_toolkit.compositor.export.rasterize_scene", fail)

        with pytest.raises(ExportError, match="canvas too large"):
            ExportRenderer(renderer).export()

        assert renderer.markers_visible
        assert renderer.interactive
        assert renderer.placements.snapshot() == before

    def test_target_width_when_negative_then_raises(self, grid_template):
        renderer = InteractiveRenderer(grid_template, PlacementMap())
        with pytest.raises(ValueError):
            ExportRenderer(renderer, target_width=-5)


class TestExportPages:

    def test_export_pages_returns_one_bitmap_per_page(self, grid_template, full_template):
        renderers = [
            InteractiveRenderer(grid_template, PlacementMap()),
            InteractiveRenderer(full_template, PlacementMap()),
        ]

        bitmaps = export_pages(renderers, target_width=400)

        assert [b.size for b in bitmaps] == [(400, 600), (400, 600)]

    def test_export_pages_runs_in_order(self, grid_template, full_template, monkeypatch):
        from panel_toolkit.compositor import export as export_module

        seen = []
        real = export_module.rasterize_scene

        def recording(scene, pixel_ratio=1.0, **kwargs):
            seen.append(len(scene.panels))
            return real(scene, pixel_ratio, **kwargs)

        monkeypatch.setattr(export_module, "rasterize_scene", recording)

        export_pages([
            InteractiveRenderer(grid_template, PlacementMap()),
            InteractiveRenderer(full_template, PlacementMap()),
        ])

        assert seen == [4, 1]
