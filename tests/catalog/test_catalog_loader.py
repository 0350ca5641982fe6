"""
Tests for loading and querying the layout catalog.
"""

import json
from pathlib import Path

import pytest

from panel_toolkit.catalog import (
    MAX_PANELS,
    MIN_PANELS,
    CatalogError,
    LayoutCatalog,
    TemplateNotFoundError,
    default_catalog,
    load_catalog,
    parse_catalog,
    templates_for_panel_count,
)


def _write_catalog(path: Path, templates: list) -> Path:
    path.write_text(json.dumps({"version": 1, "templates": templates}), encoding="utf-8")
    return path


class TestDefaultCatalog:
    """The bundled catalog."""

    def test_every_panel_count_has_templates(self):
        catalog = default_catalog()
        assert catalog.panel_counts() == list(range(MIN_PANELS, MAX_PANELS + 1))

    def test_every_template_has_matching_panel_count(self):
        for template in default_catalog():
            assert len(template.panels) == template.panel_count

    def test_templates_for_panel_count_when_two_then_declared_order(self):
        ids = [t.id for t in templates_for_panel_count(2)]
        assert ids == ["2-stacked", "2-diagonal", "2-columns"]

    def test_templates_for_panel_count_only_returns_that_count(self):
        for n in range(MIN_PANELS, MAX_PANELS + 1):
            assert all(t.panel_count == n for t in templates_for_panel_count(n))

    @pytest.mark.parametrize("n", [0, 10, -1])
    def test_templates_for_panel_count_when_out_of_range_then_raises(self, n):
        with pytest.raises(ValueError):
            templates_for_panel_count(n)

    def test_default_catalog_is_cached(self):
        assert default_catalog() is default_catalog()

    def test_get_when_unknown_id_then_raises_not_found(self):
        with pytest.raises(TemplateNotFoundError):
            default_catalog().get("no-such-layout")

    def test_get_when_known_id_then_returns_template(self):
        assert default_catalog().get("4-grid").panel_count == 4
        assert "4-grid" in default_catalog()


class TestLoadCatalog:
    """Loading catalogs from disk."""

    def test_load_when_file_missing_then_catalog_error(self, tmp_path):
        with pytest.raises(CatalogError, match="not found"):
            load_catalog(tmp_path / "missing.json")

    def test_load_when_not_json_then_catalog_error(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(CatalogError, match="not valid JSON"):
            load_catalog(path)

    def test_load_when_panel_count_mismatch_then_catalog_error(self, tmp_path):
        path = _write_catalog(tmp_path / "bad.json", [
            {"id": "x", "name": "X", "panelCount": 2,
             "panels": [{"points": [[0, 0], [100, 0], [100, 100]]}]},
        ])

        with pytest.raises(CatalogError):
            load_catalog(path)

    def test_load_when_valid_then_empty_counts_allowed(self, tmp_path):
        path = _write_catalog(tmp_path / "one.json", [
            {"id": "tri", "name": "Triangle", "panelCount": 1,
             "panels": [{"points": [[0, 0], [100, 0], [50, 100]]}]},
        ])

        catalog = load_catalog(path)

        assert len(catalog) == 1
        assert catalog.templates_for_panel_count(5) == []

    def test_parse_catalog_wraps_validation_errors(self):
        with pytest.raises(CatalogError, match="Invalid layout catalog"):
            parse_catalog({"version": 1})

    def test_layout_catalog_when_duplicate_ids_then_raises(self):
        template = default_catalog().get("1-full")
        with pytest.raises(CatalogError):
            LayoutCatalog([template, template])
