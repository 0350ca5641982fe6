"""
Module: catalog

Purpose:
    Layout template catalog: named panel-shape sets per panel count,
    plus preview helpers for the layout picker.

Key Functions:
    - templates_for_panel_count(): Lookup by panel count
    - default_catalog(): Bundled catalog
    - to_preview_path(): SVG outline of a panel
    - render_layout_thumbnail(): PIL thumbnail of a template

Key Classes:
    - LayoutCatalog: Indexed template collection
    - CatalogError / TemplateNotFoundError
"""

from .loader import (
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
from .preview import render_layout_thumbnail, to_preview_path, to_preview_svg

__all__ = [
    "MIN_PANELS",
    "MAX_PANELS",
    "CatalogError",
    "TemplateNotFoundError",
    "LayoutCatalog",
    "default_catalog",
    "load_catalog",
    "parse_catalog",
    "templates_for_panel_count",
    "to_preview_path",
    "to_preview_svg",
    "render_layout_thumbnail",
]
