"""
Module: catalog.loader

Purpose:
    Load and query the layout template catalog. Templates are static,
    versionable JSON data; the bundled catalog ships as templates.json
    next to this module.

Key Functions:
    - load_catalog(): Load and validate a catalog file
    - default_catalog(): Cached bundled catalog
    - templates_for_panel_count(): Templates with a given panel count

Key Classes:
    - LayoutCatalog: Indexed, read-only template collection
    - CatalogError: Catalog cannot be loaded
    - TemplateNotFoundError: Unknown template id

Dependencies:
    - json (std)
    - panel_toolkit.core.schemas: Catalog validation

Used By:
    - compositor.session: Layout selection by id
    - catalog.preview: Thumbnail rendering
    - cli: `layouts` command
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

from panel_toolkit.core.models import LayoutTemplate
from panel_toolkit.core.schemas import ValidationError, validate_catalog

logger = logging.getLogger(__name__)

MIN_PANELS = 1
MAX_PANELS = 9
DEFAULT_CATALOG_PATH = Path(__file__).parent / "templates.json"


class CatalogError(Exception):
    """Layout catalog could not be loaded or is invalid."""
    pass


class TemplateNotFoundError(CatalogError):
    """No template with the requested id."""
    pass


class LayoutCatalog:
    """
    Read-only collection of layout templates indexed by id.

    Templates keep the order they were declared in, which is the order
    they are offered to the user.

    Example:
        >>> catalog = default_catalog()
        >>> [t.id for t in catalog.templates_for_panel_count(2)]
        ['2-stacked', '2-diagonal', '2-columns']
    """

    def __init__(self, templates: Iterable[LayoutTemplate], version: int = 1) -> None:
        self._templates: List[LayoutTemplate] = list(templates)
        self._by_id = {t.id: t for t in self._templates}
        self.version = version
        if len(self._by_id) != len(self._templates):
            raise CatalogError("Duplicate template ids in catalog")

    def __len__(self) -> int:
        return len(self._templates)

    def __iter__(self) -> Iterator[LayoutTemplate]:
        return iter(self._templates)

    def __contains__(self, template_id: object) -> bool:
        return template_id in self._by_id

    def get(self, template_id: str) -> LayoutTemplate:
        """
        Look up a template by id.

        Raises:
            TemplateNotFoundError: If no template has this id
        """
        template = self._by_id.get(template_id)
        if template is None:
            raise TemplateNotFoundError(f"Unknown layout template: {template_id!r}")
        return template

    def templates_for_panel_count(self, n: int) -> List[LayoutTemplate]:
        """
        All templates whose panel count equals n.

        An empty list is a valid result: callers must handle the
        "no layouts available" case.

        Raises:
            ValueError: If n is outside the supported 1-9 range
        """
        if not MIN_PANELS <= n <= MAX_PANELS:
            raise ValueError(f"panel count must be {MIN_PANELS}-{MAX_PANELS}: {n}")
        matches = [t for t in self._templates if t.panel_count == n]
        logger.debug(f"{len(matches)} layouts available for {n} panels")
        return matches

    def panel_counts(self) -> List[int]:
        """Sorted panel counts that have at least one template."""
        return sorted({t.panel_count for t in self._templates})


def parse_catalog(data: dict) -> LayoutCatalog:
    """
    Build a catalog from already-parsed JSON data.

    Raises:
        CatalogError: If the data fails validation
    """
    try:
        validate_catalog(data)
        templates = [LayoutTemplate.from_dict(t) for t in data["templates"]]
    except ValidationError as e:
        location = f" at {e.path}" if e.path else ""
        raise CatalogError(f"Invalid layout catalog{location}: {e}") from e
    except ValueError as e:
        raise CatalogError(f"Invalid layout template: {e}") from e
    return LayoutCatalog(templates, version=data["version"])


def load_catalog(path: Optional[Path] = None) -> LayoutCatalog:
    """
    Load a layout catalog from a JSON file.

    Args:
        path: Catalog file (defaults to the bundled templates.json)

    Returns:
        Validated LayoutCatalog

    Raises:
        CatalogError: If the file is missing, unreadable or invalid
    """
    path = path or DEFAULT_CATALOG_PATH
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise CatalogError(f"Catalog not found: {path}") from e
    except json.JSONDecodeError as e:
        raise CatalogError(f"Catalog is not valid JSON: {path}: {e}") from e

    catalog = parse_catalog(data)
    logger.info(f"Loaded {len(catalog)} layout templates from {path.name}")
    return catalog


@lru_cache(maxsize=1)
def default_catalog() -> LayoutCatalog:
    """Bundled catalog, loaded once."""
    return load_catalog(DEFAULT_CATALOG_PATH)


def templates_for_panel_count(n: int) -> List[LayoutTemplate]:
    """Templates from the bundled catalog with exactly n panels."""
    return default_catalog().templates_for_panel_count(n)
