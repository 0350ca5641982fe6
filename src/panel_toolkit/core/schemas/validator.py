"""
Schema Validation Utilities

Validates layout catalog JSON before it is turned into LayoutTemplate
objects.

Two layers of checks:
- JSON Schema (`layout_catalog.schema.json`) for structure and ranges
- Invariant checks jsonschema cannot express (declared panel count
  matches the panel list, template ids are unique)
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema


# Schema version constants
CATALOG_SCHEMA_VERSION = 1


# Load schemas lazily
_SCHEMAS: dict[str, dict] = {}


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


class ValidationError(Exception):
    """Raised when data fails schema validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def validate_catalog(data: dict[str, Any]) -> None:
    """
    Validate layout catalog data.

    Args:
        data: Parsed catalog JSON ({"version": ..., "templates": [...]})

    Raises:
        ValidationError: If data is invalid
    """
    schema = _load_schema("layout_catalog")
    try:
        jsonschema.validate(data, schema)
    except jsonschema.ValidationError as e:
        raise ValidationError(
            f"Schema validation failed: {e.message}",
            path=".".join(str(p) for p in e.absolute_path),
            errors=[e.message],
        ) from e

    version = data["version"]
    if version != CATALOG_SCHEMA_VERSION:
        raise ValidationError(
            f"Unsupported catalog version: {version} (expected {CATALOG_SCHEMA_VERSION})",
            path="version",
        )

    seen_ids: set[str] = set()
    for i, template in enumerate(data["templates"]):
        path = f"templates[{i}]"
        template_id = template["id"]
        if template_id in seen_ids:
            raise ValidationError(
                f"Duplicate template id: {template_id!r}",
                path=f"{path}.id",
            )
        seen_ids.add(template_id)

        declared = template["panelCount"]
        actual = len(template["panels"])
        if declared != actual:
            raise ValidationError(
                f"Template {template_id!r} declares {declared} panels but defines {actual}",
                path=f"{path}.panels",
            )
