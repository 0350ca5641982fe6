"""Top-level package for the panel page toolkit.

Provides subpackages:
- panel_toolkit.catalog – layout template catalog and thumbnails
- panel_toolkit.geometry – polygon mapping, inset, centroid, content bounds
- panel_toolkit.compositor – placements, renderers, export and editing session
- panel_toolkit.output – bitmap encoding and page book output
- panel_toolkit.gui – Qt preview and editor widgets
"""

def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        try:
            content = pyproject.read_text()
            for line in content.splitlines():
                if line.strip().startswith("version"):
                    # Parse: version = "0.3.0"
                    return line.split("=")[1].strip().strip('"').strip("'")
        except OSError:
            pass

    from importlib.metadata import PackageNotFoundError, version as pkg_version
    try:
        return pkg_version("panel-toolkit")
    except PackageNotFoundError:
        return "0.0.0"

__version__ = _get_version()
__all__: list[str] = ["__version__"]
