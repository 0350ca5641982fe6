"""
Module: cli

Purpose:
    Command line access to the catalog and a headless compose/export of
    one page.

        python -m panel_toolkit layouts --panels 4
        python -m panel_toolkit compose --layout 4-grid --image a.png b.png \\
            --gutter 8 --scale 1=1.4 --offset 1=-20,15 --output page.png

Key Functions:
    - main(): Entry point, returns the exit code
    - build_parser(): Argument parser

Dependencies:
    - argparse (std)
    - catalog, compositor, output

Used By:
    - __main__: python -m panel_toolkit
    - pyproject: panel-toolkit console script
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence, Tuple

from panel_toolkit import __version__
from panel_toolkit.catalog import (
    MAX_PANELS,
    MIN_PANELS,
    CatalogError,
    load_catalog,
    default_catalog,
    render_layout_thumbnail,
)
from panel_toolkit.compositor import (
    CanvasConfig,
    EditingSession,
    ExportError,
    ImageLoadFailure,
)
from panel_toolkit.output import save_bitmap, write_pages_pdf

logger = logging.getLogger(__name__)


def _parse_scale(text: str) -> Tuple[int, float]:
    """Parse "PANEL=SCALE" (panel numbers start at 1)."""
    try:
        panel, value = text.split("=", 1)
        return int(panel) - 1, float(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected PANEL=SCALE, got {text!r}") from e


def _parse_offset(text: str) -> Tuple[int, float, float]:
    """Parse "PANEL=DX,DY" in logical pixels (panel numbers start at 1)."""
    try:
        panel, value = text.split("=", 1)
        dx, dy = value.split(",", 1)
        return int(panel) - 1, float(dx), float(dy)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected PANEL=DX,DY, got {text!r}") from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="panel-toolkit",
        description="Compose multi-panel pages from polygon layouts",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug logging")
    parser.add_argument("--catalog", type=Path, help="Layout catalog JSON (default: bundled)")
    sub = parser.add_subparsers(dest="command", required=True)

    layouts = sub.add_parser("layouts", help="List layouts for a panel count")
    layouts.add_argument("--panels", type=int, required=True, help=f"Panel count ({MIN_PANELS}-{MAX_PANELS})")
    layouts.add_argument("--thumbnails", type=Path, help="Write a PNG thumbnail per layout to this directory")

    compose = sub.add_parser("compose", help="Compose and export one page")
    compose.add_argument("--layout", required=True, help="Layout id (see `layouts`)")
    compose.add_argument("--image", nargs="*", default=[], type=Path, help="Panel images in panel order")
    compose.add_argument("--gutter", type=float, default=0.0, help="Gutter width in logical pixels")
    compose.add_argument("--gutter-color", default="#000000", help="Gutter colour")
    compose.add_argument("--scale", action="append", default=[], type=_parse_scale, metavar="PANEL=SCALE")
    compose.add_argument("--offset", action="append", default=[], type=_parse_offset, metavar="PANEL=DX,DY")
    compose.add_argument("--width", type=int, help="Export width in pixels (default: canvas width)")
    compose.add_argument("--output", type=Path, default=Path("page.png"), help="Output image")
    compose.add_argument("--pdf", type=Path, help="Also write the page as a PDF")
    return parser


def _cmd_layouts(args: argparse.Namespace) -> int:
    catalog = load_catalog(args.catalog) if args.catalog else default_catalog()
    templates = catalog.templates_for_panel_count(args.panels)

    if not templates:
        print(f"No layouts available for {args.panels} panels.")
        return 0

    print(f"{len(templates)} layouts available for {args.panels} panels")
    for template in templates:
        print(f"  {template.id:<16} {template.name}")

    if args.thumbnails:
        args.thumbnails.mkdir(parents=True, exist_ok=True)
        for template in templates:
            path = args.thumbnails / f"{template.id}.png"
            render_layout_thumbnail(template).save(path)
        logger.info(f"Wrote {len(templates)} thumbnails to {args.thumbnails}")
    return 0


def _cmd_compose(args: argparse.Namespace) -> int:
    catalog = load_catalog(args.catalog) if args.catalog else default_catalog()
    session = EditingSession(catalog=catalog, config=CanvasConfig())

    results = asyncio.run(session.load_images(args.image))
    for number, result in enumerate(results, start=1):
        if isinstance(result, ImageLoadFailure):
            logger.warning(f"Panel {number}: {result.reason}")

    template = session.select_layout(args.layout)
    session.set_gutter(width=args.gutter, color=args.gutter_color)

    for index, scale in args.scale:
        if not 0 <= index < template.panel_count:
            raise ValueError(f"--scale panel {index + 1} is outside 1-{template.panel_count}")
        session.set_scale(index, scale)
    for index, dx, dy in args.offset:
        if not 0 <= index < template.panel_count:
            raise ValueError(f"--offset panel {index + 1} is outside 1-{template.panel_count}")
        session.adjust_offset(index, dx, dy)

    bitmap = session.export(args.width)
    output = session.accept(lambda png: _write(args.output, png))
    if args.pdf:
        write_pages_pdf([bitmap], args.pdf)
    print(f"Wrote {output}")
    return 0


def _write(path: Path, png: bytes) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(png)
    return path


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
    )

    handlers = {"layouts": _cmd_layouts, "compose": _cmd_compose}
    try:
        return handlers[args.command](args)
    except (CatalogError, ExportError, ValueError) as e:
        logger.error(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
