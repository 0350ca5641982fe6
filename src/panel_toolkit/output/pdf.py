"""
Module: output.pdf

Purpose:
    Bundle exported page bitmaps into a single PDF book using ReportLab.
    Each bitmap fills one page whose size matches the bitmap at the
    given DPI.

Key Functions:
    - write_pages_pdf(): Main entry point

Dependencies:
    - reportlab: PDF generation
    - PIL: Image handling

Used By:
    - cli: compose --pdf
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Sequence

from PIL import Image
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

logger = logging.getLogger(__name__)

DEFAULT_DPI = 150


def write_pages_pdf(
    bitmaps: Sequence[Image.Image],
    output_path: Path,
    *,
    dpi: int = DEFAULT_DPI,
) -> Path:
    """
    Write page bitmaps to a PDF, one bitmap per page.

    Args:
        bitmaps: Exported pages in reading order
        output_path: Path to write PDF
        dpi: DPI for pixel to point conversion

    Returns:
        The written path

    Raises:
        ValueError: If no bitmaps are given
        OSError: If the PDF cannot be written

    Example:
        >>> write_pages_pdf([page1, page2], Path("book/story.pdf"))
    """
    if not bitmaps:
        raise ValueError("write_pages_pdf requires at least one page")

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    first = bitmaps[0]
    c = canvas.Canvas(
        str(output_path),
        pagesize=(_px_to_pt(first.width, dpi), _px_to_pt(first.height, dpi)),
    )

    for bitmap in bitmaps:
        width_pt = _px_to_pt(bitmap.width, dpi)
        height_pt = _px_to_pt(bitmap.height, dpi)
        c.setPageSize((width_pt, height_pt))
        c.drawImage(_pil_to_reader(bitmap), 0, 0, width=width_pt, height=height_pt)
        c.showPage()

    c.save()

    logger.info(f"Rendered {len(bitmaps)} pages to {output_path}")
    return output_path


def _pil_to_reader(img: Image.Image) -> ImageReader:
    """Convert PIL image to ReportLab ImageReader."""
    if img.mode not in ("RGB", "RGBA", "L"):
        img = img.convert("RGBA")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    buf.seek(0)
    return ImageReader(buf)


def _px_to_pt(px: float, dpi: int = DEFAULT_DPI) -> float:
    """Convert pixels to PDF points (1/72 inch)."""
    return px * 72.0 / dpi
