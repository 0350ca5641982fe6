"""
Module: output

Purpose:
    Output adapters for exported pages: encoded bytes, files on disk,
    a PDF book, and marker drawing shared with the rasterizer.

Key Functions:
    - encode_bitmap(): Page bitmap to PNG bytes
    - save_bitmap(): Page bitmap to file
    - write_pages_pdf(): Pages to a PDF book
    - draw_marker(): Numbered panel badge

Dependencies:
    - PIL: Image handling
    - reportlab: PDF generation
"""

from .overlay import calculate_center_position, draw_marker, load_font
from .pdf import write_pages_pdf
from .writer import encode_bitmap, save_bitmap

__all__ = [
    "encode_bitmap",
    "save_bitmap",
    "write_pages_pdf",
    "draw_marker",
    "calculate_center_position",
    "load_font",
]
