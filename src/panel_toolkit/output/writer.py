"""
Module: output.writer

Purpose:
    Encode exported page bitmaps for persistence. The engine itself
    never touches storage; accepted exports are handed to an external
    callback as encoded bytes.

Key Functions:
    - encode_bitmap(): PIL image to PNG (or other) bytes
    - save_bitmap(): Write a bitmap to disk

Dependencies:
    - PIL: Image encoding

Used By:
    - compositor.session: accept() persistence payload
    - cli: compose --output
"""

from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path

from PIL import Image

logger = logging.getLogger(__name__)

DEFAULT_FORMAT = "PNG"


def encode_bitmap(image: Image.Image, format: str = DEFAULT_FORMAT) -> bytes:
    """
    Encode an exported page.

    Args:
        image: Page bitmap
        format: PIL format name (PNG by default)

    Returns:
        Encoded image bytes
    """
    if format.upper() in ("JPEG", "JPG") and image.mode != "RGB":
        image = image.convert("RGB")

    buf = BytesIO()
    image.save(buf, format=format)
    return buf.getvalue()


def save_bitmap(image: Image.Image, path: Path) -> Path:
    """Write a page bitmap; the format follows the file extension."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fmt = Image.registered_extensions().get(path.suffix.lower(), DEFAULT_FORMAT)
    path.write_bytes(encode_bitmap(image, fmt))

    logger.info(f"Saved {image.width}x{image.height} page to {path}")
    return path
