"""
Module: geometry.content

Purpose:
    Locate painted content in a rendered alpha buffer. Returns the
    minimal rectangle enclosing every pixel whose alpha is above a
    threshold, used to anchor overlays next to a painted region.

Key Functions:
    - bounds_of_visible_content(): Scan an alpha buffer
    - alpha_mask_of(): Alpha channel of a PIL image as an array

Dependencies:
    - numpy: Vectorised row/column scans
    - PIL: Image alpha extraction

Used By:
    - compositor.renderer: Visible extent of a clipped panel image
"""

from __future__ import annotations

from typing import Optional

import numpy as np
from PIL import Image

from panel_toolkit.core.models import ContentBounds


def alpha_mask_of(image: Image.Image) -> np.ndarray:
    """
    Alpha channel of an image as a (height, width) uint8 array.

    Images without an alpha channel are fully opaque.
    """
    if "A" in image.getbands():
        return np.asarray(image.getchannel("A"), dtype=np.uint8)
    return np.full((image.height, image.width), 255, dtype=np.uint8)


def bounds_of_visible_content(
    alpha_mask,
    width: int,
    height: int,
    alpha_threshold: int = 0,
) -> Optional[ContentBounds]:
    """
    Minimal rectangle enclosing pixels with alpha above alpha_threshold.

    Args:
        alpha_mask: Alpha values, either a flat buffer of width*height
            values (bytes or sequence, row-major) or a (height, width) array
        width: Buffer width in pixels
        height: Buffer height in pixels
        alpha_threshold: Pixels must be strictly above this value

    Returns:
        ContentBounds (with .center), or None when no pixel qualifies

    Raises:
        ValueError: If the buffer size does not match width * height

    Example:
        >>> mask = np.zeros((10, 10), dtype=np.uint8)
        >>> mask[2:4, 5:8] = 255
        >>> bounds_of_visible_content(mask, 10, 10)
        ContentBounds(5, 2, 8, 4)
    """
    if isinstance(alpha_mask, (bytes, bytearray, memoryview)):
        alpha = np.frombuffer(alpha_mask, dtype=np.uint8)
    else:
        alpha = np.asarray(alpha_mask)

    if alpha.size != width * height:
        raise ValueError(
            f"alpha buffer has {alpha.size} values, expected {width}x{height}"
        )
    alpha = alpha.reshape(height, width)

    visible = alpha > alpha_threshold
    if not visible.any():
        return None

    rows = np.flatnonzero(visible.any(axis=1))
    cols = np.flatnonzero(visible.any(axis=0))
    return ContentBounds(
        left=int(cols[0]),
        top=int(rows[0]),
        right=int(cols[-1]) + 1,
        bottom=int(rows[-1]) + 1,
    )
