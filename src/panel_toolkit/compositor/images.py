"""
Module: compositor.images

Purpose:
    Decoded panel images and the asynchronous loading boundary. Image
    decoding is the only async operation in the engine; a failed load
    is a result value, not an exception, so compositing continues with
    a placeholder for that panel.

Key Functions:
    - load_panel_image(): Decode one source off the event loop
    - load_panel_images(): Decode several sources concurrently

Key Classes:
    - PanelImage: Decoded image handle plus natural size
    - ImageLoadFailure: Why a source could not be decoded

Dependencies:
    - PIL: Image decoding
    - asyncio (std): to_thread decoding

Used By:
    - compositor.session: Panel image assignment
    - cli: compose command
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import logging
from dataclasses import dataclass, field
from io import BytesIO
from pathlib import Path
from typing import Sequence, Union

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

ImageSource = Union[bytes, bytearray, str, Path, Image.Image]

DATA_URL_PREFIX = "data:"


@dataclass(frozen=True)
class PanelImage:
    """
    A decoded image ready for compositing.

    Attributes:
        handle: Fully loaded PIL image (RGB or RGBA)
        width: Natural width in pixels
        height: Natural height in pixels
        source: Short description of where it came from (for logs)
    """

    handle: Image.Image = field(repr=False, compare=False)
    width: int
    height: int
    source: str = ""

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Image size must be positive: {self.width}x{self.height}")

    @property
    def aspect_ratio(self) -> float:
        return self.height / self.width

    @property
    def has_alpha(self) -> bool:
        return self.handle.mode == "RGBA"

    @classmethod
    def from_pil(cls, image: Image.Image, source: str = "") -> PanelImage:
        """Wrap an in-memory PIL image, normalising its mode."""
        if image.mode not in ("RGB", "RGBA"):
            has_transparency = image.mode in ("LA", "PA") or "transparency" in image.info
            image = image.convert("RGBA" if has_transparency else "RGB")
        return cls(handle=image, width=image.width, height=image.height, source=source)


@dataclass(frozen=True)
class ImageLoadFailure:
    """A source that could not be decoded. Its panel renders a placeholder."""

    reason: str
    source: str = ""


def describe_source(source: ImageSource) -> str:
    if isinstance(source, (bytes, bytearray)):
        return f"<{len(source)} bytes>"
    if isinstance(source, Image.Image):
        return f"<image {source.width}x{source.height}>"
    text = str(source)
    if text.startswith(DATA_URL_PREFIX):
        return text.split(",", 1)[0] + ",..."
    return text


def decode_data_url(url: str) -> bytes:
    """
    Decode a ``data:<mime>;base64,<payload>`` URL.

    Raises:
        ValueError: If the URL is malformed or not base64 encoded
    """
    header, sep, payload = url.partition(",")
    if not sep or not header.startswith(DATA_URL_PREFIX):
        raise ValueError("malformed data URL")
    if not header.endswith(";base64"):
        raise ValueError("only base64 data URLs are supported")
    try:
        return base64.b64decode(payload, validate=True)
    except binascii.Error as e:
        raise ValueError(f"invalid base64 payload: {e}") from e


def decode_image(source: ImageSource) -> PanelImage:
    """
    Synchronously decode a source into a PanelImage.

    Raises:
        ValueError: Malformed data URL or undecodable bytes
        OSError: Unreadable file
    """
    label = describe_source(source)

    if isinstance(source, Image.Image):
        return PanelImage.from_pil(source.copy(), source=label)

    if isinstance(source, (bytes, bytearray)):
        data = bytes(source)
    elif isinstance(source, str) and source.startswith(DATA_URL_PREFIX):
        data = decode_data_url(source)
    else:
        data = Path(source).read_bytes()

    try:
        with Image.open(BytesIO(data)) as img:
            img.load()
            decoded = img.copy() if img.mode in ("RGB", "RGBA") else img
            return PanelImage.from_pil(decoded, source=label)
    except UnidentifiedImageError as e:
        raise ValueError(f"not a recognised image: {label}") from e


async def load_panel_image(source: ImageSource) -> PanelImage | ImageLoadFailure:
    """
    Decode an image source without blocking the event loop.

    Args:
        source: Raw bytes, a file path, a data URL, or a PIL image

    Returns:
        PanelImage on success, ImageLoadFailure otherwise

    Example:
        >>> result = asyncio.run(load_panel_image(Path("panel1.png")))
        >>> isinstance(result, PanelImage)
        True
    """
    label = describe_source(source)
    try:
        image = await asyncio.to_thread(decode_image, source)
    except (OSError, ValueError) as e:
        logger.warning(f"Could not load panel image {label}: {e}")
        return ImageLoadFailure(reason=str(e), source=label)

    logger.debug(f"Loaded panel image {label} ({image.width}x{image.height})")
    return image


async def load_panel_images(
    sources: Sequence[ImageSource],
) -> list[PanelImage | ImageLoadFailure]:
    """Decode several sources concurrently, preserving order."""
    return list(await asyncio.gather(*(load_panel_image(s) for s in sources)))
