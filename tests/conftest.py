import os
import sys
from pathlib import Path

import pytest
from PIL import Image

# Add src to sys.path so we can import panel_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

# Qt widgets are tested without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


def make_gradient(width: int = 120, height: int = 180, mode: str = "RGB") -> Image.Image:
    """Image with distinct pixels everywhere so placement changes are visible."""
    img = Image.new(mode, (width, height))
    pixels = img.load()
    for y in range(height):
        for x in range(width):
            r = (x * 255) // max(1, width - 1)
            g = (y * 255) // max(1, height - 1)
            pixels[x, y] = (r, g, 128, 255) if mode == "RGBA" else (r, g, 128)
    return img


# Common test fixtures
@pytest.fixture
def sample_image(tmp_path: Path):
    """Create a simple test image on disk."""
    img = Image.new("RGB", (200, 100), color="white")
    img_path = tmp_path / "sample.png"
    img.save(img_path)
    return img_path


@pytest.fixture
def gradient_image() -> Image.Image:
    return make_gradient()


@pytest.fixture
def panel_image(gradient_image):
    from panel_toolkit.compositor import PanelImage

    return PanelImage.from_pil(gradient_image, source="gradient")


@pytest.fixture
def grid_template():
    from panel_toolkit.catalog import default_catalog

    return default_catalog().get("4-grid")


@pytest.fixture
def full_template():
    from panel_toolkit.catalog import default_catalog

    return default_catalog().get("1-full")
