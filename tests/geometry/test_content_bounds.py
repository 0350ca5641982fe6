"""
Tests for the alpha-buffer content scan.
"""

import numpy as np
import pytest
from PIL import Image

from panel_toolkit.geometry import alpha_mask_of, bounds_of_visible_content


class TestBoundsOfVisibleContent:

    def test_bounds_when_block_then_exclusive_right_bottom(self):
        mask = np.zeros((10, 10), dtype=np.uint8)
        mask[2:4, 5:8] = 255

        bounds = bounds_of_visible_content(mask, 10, 10)

        assert bounds.as_tuple() == (5, 2, 8, 4)
        assert bounds.center == (6.5, 3.0)

    def test_bounds_when_fully_transparent_then_none(self):
        assert bounds_of_visible_content(bytes(100), 10, 10) is None

    def test_bounds_when_flat_bytes_then_row_major(self):
        data = bytearray(4 * 3)
        data[1 * 4 + 2] = 200  # row 1, column 2

        bounds = bounds_of_visible_content(bytes(data), 4, 3)

        assert bounds.as_tuple() == (2, 1, 3, 2)

    def test_bounds_when_at_threshold_then_not_visible(self):
        mask = np.full((5, 5), 10, dtype=np.uint8)
        mask[4, 4] = 11

        bounds = bounds_of_visible_content(mask, 5, 5, alpha_threshold=10)

        assert bounds.as_tuple() == (4, 4, 5, 5)

    def test_bounds_when_size_mismatch_then_raises(self):
        with pytest.raises(ValueError):
            bounds_of_visible_content(bytes(10), 4, 4)

    def test_bounds_when_fully_opaque_then_whole_buffer(self):
        bounds = bounds_of_visible_content(np.full((6, 8), 255, dtype=np.uint8), 8, 6)
        assert bounds.as_tuple() == (0, 0, 8, 6)


class TestAlphaMaskOf:

    def test_alpha_mask_when_rgb_then_opaque(self):
        mask = alpha_mask_of(Image.new("RGB", (3, 2)))
        assert mask.shape == (2, 3)
        assert (mask == 255).all()

    def test_alpha_mask_when_rgba_then_alpha_channel(self):
        image = Image.new("RGBA", (4, 4), (0, 0, 0, 0))
        image.putpixel((1, 2), (255, 0, 0, 128))

        bounds = bounds_of_visible_content(alpha_mask_of(image), 4, 4)

        assert bounds.as_tuple() == (1, 2, 2, 3)
