"""Tests for bounds-checked pixel access."""

import numpy as np
import pytest
from PIL import Image

from braille_maker.core.pixels import PixelImage


class TestPixelImage:
    def test_dimensions(self):
        img = PixelImage.from_pil(Image.new("RGB", (5, 3)))
        assert img.width == 5
        assert img.height == 3
        assert img.channels == 3

    def test_pixel_at_rgba(self):
        img = PixelImage.from_pil(Image.new("RGBA", (2, 2), (1, 2, 3, 4)))
        assert img.pixel_at(1, 1) == (1, 2, 3, 4)
        assert img.rgb_at(1, 1) == (1, 2, 3)

    def test_grayscale_widened_to_rgb(self):
        img = PixelImage.from_pil(Image.new("L", (1, 1), 50))
        assert img.channels == 3
        assert img.pixel_at(0, 0) == (50, 50, 50)
        assert img.rgb_at(0, 0) == (50, 50, 50)

    def test_grayscale_alpha_widened_to_rgba(self):
        img = PixelImage.from_pil(Image.new("LA", (1, 1), (50, 9)))
        assert img.channels == 4
        assert img.pixel_at(0, 0) == (50, 50, 50, 9)
        assert img.rgb_at(0, 0) == (50, 50, 50)

    def test_single_channel_array_widened_to_rgb(self):
        img = PixelImage.from_array(np.full((2, 2, 1), 7, dtype=np.uint8))
        assert img.channels == 3
        assert img.pixel_at(1, 1) == (7, 7, 7)

    def test_palette_converted_to_rgb(self):
        pal = Image.new("RGB", (2, 2), (10, 20, 30)).convert("P", palette=Image.Palette.ADAPTIVE)
        img = PixelImage.from_pil(pal)
        assert img.channels == 3
        assert img.pixel_at(0, 0) == (10, 20, 30)

    def test_coordinates_are_x_then_y(self):
        arr = np.zeros((2, 3, 3), dtype=np.uint8)
        arr[1, 2] = (7, 8, 9)
        img = PixelImage.from_array(arr)
        assert img.pixel_at(2, 1) == (7, 8, 9)

    @pytest.mark.parametrize(
        "x, y, expected",
        [(0, 0, True), (4, 2, True), (5, 0, False), (0, 3, False), (-1, 0, False), (0, -1, False)],
    )
    def test_in_bounds(self, x, y, expected):
        img = PixelImage.from_pil(Image.new("RGB", (5, 3)))
        assert img.in_bounds(x, y) is expected

    def test_pixel_at_out_of_bounds_raises(self):
        img = PixelImage.from_pil(Image.new("RGB", (2, 2)))
        with pytest.raises(IndexError):
            img.pixel_at(2, 0)
        with pytest.raises(IndexError):
            img.rgb_at(-1, 0)

    def test_arrays_are_read_only(self):
        img = PixelImage.from_pil(Image.new("RGB", (2, 2)))
        with pytest.raises(ValueError):
            img.pixels[0, 0, 0] = 1
