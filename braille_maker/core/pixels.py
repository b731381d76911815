"""Bounds-checked pixel access over a decoded image.

Wraps a Pillow image as read-only numpy arrays so rules can look up
per-channel byte values at arbitrary coordinates.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from PIL import Image

# Modes whose channels are kept exactly as decoded
NATIVE_MODES = ("RGB", "RGBA")


def normalize_mode(img: Image.Image) -> Image.Image:
    """Convert every other mode to 8-bit RGB, or RGBA when it carries alpha.

    Grayscale is widened too, so each pixel always has three or four channels.
    """
    if img.mode in NATIVE_MODES:
        return img
    has_alpha = "A" in img.getbands() or "transparency" in img.info
    return img.convert("RGBA" if has_alpha else "RGB")


@dataclass(frozen=True)
class PixelImage:
    """Immutable pixel grid.

    pixels: shape (height, width, channels), uint8.
    rgb: shape (height, width, 3), uint8. Alpha dropped.
    """

    pixels: np.ndarray
    rgb: np.ndarray

    @classmethod
    def from_pil(cls, img: Image.Image) -> PixelImage:
        img = normalize_mode(img)
        pixels = np.array(img, dtype=np.uint8)
        rgb = pixels[:, :, :3].copy()
        pixels.setflags(write=False)
        rgb.setflags(write=False)
        return cls(pixels=pixels, rgb=rgb)

    @classmethod
    def from_array(cls, arr: np.ndarray) -> PixelImage:
        """Build from a (h, w) or (h, w, c) uint8 array with 1-4 channels."""
        arr = np.asarray(arr, dtype=np.uint8)
        if arr.ndim == 3 and arr.shape[2] == 1:
            arr = arr[:, :, 0]
        # Pillow infers L / LA / RGB / RGBA from the array shape, then
        # grayscale is widened to RGB(A)
        return cls.from_pil(Image.fromarray(arr))

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def channels(self) -> int:
        return self.pixels.shape[2]

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def pixel_at(self, x: int, y: int) -> tuple[int, ...]:
        """Channel values at (x, y). Only valid when in_bounds(x, y)."""
        if not self.in_bounds(x, y):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} image")
        return tuple(int(v) for v in self.pixels[y, x])

    def rgb_at(self, x: int, y: int) -> tuple[int, int, int]:
        if not self.in_bounds(x, y):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} image")
        r, g, b = self.rgb[y, x]
        return int(r), int(g), int(b)
