"""On/off rules deciding whether a source pixel becomes a raised braille dot.

Three rule variants, each a frozen dataclass with integer parameters:

    Threshold(t)          on iff the sum of all channels >= t
    InvertedThreshold(t)  on iff the sum of R, G and B <= t (alpha ignored)
    Border(t, d)          on iff a cardinal neighbour up to d steps away
                          differs from the pixel by >= t in some channel

Every rule answers ``is_on(image, x, y)`` for a single coordinate and
``mask(image)`` for the whole image at once. Both agree exactly.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from itertools import product
from typing import Union

import numpy as np

from braille_maker.core.errors import RuleParseError, parse_int
from braille_maker.core.pixels import PixelImage

# (dx, dy) unit steps checked by the border rule
CARDINAL_DIRECTIONS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))

RULE_FORMATS = ("Threshold(<uint>)", "InvertedThreshold(<uint>)", "Border(<uint>,<uint>)")

_THRESHOLD_RE = re.compile(r"Threshold\((\d+)\)")
_INVERTED_RE = re.compile(r"InvertedThreshold\((\d+)\)")
_BORDER_RE = re.compile(r"Border\((\d+),(\d+)\)")


@dataclass(frozen=True)
class Threshold:
    threshold: int

    def is_on(self, image: PixelImage, x: int, y: int) -> bool:
        if not image.in_bounds(x, y):
            return False
        return sum(image.pixel_at(x, y)) >= self.threshold

    def mask(self, image: PixelImage) -> np.ndarray:
        return image.pixels.sum(axis=2, dtype=np.int64) >= self.threshold

    def __str__(self) -> str:
        return f"Threshold({self.threshold})"


@dataclass(frozen=True)
class InvertedThreshold:
    threshold: int

    def is_on(self, image: PixelImage, x: int, y: int) -> bool:
        if not image.in_bounds(x, y):
            return False
        return sum(image.rgb_at(x, y)) <= self.threshold

    def mask(self, image: PixelImage) -> np.ndarray:
        return image.rgb.sum(axis=2, dtype=np.int64) <= self.threshold

    def __str__(self) -> str:
        return f"InvertedThreshold({self.threshold})"


def _max_channel_diff(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Largest absolute per-channel difference along the last axis."""
    return np.abs(a.astype(np.int16) - b.astype(np.int16)).max(axis=-1)


@dataclass(frozen=True)
class Border:
    """Edge detection by comparing a pixel against its cardinal neighbours.

    A neighbour whose coordinate would be negative is clamped to 0 on that
    axis before the bounds check, so pixels near the top and left edges are
    also compared against row/column 0.
    """

    threshold: int
    distance: int

    def _steps(self, image: PixelImage) -> int:
        # Past the longer side every step repeats a comparison already made
        return max(0, min(self.distance, max(image.width, image.height)))

    def is_on(self, image: PixelImage, x: int, y: int) -> bool:
        if not image.in_bounds(x, y):
            return False
        center = image.pixels[y, x]
        steps = range(1, self._steps(image) + 1)
        for (dx, dy), k in product(CARDINAL_DIRECTIONS, steps):
            nx = max(x + dx * k, 0)
            ny = max(y + dy * k, 0)
            if not image.in_bounds(nx, ny):
                continue
            if int(_max_channel_diff(image.pixels[ny, nx], center)) >= self.threshold:
                return True
        return False

    def mask(self, image: PixelImage) -> np.ndarray:
        px = image.pixels
        h, w = image.height, image.width
        cols = np.arange(w)
        rows = np.arange(h)
        on = np.zeros((h, w), dtype=bool)

        for k in range(1, self._steps(image) + 1):
            left = np.maximum(cols - k, 0)
            on |= _max_channel_diff(px[:, left], px) >= self.threshold

            up = np.maximum(rows - k, 0)
            on |= _max_channel_diff(px[up], px) >= self.threshold

            right = cols + k
            valid = right < w
            on[:, valid] |= (
                _max_channel_diff(px[:, right[valid]], px[:, valid]) >= self.threshold
            )

            down = rows + k
            valid = down < h
            on[valid] |= _max_channel_diff(px[down[valid]], px[valid]) >= self.threshold

        return on

    def __str__(self) -> str:
        return f"Border({self.threshold},{self.distance})"


OnOffRule = Union[Threshold, InvertedThreshold, Border]


def parse_rule(text: str) -> OnOffRule:
    """Parse a rule from its textual form, e.g. ``Border(40,2)``.

    Raises:
        RuleParseError: text matches none of the three formats.
        NumberParseError: a parameter is not a valid 32-bit integer.
    """
    match = _THRESHOLD_RE.fullmatch(text)
    if match:
        return Threshold(parse_int(match.group(1)))

    match = _INVERTED_RE.fullmatch(text)
    if match:
        return InvertedThreshold(parse_int(match.group(1)))

    match = _BORDER_RE.fullmatch(text)
    if match:
        return Border(parse_int(match.group(1)), parse_int(match.group(2)))

    raise RuleParseError(text)
