"""Braille encoding of the boolean dot matrix.

Braille characters use a 2-wide x 4-tall dot grid per character.
Unicode braille block starts at U+2800.
Dot positions (col 0, col 1):
  row 0: bit 0, bit 3
  row 1: bit 1, bit 4
  row 2: bit 2, bit 5
  row 3: bit 6, bit 7
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

import numpy as np

logger = logging.getLogger(__name__)

BRAILLE_BASE = 0x2800
CELL_WIDTH = 2
CELL_HEIGHT = 4

# (dy, dx) offset from the cell's top-left pixel, indexed by bit
BRAILLE_DOT_OFFSETS: tuple[tuple[int, int], ...] = (
    (0, 0),
    (1, 0),
    (2, 0),
    (0, 1),
    (1, 1),
    (2, 1),
    (3, 0),
    (3, 1),
)

# sample(row, col) -> dot state, or None when the pixel doesn't exist
Sampler = Callable[[int, int], Optional[bool]]


def region_braille(cell_x: int, cell_y: int, sample: Sampler) -> int:
    """Code point for the braille cell at cell coordinates (cell_x, cell_y).

    Absent pixels count as off.
    """
    top = cell_y * CELL_HEIGHT
    left = cell_x * CELL_WIDTH
    code = 0
    for bit, (dy, dx) in enumerate(BRAILLE_DOT_OFFSETS):
        if sample(top + dy, left + dx):
            code |= 1 << bit
    return BRAILLE_BASE + code


def matrix_sampler(matrix: np.ndarray) -> Sampler:
    """Bounds-checked lookup into a (height, width) boolean matrix."""
    height, width = matrix.shape

    def sample(row: int, col: int) -> bool | None:
        if 0 <= row < height and 0 <= col < width:
            return bool(matrix[row, col])
        return None

    return sample


def braille_char(dots: np.ndarray) -> str:
    """Convert a 4x2 boolean array to a single braille character.

    Args:
        dots: shape (4, 2) boolean array where True = raised dot.
    """
    return chr(region_braille(0, 0, matrix_sampler(np.asarray(dots, dtype=bool))))


def cell_grid_size(width: int, height: int, inclusive: bool = False) -> tuple[int, int]:
    """Number of (columns, rows) of braille cells covering a width x height image.

    By default partial cells at the right and bottom edges are kept and
    nothing more. ``inclusive`` always adds one trailing column and row.
    """
    if inclusive:
        return width // CELL_WIDTH + 1, height // CELL_HEIGHT + 1
    if width == 0 or height == 0:
        return 0, 0
    return -(-width // CELL_WIDTH), -(-height // CELL_HEIGHT)


def render_lines(matrix: np.ndarray, inclusive: bool = False) -> list[str]:
    """Render a boolean matrix as braille lines, one per row of cells."""
    height, width = matrix.shape
    cols, rows = cell_grid_size(width, height, inclusive)
    sample = matrix_sampler(matrix)

    lines = []
    for cell_y in range(rows):
        lines.append(
            "".join(chr(region_braille(cell_x, cell_y, sample)) for cell_x in range(cols))
        )
    logger.debug("Rendered %dx%d pixels as %dx%d cells", width, height, cols, rows)
    return lines


def render_text(lines: list[str]) -> str:
    """Join lines, terminating each with a line break."""
    return "".join(f"{line}\n" for line in lines)
