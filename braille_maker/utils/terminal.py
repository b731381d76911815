"""Terminal size detection utilities."""

from __future__ import annotations

import shutil

from braille_maker.core.braille import CELL_HEIGHT, CELL_WIDTH
from braille_maker.core.size import ImageSize, fit_within


def get_terminal_size(
    fallback_width: int = 80,
    fallback_height: int = 24,
) -> tuple[int, int]:
    """Get current terminal size in columns and rows.

    Returns (width, height). Falls back to provided defaults
    if terminal size cannot be determined.
    """
    try:
        size = shutil.get_terminal_size(fallback=(fallback_width, fallback_height))
        return size.columns, size.lines
    except (ValueError, OSError):
        return fallback_width, fallback_height


def fit_to_terminal(
    img_width: int,
    img_height: int,
    max_cols: int | None = None,
    max_rows: int | None = None,
) -> ImageSize:
    """Pixel size that fills at most max_cols x max_rows braille cells.

    A terminal cell is roughly twice as tall as it is wide and holds 2x4
    dots, so dots come out close to square and the image aspect ratio
    carries over unchanged.

    Args:
        img_width: original image width in pixels.
        img_height: original image height in pixels.
        max_cols: maximum character columns (defaults to terminal width).
        max_rows: maximum character rows (defaults to terminal height - 4 for UI).
    """
    if max_cols is None or max_rows is None:
        tw, th = get_terminal_size()
        if max_cols is None:
            max_cols = tw
        if max_rows is None:
            max_rows = max(th - 4, 10)  # Leave room for UI chrome

    if img_width <= 0 or img_height <= 0:
        return ImageSize()

    width, height = fit_within(
        img_width,
        img_height,
        max(max_cols, 1) * CELL_WIDTH,
        max(max_rows, 1) * CELL_HEIGHT,
    )
    return ImageSize(width=width, height=height)
