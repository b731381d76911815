"""Write rendered braille lines as text or as an image.

Text goes to a stream or a ``.txt`` file. Image output draws the glyphs
with a monospace font using Pillow.
"""

from __future__ import annotations

from pathlib import Path
from typing import TextIO

from PIL import Image, ImageDraw, ImageFont

from braille_maker.core.braille import render_text

# Monospace font size and metrics
DEFAULT_FONT_SIZE = 14
CHAR_WIDTH_RATIO = 0.6  # Approximate char width / font size for monospace

TEXT_SUFFIXES = (".txt",)
IMAGE_SUFFIXES = (".png", ".jpg", ".jpeg", ".gif", ".bmp")


def write_text(lines: list[str], stream: TextIO) -> None:
    """Write each line followed by a line break."""
    stream.write(render_text(lines))
    stream.flush()


def _get_font(size: int = DEFAULT_FONT_SIZE) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """Get a monospace font with braille coverage for rendering."""
    for name in [
        "DejaVuSansMono.ttf",
        "/usr/share/fonts/truetype/dejavu/DejaVuSansMono.ttf",
        "Menlo.ttc",
        "/System/Library/Fonts/Menlo.ttc",
        "Consolas.ttf",
    ]:
        try:
            return ImageFont.truetype(name, size)
        except (IOError, OSError):
            continue
    return ImageFont.load_default()


def render_lines_to_image(
    lines: list[str],
    font_size: int = DEFAULT_FONT_SIZE,
    fg_color: tuple[int, int, int] = (255, 255, 255),
    bg_color: tuple[int, int, int] = (0, 0, 0),
) -> Image.Image:
    """Draw braille lines onto a new RGB image, one glyph per character cell."""
    font = _get_font(font_size)

    char_w = max(int(font_size * CHAR_WIDTH_RATIO), 1)
    char_h = font_size + 2
    max_line_len = max((len(line) for line in lines), default=0)

    img_w = max(max_line_len * char_w, 1)
    img_h = max(len(lines) * char_h, 1)

    img = Image.new("RGB", (img_w, img_h), bg_color)
    draw = ImageDraw.Draw(img)

    for row_idx, line in enumerate(lines):
        y = row_idx * char_h
        for col_idx, ch in enumerate(line):
            draw.text((col_idx * char_w, y), ch, fill=fg_color, font=font)

    return img


def save_output(
    lines: list[str],
    output_path: Path,
    font_size: int = DEFAULT_FONT_SIZE,
) -> None:
    """Save lines in the format determined by the output file extension."""
    suffix = output_path.suffix.lower()
    if suffix in TEXT_SUFFIXES:
        output_path.write_text(render_text(lines), encoding="utf-8")
    elif suffix in IMAGE_SUFFIXES:
        render_lines_to_image(lines, font_size).save(str(output_path))
    else:
        raise ValueError(f"Unsupported output format: {suffix}")
