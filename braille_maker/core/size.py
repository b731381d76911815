"""Target image size parsing and the resize step run before evaluation."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from PIL import Image

from braille_maker.core.errors import SizeParseError, parse_int

logger = logging.getLogger(__name__)

DEFAULT_SIZE_TEXT = "_"


@dataclass(frozen=True)
class ImageSize:
    """Requested pixel size. ``None`` dimensions mean keep the source size."""

    width: int | None = None
    height: int | None = None

    @property
    def is_default(self) -> bool:
        return self.width is None or self.height is None

    def __str__(self) -> str:
        if self.is_default:
            return DEFAULT_SIZE_TEXT
        return f"{self.width}x{self.height}"


def parse_size(text: str) -> ImageSize:
    """Parse ``_`` or ``<width>x<height>``.

    Only the first two ``x``-separated fields are read.

    Raises:
        SizeParseError: no ``x`` separator, or a zero dimension.
        NumberParseError: a field is not an unsigned 32-bit integer.
    """
    if text == DEFAULT_SIZE_TEXT:
        return ImageSize()
    fields = text.split("x")
    if len(fields) < 2:
        raise SizeParseError(text)
    size = ImageSize(
        width=parse_int(fields[0], signed=False),
        height=parse_int(fields[1], signed=False),
    )
    if size.width == 0 or size.height == 0:
        raise SizeParseError(text, "image size must be non-zero")
    return size


def fit_within(
    src_width: int, src_height: int, max_width: int, max_height: int
) -> tuple[int, int]:
    """Largest size inside max_width x max_height with the source aspect ratio."""
    ratio = min(max_width / src_width, max_height / src_height)
    return max(1, round(src_width * ratio)), max(1, round(src_height * ratio))


def resize_image(
    img: Image.Image, size: ImageSize, keep_aspect: bool = False
) -> Image.Image:
    """Resize with a triangle (bilinear) filter.

    A no-op when the size is the default or already matches the image.
    """
    if size.is_default or (size.width, size.height) == img.size:
        return img
    if size.width == 0 or size.height == 0:
        raise SizeParseError(str(size), "image size must be non-zero")

    target = (size.width, size.height)
    if keep_aspect and img.width and img.height:
        target = fit_within(img.width, img.height, size.width, size.height)
        if target == img.size:
            return img

    logger.debug("Resizing %dx%d -> %dx%d", img.width, img.height, *target)
    return img.resize(target, Image.Resampling.BILINEAR)
