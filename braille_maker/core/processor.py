"""Image processing pipeline.

Resize → pixel grid → rule evaluation → braille cells.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from PIL import Image

from braille_maker.core.braille import render_lines
from braille_maker.core.evaluator import Strategy, evaluate_matrix
from braille_maker.core.pixels import PixelImage, normalize_mode
from braille_maker.core.rules import OnOffRule, Threshold, parse_rule
from braille_maker.core.size import DEFAULT_SIZE_TEXT, ImageSize, parse_size, resize_image

logger = logging.getLogger(__name__)

DEFAULT_RULE_TEXT = "Threshold(100)"


@dataclass(frozen=True)
class Settings:
    """Processing settings that affect output."""

    rule: OnOffRule = field(default_factory=lambda: Threshold(100))
    size: ImageSize = field(default_factory=ImageSize)
    strategy: Strategy = Strategy.VECTORIZED
    keep_aspect: bool = False
    inclusive: bool = False
    max_workers: int | None = None

    @classmethod
    def from_strings(
        cls,
        rule: str = DEFAULT_RULE_TEXT,
        size: str = DEFAULT_SIZE_TEXT,
        **kwargs,
    ) -> Settings:
        """Build settings from textual rule and size, failing on bad config."""
        return cls(rule=parse_rule(rule), size=parse_size(size), **kwargs)


@dataclass
class RenderedImage:
    """Result of rendering one image."""

    lines: list[str]
    width: int  # pixel size after resizing
    height: int

    @property
    def cols(self) -> int:
        return len(self.lines[0]) if self.lines else 0

    @property
    def rows(self) -> int:
        return len(self.lines)


def process_image(img: Image.Image, settings: Settings) -> RenderedImage:
    """Run the full pipeline over one decoded image."""
    img = normalize_mode(img)
    img = resize_image(img, settings.size, keep_aspect=settings.keep_aspect)
    pixels = PixelImage.from_pil(img)

    matrix = evaluate_matrix(
        pixels,
        settings.rule,
        strategy=settings.strategy,
        max_workers=settings.max_workers,
    )
    lines = render_lines(matrix, inclusive=settings.inclusive)
    logger.info(
        "Rendered %dx%d image with %s into %d lines",
        pixels.width,
        pixels.height,
        settings.rule,
        len(lines),
    )
    return RenderedImage(
        lines=lines,
        width=pixels.width,
        height=pixels.height,
    )
