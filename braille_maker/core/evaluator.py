"""Evaluate an on/off rule at every pixel to build the boolean dot matrix."""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from enum import Enum

import numpy as np

from braille_maker.core.pixels import PixelImage
from braille_maker.core.rules import OnOffRule

logger = logging.getLogger(__name__)


class Strategy(str, Enum):
    SEQUENTIAL = "sequential"
    THREADED = "threaded"
    VECTORIZED = "vectorized"


def _evaluate_sequential(image: PixelImage, rule: OnOffRule) -> np.ndarray:
    matrix = np.zeros((image.height, image.width), dtype=bool)
    for y in range(image.height):
        for x in range(image.width):
            matrix[y, x] = rule.is_on(image, x, y)
    return matrix


def _evaluate_threaded(
    image: PixelImage, rule: OnOffRule, max_workers: int | None
) -> np.ndarray:
    """Rows in order; the columns of each row are spread over a thread pool.

    Each column writes only its own slot, and pool.map keeps column order.
    """
    matrix = np.zeros((image.height, image.width), dtype=bool)
    columns = range(image.width)
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        for y in range(image.height):
            matrix[y, :] = list(pool.map(lambda x: rule.is_on(image, x, y), columns))
    return matrix


def evaluate_matrix(
    image: PixelImage,
    rule: OnOffRule,
    strategy: Strategy = Strategy.VECTORIZED,
    max_workers: int | None = None,
) -> np.ndarray:
    """Build the (height, width) boolean matrix with matrix[y, x] = rule.is_on(image, x, y).

    All strategies produce identical matrices. The result is read-only.
    """
    start = time.perf_counter()
    if strategy == Strategy.SEQUENTIAL:
        matrix = _evaluate_sequential(image, rule)
    elif strategy == Strategy.THREADED:
        matrix = _evaluate_threaded(image, rule, max_workers)
    else:
        matrix = np.ascontiguousarray(rule.mask(image), dtype=bool)

    matrix.setflags(write=False)
    logger.debug(
        "Evaluated %s over %dx%d (%s) in %.1fms, %d dots on",
        rule,
        image.width,
        image.height,
        strategy.value,
        (time.perf_counter() - start) * 1000,
        int(matrix.sum()),
    )
    return matrix
