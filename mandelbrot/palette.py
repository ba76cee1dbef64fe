"""Grayscale shading of escape counts."""

from __future__ import annotations

import numpy as np


def intensity(count: int, max_iterations: int) -> int:
    """Shade for a single escape count: bright when it escapes fast, black inside."""

    if count >= max_iterations:
        return 0
    return 255 - (255 * count) // max_iterations


def colorize(iterations: np.ndarray, max_iterations: int) -> np.ndarray:
    """Vectorized :func:`intensity` producing an 8-bit grayscale image."""

    counts = np.asarray(iterations, dtype=np.int64)
    shades = 255 - (255 * counts) // max_iterations
    return np.where(counts >= max_iterations, 0, shades).astype(np.uint8)
