"""Mapping between the pixel grid and the sampled region of the complex plane."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class Viewport:
    """Rectangle of the complex plane spanned by two opposite corners.

    ``upper_left`` is sampled by pixel ``(0, 0)`` and ``lower_right`` by the
    last pixel of the last row. The corners may be given in any orientation,
    they only must not coincide.
    """

    upper_left: complex
    lower_right: complex

    @property
    def re_span(self) -> float:
        return self.lower_right.real - self.upper_left.real

    @property
    def im_span(self) -> float:
        return self.lower_right.imag - self.upper_left.imag

    @property
    def is_degenerate(self) -> bool:
        return self.upper_left == self.lower_right


def _interpolate(start: float, end: float, index: int, count: int) -> float:
    if count == 1:
        return start
    return start + (index / (count - 1)) * (end - start)


def pixel_to_complex(size: tuple[int, int], pixel: tuple[int, int], viewport: Viewport) -> complex:
    """Return the point of the complex plane sampled by ``pixel``.

    ``size`` is ``(width, height)`` and ``pixel`` is ``(column, row)``. Both
    corners of the viewport are sampled exactly (inclusive endpoints); a
    single column or row samples the upper-left coordinate.
    """

    width, height = size
    column, row = pixel
    re = _interpolate(viewport.upper_left.real, viewport.lower_right.real, column, width)
    im = _interpolate(viewport.upper_left.imag, viewport.lower_right.imag, row, height)
    return complex(re, im)


def _sample_axis(start: float, end: float, count: int) -> np.ndarray:
    if count == 1:
        return np.array([start], dtype=np.float64)
    indices = np.arange(count, dtype=np.float64)
    return np.float64(start) + (indices / np.float64(count - 1)) * (np.float64(end) - np.float64(start))


def sample_axes(width: int, height: int, viewport: Viewport) -> tuple[np.ndarray, np.ndarray]:
    """Real parts per column and imaginary parts per row of the sampling grid.

    Evaluates the same expression as :func:`pixel_to_complex`, element by
    element, so both paths produce identical doubles.
    """

    re_axis = _sample_axis(viewport.upper_left.real, viewport.lower_right.real, width)
    im_axis = _sample_axis(viewport.upper_left.imag, viewport.lower_right.imag, height)
    return re_axis, im_axis


def split_rows(height: int, bands: int) -> list[tuple[int, int]]:
    """Partition ``range(height)`` into contiguous ``(start, stop)`` bands."""

    if bands < 1:
        raise ValueError(f"bands must be at least 1, got {bands}")
    rows_per_band = height // bands + 1
    return [(start, min(start + rows_per_band, height)) for start in range(0, height, rows_per_band)]
