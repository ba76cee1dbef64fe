"""Rendering primitives for Mandelbrot images."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional

import numpy as np
import tensorflow as tf

from .palette import colorize
from .viewport import Viewport, pixel_to_complex, sample_axes, split_rows

HORIZON = 4.0
DEFAULT_MAX_ITERATIONS = 255
# Escape counts are int32 on the grid and in the kernel.
MAX_ITERATIONS_LIMIT = int(np.iinfo(np.int32).max)


@dataclass(frozen=True)
class RenderParameters:
    """Parameters that describe a single render of the Mandelbrot set."""

    width: int
    height: int
    viewport: Viewport
    max_iterations: int = DEFAULT_MAX_ITERATIONS

    def __post_init__(self) -> None:
        if self.width < 1 or self.height < 1:
            raise ValueError(f"image size must be positive, got {self.width}x{self.height}")
        if not 1 <= self.max_iterations <= MAX_ITERATIONS_LIMIT:
            raise ValueError(
                f"max_iterations must be between 1 and {MAX_ITERATIONS_LIMIT}, got {self.max_iterations}"
            )
        if self.viewport.is_degenerate:
            raise ValueError("viewport corners coincide")

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height


@dataclass(frozen=True)
class RenderResult:
    """Escape counts and grayscale pixels of a render, indexed ``[row, column]``."""

    iterations: np.ndarray
    pixels: np.ndarray
    params: RenderParameters


def escape_time(c: complex, max_iterations: int) -> int:
    """Count the iterations of ``z = z**2 + c`` needed for ``|z|`` to exceed 2.

    Returns the index of the iteration that escaped, or ``max_iterations``
    when ``c`` stayed bounded for the whole budget and is taken to be a
    member of the set.
    """

    re = 0.0
    im = 0.0
    for i in range(max_iterations):
        re, im = re * re - im * im + c.real, 2.0 * re * im + c.imag
        if re * re + im * im > HORIZON:
            return i
    return max_iterations


@tf.function(reduce_retracing=True)
def _escape_step(
    re: tf.Tensor,
    im: tf.Tensor,
    c_re: tf.Tensor,
    c_im: tf.Tensor,
    counts: tf.Tensor,
    active: tf.Tensor,
    i: tf.Tensor,
) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor, tf.Tensor]:
    """Advance the points that have not escaped yet by one iteration."""

    new_re = re * re - im * im + c_re
    new_im = 2.0 * re * im + c_im
    re = tf.where(active, new_re, re)
    im = tf.where(active, new_im, im)
    escaped = tf.logical_and(active, re * re + im * im > HORIZON)
    counts = tf.where(escaped, i, counts)
    active = tf.logical_and(active, tf.logical_not(escaped))
    return re, im, counts, active


@tf.function(reduce_retracing=True)
def _escape_run(c_re: tf.Tensor, c_im: tf.Tensor, max_iterations: tf.Tensor) -> tf.Tensor:
    """Iterate every point of the grid using a TensorFlow while loop."""

    max_iterations = tf.cast(max_iterations, tf.int32)
    i = tf.constant(0, dtype=tf.int32)
    re = tf.zeros_like(c_re)
    im = tf.zeros_like(c_im)
    counts = tf.fill(tf.shape(c_re), max_iterations)
    active = tf.ones_like(counts, tf.bool)

    def cond(i, re, im, counts, active):
        return tf.logical_and(tf.less(i, max_iterations), tf.reduce_any(active))

    def body(i, re, im, counts, active):
        re, im, counts, active = _escape_step(re, im, c_re, c_im, counts, active, i)
        return i + 1, re, im, counts, active

    _, _, _, counts, _ = tf.while_loop(cond, body, (i, re, im, counts, active))
    return counts


def _render_band(
    re_axis: np.ndarray,
    im_axis: np.ndarray,
    max_iterations: int,
    device: Optional[str],
) -> np.ndarray:
    with tf.device(device if device is not None else "/CPU:0"):
        re_tf = tf.convert_to_tensor(re_axis, dtype=tf.float64)
        im_tf = tf.convert_to_tensor(im_axis, dtype=tf.float64)
        c_re, c_im = tf.meshgrid(re_tf, im_tf)
        counts = _escape_run(c_re, c_im, tf.constant(max_iterations, dtype=tf.int32))
    return counts.numpy()


def render_rows(params: RenderParameters, start: int, stop: int, *, device: Optional[str] = None) -> np.ndarray:
    """Escape counts for rows ``start`` to ``stop`` of the full image."""

    re_axis, im_axis = sample_axes(params.width, params.height, params.viewport)
    return _render_band(re_axis, im_axis[start:stop], params.max_iterations, device)


def render_frame(params: RenderParameters, *, threads: int = 1, device: Optional[str] = None) -> RenderResult:
    """Render the image described by ``params``.

    Rows are split into bands rendered concurrently by up to ``threads``
    workers. Every band writes to its own slice of the output, so the result
    does not depend on the number of threads.
    """

    re_axis, im_axis = sample_axes(params.width, params.height, params.viewport)
    iterations = np.empty((params.height, params.width), dtype=np.int32)

    def render_band(band: tuple[int, int]) -> None:
        start, stop = band
        iterations[start:stop] = _render_band(re_axis, im_axis[start:stop], params.max_iterations, device)

    bands = split_rows(params.height, threads)
    if len(bands) == 1:
        render_band(bands[0])
    else:
        with ThreadPoolExecutor(max_workers=len(bands)) as executor:
            for future in [executor.submit(render_band, band) for band in bands]:
                future.result()

    return RenderResult(
        iterations=iterations,
        pixels=colorize(iterations, params.max_iterations),
        params=params,
    )


def render_reference(params: RenderParameters) -> RenderResult:
    """Render pixel by pixel in pure Python; slow, but trivially correct."""

    iterations = np.empty((params.height, params.width), dtype=np.int32)
    for row in range(params.height):
        for column in range(params.width):
            point = pixel_to_complex(params.size, (column, row), params.viewport)
            iterations[row, column] = escape_time(point, params.max_iterations)

    return RenderResult(
        iterations=iterations,
        pixels=colorize(iterations, params.max_iterations),
        params=params,
    )
