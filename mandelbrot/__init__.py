"""Public API for Mandelbrot rendering utilities."""

from .palette import colorize, intensity
from .parsing import parse_complex, parse_pair, parse_size, parse_viewport
from .renderer import (
    DEFAULT_MAX_ITERATIONS,
    MAX_ITERATIONS_LIMIT,
    RenderParameters,
    RenderResult,
    escape_time,
    render_frame,
    render_reference,
    render_rows,
)
from .viewport import Viewport, pixel_to_complex, sample_axes, split_rows

__all__ = [
    "DEFAULT_MAX_ITERATIONS",
    "MAX_ITERATIONS_LIMIT",
    "RenderParameters",
    "RenderResult",
    "Viewport",
    "colorize",
    "escape_time",
    "intensity",
    "parse_complex",
    "parse_pair",
    "parse_size",
    "parse_viewport",
    "pixel_to_complex",
    "render_frame",
    "render_reference",
    "render_rows",
    "sample_axes",
    "split_rows",
]
