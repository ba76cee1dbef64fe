"""Parsing of the command-line values describing a render."""

from __future__ import annotations

import math
from typing import Callable, TypeVar

from .viewport import Viewport

T = TypeVar("T")


def parse_pair(text: str, separator: str, kind: Callable[[str], T]) -> tuple[T, T] | None:
    """Parse ``text`` as two values joined by ``separator``, like ``"400x600"`` or ``"1.0,0.5"``.

    The text is split at the first separator. Returns ``None`` when the
    separator is missing or either half does not convert with ``kind``.
    Digit-group underscores are not accepted.
    """

    index = text.find(separator)
    if index < 0 or "_" in text:
        return None
    try:
        return kind(text[:index]), kind(text[index + 1:])
    except ValueError:
        return None


def parse_size(text: str) -> tuple[int, int]:
    """Parse ``WIDTHxHEIGHT`` into positive integer dimensions."""

    pair = parse_pair(text.strip().lower(), "x", int)
    if pair is None:
        raise ValueError(f"invalid image size {text!r}: expected WIDTHxHEIGHT, e.g. 1000x750")
    width, height = pair
    if width <= 0 or height <= 0:
        raise ValueError(f"invalid image size {text!r}: width and height must be positive")
    return width, height


def parse_complex(text: str) -> complex:
    """Parse ``RE,IM`` into a complex number with finite parts."""

    pair = parse_pair(text.strip(), ",", float)
    if pair is None:
        raise ValueError(f"invalid point {text!r}: expected RE,IM, e.g. -1.20,0.35")
    re, im = pair
    if not (math.isfinite(re) and math.isfinite(im)):
        raise ValueError(f"invalid point {text!r}: coordinates must be finite")
    return complex(re, im)


def parse_viewport(upper_left: str, lower_right: str) -> Viewport:
    """Parse both corners and reject a viewport whose corners coincide."""

    viewport = Viewport(parse_complex(upper_left), parse_complex(lower_right))
    if viewport.is_degenerate:
        raise ValueError(
            f"upper-left {upper_left!r} and lower-right {lower_right!r} coincide; the viewport has no area"
        )
    return viewport
