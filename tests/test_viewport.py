"""Tests for the pixel grid to complex plane mapping."""

import numpy as np
import pytest

from mandelbrot.viewport import Viewport, pixel_to_complex, sample_axes, split_rows

WHOLE_SET = Viewport(-2.0 + 2.0j, 2.0 - 2.0j)


def test_pixel_to_complex_interpolates_both_axes():
    viewport = Viewport(-1.0 + 1.0j, 1.0 - 1.0j)
    assert pixel_to_complex((101, 101), (25, 75), viewport) == complex(-0.5, -0.5)


def test_corners_are_sampled_exactly():
    assert pixel_to_complex((1000, 750), (0, 0), WHOLE_SET) == WHOLE_SET.upper_left
    assert pixel_to_complex((1000, 750), (999, 749), WHOLE_SET) == WHOLE_SET.lower_right


def test_single_column_and_row_sample_upper_left():
    viewport = Viewport(-1.5 + 0.5j, 0.5 - 0.5j)
    assert pixel_to_complex((1, 1), (0, 0), viewport) == viewport.upper_left
    assert pixel_to_complex((1, 3), (0, 2), viewport) == complex(-1.5, -0.5)
    assert pixel_to_complex((3, 1), (2, 0), viewport) == complex(0.5, 0.5)


def test_two_pixel_line_hits_both_ends():
    viewport = Viewport(-1.0 + 0.0j, 1.0 + 0.0j)
    assert pixel_to_complex((2, 1), (0, 0), viewport) == complex(-1.0, 0.0)
    assert pixel_to_complex((2, 1), (1, 0), viewport) == complex(1.0, 0.0)


@pytest.mark.parametrize("size", [(1, 1), (2, 1), (7, 5), (64, 33)], ids=lambda s: f"{s[0]}x{s[1]}")
def test_sample_axes_match_scalar_mapping(size):
    width, height = size
    viewport = Viewport(-2.2 + 1.3j, 0.75 - 1.3j)
    re_axis, im_axis = sample_axes(width, height, viewport)

    assert re_axis.dtype == np.float64
    assert re_axis.shape == (width,)
    assert im_axis.shape == (height,)
    expected_re = [pixel_to_complex(size, (column, 0), viewport).real for column in range(width)]
    expected_im = [pixel_to_complex(size, (0, row), viewport).imag for row in range(height)]
    np.testing.assert_array_equal(re_axis, expected_re)
    np.testing.assert_array_equal(im_axis, expected_im)


def test_viewport_spans_and_degeneracy():
    assert WHOLE_SET.re_span == 4.0
    assert WHOLE_SET.im_span == -4.0
    assert not WHOLE_SET.is_degenerate
    assert Viewport(0j, 0j).is_degenerate
    assert not Viewport(0j, 1j).is_degenerate


def test_split_rows_matches_band_layout():
    assert split_rows(750, 4) == [(0, 188), (188, 376), (376, 564), (564, 750)]
    assert split_rows(1, 4) == [(0, 1)]
    assert split_rows(5, 1) == [(0, 5)]


@pytest.mark.parametrize("height", [1, 2, 3, 10, 97])
@pytest.mark.parametrize("bands", [1, 2, 4, 16])
def test_split_rows_covers_every_row_once(height, bands):
    layout = split_rows(height, bands)
    rows = [row for start, stop in layout for row in range(start, stop)]
    assert rows == list(range(height))
    assert all(stop > start for start, stop in layout)
    assert len(layout) <= bands


def test_split_rows_rejects_zero_bands():
    with pytest.raises(ValueError):
        split_rows(10, 0)
