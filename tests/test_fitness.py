"""Tests for color statistics and RMS fitness metrics."""

import math

import numpy as np
import pytest

from geoshaper.art.fitness import (
    average_color,
    average_color_in_area,
    full_diff,
    pixel_window,
    windowed_diff,
)
from geoshaper.art.renderer import rasterize
from geoshaper.errors import ConfigError
from geoshaper.shapes.geometry import POLYGON_TYPES, Point, Rectangle

from conftest import solid


def test_identical_images_have_zero_distance(split_target):
    assert full_diff(split_target, split_target.copy()) == 0
    assert windowed_diff(split_target, split_target.copy(), (Point(3, 3), Point(20, 9))) == 0


def test_full_diff_black_vs_white():
    black = solid(2, 2, (0, 0, 0))
    white = solid(2, 2, (255, 255, 255))
    assert full_diff(black, white) == pytest.approx(255 * math.sqrt(3))


def test_full_diff_ignores_alpha():
    a = np.zeros((2, 2, 4), dtype=np.uint8)
    b = a.copy()
    b[..., 3] = 255
    assert full_diff(a, b) == 0


def test_windowed_diff_scores_only_the_window():
    a = np.zeros((4, 4, 3), dtype=np.uint8)
    b = a.copy()
    b[0, 0] = (3, 4, 0)
    b[3, 3] = (255, 255, 255)
    # (0,0)-(1,1) covers the 2x2 top-left block: 25 / 4 pixels
    assert windowed_diff(a, b, (Point(0, 0), Point(1, 1))) == pytest.approx(2.5)


def test_pixel_window_covers_bounds_and_clips():
    assert pixel_window((Point(0, 0), Point(10, 10)), 20, 20) == (0, 0, 11, 11)
    assert pixel_window((Point(2.5, 3.2), Point(4.1, 5.9)), 20, 20) == (2, 3, 6, 7)
    assert pixel_window((Point(-4, -4), Point(50, 50)), 20, 10) == (0, 0, 20, 10)


@pytest.mark.parametrize("lo, hi", [
    (Point(5, 5), Point(5, 9)),
    (Point(5, 5), Point(9, 5)),
    (Point(40, 40), Point(50, 50)),
])
def test_pixel_window_rejects_degenerate_bounds(lo, hi):
    with pytest.raises(ConfigError):
        pixel_window((lo, hi), 20, 20)


def test_windowed_diff_rejects_zero_area():
    img = solid(4, 4, (1, 2, 3))
    with pytest.raises(ConfigError):
        windowed_diff(img, img, (Point(1, 1), Point(1, 1)))


def test_size_mismatch():
    with pytest.raises(ValueError):
        full_diff(solid(2, 2, (0, 0, 0)), solid(3, 2, (0, 0, 0)))


def test_average_color(red_2x2):
    assert average_color(red_2x2) == (255, 0, 0)


def test_average_color_is_integer_mean():
    arr = np.zeros((1, 2, 3), dtype=np.uint8)
    arr[0, 1] = (1, 3, 255)
    assert average_color(arr) == (0, 1, 127)


def test_average_color_in_area(split_target):
    assert average_color_in_area(split_target, (Point(5, 5), Point(10, 10))) == (20, 40, 220)
    assert average_color_in_area(split_target, (Point(20, 20), Point(30, 30))) == (255, 255, 255)


@pytest.mark.parametrize("points", [
    [(2, 2), (6, 2), (6, 6), (2, 6)],
    [(3.4, 1.2), (9.0, 4.0), (5.5, 8.6)],
])
def test_pixel_window_holds_every_painted_pixel(points):
    kind = "rectangle" if len(points) == 4 else "triangle"
    poly = POLYGON_TYPES[kind](points=[Point(x, y) for x, y in points],
                               width=16, height=16, fill=(255, 255, 255))
    out = rasterize([poly], (0, 0, 0), 16, 16, opacity=1.0)
    x0, y0, x1, y1 = pixel_window(poly.bounds(), 16, 16)
    painted = np.argwhere(out.any(axis=2))
    assert len(painted) > 0
    for y, x in painted:
        assert x0 <= x < x1
        assert y0 <= y < y1


def test_pixel_window_includes_vertex_on_max():
    rect = Rectangle(points=[Point(2, 2), Point(6, 2), Point(6, 6), Point(2, 6)],
                     width=16, height=16, fill=(255, 255, 255))
    out = rasterize([rect], (0, 0, 0), 16, 16, opacity=1.0)
    assert tuple(out[6, 6]) == (255, 255, 255)
    assert pixel_window(rect.bounds(), 16, 16) == (2, 2, 7, 7)
