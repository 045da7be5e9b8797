"""Tests for random shape templates."""

import random

import pytest

from geoshaper.shapes.generators import (
    GENERATORS,
    create_polygon,
    generate_rectangle,
    generate_triangle,
)
from geoshaper.shapes.geometry import Rectangle, Triangle, bounds


def test_rectangle_within_range(rng):
    for _ in range(50):
        points = generate_rectangle(512.0, 512.0, rng)
        assert len(points) == 4
        for p in points:
            assert 0 <= p.x < 512.0
            assert 0 <= p.y < 512.0


def test_rectangle_is_one_eighth_of_canvas(rng):
    p0, p1, p2, p3 = generate_rectangle(400.0, 160.0, rng)
    assert p1.x - p0.x == pytest.approx(50.0)
    assert p3.y - p0.y == pytest.approx(20.0)
    assert (p2.x, p2.y) == (p1.x, p3.y)
    assert p3.x == p0.x and p1.y == p0.y


def test_triangle_within_range(rng):
    for _ in range(50):
        points = generate_triangle(512.0, 512.0, rng)
        assert len(points) == 3
        for p in points:
            assert 0 <= p.x <= 512.0
            assert 0 <= p.y <= 512.0


def test_triangle_stays_inside_one_tile(rng):
    for _ in range(50):
        lo, hi = bounds(generate_triangle(400.0, 200.0, rng))
        assert hi.x - lo.x <= 100.0
        assert hi.y - lo.y <= 50.0


def test_generators_are_reproducible():
    for gen in GENERATORS.values():
        a = gen(300.0, 200.0, random.Random(7))
        b = gen(300.0, 200.0, random.Random(7))
        assert a == b


def test_create_polygon_picks_variant(rng):
    rect = create_polygon("rectangle", 64, 48, rng)
    tri = create_polygon("triangle", 64, 48, rng)
    assert isinstance(rect, Rectangle) and len(rect.points) == 4
    assert isinstance(tri, Triangle) and len(tri.points) == 3
    assert (rect.width, rect.height) == (64, 48)
    for p in rect.points + tri.points:
        assert 0 <= p.x < 64
        assert 0 <= p.y < 48


def test_create_polygon_unknown_kind(rng):
    with pytest.raises(ValueError):
        create_polygon("ellipse", 10, 10, rng)
