"""Random shape templates.

Every generator has the same signature ``(width, height, rng) -> points`` and
draws only from the ``random.Random`` it is handed, so a seeded run always
proposes the same shapes.
"""

from __future__ import annotations

import random
from typing import Callable

from geoshaper.shapes.geometry import POLYGON_TYPES, Point, Polygon, clamp

Generator = Callable[[float, float, random.Random], list[Point]]

RECT_FRACTION = 8
TRIANGLE_TILES = 4


def generate_rectangle(width: float, height: float,
                       rng: random.Random) -> list[Point]:
    """Axis-aligned box one eighth of the canvas in each dimension."""
    base_w = width / RECT_FRACTION
    base_h = height / RECT_FRACTION
    x0 = rng.uniform(0.0, width - base_w)
    y0 = rng.uniform(0.0, height - base_h)
    return [
        Point(x0, y0),
        Point(x0 + base_w, y0),
        Point(x0 + base_w, y0 + base_h),
        Point(x0, y0 + base_h),
    ]


def generate_triangle(width: float, height: float,
                      rng: random.Random) -> list[Point]:
    """Three points inside one randomly chosen tile of a 4x4 grid.

    Keeping the vertices inside a single tile keeps the scoring window small.
    """
    tile_w = width / TRIANGLE_TILES
    tile_h = height / TRIANGLE_TILES
    tx = rng.randrange(TRIANGLE_TILES)
    ty = rng.randrange(TRIANGLE_TILES)
    return [
        Point(rng.uniform(tile_w * tx, tile_w * (tx + 1)),
              rng.uniform(tile_h * ty, tile_h * (ty + 1)))
        for _ in range(3)
    ]


GENERATORS: dict[str, Generator] = {
    "rectangle": generate_rectangle,
    "triangle": generate_triangle,
}


def create_polygon(kind: str, width: float, height: float,
                   rng: random.Random) -> Polygon:
    try:
        generator = GENERATORS[kind]
    except KeyError:
        raise ValueError(f"Unknown shape type: {kind}") from None
    cls = POLYGON_TYPES[kind]
    polygon = cls(points=generator(width, height, rng), width=width, height=height)
    clamp(polygon)
    return polygon
