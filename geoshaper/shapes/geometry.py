"""Polygon geometry for the shape approximation.

A polygon is one of two tagged variants, ``Rectangle`` or ``Triangle``.
Both carry their points, their fill color and the canvas extents they are
clamped into.  Only rectangles can be scaled; a triangle has no ``scale``
and passing one to :func:`scale` is a type error, not a silent no-op.

All transforms work in place and finish with :func:`clamp`, so after any
mutation every coordinate lies in ``[0, width) x [0, height)``.

Rectangle point order::

    p0--p1
    |    |
    p3--p2
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar

Color = tuple[int, int, int]


@dataclass
class Point:
    x: float
    y: float

    def copy(self) -> Point:
        return Point(self.x, self.y)


# ------------------------------------------------------------------
# Polygon variants
# ------------------------------------------------------------------

@dataclass
class Polygon(ABC):
    points: list[Point]
    width: float
    height: float
    fill: Color = (0, 0, 0)

    kind: ClassVar[str] = ""
    num_points: ClassVar[int] = 0

    @abstractmethod
    def center(self) -> Point:
        """Pivot used by :func:`rotate`."""

    def bounds(self) -> tuple[Point, Point]:
        return bounds(self.points)

    def copy(self) -> Polygon:
        return self.__class__(
            points=[p.copy() for p in self.points],
            width=self.width, height=self.height, fill=self.fill,
        )

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "points": [[p.x, p.y] for p in self.points],
            "fill": list(self.fill),
        }

    def to_svg(self, opacity: float) -> str:
        points = " ".join(f"{p.x:.2f},{p.y:.2f}" for p in self.points)
        r, g, b = self.fill
        return (f'<polygon points="{points}" fill="rgb({r},{g},{b})" '
                f'fill-opacity="{opacity:g}"/>')

    @staticmethod
    def from_dict(d: dict, width: float, height: float) -> Polygon:
        cls = POLYGON_TYPES[d["kind"]]
        r, g, b = d.get("fill", (0, 0, 0))
        return cls(
            points=[Point(float(x), float(y)) for x, y in d["points"]],
            width=width, height=height,
            fill=(int(r), int(g), int(b)),
        )


class Rectangle(Polygon):
    kind = "rectangle"
    num_points = 4

    def center(self) -> Point:
        p = self.points
        return Point((p[1].x + p[0].x) / 2.0, (p[3].y + p[0].y) / 2.0)


class Triangle(Polygon):
    kind = "triangle"
    num_points = 3

    def center(self) -> Point:
        # Pivot on the first vertex rather than the true centroid.
        return self.points[0].copy()


POLYGON_TYPES: dict[str, type[Polygon]] = {
    "rectangle": Rectangle,
    "triangle": Triangle,
}


# ------------------------------------------------------------------
# Operations
# ------------------------------------------------------------------

def bounds(points: list[Point]) -> tuple[Point, Point]:
    """Axis-aligned bounding box ``(min, max)`` of a non-empty point set."""
    if not points:
        raise ValueError("bounds of an empty point set")
    min_x = max_x = points[0].x
    min_y = max_y = points[0].y
    for p in points[1:]:
        min_x = min(min_x, p.x)
        max_x = max(max_x, p.x)
        min_y = min(min_y, p.y)
        max_y = max(max_y, p.y)
    return Point(min_x, min_y), Point(max_x, max_y)


def clamp(polygon: Polygon) -> None:
    """Pull every point back inside the canvas."""
    for p in polygon.points:
        if p.x >= polygon.width:
            p.x = polygon.width - 1
        elif p.x < 0:
            p.x = 0.0
        if p.y >= polygon.height:
            p.y = polygon.height - 1
        elif p.y < 0:
            p.y = 0.0


def rotate(polygon: Polygon, degrees: float) -> None:
    """Rotate about the polygon's center, then clamp."""
    rad = math.radians(degrees)
    cos_a = math.cos(rad)
    sin_a = math.sin(rad)
    c = polygon.center()
    for p in polygon.points:
        dx = p.x - c.x
        dy = p.y - c.y
        p.x = c.x + dx * cos_a - dy * sin_a
        p.y = c.y + dx * sin_a + dy * cos_a
    clamp(polygon)


def scale(rect: Rectangle, scale_x: float, scale_y: float) -> None:
    """Stretch a rectangle from its p0 anchor corner, then clamp."""
    if not isinstance(rect, Rectangle):
        raise TypeError(f"only rectangles can be scaled, got {type(rect).__name__}")
    p = rect.points
    new_right = p[0].x + (p[1].x - p[0].x) * scale_x
    new_bottom = p[0].y + (p[3].y - p[0].y) * scale_y
    p[1].x = new_right
    p[2].x = new_right
    p[2].y = new_bottom
    p[3].y = new_bottom
    clamp(rect)
