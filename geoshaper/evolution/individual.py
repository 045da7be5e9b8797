"""The evolving approximation and its one-polygon mutations.

A ``GImage`` is the accepted shape list painted over the target's average
color.  ``mutate`` never touches its parent: it returns a new ``GImage``
whose polygons are copies of the parent's with one candidate appended.
The target pixels are shared read-only between every instance.
"""

from __future__ import annotations

import random
from pathlib import Path
from typing import Callable

import numpy as np

from geoshaper.art.fitness import (
    Bounds,
    average_color_in_area,
    full_diff,
    windowed_diff,
)
from geoshaper.art.renderer import DEFAULT_OPACITY, rasterize, write_png
from geoshaper.errors import RasterWriteError
from geoshaper.shapes.geometry import Color, Polygon, Rectangle, rotate, scale

Rasterizer = Callable[[list[Polygon], Color, int, int, float], np.ndarray]


class GImage:
    def __init__(self, id: int, target: np.ndarray, background: Color,
                 width: int, height: int,
                 polygons: list[Polygon] | None = None,
                 opacity: float = DEFAULT_OPACITY,
                 rasterizer: Rasterizer = rasterize):
        self.id = id
        self.target = target
        self.background = background
        self.width = width
        self.height = height
        self.polygons: list[Polygon] = polygons if polygons is not None else []
        self.opacity = opacity
        self._rasterizer = rasterizer

    def __repr__(self) -> str:
        return (f"GImage(id={self.id}, size={self.width}x{self.height}, "
                f"polygons={len(self.polygons)})")

    # ------------------------------------------------------------------
    # Shape list
    # ------------------------------------------------------------------

    def add_polygon(self, polygon: Polygon) -> None:
        self.polygons.append(polygon)

    def last_polygon(self) -> Polygon:
        if not self.polygons:
            raise ValueError(f"image {self.id} has no polygons")
        return self.polygons[-1].copy()

    def mutation_area(self) -> Bounds:
        """Bounds of the most recently appended polygon."""
        if not self.polygons:
            raise ValueError(f"image {self.id} has no mutation")
        return self.polygons[-1].bounds()

    def mutate(self, candidate: Polygon, new_id: int, rng: random.Random,
               rotation_range: tuple[float, float] = (0.0, 360.0),
               scale_range: tuple[float, float] = (0.5, 2.0)) -> GImage:
        """Return a copy of this image with a transformed ``candidate`` on top.

        The fill is the target's average color under the candidate's
        untransformed bounds.  Rectangles are then stretched by independent
        x/y factors; every kind is rotated.
        """
        shape = candidate.copy()
        shape.fill = average_color_in_area(self.target, shape.bounds())
        if isinstance(shape, Rectangle):
            scale(shape, rng.uniform(*scale_range), rng.uniform(*scale_range))
        rotate(shape, rng.uniform(*rotation_range))
        return GImage(
            new_id, self.target, self.background, self.width, self.height,
            polygons=[p.copy() for p in self.polygons] + [shape],
            opacity=self.opacity, rasterizer=self._rasterizer,
        )

    # ------------------------------------------------------------------
    # Rendering and fitness
    # ------------------------------------------------------------------

    def raster(self) -> np.ndarray:
        return self._rasterizer(self.polygons, self.background,
                                self.width, self.height, self.opacity)

    def fitness_mutation(self) -> float:
        """Windowed error over the last polygon's bounds."""
        return windowed_diff(self.target, self.raster(), self.mutation_area())

    def fitness_in_area(self, bounds: Bounds) -> float:
        return windowed_diff(self.target, self.raster(), bounds)

    def fitness_full(self) -> float:
        return full_diff(self.target, self.raster())

    def save_raster(self, path: str | Path) -> Path:
        return write_png(self.raster(), path)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> dict:
        return {
            "width": self.width,
            "height": self.height,
            "background": list(self.background),
            "opacity": self.opacity,
            "polygons": [p.to_dict() for p in self.polygons],
        }

    def to_svg(self) -> str:
        """The composition as an SVG document, shapes in z-order."""
        r, g, b = self.background
        lines = [
            f'<svg width="{self.width}" height="{self.height}" '
            f'viewBox="0 0 {self.width} {self.height}" version="1.1" '
            f'xmlns="http://www.w3.org/2000/svg">',
            f'<rect x="0" y="0" width="{self.width}" height="{self.height}" '
            f'fill="rgb({r},{g},{b})" fill-opacity="{self.opacity:g}"/>',
        ]
        lines.extend(p.to_svg(self.opacity) for p in self.polygons)
        lines.append("</svg>")
        return "\n".join(lines) + "\n"

    def save_svg(self, path: str | Path) -> Path:
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(self.to_svg())
        except OSError as e:
            raise RasterWriteError(f"cannot write {path}: {e}") from e
        return path
