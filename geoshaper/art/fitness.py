"""Color statistics and fitness metrics.

All functions take ``(H, W, C)`` uint8 arrays with ``C >= 3``; any alpha
channel is ignored.  Distances are root-mean-square color errors, so lower is
better and 0 means pixel-identical.
"""

from __future__ import annotations

import math

import numpy as np

from geoshaper.errors import ConfigError
from geoshaper.shapes.geometry import Color, Point

Bounds = tuple[Point, Point]


def pixel_window(bounds: Bounds, width: int, height: int) -> tuple[int, int, int, int]:
    """Half-open integer window ``(x0, y0, x1, y1)`` covering ``bounds``.

    The window holds every pixel a polygon with these bounds can paint, so
    it runs through the pixel under ``ceil(max)`` and is clipped into the
    canvas.  Zero-area bounds, or bounds outside the canvas, are a
    configuration error rather than something to score.
    """
    lo, hi = bounds
    if not (hi.x > lo.x and hi.y > lo.y):
        raise ConfigError(
            f"bounds have zero area: ({lo.x:.2f}, {lo.y:.2f})-({hi.x:.2f}, {hi.y:.2f})"
        )
    x0 = max(0, int(math.floor(lo.x)))
    y0 = max(0, int(math.floor(lo.y)))
    x1 = min(width, int(math.ceil(hi.x)) + 1)
    y1 = min(height, int(math.ceil(hi.y)) + 1)
    if x1 - x0 < 1 or y1 - y0 < 1:
        raise ConfigError(
            f"scoring window must span at least one pixel per axis, "
            f"got x=[{x0}, {x1}) y=[{y0}, {y1}) from bounds "
            f"({lo.x:.2f}, {lo.y:.2f})-({hi.x:.2f}, {hi.y:.2f})"
        )
    return x0, y0, x1, y1


def _mean_rgb(pixels: np.ndarray) -> Color:
    rgb = pixels[..., :3].reshape(-1, 3).astype(np.int64)
    r, g, b = (rgb.sum(axis=0) // rgb.shape[0]).tolist()
    return (r, g, b)


def average_color(pixels: np.ndarray) -> Color:
    """Integer mean of R, G and B over the whole image."""
    return _mean_rgb(pixels)


def average_color_in_area(pixels: np.ndarray, bounds: Bounds) -> Color:
    """Integer mean color of the pixels under ``bounds``."""
    h, w = pixels.shape[:2]
    x0, y0, x1, y1 = pixel_window(bounds, w, h)
    return _mean_rgb(pixels[y0:y1, x0:x1])


def _rms(a: np.ndarray, b: np.ndarray) -> float:
    if a.shape[:2] != b.shape[:2]:
        raise ValueError(f"image sizes differ: {a.shape[:2]} vs {b.shape[:2]}")
    diff = a[..., :3].astype(np.int64) - b[..., :3].astype(np.int64)
    total = float(np.sum(diff * diff))
    count = a.shape[0] * a.shape[1]
    return math.sqrt(total / count)


def full_diff(image_a: np.ndarray, image_b: np.ndarray) -> float:
    """RMS color distance over the whole canvas.

    Args:
        image_a, image_b: (H, W, C) uint8 arrays of equal size.

    Returns:
        ``sqrt(sum(dr^2 + dg^2 + db^2) / pixel_count)``.
    """
    return _rms(image_a, image_b)


def windowed_diff(image_a: np.ndarray, image_b: np.ndarray, bounds: Bounds) -> float:
    """RMS color distance restricted to the pixel window of ``bounds``.

    This is the cheap proxy used during search: only the area a new shape
    can have changed is compared.
    """
    if image_a.shape[:2] != image_b.shape[:2]:
        raise ValueError(f"image sizes differ: {image_a.shape[:2]} vs {image_b.shape[:2]}")
    h, w = image_a.shape[:2]
    x0, y0, x1, y1 = pixel_window(bounds, w, h)
    return _rms(image_a[y0:y1, x0:x1], image_b[y0:y1, x0:x1])
