"""Rasterize polygon lists to pixel arrays, and read/write image files.

Everything stays in memory: a shape list goes straight to a numpy array via
Pillow's ``ImageDraw``.  Only the final result and optional debug snapshots
are written to disk.
"""

from __future__ import annotations

import base64
import io
import math
from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw, UnidentifiedImageError

from geoshaper.errors import DecodeError, RasterWriteError, RenderError
from geoshaper.shapes.geometry import Color, Polygon

DEFAULT_OPACITY = 0.9


# ------------------------------------------------------------------
# Loading
# ------------------------------------------------------------------

def _to_rgb_array(img: Image.Image) -> np.ndarray:
    arr = np.array(img.convert("RGB"), dtype=np.uint8)
    if arr.shape[0] == 0 or arr.shape[1] == 0:
        raise DecodeError("image has no pixels")
    return arr


def load_image(path: str | Path) -> np.ndarray:
    """Decode an image file into an (H, W, 3) uint8 array."""
    path = Path(path)
    try:
        with Image.open(path) as img:
            return _to_rgb_array(img)
    except FileNotFoundError as e:
        raise DecodeError(f"image not found: {path}") from e
    except (UnidentifiedImageError, OSError) as e:
        raise DecodeError(f"cannot decode image {path}: {e}") from e


def decode_image(data: bytes) -> np.ndarray:
    """Decode in-memory image bytes (e.g. an upload)."""
    if not data:
        raise DecodeError("empty image data")
    try:
        with Image.open(io.BytesIO(data)) as img:
            return _to_rgb_array(img)
    except (UnidentifiedImageError, OSError) as e:
        raise DecodeError(f"cannot decode image: {e}") from e


# ------------------------------------------------------------------
# Rasterizing
# ------------------------------------------------------------------

def _polygon_xy(polygon: Polygon) -> list[tuple[float, float]]:
    if len(polygon.points) != polygon.num_points:
        raise RenderError(
            f"{polygon.kind or 'polygon'} needs {polygon.num_points} points, "
            f"got {len(polygon.points)}"
        )
    xy = []
    for p in polygon.points:
        if not (math.isfinite(p.x) and math.isfinite(p.y)):
            raise RenderError(f"non-finite vertex ({p.x}, {p.y})")
        xy.append((p.x, p.y))
    return xy


def rasterize(polygons: list[Polygon], background: Color,
              width: int, height: int,
              opacity: float = DEFAULT_OPACITY) -> np.ndarray:
    """Paint ``polygons`` in list order over a solid background.

    Returns:
        (height, width, 3) uint8 array.
    """
    alpha = int(round(opacity * 255))
    try:
        canvas = Image.new("RGB", (int(width), int(height)), tuple(background))
        draw = ImageDraw.Draw(canvas, "RGBA")
        for polygon in polygons:
            draw.polygon(_polygon_xy(polygon), fill=tuple(polygon.fill) + (alpha,))
    except RenderError:
        raise
    except (ValueError, TypeError, OSError) as e:
        raise RenderError(f"rasterization failed: {e}") from e
    return np.asarray(canvas, dtype=np.uint8)


# ------------------------------------------------------------------
# Writing
# ------------------------------------------------------------------

def write_png(pixels: np.ndarray, path: str | Path) -> Path:
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8)).save(path, format="PNG")
    except (OSError, ValueError, TypeError) as e:
        raise RasterWriteError(f"cannot write {path}: {e}") from e
    return path


def image_to_base64(pixels: np.ndarray) -> str:
    buf = io.BytesIO()
    Image.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8)).save(buf, format="PNG")
    return base64.b64encode(buf.getvalue()).decode("ascii")
