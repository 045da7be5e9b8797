"""Shared test fixtures."""

from __future__ import annotations

import random

import numpy as np
import pytest
from PIL import Image


def solid(width: int, height: int, rgb: tuple[int, int, int]) -> np.ndarray:
    arr = np.zeros((height, width, 3), dtype=np.uint8)
    arr[:, :] = rgb
    return arr


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def red_2x2() -> np.ndarray:
    return solid(2, 2, (255, 0, 0))


@pytest.fixture
def split_target() -> np.ndarray:
    """32x32: left half black, right half white, with a blue square."""
    arr = np.zeros((32, 32, 3), dtype=np.uint8)
    arr[:, 16:] = 255
    arr[4:12, 4:12] = (20, 40, 220)
    return arr


@pytest.fixture
def target_file(tmp_path, split_target):
    path = tmp_path / "target.png"
    Image.fromarray(split_target).save(path)
    return path
