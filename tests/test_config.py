"""Tests for run option validation."""

import pytest

from geoshaper.config import Options
from geoshaper.errors import ConfigError


def test_defaults():
    opts = Options()
    assert opts.shape == "triangle"
    assert opts.max_generations == 200
    assert opts.num_candidates == 100
    assert opts.render_debug_rasters is False
    assert opts.output_path == "result.png"
    assert opts.rotation_range == (0.0, 360.0)
    assert opts.scale_range == (0.5, 2.0)
    assert opts.opacity == 0.9
    assert opts.seed is None


@pytest.mark.parametrize("kwargs", [
    {"shape": "circle"},
    {"max_generations": -1},
    {"num_candidates": 0},
    {"workers": 0},
    {"opacity": 0.0},
    {"opacity": 1.5},
    {"rotation_range": (90.0, 10.0)},
    {"scale_range": (1.0, 1.0)},
    {"scale_range": (-1.0, 2.0)},
])
def test_build_rejects_invalid(kwargs):
    with pytest.raises(ConfigError):
        Options.build(**kwargs)


def test_build_accepts_zero_generations():
    assert Options.build(max_generations=0, seed=5).max_generations == 0
