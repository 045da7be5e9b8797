"""Run options for the hill-climbing approximation.

One pydantic model serves the CLI, the HTTP API and library callers, so the
same validation applies everywhere.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, ValidationError, field_validator

from geoshaper.errors import ConfigError

ShapeKind = Literal["rectangle", "triangle"]
SHAPE_KINDS: tuple[str, ...] = ("rectangle", "triangle")

DEFAULT_MAX_GENERATIONS = 200
DEFAULT_NUM_CANDIDATES = 100
DEFAULT_WORKERS = 4


class Options(BaseModel):
    shape: ShapeKind = "triangle"
    max_generations: int = Field(DEFAULT_MAX_GENERATIONS, ge=0)
    num_candidates: int = Field(DEFAULT_NUM_CANDIDATES, ge=1)
    workers: int = Field(DEFAULT_WORKERS, ge=1)
    render_debug_rasters: bool = False
    debug_dir: str = "output"
    output_path: str = "result.png"
    # Not read by the generation loop; kept so older option files still load.
    population_size: int = Field(1, ge=1)
    rotation_range: tuple[float, float] = (0.0, 360.0)
    scale_range: tuple[float, float] = (0.5, 2.0)
    opacity: float = Field(0.9, gt=0.0, le=1.0)
    seed: int | None = None

    @field_validator("rotation_range", "scale_range")
    @classmethod
    def _check_range(cls, v: tuple[float, float]) -> tuple[float, float]:
        lo, hi = v
        if not lo < hi:
            raise ValueError(f"range must satisfy low < high, got {v}")
        return v

    @field_validator("scale_range")
    @classmethod
    def _check_scale_positive(cls, v: tuple[float, float]) -> tuple[float, float]:
        if v[0] <= 0:
            raise ValueError("scale factors must be positive")
        return v

    @classmethod
    def build(cls, **kwargs) -> Options:
        """Validate keyword options, reporting problems as ConfigError."""
        try:
            return cls(**kwargs)
        except ValidationError as e:
            raise ConfigError(f"invalid options: {e}") from e
