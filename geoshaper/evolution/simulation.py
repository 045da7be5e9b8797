"""Greedy hill-climbing over one-polygon mutations.

Each generation:
1. draws one shape template from the configured generator,
2. derives ``num_candidates`` mutations of the accepted image from it,
3. scores every mutation's windowed error on a thread pool,
4. keeps the best mutation only if it beats the accepted image over the
   same window.

Workers share nothing mutable.  Each returns its own ``CandidateResult`` and
the winner is picked by one sequential reduction after the pool joins
(lowest fitness, then lowest candidate id), so a seeded run is reproducible.
"""

from __future__ import annotations

import json
import logging
import math
import random
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable

import numpy as np

from geoshaper.art.fitness import average_color
from geoshaper.art.renderer import load_image, rasterize
from geoshaper.config import Options
from geoshaper.errors import ConfigError, RasterWriteError, RenderError
from geoshaper.evolution.individual import GImage, Rasterizer
from geoshaper.shapes.generators import create_polygon
from geoshaper.shapes.geometry import Polygon

logger = logging.getLogger(__name__)


class Phase(Enum):
    INITIALIZING = "initializing"
    GENERATING = "generating"
    EVALUATING = "evaluating"
    DECIDING = "deciding"
    FINISHED = "finished"


@dataclass(frozen=True)
class CandidateResult:
    id: int
    fitness: float


@dataclass
class GenerationReport:
    generation: int
    accepted: bool
    winner_id: int | None
    winner_fitness: float
    current_fitness: float | None
    polygon_count: int


def select_winner(results: Iterable[CandidateResult]) -> CandidateResult | None:
    """Lowest fitness wins; exact ties go to the lowest candidate id."""
    best: CandidateResult | None = None
    for r in results:
        if best is None or (r.fitness, r.id) < (best.fitness, best.id):
            best = r
    return best


def evaluate_candidate(candidate: GImage) -> CandidateResult:
    """Score one mutation, mapping a failure to an unbeatable fitness."""
    try:
        fitness = candidate.fitness_mutation()
    except (RenderError, ConfigError) as e:
        logger.warning("Candidate %d penalized: %s", candidate.id, e)
        fitness = math.inf
    return CandidateResult(candidate.id, fitness)


class Simulation:
    def __init__(self, target: np.ndarray, options: Options | None = None,
                 rasterizer: Rasterizer = rasterize,
                 on_generation: Callable[[GenerationReport], None] | None = None,
                 initial_polygons: list[Polygon] | None = None):
        self.options = options or Options()
        arr = np.asarray(target)
        if arr.ndim != 3 or arr.shape[2] < 3 or arr.shape[0] == 0 or arr.shape[1] == 0:
            raise ConfigError(f"target must be an (H, W, 3) image, got shape {arr.shape}")
        self.target = np.array(arr[..., :3], dtype=np.uint8)
        self.target.flags.writeable = False
        self.height, self.width = self.target.shape[:2]

        self.rng = random.Random(self.options.seed)
        self.rasterizer = rasterizer
        self.on_generation = on_generation
        self.initial_polygons = [p.copy() for p in initial_polygons or []]

        self.image: GImage | None = None
        self.generation: int = 0
        self.phase: Phase = Phase.INITIALIZING
        self.history: list[GenerationReport] = []
        self._next_id = 0

    # ------------------------------------------------------------------
    # Initialization
    # ------------------------------------------------------------------

    def _new_id(self) -> int:
        self._next_id += 1
        return self._next_id

    def initialize(self) -> None:
        self.phase = Phase.INITIALIZING
        background = average_color(self.target)
        self.image = GImage(
            self._new_id(), self.target, background, self.width, self.height,
            polygons=[p.copy() for p in self.initial_polygons],
            opacity=self.options.opacity, rasterizer=self.rasterizer,
        )
        self.generation = 0
        self.history = []
        logger.info("Initialized %dx%d target, background rgb%s, %d shapes",
                    self.width, self.height, background, len(self.image.polygons))
        self._advance_phase()

    @property
    def finished(self) -> bool:
        return self.phase is Phase.FINISHED

    def _advance_phase(self) -> None:
        if self.generation >= self.options.max_generations:
            self.phase = Phase.FINISHED
        else:
            self.phase = Phase.GENERATING

    # ------------------------------------------------------------------
    # Generation loop
    # ------------------------------------------------------------------

    def _generate(self) -> list[GImage]:
        opts = self.options
        template = create_polygon(opts.shape, self.width, self.height, self.rng)
        return [
            self.image.mutate(template, self._new_id(), self.rng,
                              rotation_range=opts.rotation_range,
                              scale_range=opts.scale_range)
            for _ in range(opts.num_candidates)
        ]

    def _evaluate(self, candidates: list[GImage]) -> list[CandidateResult]:
        workers = min(self.options.workers, len(candidates))
        if workers <= 1:
            results = [evaluate_candidate(c) for c in candidates]
        else:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                results = list(executor.map(evaluate_candidate, candidates))
        for r in results:
            logger.debug("Generation %d candidate %d fitness %.4f",
                         self.generation, r.id, r.fitness)
        return results

    def _decide(self, winner: CandidateResult | None,
                candidates: list[GImage]) -> GenerationReport:
        g = self.generation
        if winner is None or math.isinf(winner.fitness):
            logger.info("Generation %d: no scorable candidate, rejected", g)
            return GenerationReport(g, False, None, math.inf, None,
                                    len(self.image.polygons))

        mutation = next(c for c in candidates if c.id == winner.id)
        area = mutation.mutation_area()
        try:
            current = self.image.fitness_in_area(area)
        except (RenderError, ConfigError) as e:
            raise RenderError(
                f"scoring the accepted image at generation {g} failed: {e}"
            ) from e

        accepted = current > winner.fitness
        if accepted:
            self.image.add_polygon(mutation.last_polygon())
            logger.info("Generation %d: accepted candidate %d (%.3f < %.3f), %d polygons",
                        g, winner.id, winner.fitness, current, len(self.image.polygons))
            if self.options.render_debug_rasters:
                self._write_debug_raster(g)
        else:
            logger.debug("Generation %d: rejected candidate %d (%.3f >= %.3f)",
                         g, winner.id, winner.fitness, current)
        return GenerationReport(g, accepted, winner.id, winner.fitness, current,
                                len(self.image.polygons))

    def _write_debug_raster(self, generation: int) -> None:
        path = Path(self.options.debug_dir) / f"gen_{generation:04d}.png"
        try:
            self.image.save_raster(path)
        except RasterWriteError as e:
            logger.warning("Debug snapshot for generation %d not written: %s",
                           generation, e)

    def step(self) -> GenerationReport:
        """Run one generation and return what happened."""
        if self.image is None:
            self.initialize()
        if self.finished:
            raise RuntimeError("simulation already finished")

        self.phase = Phase.GENERATING
        try:
            candidates = self._generate()
        except ConfigError as e:
            logger.warning("Generation %d: degenerate template, rejected: %s",
                           self.generation, e)
            candidates = []

        self.phase = Phase.EVALUATING
        results = self._evaluate(candidates) if candidates else []

        self.phase = Phase.DECIDING
        report = self._decide(select_winner(results), candidates)

        self.history.append(report)
        self.generation += 1
        self._advance_phase()
        if self.on_generation is not None:
            self.on_generation(report)
        return report

    def run(self) -> GImage:
        if self.image is None:
            self.initialize()
        while not self.finished:
            self.step()
        accepted = sum(1 for r in self.history if r.accepted)
        logger.info("Finished %d generations, %d accepted, %d polygons",
                    self.generation, accepted, len(self.image.polygons))
        return self.image


def load_shapes(path: str | Path, width: int, height: int) -> list[Polygon]:
    """Read a shapes export back into polygons for a ``width`` x ``height`` canvas."""
    path = Path(path)
    try:
        data = json.loads(path.read_text())
    except (OSError, ValueError) as e:
        raise ConfigError(f"cannot read shapes from {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{path} is not a shapes export")
    if (data.get("width"), data.get("height")) != (width, height):
        raise ConfigError(
            f"{path} was exported for a {data.get('width')}x{data.get('height')} "
            f"canvas, target is {width}x{height}"
        )
    try:
        polygons = [Polygon.from_dict(d, width, height) for d in data.get("polygons", [])]
    except (KeyError, TypeError, ValueError) as e:
        raise ConfigError(f"malformed shape in {path}: {e}") from e
    for p in polygons:
        if len(p.points) != p.num_points:
            raise ConfigError(f"{p.kind} in {path} has {len(p.points)} points")
    return polygons


def run(image_path: str | Path, options: Options | None = None,
        on_generation: Callable[[GenerationReport], None] | None = None,
        resume_from: str | Path | None = None) -> GImage:
    """Load ``image_path``, approximate it and write the result PNG.

    With ``resume_from``, generation 0 starts from a previous shapes export.
    """
    options = options or Options()
    target = load_image(image_path)
    height, width = target.shape[:2]
    initial = load_shapes(resume_from, width, height) if resume_from else None
    sim = Simulation(target, options, on_generation=on_generation,
                     initial_polygons=initial)
    image = sim.run()
    path = image.save_raster(options.output_path)
    logger.info("Wrote %s", path)
    return image
