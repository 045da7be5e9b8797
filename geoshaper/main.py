#!/usr/bin/env python3
"""geoshaper -- CLI Interface.

Approximates a target image with rectangles or triangles:
1. Loads the target and paints its average color as the background
2. Each generation proposes candidate shapes and scores them in parallel
3. Keeps the best candidate only if it lowers the local error
4. Writes the result PNG

Usage:
    python -m geoshaper.main -i image.png [--shape rectangle|triangle] [--maxiter N] [--debug]
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from geoshaper.config import (
    DEFAULT_MAX_GENERATIONS,
    DEFAULT_NUM_CANDIDATES,
    DEFAULT_WORKERS,
    SHAPE_KINDS,
    Options,
)
from geoshaper.errors import GeoshaperError
from geoshaper.evolution.simulation import GenerationReport, run

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None):
    p = argparse.ArgumentParser(
        prog="geoshaper",
        description="Approximate an image with simple geometric shapes",
    )
    p.add_argument("-i", "--image", required=True, help="Target image")
    p.add_argument(
        "-s", "--shape",
        choices=SHAPE_KINDS,
        default="triangle",
        help="Shape used to mimic the image (default: triangle)",
    )
    p.add_argument(
        "-m", "--maxiter",
        type=int,
        default=DEFAULT_MAX_GENERATIONS,
        help=f"Maximum number of generations (default: {DEFAULT_MAX_GENERATIONS})",
    )
    p.add_argument(
        "-c", "--candidates",
        type=int,
        default=DEFAULT_NUM_CANDIDATES,
        help=f"Candidates per generation (default: {DEFAULT_NUM_CANDIDATES})",
    )
    p.add_argument(
        "-w", "--workers",
        type=int,
        default=DEFAULT_WORKERS,
        help=f"Worker threads for scoring (default: {DEFAULT_WORKERS})",
    )
    p.add_argument("-d", "--debug", action="store_true", help="Render incremental rasters")
    p.add_argument("--debug-dir", default="output", help="Directory for debug rasters (default: output)")
    p.add_argument("-o", "--output", default="result.png", help="Result path (default: result.png)")
    p.add_argument("--seed", type=int, default=None, help="Random seed for a reproducible run")
    p.add_argument("--export-shapes", default=None, help="Also write the accepted shapes as JSON")
    p.add_argument("--svg", default=None, help="Also write the result as an SVG document")
    p.add_argument("--resume", default=None, help="Start from a previous --export-shapes file")
    p.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error"],
        default="info",
        help="Logging verbosity (default: info)",
    )
    p.add_argument("-q", "--quiet", action="store_true", help="No per-generation progress lines")
    return p.parse_args(argv)


def _progress(report: GenerationReport) -> None:
    mark = "+" if report.accepted else " "
    fitness = "-" if report.winner_fitness == float("inf") else f"{report.winner_fitness:.3f}"
    print(f"  [{mark}] gen {report.generation:4d}  best {fitness:>9}  shapes {report.polygon_count}")


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    try:
        options = Options.build(
            shape=args.shape,
            max_generations=args.maxiter,
            num_candidates=args.candidates,
            workers=args.workers,
            render_debug_rasters=args.debug,
            debug_dir=args.debug_dir,
            output_path=args.output,
            seed=args.seed,
        )

        if not args.quiet:
            print("=== geoshaper ===")
            print(f"Image: {args.image} | Shape: {options.shape} | "
                  f"Generations: {options.max_generations} | Candidates: {options.num_candidates}")
            print()

        image = run(args.image, options,
                    on_generation=None if args.quiet else _progress,
                    resume_from=args.resume)

        if args.export_shapes:
            path = Path(args.export_shapes)
            path.write_text(json.dumps(image.to_dict(), indent=2))
            print(f"Shapes saved to: {path}")
        if args.svg:
            print(f"SVG saved to: {image.save_svg(args.svg)}")
    except (GeoshaperError, OSError) as e:
        logger.error("%s", e)
        print(f"err: {e}", file=sys.stderr)
        return 1

    print(f"Result saved to: {options.output_path} ({len(image.polygons)} shapes)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
