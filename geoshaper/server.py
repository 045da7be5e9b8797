"""geoshaper -- Web API Server.

Upload an image, get back its shape approximation as a base64 PNG plus the
accepted polygon list.

Launch:
    python -m geoshaper.server
    # or: uvicorn geoshaper.server:app --reload
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, File, Query, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from geoshaper.art.renderer import decode_image, image_to_base64
from geoshaper.config import (
    DEFAULT_MAX_GENERATIONS,
    DEFAULT_NUM_CANDIDATES,
    DEFAULT_WORKERS,
    Options,
    ShapeKind,
)
from geoshaper.errors import ConfigError, DecodeError, GeoshaperError
from geoshaper.evolution.simulation import Simulation

logger = logging.getLogger(__name__)

# Upper bounds on per-request work.
MAX_API_GENERATIONS = 2000
MAX_API_CANDIDATES = 1000
MAX_API_WORKERS = 64

app = FastAPI(title="geoshaper")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# API routes
# ---------------------------------------------------------------------------

@app.get("/api/health")
def api_health():
    return JSONResponse({"status": "ok"})


@app.get("/api/defaults")
def api_defaults():
    return JSONResponse(Options().model_dump(mode="json"))


@app.post("/api/approximate")
def api_approximate(
    file: UploadFile = File(...),
    shape: ShapeKind = Query("triangle"),
    max_generations: int = Query(DEFAULT_MAX_GENERATIONS, le=MAX_API_GENERATIONS),
    num_candidates: int = Query(DEFAULT_NUM_CANDIDATES, le=MAX_API_CANDIDATES),
    workers: int = Query(DEFAULT_WORKERS, le=MAX_API_WORKERS),
    seed: int | None = Query(None),
):
    try:
        options = Options.build(
            shape=shape,
            max_generations=max_generations,
            num_candidates=num_candidates,
            workers=workers,
            seed=seed,
        )
    except ConfigError as e:
        return JSONResponse({"error": str(e)}, status_code=422)

    try:
        target = decode_image(file.file.read())
    except DecodeError as e:
        return JSONResponse({"error": str(e)}, status_code=400)

    logger.info("Approximating %s upload (%dx%d) with %s",
                file.filename, target.shape[1], target.shape[0], options.shape)
    try:
        sim = Simulation(target, options)
        image = sim.run()
        pixels = image.raster()
        fitness = image.fitness_full()
    except GeoshaperError as e:
        logger.error("Approximation failed: %s", e)
        return JSONResponse({"error": str(e)}, status_code=500)

    return JSONResponse({
        "image": image_to_base64(pixels),
        "svg": image.to_svg(),
        "width": image.width,
        "height": image.height,
        "generations": sim.generation,
        "accepted": sum(1 for r in sim.history if r.accepted),
        "polygons": [p.to_dict() for p in image.polygons],
        "fitness": fitness,
    })


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    print("Starting server at http://localhost:8000")
    uvicorn.run(app, host="0.0.0.0", port=8000)
