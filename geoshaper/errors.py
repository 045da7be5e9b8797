"""Error taxonomy for the approximation engine.

Per-candidate failures (RenderError, ConfigError) are absorbed by the
simulation and turned into a worst-possible fitness.  The same errors raised
while scoring the accepted image or writing the result abort the run.
"""

from __future__ import annotations


class GeoshaperError(Exception):
    """Base class for every error the package raises on purpose."""


class DecodeError(GeoshaperError):
    """The target image is missing or could not be decoded."""


class RenderError(GeoshaperError):
    """A shape list could not be rasterized."""


class RasterWriteError(GeoshaperError):
    """A raster could not be written to disk."""


class ConfigError(GeoshaperError):
    """Invalid options or a degenerate (zero-area) scoring window."""
