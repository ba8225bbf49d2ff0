"""Tidal wavelength size criterion."""

from __future__ import annotations

import logging

import numpy as np

from coastal_sizing import defaults
from coastal_sizing.grid import to_degrees

logger = logging.getLogger(__name__)

EPS = np.finfo(float).eps


def band_mask(depth, band) -> np.ndarray:
    """Nodes whose depth lies strictly inside ``(band.depth_lo, band.depth_hi)``."""
    return (depth < band.depth_hi) & (depth > band.depth_lo)


def wavelength_sizes(grid, depth, criterion) -> np.ndarray:
    """Sizes (degrees) resolving the shallow-water wavelength ``T * sqrt(g * |h|)``.

    Bands are applied in configuration order; where bands overlap the last one
    wins.  Nodes outside every band are ``NaN``.
    """
    _, yg = grid.coordinates()
    layer = np.full(grid.shape, np.nan)
    celerity = np.sqrt(defaults.GRAVITY_MS2 * np.abs(depth + EPS))
    for band in criterion.bands:
        logger.info(
            "Building wavelength layer: %s elements per wavelength for %s < depth < %s",
            band.divisor, band.depth_lo, band.depth_hi,
        )
        sizes = np.minimum(criterion.period_s * celerity / band.divisor, defaults.MAX_SIZE_M)
        sizes = to_degrees(yg, sizes)
        sel = band_mask(depth, band)
        layer[sel] = sizes[sel]
    return layer
