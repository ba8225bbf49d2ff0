"""
Combination of size layers, bound enforcement and the CFL limiter.

All functions here except :func:`combine_layers` work in planar metres.
"""

from __future__ import annotations

import logging
import math

import numpy as np

from coastal_sizing import defaults
from coastal_sizing.errors import ConfigurationError, MissingCriterionError

logger = logging.getLogger(__name__)


def combine_layers(layers) -> np.ndarray:
    """Elementwise minimum of ``layers`` ignoring ``NaN``.

    A node is ``NaN`` in the result only when it is ``NaN`` in every layer.
    """
    layers = list(layers)
    if not layers:
        raise ConfigurationError("No size criteria were enabled")
    return np.fmin.reduce(np.stack(layers), axis=0)


def apply_bounds(h, config, distance=None, depth=None):
    """Apply the nearshore cap, the ``h0`` floor and ``max_el`` caps.

    Parameters
    ----------
    h : np.ndarray
        Sizes in metres (not modified).
    config : SizingConfig
    distance : np.ndarray, optional
        Signed distance to the boundary (degrees); needed for ``max_el_ns``.
    depth : np.ndarray, optional
        Depth on the grid; needed for banded ``max_el``.

    Returns
    -------
    (np.ndarray, dict)
        Bounded sizes and the number of nodes changed by each rule.
    """
    h = np.array(h, dtype=float)
    counts = {"nearshore": 0, "floor": 0, "ceiling": 0}

    if math.isfinite(config.max_el_ns):
        if distance is None:
            raise ConfigurationError("max_el_ns needs the boundary distance layer")
        sel = (np.abs(distance) < defaults.NEARSHORE_DISTANCE_DEG) & (h > config.max_el_ns)
        h[sel] = config.max_el_ns
        counts["nearshore"] = int(sel.sum())

    sel = h < config.h0
    h[sel] = config.h0
    counts["floor"] = int(sel.sum())

    if config.banded_max_el:
        if depth is None:
            raise ConfigurationError("Depth-banded max_el needs a bathymetry interpolant")
        for band in config.max_el:
            sel = (depth < band.depth_hi) & (depth > band.depth_lo) & (h > band.max_el)
            h[sel] = band.max_el
            counts["ceiling"] += int(sel.sum())
    elif math.isfinite(config.global_max_el):
        sel = h > config.global_max_el
        h[sel] = config.global_max_el
        counts["ceiling"] = int(sel.sum())

    logger.info(
        "Bounds enforced: %d nearshore, %d floor, %d ceiling nodes changed",
        counts["nearshore"], counts["floor"], counts["ceiling"],
    )
    return h, counts


def wave_speed(depth) -> np.ndarray:
    """Shallow-water speed plus the orbital velocity of a 1 m amplitude wave.

    ``u = sqrt(g|h|) + sqrt(g/|h|)`` with depth limited to at least 1 m.
    """
    h = np.abs(np.minimum(np.asarray(depth, dtype=float), -defaults.MIN_CFL_DEPTH_M))
    return np.sqrt(defaults.GRAVITY_MS2 * h) + np.sqrt(defaults.GRAVITY_MS2 / h)


def automatic_timestep(reference, depth) -> float:
    """Largest timestep keeping ``reference`` sizes (metres) at the stability CFL on wet nodes."""
    wet = np.asarray(depth) < 0
    if not np.any(wet):
        raise ConfigurationError("Cannot derive a timestep: no wet nodes in the domain")
    u = wave_speed(depth)
    candidates = defaults.CFL_STABILITY * np.asarray(reference, dtype=float)[wet] / u[wet]
    candidates = candidates[np.isfinite(candidates)]
    if candidates.size == 0:
        raise MissingCriterionError(
            "Cannot derive a timestep: the reference size layer is undefined on every wet node"
        )
    return float(candidates.min())


def courant_number(h, depth, dt) -> np.ndarray:
    return dt * wave_speed(depth) / h


def enforce_cfl(h, depth, dt):
    """Coarsen sizes (metres) whose Courant number at ``dt`` exceeds the stability fraction.

    Returns the limited sizes and the number of nodes changed.
    """
    h = np.array(h, dtype=float)
    u = wave_speed(depth)
    sel = dt * u / h > defaults.CFL_STABILITY
    h[sel] = dt * u[sel] / defaults.CFL_STABILITY
    logger.info("Enforcing timestep of %g s: %d nodes limited", dt, int(sel.sum()))
    return h, int(sel.sum())
