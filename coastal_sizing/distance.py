"""Signed distance to the domain boundary and the distance size criterion."""

from __future__ import annotations

import logging

import numpy as np

from coastal_sizing.errors import ConfigurationError

logger = logging.getLogger(__name__)


def distance_layer(grid, boundary) -> np.ndarray:
    """Evaluate the boundary's signed distance (degrees, negative inside) at every node."""
    d = np.asarray(boundary.signed_distance(grid.points()), dtype=float)
    if d.size != grid.size:
        raise ConfigurationError(
            f"Distance evaluator returned {d.size} values for {grid.size} grid nodes"
        )
    if not np.all(np.isfinite(d)):
        raise ConfigurationError("Distance evaluator returned non-finite values")
    return d.reshape(grid.shape)


def distance_sizes(grid, distance, rate) -> np.ndarray:
    """Sizes (degrees) growing linearly from ``grid.spacing`` at the boundary at ``rate``."""
    logger.info("Building distance layer (rate=%s)", rate)
    return grid.spacing + rate * np.abs(distance)
