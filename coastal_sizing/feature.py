"""
Feature-size criterion from the medial axis of the signed distance field.

The width of a channel or estuary at a node is approximated by the distance
to the nearest medial-axis point plus the distance to the boundary.  Medial
points are located where the distance field stops being a unit-gradient
function (the ridge where wavefronts from opposite shores meet).

Steps:

1. candidates where ``|grad d| < 0.9`` and ``d < -0.5 * spacing``;
2. pinch nodes: interior nodes whose two row or two column neighbours are
   both on or outside the boundary, so one-cell-wide channels still get a
   medial point;
3. prune points without three near neighbours within ``2*sqrt(2)``, ``4*sqrt(2)``
   and ``6*sqrt(2)`` grid spacings;
4. feature size ``2 * (d_medial - d) / R`` at every node.
"""

from __future__ import annotations

import logging

import numpy as np

from coastal_sizing import defaults
from coastal_sizing.spatial import NearestNeighbor

logger = logging.getLogger(__name__)


def medial_candidates(distance, spacing) -> np.ndarray:
    """Boolean mask of gradient singularities sufficiently inside the domain."""
    ddx, ddy = np.gradient(distance, spacing)
    grad = np.hypot(ddx, ddy)
    return (grad < defaults.MEDIAL_GRADIENT_THRESHOLD) & (
        distance < -defaults.MEDIAL_INTERIOR_FRACTION * spacing
    )


def pinch_points(distance) -> np.ndarray:
    """Boolean mask of interior nodes squeezed between boundary crossings."""
    mask = np.zeros(distance.shape, dtype=bool)
    if min(distance.shape) < 3:
        return mask
    centre = distance[1:-1, 1:-1]
    across_x = (distance[:-2, 1:-1] >= 0) & (distance[2:, 1:-1] >= 0)
    across_y = (distance[1:-1, :-2] >= 0) & (distance[1:-1, 2:] >= 0)
    mask[1:-1, 1:-1] = (centre < 0) & (across_x | across_y)
    return mask


def prune_isolated(points, spacing) -> np.ndarray:
    """Drop medial points that lack three close neighbours along the axis."""
    if points.shape[0] < 4:
        return points[:0]
    dmed, _ = NearestNeighbor(points).query(points, k=4)
    cutoff = defaults.MEDIAL_PRUNE_CUTOFF * spacing
    prune = (dmed[:, 1] > cutoff) | (dmed[:, 2] > 2 * cutoff) | (dmed[:, 3] > 3 * cutoff)
    logger.debug("Pruned %d of %d medial points", int(prune.sum()), points.shape[0])
    return points[~prune]


def medial_points(grid, distance) -> np.ndarray:
    """Return the surviving medial-axis points as an ``(N, 2)`` lon/lat array."""
    flagged = medial_candidates(distance, grid.spacing) | pinch_points(distance)
    xg, yg = grid.coordinates()
    points = np.column_stack((xg[flagged], yg[flagged]))
    return prune_isolated(points, grid.spacing)


def feature_sizes(grid, distance, elements_per_feature) -> np.ndarray:
    """Feature-size layer in degrees; all ``NaN`` when no medial axis survives."""
    logger.info("Building feature size layer (R=%s)", elements_per_feature)
    medial = medial_points(grid, distance)
    if medial.shape[0] == 0:
        logger.warning("No medial axis points found; feature size layer is empty")
        return np.full(grid.shape, np.nan)
    logger.info("Found %d medial axis points", medial.shape[0])
    d_medial, _ = NearestNeighbor(medial).query(grid.points(), k=1)
    d_medial = d_medial.reshape(grid.shape)
    return 2.0 * (d_medial - distance) / elements_per_feature
