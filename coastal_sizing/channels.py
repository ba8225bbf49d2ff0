"""
Channel size criterion.

Channel cross-sections are approximated as a V with side slopes at the
repose angle, so the half-width at a vertex is ``tan(angle) * |depth|``.
Around every channel vertex inside the domain a square stencil wide enough to
cover that half-width is stamped with ``|depth| / divisor``.  Overlapping
stencils keep the value stamped last.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np

from coastal_sizing import defaults
from coastal_sizing.errors import GeometryDegenerate

logger = logging.getLogger(__name__)


@dataclass
class Channel:
    """A channel centreline with its estimated half-width (degrees) per vertex."""

    points: np.ndarray
    half_width: np.ndarray

    def __post_init__(self):
        self.points = np.atleast_2d(np.asarray(self.points, dtype=float))
        self.half_width = np.asarray(self.half_width, dtype=float)
        if self.half_width.shape != (self.points.shape[0],):
            raise ValueError("half_width needs one value per channel vertex")


def estimate_channels(polylines, bathymetry, repose_angle_deg=defaults.REPOSE_ANGLE_DEG):
    """Build :class:`Channel` records from raw polylines using local depth."""
    slope = math.tan(math.radians(repose_angle_deg))
    channels = []
    for line in polylines:
        pts = np.atleast_2d(np.asarray(line, dtype=float))
        if pts.shape[0] == 0:
            continue
        depth = np.asarray(bathymetry(pts[:, 0], pts[:, 1]), dtype=float)
        channels.append(Channel(pts, slope * np.abs(depth) / defaults.METERS_PER_DEGREE))
    return channels


def stencil(grid, i, j, half_cells):
    """Return clamped ``(ii, jj)`` index arrays of the square around node ``(i, j)``."""
    if half_cells > defaults.MAX_STENCIL_CELLS:
        raise GeometryDegenerate(
            f"Channel stencil of {half_cells} cells exceeds the limit of "
            f"{defaults.MAX_STENCIL_CELLS}",
            stencil=half_cells,
        )
    offsets = np.arange(-half_cells, half_cells + 1)
    ii = np.clip(i + offsets, 0, grid.nx - 1)
    jj = np.clip(j + offsets, 0, grid.ny - 1)
    ii, jj = np.meshgrid(ii, jj, indexing="ij")
    return ii.ravel(), jj.ravel()


def channel_sizes(grid, depth, channels, boundary, divisor, min_el_ch, h0):
    """Imprint channel sizes onto the grid.

    Returns
    -------
    layer : np.ndarray
        Sizes in degrees, ``NaN`` away from channels.
    skipped : int
        Number of vertices skipped because their stencil was too large.
    """
    layer = np.full(grid.shape, np.nan)
    kept = [ch for ch in channels if np.any(boundary.contains(ch.points))]
    logger.info(
        "Building channel layer from %d of %d channels (divisor=%s)",
        len(kept), len(channels), divisor,
    )
    skipped = 0
    for channel in kept:
        inside = boundary.contains(channel.points)
        pts = channel.points[inside]
        half_width = channel.half_width[inside]
        ci, cj = grid.nearest_index(pts[:, 0], pts[:, 1])
        for i, j, width in zip(ci, cj, half_width):
            half_cells = int(math.ceil(width * defaults.METERS_PER_DEGREE / h0))
            try:
                ii, jj = stencil(grid, int(i), int(j), half_cells)
            except GeometryDegenerate as exc:
                logger.warning("Skipping channel point near node (%d, %d): %s", i, j, exc)
                skipped += 1
                continue
            layer[ii, jj] = np.abs(depth[ii, jj]) / divisor
    layer[layer < min_el_ch] = min_el_ch
    return grid.meters_to_degrees(layer), skipped
