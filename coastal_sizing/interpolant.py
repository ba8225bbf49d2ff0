"""
The finished sizing function handed to the mesh generator.

``SizingFunction`` evaluates the gridded field (degrees) bilinearly.  Queries
beyond the grid are clamped onto it, so they return the nearest in-grid value
rather than an extrapolation.
"""

from __future__ import annotations

import logging

import numpy as np
from scipy.interpolate import RegularGridInterpolator

from coastal_sizing.grid import Grid

logger = logging.getLogger(__name__)


class SizingFunction:
    """Read-only bilinear interpolant over a :class:`Grid`.

    Parameters
    ----------
    grid : Grid
    values : np.ndarray
        ``(nx, ny)`` sizes in degrees.
    criteria : sequence of str
        Kinds of the criteria that produced the field.
    h0, grade, dt : float, optional
        Parameters the field satisfies, recorded for downstream checks.
    """

    def __init__(self, grid, values, criteria=(), h0=None, grade=None, dt=None):
        values = np.array(values, dtype=float)
        if values.shape != grid.shape:
            raise ValueError(f"values shape {values.shape} does not match grid {grid.shape}")
        self.grid = grid
        self.values = values
        self.values.setflags(write=False)
        self.criteria = tuple(criteria)
        self.h0 = h0
        self.grade = grade
        self.dt = dt
        self._interp = RegularGridInterpolator(
            (grid.lon, grid.lat), values, method="linear", bounds_error=False
        )

    def __call__(self, lon, lat=None):
        """Evaluate at ``(lon, lat)`` arrays, or at an ``(N, 2)`` array of points."""
        if lat is None:
            pts = np.atleast_2d(np.asarray(lon, dtype=float))
            lon, lat = pts[:, 0], pts[:, 1]
        xmin, xmax, ymin, ymax = self.grid.extent
        lon = np.clip(np.asarray(lon, dtype=float), xmin, xmax)
        lat = np.clip(np.asarray(lat, dtype=float), ymin, ymax)
        shape = np.broadcast(lon, lat).shape
        pts = np.column_stack(
            (np.broadcast_to(lon, shape).ravel(), np.broadcast_to(lat, shape).ravel())
        )
        return self._interp(pts).reshape(shape)

    def record(self) -> dict:
        """Machine-readable description of the field for downstream diagnostics."""
        return {
            "criteria": list(self.criteria),
            "grid": {
                "x0": self.grid.x0,
                "y0": self.grid.y0,
                "spacing": self.grid.spacing,
                "nx": self.grid.nx,
                "ny": self.grid.ny,
            },
            "h0": self.h0,
            "grade": self.grade,
            "dt": self.dt,
        }

    def save(self, path):
        """Persist grid, values and metadata to a ``.npz`` file."""
        g = self.grid
        np.savez_compressed(
            path,
            values=self.values,
            grid=np.array([g.x0, g.y0, g.spacing, g.nx, g.ny, g.centroid_lat]),
            criteria=np.array(self.criteria, dtype=str),
            params=np.array(
                [np.nan if v is None else v for v in (self.h0, self.grade, self.dt)],
                dtype=float,
            ),
        )
        logger.info("Saved sizing function to %s", path)

    @classmethod
    def load(cls, path) -> "SizingFunction":
        with np.load(path) as data:
            x0, y0, spacing, nx, ny, centroid_lat = data["grid"]
            grid = Grid(
                x0=float(x0), y0=float(y0), spacing=float(spacing),
                nx=int(nx), ny=int(ny), centroid_lat=float(centroid_lat),
            )
            h0, grade, dt = (None if np.isnan(v) else float(v) for v in data["params"])
            return cls(
                grid,
                data["values"].copy(),
                criteria=[str(c) for c in data["criteria"]],
                h0=h0,
                grade=grade,
                dt=dt,
            )
