"""
Structured lon/lat evaluation grid and unit conversions.

Every size layer is an ``(nx, ny)`` array laid out with ``indexing="ij"``:
axis 0 runs east along longitude, axis 1 runs north along latitude.  Row-major
flattening therefore walks latitude fastest.

Sizes travel between two unit systems:

* geographic degrees -- the unit of every layer and of the finished field;
* planar metres -- used for bounds, CFL and grading arithmetic.

The conversion is the haversine length of a zonal segment at the local
latitude, so ``to_degrees(lat, to_planar_meters(lat, h)) == h``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from coastal_sizing import defaults


@dataclass(frozen=True)
class Grid:
    """Uniform lon/lat grid shared by all layers of one sizing field.

    Parameters
    ----------
    x0, y0 : float
        Longitude/latitude of node ``(0, 0)``.
    spacing : float
        Node spacing in degrees, identical along both axes.
    nx, ny : int
        Number of nodes along longitude and latitude.
    centroid_lat : float
        Representative latitude (mean of the bounding-box latitude extent).
    """

    x0: float
    y0: float
    spacing: float
    nx: int
    ny: int
    centroid_lat: float

    @classmethod
    def from_bbox(cls, bbox, h0, origin=None) -> "Grid":
        """Derive the grid from a ``(xmin, xmax, ymin, ymax)`` box and ``h0`` in metres.

        The spacing satisfies ``spacing * 111e3 * cos(centroid_lat) == h0`` and
        the node count reaches at least to the far corner of the box.
        """
        xmin, xmax, ymin, ymax = (float(v) for v in bbox)
        if xmax <= xmin or ymax <= ymin:
            raise ValueError(f"Degenerate bounding box: {bbox}")
        if h0 <= 0:
            raise ValueError("h0 must be positive")
        x0, y0 = (xmin, ymin) if origin is None else (float(origin[0]), float(origin[1]))
        centroid_lat = 0.5 * (ymin + ymax)
        spacing = h0 / (math.cos(math.radians(centroid_lat)) * defaults.METERS_PER_DEGREE)
        nx = int(math.ceil(abs(xmax - x0) / spacing)) + 1
        ny = int(math.ceil(abs(ymax - y0) / spacing)) + 1
        return cls(x0=x0, y0=y0, spacing=spacing, nx=nx, ny=ny, centroid_lat=centroid_lat)

    @property
    def shape(self):
        return (self.nx, self.ny)

    @property
    def size(self) -> int:
        return self.nx * self.ny

    @property
    def lon(self) -> np.ndarray:
        return self.x0 + np.arange(self.nx) * self.spacing

    @property
    def lat(self) -> np.ndarray:
        return self.y0 + np.arange(self.ny) * self.spacing

    @property
    def extent(self):
        """``(xmin, xmax, ymin, ymax)`` covered by the nodes."""
        return (
            self.x0,
            self.x0 + (self.nx - 1) * self.spacing,
            self.y0,
            self.y0 + (self.ny - 1) * self.spacing,
        )

    def coordinates(self):
        """Return ``(xg, yg)`` node coordinate arrays of shape ``(nx, ny)``."""
        return np.meshgrid(self.lon, self.lat, indexing="ij")

    def points(self) -> np.ndarray:
        """Return an ``(nx * ny, 2)`` array of node coordinates in row-major order."""
        xg, yg = self.coordinates()
        return np.column_stack((xg.ravel(), yg.ravel()))

    def nearest_index(self, lon, lat):
        """Return the ``(i, j)`` indices of the nodes nearest to ``lon``, ``lat``."""
        i = np.rint((np.asarray(lon, dtype=float) - self.x0) / self.spacing).astype(int)
        j = np.rint((np.asarray(lat, dtype=float) - self.y0) / self.spacing).astype(int)
        return np.clip(i, 0, self.nx - 1), np.clip(j, 0, self.ny - 1)

    def planar_spacing(self):
        """Return ``(dx, dy)`` in metres at the mean grid latitude (haversine assumption)."""
        mean_lat = float(np.mean(self.lat))
        dy = self.spacing * defaults.EARTH_RADIUS_M * math.pi / 180.0
        dx = dy * math.cos(math.radians(mean_lat))
        return dx, dy

    def meters_to_degrees(self, meters):
        """Convert metres to degrees with the grid's centroid-latitude scale."""
        return np.asarray(meters, dtype=float) / (
            math.cos(math.radians(self.centroid_lat)) * defaults.METERS_PER_DEGREE
        )


def to_planar_meters(lat, values):
    """Convert sizes in degrees of longitude at ``lat`` to metres.

    ``NaN`` entries pass through unchanged.
    """
    lat = np.radians(np.asarray(lat, dtype=float))
    half = np.radians(np.asarray(values, dtype=float)) / 2.0
    arg = np.clip(np.cos(lat) * np.abs(np.sin(half)), 0.0, 1.0)
    return 2.0 * defaults.EARTH_RADIUS_M * np.arcsin(arg)


def to_degrees(lat, values):
    """Convert sizes in metres to degrees of longitude at ``lat``.

    Inverse of :func:`to_planar_meters`.  Sizes too large to fit on the parallel
    saturate at 180 degrees; callers cap inputs at ``MAX_SIZE_M`` beforehand.
    """
    lat = np.radians(np.asarray(lat, dtype=float))
    meters = np.asarray(values, dtype=float)
    arg = np.abs(np.sin(meters / (2.0 * defaults.EARTH_RADIUS_M))) / np.cos(lat)
    return np.degrees(2.0 * np.arcsin(np.clip(arg, 0.0, 1.0)))
