"""
Boundary and bathymetry collaborators consumed by the sizing pipeline.

The pipeline only depends on the two protocols below, so any boundary
representation (polygon, level set, raster mask) or bathymetry source can be
plugged in.  ``PolygonBoundary`` and ``GriddedBathymetry`` are the stock
implementations.

Sign convention: signed distances are **negative inside** the domain and
positive outside, in degrees.  Depths are **negative below sea level**.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

import numpy as np
import shapely
from scipy.interpolate import RegularGridInterpolator
from shapely.geometry import MultiPolygon, Polygon

logger = logging.getLogger(__name__)


@runtime_checkable
class DistanceEvaluator(Protocol):
    """Capability interface: point -> signed distance to the domain boundary."""

    bbox: tuple
    origin: tuple
    h0: float

    def signed_distance(self, points: np.ndarray) -> np.ndarray:
        """Return the signed distance (degrees, negative inside) at ``(N, 2)`` points."""
        ...

    def contains(self, points: np.ndarray) -> np.ndarray:
        """Return a boolean mask of points strictly inside the domain."""
        ...


@runtime_checkable
class Bathymetry(Protocol):
    """Continuous depth interpolant callable at arbitrary lon/lat."""

    def __call__(self, lon, lat) -> np.ndarray:
        ...


class PolygonBoundary:
    """Domain boundary given as a (multi)polygon in lon/lat.

    Parameters
    ----------
    polygon : shapely Polygon/MultiPolygon, or a sequence of rings
        The meshing domain.  A sequence is read as ``[exterior, *holes]``.
    h0 : float
        Minimum resolution in metres.
    bbox : tuple, optional
        ``(xmin, xmax, ymin, ymax)``; defaults to the polygon bounds.
    origin : tuple, optional
        Lower-left grid origin; defaults to ``(xmin, ymin)``.
    """

    def __init__(self, polygon, h0, bbox=None, origin=None):
        if not isinstance(polygon, (Polygon, MultiPolygon)):
            rings = [np.asarray(r, dtype=float) for r in polygon]
            polygon = Polygon(rings[0], rings[1:])
        if polygon.is_empty:
            raise ValueError("Boundary polygon is empty")
        if not polygon.is_valid:
            logger.warning("Boundary polygon is invalid; repairing with buffer(0)")
            polygon = polygon.buffer(0)
        self.polygon = polygon
        self.h0 = float(h0)
        if bbox is None:
            xmin, ymin, xmax, ymax = polygon.bounds
            bbox = (xmin, xmax, ymin, ymax)
        self.bbox = tuple(float(v) for v in bbox)
        self.origin = (self.bbox[0], self.bbox[2]) if origin is None else tuple(origin)
        self._outline = polygon.boundary
        shapely.prepare(self.polygon)
        shapely.prepare(self._outline)

    def signed_distance(self, points):
        points = np.atleast_2d(np.asarray(points, dtype=float))
        dist = shapely.distance(self._outline, shapely.points(points))
        inside = self.contains(points)
        return np.where(inside, -dist, dist)

    def contains(self, points):
        points = np.atleast_2d(np.asarray(points, dtype=float))
        return shapely.contains_xy(self.polygon, points[:, 0], points[:, 1])


class GriddedBathymetry:
    """Bilinear depth interpolant over a regular lon/lat raster.

    Queries outside the raster take the nearest edge value.
    """

    def __init__(self, lon, lat, depth):
        self.lon = np.asarray(lon, dtype=float)
        self.lat = np.asarray(lat, dtype=float)
        depth = np.asarray(depth, dtype=float)
        if depth.shape != (self.lon.size, self.lat.size):
            raise ValueError(
                f"depth shape {depth.shape} does not match (lon, lat) = "
                f"({self.lon.size}, {self.lat.size})"
            )
        # north-up rasters list latitude descending
        if self.lon.size > 1 and self.lon[0] > self.lon[-1]:
            self.lon = self.lon[::-1]
            depth = depth[::-1, :]
        if self.lat.size > 1 and self.lat[0] > self.lat[-1]:
            self.lat = self.lat[::-1]
            depth = depth[:, ::-1]
        self._interp = RegularGridInterpolator(
            (self.lon, self.lat), depth, method="linear", bounds_error=False
        )

    def __call__(self, lon, lat):
        lon = np.clip(np.asarray(lon, dtype=float), self.lon[0], self.lon[-1])
        lat = np.clip(np.asarray(lat, dtype=float), self.lat[0], self.lat[-1])
        shape = np.broadcast(lon, lat).shape
        pts = np.column_stack((np.broadcast_to(lon, shape).ravel(), np.broadcast_to(lat, shape).ravel()))
        return self._interp(pts).reshape(shape)
