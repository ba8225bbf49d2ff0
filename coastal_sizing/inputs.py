"""
Readers for the collaborator data referenced by a sizing configuration.

These cover the simple interchange formats the CLI accepts:

* boundary — GeoJSON (Feature, FeatureCollection or bare geometry) of
  Polygon/MultiPolygon features in lon/lat;
* bathymetry — ``.npz`` with ``lon`` (nx,), ``lat`` (ny,) and ``depth``
  (nx, ny) arrays, depth negative below sea level;
* channels — GeoJSON of LineString/MultiLineString centrelines.
"""

from __future__ import annotations

import json
import logging
import os

import numpy as np
import shapely
from shapely.geometry import LineString, MultiLineString, MultiPolygon, Polygon, shape

from coastal_sizing.boundary import GriddedBathymetry, PolygonBoundary

logger = logging.getLogger(__name__)


def _geometries(geojson):
    kind = geojson.get("type")
    if kind == "FeatureCollection":
        return [shape(f["geometry"]) for f in geojson.get("features", []) if f.get("geometry")]
    if kind == "Feature":
        return [shape(geojson["geometry"])]
    return [shape(geojson)]


def _read_json(path):
    if not os.path.isfile(path):
        raise FileNotFoundError(f'Could not find "{path}"')
    with open(path) as f:
        return json.load(f)


def load_boundary(path, h0, bbox=None) -> PolygonBoundary:
    """Read a GeoJSON domain boundary."""
    polygons = [g for g in _geometries(_read_json(path)) if isinstance(g, (Polygon, MultiPolygon))]
    if not polygons:
        raise AttributeError(f"No polygon features found in {path}")
    polygon = polygons[0] if len(polygons) == 1 else shapely.union_all(polygons)
    logger.info("Loaded boundary from %s (%d polygon features)", path, len(polygons))
    return PolygonBoundary(polygon, h0, bbox=bbox)


def load_bathymetry(path) -> GriddedBathymetry:
    """Read a gridded bathymetry ``.npz``."""
    if not os.path.isfile(path):
        raise FileNotFoundError(f'Could not find "{path}"')
    with np.load(path) as data:
        missing = {"lon", "lat", "depth"} - set(data.files)
        if missing:
            raise KeyError(f"{path} is missing arrays: {', '.join(sorted(missing))}")
        return GriddedBathymetry(data["lon"], data["lat"], data["depth"])


def load_channels(path) -> list:
    """Read channel centrelines as a list of ``(N, 2)`` arrays."""
    lines = []
    for geom in _geometries(_read_json(path)):
        if isinstance(geom, LineString):
            lines.append(np.asarray(geom.coords)[:, :2])
        elif isinstance(geom, MultiLineString):
            lines.extend(np.asarray(part.coords)[:, :2] for part in geom.geoms)
    logger.info("Loaded %d channel centrelines from %s", len(lines), path)
    return lines
