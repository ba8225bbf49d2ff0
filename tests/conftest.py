"""Shared fixtures for the coastal_sizing test suite."""

import json

import numpy as np
import pytest

from coastal_sizing.boundary import PolygonBoundary
from coastal_sizing.grid import Grid


def flat_bathymetry(depth):
    """Bathymetry callable returning a constant depth everywhere."""

    def _bathymetry(lon, lat):
        shape = np.broadcast(np.asarray(lon), np.asarray(lat)).shape
        return np.full(shape, float(depth))

    return _bathymetry


def square(x0, y0, x1, y1):
    return [[x0, y0], [x1, y0], [x1, y1], [x0, y1], [x0, y0]]


# ── Fixtures ──────────────────────────────────────────────────────────

@pytest.fixture
def square_boundary():
    """A 0.05 x 0.05 degree square domain at the equator with h0 = 500 m."""
    return PolygonBoundary([square(0.0, 0.0, 0.05, 0.05)], h0=500.0)


@pytest.fixture
def square_grid(square_boundary):
    return Grid.from_bbox(square_boundary.bbox, square_boundary.h0, origin=square_boundary.origin)


@pytest.fixture
def coastline_boundary():
    """Domain whose only boundary near the bbox is a straight coast along lat = 0.

    The polygon reaches a degree or more beyond the other three sides of the
    bounding box, so inside the box the signed distance is ``-lat``.
    """
    polygon = [square(-1.0, 0.0, 1.05, 2.0)]
    return PolygonBoundary(polygon, h0=100.0, bbox=(0.0, 0.05, 0.0, 0.5))


@pytest.fixture
def strip_boundary():
    """A 0.02 degree wide east-west strip (a straight channel), h0 = 100 m."""
    return PolygonBoundary([square(0.0, 0.0, 0.1, 0.02)], h0=100.0)


@pytest.fixture
def package_dir(tmp_path):
    """A config directory with sizing.json, a boundary GeoJSON and bathymetry."""
    (tmp_path / "boundary.geojson").write_text(json.dumps({
        "type": "FeatureCollection",
        "features": [{
            "type": "Feature",
            "properties": {},
            "geometry": {"type": "Polygon", "coordinates": [square(0.0, 0.0, 0.05, 0.05)]},
        }],
    }))
    lon = np.linspace(-0.01, 0.06, 15)
    lat = np.linspace(-0.01, 0.06, 15)
    depth = -20.0 - 400.0 * np.add.outer(lon, lat)
    np.savez(tmp_path / "bathymetry.npz", lon=lon, lat=lat, depth=depth)
    (tmp_path / "sizing.json").write_text(json.dumps({
        "name": "test domain",
        "h0": 500.0,
        "max_el": 5000.0,
        "grade": 0.25,
        "criteria": [
            {"kind": "distance", "rate": 0.2},
            {"kind": "wavelength", "bands": [60]},
        ],
        "inputs": {"boundary": "boundary.geojson", "bathymetry": "bathymetry.npz"},
    }))
    return tmp_path
