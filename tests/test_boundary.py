"""Tests for coastal_sizing.boundary — distance and bathymetry collaborators."""

import logging

import numpy as np
import pytest
from shapely.geometry import Polygon

from coastal_sizing.boundary import (
    Bathymetry,
    DistanceEvaluator,
    GriddedBathymetry,
    PolygonBoundary,
)
from conftest import flat_bathymetry, square


class TestPolygonBoundary:
    def test_implements_protocol(self, square_boundary):
        assert isinstance(square_boundary, DistanceEvaluator)

    def test_bbox_and_origin_from_bounds(self, square_boundary):
        assert square_boundary.bbox == (0.0, 0.05, 0.0, 0.05)
        assert square_boundary.origin == (0.0, 0.0)
        assert square_boundary.h0 == 500.0

    def test_explicit_bbox(self, coastline_boundary):
        assert coastline_boundary.bbox == (0.0, 0.05, 0.0, 0.5)
        assert coastline_boundary.origin == (0.0, 0.0)

    def test_signed_distance_negative_inside(self, square_boundary):
        d = square_boundary.signed_distance(np.array([[0.025, 0.025], [0.01, 0.025]]))
        np.testing.assert_allclose(d, [-0.025, -0.01])

    def test_signed_distance_positive_outside(self, square_boundary):
        d = square_boundary.signed_distance(np.array([[0.1, 0.025], [0.025, -0.02]]))
        np.testing.assert_allclose(d, [0.05, 0.02])

    def test_signed_distance_zero_on_boundary(self, square_boundary):
        d = square_boundary.signed_distance(np.array([[0.0, 0.02]]))
        assert d[0] == pytest.approx(0.0)

    def test_contains(self, square_boundary):
        mask = square_boundary.contains(np.array([[0.02, 0.02], [0.06, 0.02], [0.0, 0.02]]))
        assert mask.tolist() == [True, False, False]

    def test_hole_is_outside(self):
        boundary = PolygonBoundary(
            [square(0.0, 0.0, 1.0, 1.0), square(0.4, 0.4, 0.6, 0.6)], h0=1000.0
        )
        d = boundary.signed_distance(np.array([[0.5, 0.5], [0.3, 0.5]]))
        assert d[0] == pytest.approx(0.1)
        assert d[1] == pytest.approx(-0.1)

    def test_accepts_shapely_polygon(self):
        boundary = PolygonBoundary(Polygon(square(0, 0, 1, 1)), h0=1000.0)
        assert boundary.contains(np.array([[0.5, 0.5]]))[0]

    def test_invalid_polygon_repaired(self, caplog):
        bowtie = [[0, 0], [1, 1], [1, 0], [0, 1], [0, 0]]
        with caplog.at_level(logging.WARNING):
            boundary = PolygonBoundary([bowtie], h0=1000.0)
        assert "invalid" in caplog.text
        assert boundary.polygon.is_valid

    def test_empty_polygon_rejected(self):
        with pytest.raises(ValueError, match="empty"):
            PolygonBoundary(Polygon(), h0=100.0)


class TestGriddedBathymetry:
    @pytest.fixture
    def ramp(self):
        lon = np.linspace(0.0, 1.0, 11)
        lat = np.linspace(0.0, 2.0, 21)
        depth = -10.0 - 100.0 * lon[:, None] - 5.0 * lat[None, :]
        return GriddedBathymetry(lon, lat, depth)

    def test_implements_protocol(self, ramp):
        assert isinstance(ramp, Bathymetry)
        assert isinstance(flat_bathymetry(-5.0), Bathymetry)

    def test_linear_field_is_exact(self, ramp):
        out = ramp(np.array([0.25, 0.73]), np.array([1.5, 0.11]))
        np.testing.assert_allclose(out, [-10 - 25 - 7.5, -10 - 73 - 0.55])

    def test_grid_shaped_query(self, ramp):
        xg, yg = np.meshgrid([0.1, 0.2, 0.3], [0.5, 1.0], indexing="ij")
        assert ramp(xg, yg).shape == (3, 2)

    def test_outside_takes_edge_value(self, ramp):
        out = ramp(np.array([-1.0, 5.0]), np.array([1.0, 1.0]))
        np.testing.assert_allclose(out, [-15.0, -115.0])

    def test_descending_latitude(self, ramp):
        lon = np.linspace(0.0, 1.0, 11)
        lat = np.linspace(2.0, 0.0, 21)
        depth = -10.0 - 100.0 * lon[:, None] - 5.0 * lat[None, :]
        north_up = GriddedBathymetry(lon, lat, depth)
        x, y = np.array([0.25, 0.73, -1.0]), np.array([1.5, 0.11, 3.0])
        np.testing.assert_allclose(north_up(x, y), ramp(x, y))
        assert north_up.lat[0] < north_up.lat[-1]

    def test_descending_longitude(self, ramp):
        lon = np.linspace(1.0, 0.0, 11)
        lat = np.linspace(0.0, 2.0, 21)
        depth = -10.0 - 100.0 * lon[:, None] - 5.0 * lat[None, :]
        x, y = np.array([0.25, 0.73]), np.array([1.5, 0.11])
        np.testing.assert_allclose(GriddedBathymetry(lon, lat, depth)(x, y), ramp(x, y))

    def test_shape_mismatch(self):
        with pytest.raises(ValueError, match="does not match"):
            GriddedBathymetry(np.arange(3.0), np.arange(4.0), np.zeros((4, 3)))
