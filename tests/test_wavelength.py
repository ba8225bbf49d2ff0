"""Tests for coastal_sizing.wavelength — tidal wavelength criterion."""

import math

import numpy as np
import pytest

from coastal_sizing import defaults
from coastal_sizing.config import DepthBand, WavelengthCriterion
from coastal_sizing.grid import Grid, to_degrees
from coastal_sizing.wavelength import band_mask, wavelength_sizes


@pytest.fixture
def grid():
    return Grid(x0=0.0, y0=0.0, spacing=0.01, nx=4, ny=3, centroid_lat=0.01)


def _expected(grid, depth, divisor, period=defaults.M2_PERIOD_S):
    _, yg = grid.coordinates()
    meters = period * math.sqrt(defaults.GRAVITY_MS2 * abs(depth)) / divisor
    return to_degrees(yg, meters)


class TestBandMask:
    def test_open_interval(self):
        band = DepthBand(divisor=1, depth_hi=-10, depth_lo=-100)
        depth = np.array([-5.0, -10.0, -50.0, -100.0, -200.0])
        assert band_mask(depth, band).tolist() == [False, False, True, False, False]


class TestWavelengthSizes:
    def test_deep_water(self, grid):
        depth = np.full(grid.shape, -100.0)
        layer = wavelength_sizes(grid, depth, WavelengthCriterion(bands=60))
        np.testing.assert_allclose(layer, _expected(grid, -100.0, 60))

    def test_known_value_in_meters(self, grid):
        depth = np.full(grid.shape, -100.0)
        layer = wavelength_sizes(grid, depth, WavelengthCriterion(bands=60))
        # 44712 s * sqrt(9.807 * 100) m/s / 60 ~= 23.3 km
        assert layer[0, 0] * defaults.EARTH_RADIUS_M * math.pi / 180.0 == pytest.approx(
            23337.0, rel=1e-3
        )

    def test_shallow_nodes_outside_default_band(self, grid):
        depth = np.full(grid.shape, -100.0)
        depth[0, :] = -20.0
        layer = wavelength_sizes(grid, depth, WavelengthCriterion(bands=[60]))
        assert np.isnan(layer[0]).all()
        assert np.isfinite(layer[1:]).all()

    def test_deeper_is_larger(self, grid):
        depth = np.full(grid.shape, -100.0)
        depth[3, :] = -1000.0
        layer = wavelength_sizes(grid, depth, WavelengthCriterion(bands=60))
        assert np.all(layer[3] > layer[0])

    def test_overlapping_bands_last_wins(self, grid):
        depth = np.full(grid.shape, -100.0)
        depth[0, :] = -1000.0
        criterion = WavelengthCriterion(bands=[[60, -50, -math.inf], [30, -20, -200]])
        layer = wavelength_sizes(grid, depth, criterion)
        np.testing.assert_allclose(layer[1:], _expected(grid, -100.0, 30)[1:])
        np.testing.assert_allclose(layer[0], _expected(grid, -1000.0, 60)[0])

    def test_custom_period(self, grid):
        depth = np.full(grid.shape, -100.0)
        layer = wavelength_sizes(grid, depth, WavelengthCriterion(bands=60, period_s=3600.0))
        np.testing.assert_allclose(layer, _expected(grid, -100.0, 60, period=3600.0))

    def test_capped_at_max_size(self, grid):
        depth = np.full(grid.shape, -1e6)
        layer = wavelength_sizes(grid, depth, WavelengthCriterion(bands=1))
        _, yg = grid.coordinates()
        np.testing.assert_allclose(layer, to_degrees(yg, defaults.MAX_SIZE_M))
