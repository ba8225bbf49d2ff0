"""Tests for coastal_sizing.combine — layer combination, bounds and the CFL limiter."""

import math

import numpy as np
import pytest

from coastal_sizing import defaults
from coastal_sizing.combine import (
    apply_bounds,
    automatic_timestep,
    combine_layers,
    courant_number,
    enforce_cfl,
    wave_speed,
)
from coastal_sizing.config import SizingConfig
from coastal_sizing.errors import ConfigurationError, MissingCriterionError


def _config(**overrides):
    base = {"h0": 100.0, "criteria": [{"kind": "distance", "rate": 0.1}]}
    base.update(overrides)
    return SizingConfig(**base)


class TestCombineLayers:
    def test_elementwise_minimum(self):
        a = np.array([[1.0, 5.0], [3.0, 2.0]])
        b = np.array([[2.0, 4.0], [1.0, 8.0]])
        np.testing.assert_array_equal(combine_layers([a, b]), [[1.0, 4.0], [1.0, 2.0]])

    def test_disjoint_nan_coverage(self):
        a = np.array([1.0, np.nan, np.nan])
        b = np.array([np.nan, 2.0, np.nan])
        out = combine_layers([a, b])
        np.testing.assert_array_equal(out[:2], [1.0, 2.0])
        assert np.isnan(out[2])

    def test_single_layer(self):
        a = np.array([3.0, np.nan])
        np.testing.assert_array_equal(combine_layers([a]), a)

    def test_no_layers(self):
        with pytest.raises(ConfigurationError):
            combine_layers([])


class TestApplyBounds:
    def test_floor_and_ceiling(self):
        h, counts = apply_bounds(np.array([10.0, 500.0, 9000.0]), _config(max_el=5000))
        np.testing.assert_array_equal(h, [100.0, 500.0, 5000.0])
        assert counts == {"nearshore": 0, "floor": 1, "ceiling": 1}

    def test_input_not_modified(self):
        h = np.array([10.0])
        apply_bounds(h, _config())
        assert h[0] == 10.0

    def test_unbounded_max_el(self):
        h, counts = apply_bounds(np.array([1e7]), _config())
        assert h[0] == 1e7
        assert counts["ceiling"] == 0

    def test_nearshore(self):
        distance = np.array([-0.001, 0.005, -0.5])
        h, counts = apply_bounds(np.array([3000.0, 3000.0, 3000.0]), _config(max_el_ns=800), distance=distance)
        np.testing.assert_array_equal(h, [800.0, 800.0, 3000.0])
        assert counts["nearshore"] == 2

    def test_nearshore_needs_distance(self):
        with pytest.raises(ConfigurationError, match="distance"):
            apply_bounds(np.array([3000.0]), _config(max_el_ns=800))

    def test_banded_max_el(self):
        config = _config(max_el=[[1000, 0, -100], [5000, -100, -math.inf]])
        depth = np.array([-10.0, -500.0, -10.0, 5.0])
        h, counts = apply_bounds(np.array([9000.0, 9000.0, 500.0, 9000.0]), config, depth=depth)
        np.testing.assert_array_equal(h, [1000.0, 5000.0, 500.0, 9000.0])
        assert counts["ceiling"] == 2

    def test_banded_needs_depth(self):
        config = _config(max_el=[[1000, 0, -100]])
        with pytest.raises(ConfigurationError, match="bathymetry"):
            apply_bounds(np.array([9000.0]), config)

    def test_floor_applied_after_nearshore(self):
        distance = np.array([0.0])
        h, _ = apply_bounds(np.array([3000.0]), _config(max_el_ns=50.0), distance=distance)
        assert h[0] == 100.0


class TestCfl:
    def test_wave_speed(self):
        u = wave_speed(np.array([-100.0]))
        g = defaults.GRAVITY_MS2
        assert u[0] == pytest.approx(math.sqrt(g * 100) + math.sqrt(g / 100))

    def test_wave_speed_dry_uses_one_metre(self):
        np.testing.assert_allclose(wave_speed(np.array([5.0, -0.2])), wave_speed(np.array([-1.0, -1.0])))

    def test_automatic_timestep(self):
        depth = np.array([-100.0, -10.0, 20.0])
        reference = np.array([1000.0, 1000.0, 1.0])
        dt = automatic_timestep(reference, depth)
        expected = min(0.5 * 1000.0 / wave_speed(np.array([d]))[0] for d in (-100.0, -10.0))
        assert dt == pytest.approx(expected)

    def test_automatic_timestep_all_dry(self):
        with pytest.raises(ConfigurationError, match="no wet nodes"):
            automatic_timestep(np.array([100.0]), np.array([3.0]))

    def test_automatic_timestep_undefined_reference(self):
        depth = np.array([-100.0, -10.0])
        with pytest.raises(MissingCriterionError, match="undefined on every wet node"):
            automatic_timestep(np.array([np.nan, np.nan]), depth)

    def test_automatic_timestep_ignores_undefined_nodes(self):
        depth = np.array([-100.0, -100.0])
        dt = automatic_timestep(np.array([np.nan, 800.0]), depth)
        assert dt == pytest.approx(0.5 * 800.0 / wave_speed(np.array([-100.0]))[0])

    def test_enforce_cfl(self):
        depth = np.array([-10.0, -1000.0, -1000.0])
        h = np.array([500.0, 500.0, 50000.0])
        limited, count = enforce_cfl(h, depth, dt=10.0)
        assert count == 1
        assert limited[0] == 500.0 and limited[2] == 50000.0
        assert courant_number(limited, depth, 10.0)[1] == pytest.approx(defaults.CFL_STABILITY)

    def test_enforce_cfl_only_coarsens(self):
        rng = np.random.default_rng(3)
        h = rng.uniform(100.0, 5000.0, 200)
        depth = -rng.uniform(1.0, 4000.0, 200)
        limited, count = enforce_cfl(h, depth, dt=5.0)
        assert np.all(limited >= h)
        assert count == int(np.sum(limited > h))
        assert np.all(courant_number(limited, depth, 5.0) <= defaults.CFL_STABILITY * (1 + 1e-12))
