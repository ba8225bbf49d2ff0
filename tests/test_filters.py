"""Tests for coastal_sizing.filters — Gaussian bathymetry filters."""

import numpy as np
import pytest

from coastal_sizing.filters import filt2


def _waves(wavelength_cells, n=400):
    x = np.arange(n, dtype=float)
    return np.tile(np.sin(2 * np.pi * x / wavelength_cells)[:, None], (1, 8))


class TestFilt2:
    def test_lowpass_keeps_constant(self):
        z = np.full((20, 20), -30.0)
        np.testing.assert_allclose(filt2(z, 100.0, 1000.0, "lowpass"), z)

    def test_highpass_removes_constant(self):
        z = np.full((20, 20), -30.0)
        np.testing.assert_allclose(filt2(z, 100.0, 1000.0, "highpass"), 0.0, atol=1e-12)

    def test_lowpass_removes_short_waves(self):
        out = filt2(_waves(4), 1.0, 40.0, "lowpass")
        assert np.abs(out[50:-50]).max() < 1e-3

    def test_lowpass_keeps_long_waves(self):
        z = _waves(400)
        out = filt2(z, 1.0, 40.0, "lowpass")
        np.testing.assert_allclose(out[50:-50], z[50:-50], atol=0.02)

    def test_highpass_complements_lowpass(self):
        z = _waves(4) + _waves(400)
        low = filt2(z, 1.0, 40.0, "lowpass")
        high = filt2(z, 1.0, 40.0, "highpass")
        np.testing.assert_allclose(low + high, z)

    def test_bandpass_order_independent(self):
        z = _waves(20) + _waves(400)
        a = filt2(z, 1.0, (10.0, 100.0), "bandpass")
        b = filt2(z, 1.0, (100.0, 10.0), "bandpass")
        np.testing.assert_allclose(a, b)

    def test_unknown_mode(self):
        with pytest.raises(ValueError, match="Unknown filter mode"):
            filt2(np.zeros((3, 3)), 1.0, 1.0, "notch")
