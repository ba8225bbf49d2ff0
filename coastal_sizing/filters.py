"""
Spatial filtering of gridded bathymetry.

Filters are Gaussian, parameterised by a cutoff wavelength ``lam`` in the
same units as the grid spacing ``res``.  The Gaussian width is
``sigma = lam / (2 * pi * res)`` grid cells, so features much shorter than
``lam`` are removed by the low-pass and kept by the high-pass.
"""

from __future__ import annotations

import logging
import math

import numpy as np
from scipy.ndimage import gaussian_filter

logger = logging.getLogger(__name__)

FILTER_MODES = ("lowpass", "highpass", "bandpass")


def _sigma(res, lam):
    return lam / (2.0 * math.pi * res)


def filt2(z, res, lam, mode):
    """Filter the 2-D field ``z`` sampled at spacing ``res``.

    Parameters
    ----------
    z : np.ndarray
        Gridded field.
    res : float
        Grid spacing (metres).
    lam : float or pair of float
        Cutoff wavelength; a ``(lam1, lam2)`` pair for ``"bandpass"``.
    mode : str
        ``"lowpass"``, ``"highpass"`` or ``"bandpass"``.
    """
    z = np.asarray(z, dtype=float)
    if mode == "lowpass":
        return gaussian_filter(z, _sigma(res, lam), mode="nearest")
    if mode == "highpass":
        return z - gaussian_filter(z, _sigma(res, lam), mode="nearest")
    if mode == "bandpass":
        short, long_ = sorted(float(v) for v in lam)
        return (
            gaussian_filter(z, _sigma(res, short), mode="nearest")
            - gaussian_filter(z, _sigma(res, long_), mode="nearest")
        )
    raise ValueError(f"Unknown filter mode {mode!r}; expected one of {FILTER_MODES}")
