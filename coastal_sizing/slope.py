"""
Bathymetric slope size criterion.

Required size is ``(2 * pi / divisor) * |h / |grad h|||``, the topographic
length scale resolved with ``divisor`` elements.  Depth is filtered first so
the slope reflects features the model can represent:

* ``"off"``    -- raw depth;
* band list    -- sum of low/high/band-pass filtered depths;
* ``"rossby"`` -- adaptive low-pass whose width follows the local barotropic
  Rossby radius of deformation.
"""

from __future__ import annotations

import logging

import numpy as np

from coastal_sizing import defaults
from coastal_sizing.filters import filt2
from coastal_sizing.grid import to_degrees
from coastal_sizing.wavelength import EPS, band_mask

logger = logging.getLogger(__name__)


def slope_magnitude(z, dx, dy) -> np.ndarray:
    """Gradient norm of ``z`` with planar spacings ``dx`` (axis 0) and ``dy`` (axis 1)."""
    bx, by = np.gradient(z, dx, dy)
    return np.hypot(bx, by)


def rossby_radius(depth, lat) -> np.ndarray:
    """Barotropic Rossby radius ``sqrt(g|h|) / f`` in metres, capped at 1000 km."""
    f = 2.0 * defaults.EARTH_ROTATION_RAD_S * np.abs(np.sin(np.radians(lat)))
    c = np.sqrt(defaults.GRAVITY_MS2 * np.abs(depth))
    radius = np.full(np.shape(depth), defaults.MAX_ROSSBY_RADIUS_M)
    np.divide(c, f, out=radius, where=f > 0)
    return np.minimum(radius, defaults.MAX_ROSSBY_RADIUS_M)


def rossby_filtered_slope(grid, depth) -> np.ndarray:
    """Slope of depth low-passed at a width tracking the local Rossby radius.

    Nodes are binned by Rossby radius.  Bins are visited from small to large
    radius; whenever a bin's centre exceeds twice the current filter width
    the running depth is low-passed again at that length.  Each pass treats
    the previous width as the resolution of the already smoothed depth, so
    it only removes the scales between the two widths.
    """
    dx, dy = grid.planar_spacing()
    _, yg = grid.coordinates()
    radius = rossby_radius(depth, yg)
    edges = np.histogram_bin_edges(radius, bins="sturges")

    smoothed = depth
    width = dx
    current = slope_magnitude(smoothed, dx, dy)
    slope = np.full(grid.shape, np.nan)
    for lo, hi in zip(edges[:-1], edges[1:]):
        sel = (radius >= lo) & (radius <= hi)
        centre = 0.5 * (lo + hi)
        if centre > 2.0 * width:
            logger.debug("Rossby filter: radius %.0f m (%.1f x previous width)", centre, centre / width)
            smoothed = filt2(smoothed, width, centre, "lowpass")
            width = centre
            current = slope_magnitude(smoothed, dx, dy)
        slope[sel] = current[sel]
    return slope


def banded_filtered_slope(grid, depth, bands) -> np.ndarray:
    """Slope of the sum of the filtered depth contributions of every band."""
    dx, dy = grid.planar_spacing()
    filtered = np.zeros(grid.shape)
    for band in bands:
        if band.mode == "bandpass":
            part = filt2(depth, dx, (band.low, band.high), "bandpass")
        elif band.mode == "lowpass":
            part = filt2(depth, dx, band.low, "lowpass")
        else:
            logger.warning(
                "Highpass filter on bathymetry in the slope criterion is not recommended"
            )
            part = filt2(depth, dx, band.high, "highpass")
        filtered = filtered + part
    return slope_magnitude(filtered, dx, dy)


def depth_slope(grid, depth, filter_spec) -> np.ndarray:
    """Slope magnitude of depth after the configured filter."""
    if filter_spec == "off":
        logger.info("Slope filter is off")
        dx, dy = grid.planar_spacing()
        return slope_magnitude(depth, dx, dy)
    if filter_spec == "rossby":
        logger.info("Rossby radius of deformation filter on")
        return rossby_filtered_slope(grid, depth)
    return banded_filtered_slope(grid, depth, filter_spec)


def slope_sizes(grid, depth, criterion) -> np.ndarray:
    """Slope-resolving sizes in degrees, ``NaN`` outside the configured depth bands.

    Bands are applied in configuration order; where bands overlap the last one
    wins.
    """
    depth = np.minimum(depth, defaults.LAND_CLIP_M)
    slope = depth_slope(grid, depth, criterion.filter)
    _, yg = grid.coordinates()
    layer = np.full(grid.shape, np.nan)
    for band in criterion.bands:
        logger.info(
            "Building slope layer: divisor %s for %s < depth < %s",
            band.divisor, band.depth_lo, band.depth_hi,
        )
        sizes = (2.0 * np.pi / band.divisor) * np.abs(depth / (slope + EPS))
        sel = band_mask(depth, band)
        layer[sel] = sizes[sel]
    layer = np.minimum(layer, defaults.MAX_SIZE_M)
    return to_degrees(yg, layer)
