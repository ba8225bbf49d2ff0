"""
Sizing-field pipeline.

``build_sizing_field()`` runs the whole construction:

1. derive the evaluation grid from the boundary's bounding box and ``h0``;
2. build one layer per configured criterion (each an independent pure
   function of the grid and the read-only collaborators);
3. combine the layers, convert to planar metres and apply the nearshore,
   ``h0`` and ``max_el`` bounds;
4. relax the field to the maximum grade (fatal if it does not converge);
5. coarsen sizes that violate the CFL condition when a timestep is configured;
6. convert back to degrees and wrap the grid in a :class:`SizingFunction`.

The CFL limiter runs last so the timestep bound holds exactly on the finished
field.  It only raises values, so the ``h0`` floor survives; nodes it touches
may locally exceed the grade or ``max_el`` and are counted in the diagnostics.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from coastal_sizing.callbacks import NullCallback
from coastal_sizing.channels import Channel, channel_sizes, estimate_channels
from coastal_sizing.combine import apply_bounds, automatic_timestep, combine_layers, enforce_cfl
from coastal_sizing.diagnostics import SizingDiagnostics
from coastal_sizing.distance import distance_layer, distance_sizes
from coastal_sizing.errors import ConfigurationError, MissingCriterionError
from coastal_sizing.feature import feature_sizes
from coastal_sizing.grading import enforce_grading
from coastal_sizing.grid import Grid, to_degrees, to_planar_meters
from coastal_sizing.interpolant import SizingFunction
from coastal_sizing.slope import slope_sizes
from coastal_sizing.wavelength import wavelength_sizes

logger = logging.getLogger(__name__)


@dataclass
class SizingResult:
    """Output of :func:`build_sizing_field`."""

    function: SizingFunction
    diagnostics: SizingDiagnostics
    timestep_s: Optional[float] = None
    layers: dict = field(default_factory=dict)


def check_inputs(config, bathymetry=None, channels=None) -> None:
    """Reject configurations whose criteria lack their collaborator data."""
    if not config.criteria:
        raise ConfigurationError("No size criteria were enabled")
    if config.requires_bathymetry and bathymetry is None:
        needs = [k for k in config.enabled if k in ("wavelength", "slope", "channel")]
        if config.cfl_enabled:
            needs.append("CFL limiter")
        if config.banded_max_el:
            needs.append("banded max_el")
        raise ConfigurationError(
            f"No bathymetry interpolant supplied; required by: {', '.join(needs)}"
        )
    if "channel" in config.enabled and channels is None:
        raise ConfigurationError("The channel criterion needs channel polylines")
    if config.dt == 0 and not {"distance", "feature_size"}.intersection(config.enabled):
        raise MissingCriterionError(
            "Cannot use the automatic timestep without a distance or feature_size criterion"
        )


def _as_channels(channels, bathymetry, repose_angle_deg):
    if all(isinstance(c, Channel) for c in channels):
        return list(channels)
    return estimate_channels(channels, bathymetry, repose_angle_deg)


def build_layer(criterion, grid, distance=None, depth=None, boundary=None,
                channels=None, config=None, diagnostics=None):
    """Build the size layer (degrees) of one criterion."""
    kind = criterion.kind
    if kind == "distance":
        return distance_sizes(grid, distance, criterion.rate)
    if kind == "feature_size":
        return feature_sizes(grid, distance, criterion.elements_per_feature)
    if kind == "wavelength":
        return wavelength_sizes(grid, depth, criterion)
    if kind == "slope":
        return slope_sizes(grid, depth, criterion)
    if kind == "channel":
        layer, skipped = channel_sizes(
            grid, depth, channels, boundary, criterion.divisor, config.min_el_ch, config.h0
        )
        if diagnostics is not None:
            diagnostics.channel_points_skipped = skipped
        return layer
    raise ConfigurationError(f"Unknown size criterion {kind!r}")


def timestep_reference(layers, lat, depth):
    """Pick the layer (metres) the automatic timestep is derived from.

    Distance is preferred over feature size; a layer with no finite value on
    any wet node is passed over in favour of the other.
    """
    wet = np.asarray(depth) < 0
    candidates = [k for k in ("distance", "feature_size") if k in layers]
    for kind in candidates:
        reference = to_planar_meters(lat, layers[kind])
        if np.isfinite(reference[wet]).any():
            return kind, reference
        logger.warning("The %s layer is undefined on every wet node; not usable for the timestep", kind)
    kind = candidates[0]
    return kind, to_planar_meters(lat, layers[kind])


def build_sizing_field(config, boundary, bathymetry=None, channels=None,
                       callback=None, keep_layers=False) -> SizingResult:
    """Build the finished sizing function for ``config``.

    Parameters
    ----------
    config : SizingConfig
    boundary : DistanceEvaluator
        Supplies the bounding box, origin and signed distance.
    bathymetry : Bathymetry, optional
        Depth interpolant (negative below sea level).
    channels : sequence, optional
        Channel polylines (``(N, 2)`` lon/lat arrays) or :class:`Channel` records.
    callback : SizingCallback, optional
        Progress reporting.
    keep_layers : bool
        Return the per-criterion layers (degrees) instead of releasing them.

    Raises
    ------
    ConfigurationError, MissingCriterionError, ConvergenceError
    """
    callback = callback or NullCallback()
    check_inputs(config, bathymetry, channels)

    grid = Grid.from_bbox(boundary.bbox, config.h0, origin=boundary.origin)
    logger.info(
        "Sizing grid: %d x %d nodes at %.6g degrees (criteria: %s)",
        grid.nx, grid.ny, grid.spacing, ", ".join(config.enabled),
    )
    diagnostics = SizingDiagnostics(config.enabled, grid, name=config.name)
    callback.on_metric("grid_nodes", grid.size)

    xg, yg = grid.coordinates()
    depth = None
    if bathymetry is not None:
        depth = np.asarray(bathymetry(xg, yg), dtype=float)

    distance = None
    if {"distance", "feature_size"}.intersection(config.enabled) or math.isfinite(config.max_el_ns):
        callback.on_status("building distance field")
        distance = distance_layer(grid, boundary)

    channel_records = None
    channel_criterion = config.criterion("channel")
    if channel_criterion is not None:
        channel_records = _as_channels(channels, bathymetry, channel_criterion.repose_angle_deg)

    layers = {}
    for criterion in config.criteria:
        callback.on_status(f"building {criterion.kind} layer")
        start = time.perf_counter()
        layers[criterion.kind] = build_layer(
            criterion, grid,
            distance=distance, depth=depth, boundary=boundary,
            channels=channel_records, config=config, diagnostics=diagnostics,
        )
        diagnostics.record_layer(criterion.kind, layers[criterion.kind], time.perf_counter() - start)

    callback.on_status("combining layers")
    h = to_planar_meters(yg, combine_layers(layers.values()))

    missing = np.isnan(h)
    if missing.any():
        if not math.isfinite(config.global_max_el):
            raise ConfigurationError(
                f"{int(missing.sum())} grid nodes are not covered by any size criterion "
                "and no finite max_el is configured"
            )
        logger.warning(
            "%d grid nodes are not covered by any size criterion; using max_el=%g",
            int(missing.sum()), config.global_max_el,
        )
        h[missing] = config.global_max_el
        diagnostics.nan_filled = int(missing.sum())

    h, counts = apply_bounds(h, config, distance=distance, depth=depth)
    diagnostics.record_bounds(counts)

    callback.on_status("grading")
    graded = enforce_grading(h, config.h0, config.grade, config.grading_max_iterations)
    diagnostics.record_grading(graded)
    callback.on_metric("grading_iterations", graded.iterations)
    h = graded.values

    dt = None
    if config.cfl_enabled:
        callback.on_status("enforcing CFL")
        dt = config.dt
        if dt == 0:
            kind, reference = timestep_reference(layers, yg, depth)
            dt = automatic_timestep(reference, depth)
            logger.info("Automatic timestep from %s layer: %g s", kind, dt)
        h, limited = enforce_cfl(h, depth, dt)
        diagnostics.record_cfl(dt, limited)
        callback.on_metric("timestep_s", dt)
        if limited:
            logger.warning(
                "CFL limit at dt=%g s coarsened %d graded nodes; grade and max_el "
                "may be exceeded there", dt, limited,
            )

    diagnostics.record_final(h)
    function = SizingFunction(
        grid,
        to_degrees(yg, h),
        criteria=config.enabled,
        h0=config.h0,
        grade=config.grade,
        dt=dt,
    )
    logger.info("Finalized sizing function: %s", diagnostics.format_summary())
    callback.on_status("finalized")
    return SizingResult(
        function=function,
        diagnostics=diagnostics,
        timestep_s=dt,
        layers=layers if keep_layers else {},
    )
