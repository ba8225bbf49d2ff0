"""
Sizing-field diagnostics — per-layer statistics and a run summary.

Produces one output file:

``sizing_summary.json``
    Single-record structured summary of one sizing-field build: which
    criteria were enabled, per-layer statistics, how many nodes each bound
    rule changed, the timestep used by the CFL limiter and how the gradient
    limiter converged.  Designed for storage next to the finished field so a
    mesh run can be traced back to the sizes that drove it.

Usage (inside pipeline.py)::

    diagnostics = SizingDiagnostics(config.enabled, grid, name=config.name)
    diagnostics.record_layer("wavelength", layer, elapsed_s)
    ...
    diagnostics.write(output_dir)
"""

import importlib.metadata
import json
import logging
import os
import platform
from datetime import datetime, timezone

import numpy as np

logger = logging.getLogger(__name__)

#: Schema version for the summary JSON; bump when fields are added or removed.
SUMMARY_SCHEMA_VERSION = "1"

SUMMARY_FILENAME = "sizing_summary.json"


def _layer_stats(values) -> dict:
    values = np.asarray(values, dtype=float)
    finite = values[np.isfinite(values)]
    if finite.size == 0:
        return {"min": None, "max": None, "median": None, "nan_fraction": 1.0}
    return {
        "min": float(finite.min()),
        "max": float(finite.max()),
        "median": float(np.median(finite)),
        "nan_fraction": round(1.0 - finite.size / max(1, values.size), 6),
    }


class SizingDiagnostics:
    """
    Collects statistics while a sizing field is built.

    Parameters
    ----------
    criteria : sequence of str
        Enabled criteria kinds, in configuration order.
    grid : Grid
        The evaluation grid.
    name : str, optional
        Configuration name, written to the summary.
    """

    def __init__(self, criteria, grid, name=None):
        self.criteria = list(criteria)
        self.grid = grid
        self.name = name or ""
        self.layers = {}
        self.bounds = {}
        self.timestep_s = None
        self.cfl_limited = 0
        self.channel_points_skipped = 0
        self.nan_filled = 0
        self.grading = {"converged": None, "iterations": None}
        self.final = {}
        self._started_at = datetime.now(tz=timezone.utc)

    def record_layer(self, kind, values, elapsed_s=0.0) -> dict:
        stats = _layer_stats(values)
        stats["elapsed_s"] = round(elapsed_s, 3)
        self.layers[kind] = stats
        logger.debug("Layer %s: %s", kind, stats)
        return stats

    def record_bounds(self, counts) -> None:
        self.bounds = dict(counts)

    def record_cfl(self, timestep_s, limited) -> None:
        self.timestep_s = float(timestep_s)
        self.cfl_limited = int(limited)

    def record_grading(self, result) -> None:
        self.grading = {"converged": bool(result.converged), "iterations": int(result.iterations)}

    def record_final(self, values_m) -> None:
        self.final = _layer_stats(values_m)

    def format_summary(self) -> str:
        """Return a one-line summary for the log.

        Example output::

            feature_size+wavelength | 412x388 nodes | h 30-1000 m | grading 57 sweeps | dt=2s
        """
        final = self.final or {}
        parts = [
            "+".join(self.criteria) or "no criteria",
            f"{self.grid.nx}x{self.grid.ny} nodes",
        ]
        if final.get("min") is not None:
            parts.append(f"h {final['min']:.0f}-{final['max']:.0f} m")
        if self.grading["iterations"] is not None:
            parts.append(f"grading {self.grading['iterations']} sweeps")
        if self.timestep_s is not None:
            parts.append(f"dt={self.timestep_s:.3g}s")
        return " | ".join(parts)

    def _collect_environment(self) -> dict:
        """Collect software environment metadata."""
        env = {
            "hostname": platform.node(),
            "python_version": platform.python_version(),
        }
        for pkg in ("coastal-sizing", "numpy", "scipy", "shapely", "pydantic"):
            try:
                env[f"{pkg.replace('-', '_')}_version"] = importlib.metadata.version(pkg)
            except importlib.metadata.PackageNotFoundError:
                env[f"{pkg.replace('-', '_')}_version"] = "unknown"
        return env

    def summary(self) -> dict:
        g = self.grid
        return {
            "schema_version": SUMMARY_SCHEMA_VERSION,
            "name": self.name,
            "started_at": self._started_at.isoformat(),
            "finished_at": datetime.now(tz=timezone.utc).isoformat(),
            "criteria": self.criteria,
            "grid": {
                "x0": g.x0,
                "y0": g.y0,
                "spacing_deg": g.spacing,
                "nx": g.nx,
                "ny": g.ny,
                "centroid_lat": g.centroid_lat,
            },
            "layers": self.layers,
            "bounds": self.bounds,
            "nan_filled": self.nan_filled,
            "channel_points_skipped": self.channel_points_skipped,
            "timestep_s": self.timestep_s,
            "cfl_limited": self.cfl_limited,
            "grading": self.grading,
            "final_m": self.final,
            "environment": self._collect_environment(),
        }

    def write(self, output_dir) -> str:
        """Write ``sizing_summary.json`` into ``output_dir`` and return its path."""
        path = os.path.join(output_dir, SUMMARY_FILENAME)
        with open(path, "w") as f:
            json.dump(self.summary(), f, indent=2)
        logger.info("Sizing summary written to %s", path)
        return path
