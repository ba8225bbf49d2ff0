#!/usr/bin/env python3
"""
Prepare the synthetic estuary example for coastal_sizing.

Writes the collaborator data referenced by examples/estuary/sizing.json:
a coastline with a narrow inlet, a sloping shelf bathymetry and the inlet's
channel centreline.  The data are generated, not measured, so the example is
reproducible anywhere.

Geometry (WGS84 lon/lat):
    open coast along lon 150.10, shelf deepening eastward to ~125 m at 150.30,
    inlet 0.02 degrees wide reaching west to lon 150.02 at lat -32.92.

Usage:
    python scripts/prepare_estuary_example.py [output_dir]
"""

import json
import sys
from pathlib import Path

import numpy as np

# ---------------------------------------------------------------------------
# Paths and geometry
# ---------------------------------------------------------------------------
OUT_DIR = Path("examples/estuary")

COAST_LON = 150.10
INLET_WEST_LON = 150.02
INLET_LAT = (-32.93, -32.91)
DOMAIN = {"xmin": COAST_LON, "xmax": 150.30, "ymin": -33.00, "ymax": -32.85}

# Shelf depth at the coast and its increase per degree of longitude offshore.
COAST_DEPTH_M = -5.0
SHELF_SLOPE_M_PER_DEG = -600.0
INLET_DEPTH_M = -6.0
LAND_ELEVATION_M = 10.0


def boundary_ring() -> list:
    """Exterior ring of the water domain: open shelf plus the inlet."""
    lat_s, lat_n = INLET_LAT
    return [
        [DOMAIN["xmin"], DOMAIN["ymin"]],
        [DOMAIN["xmax"], DOMAIN["ymin"]],
        [DOMAIN["xmax"], DOMAIN["ymax"]],
        [DOMAIN["xmin"], DOMAIN["ymax"]],
        [DOMAIN["xmin"], lat_n],
        [INLET_WEST_LON, lat_n],
        [INLET_WEST_LON, lat_s],
        [DOMAIN["xmin"], lat_s],
        [DOMAIN["xmin"], DOMAIN["ymin"]],
    ]


# ---------------------------------------------------------------------------
# Step 1: boundary.geojson
# ---------------------------------------------------------------------------
def make_boundary(out_dir: Path):
    print("Creating boundary.geojson…")
    geojson = {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "properties": {"name": "estuary domain"},
                "geometry": {"type": "Polygon", "coordinates": [boundary_ring()]},
            }
        ],
    }
    out = out_dir / "boundary.geojson"
    out.write_text(json.dumps(geojson, indent=2))
    print(f"  Written: {out}")


# ---------------------------------------------------------------------------
# Step 2: bathymetry.npz
# Shelf deepening linearly offshore, a flat inlet, dry land elsewhere.
# ---------------------------------------------------------------------------
def make_bathymetry(out_dir: Path):
    print("Creating bathymetry.npz…")
    lon = np.arange(149.95, 150.35 + 1e-9, 0.005)
    lat = np.arange(-33.05, -32.80 + 1e-9, 0.005)
    xg, yg = np.meshgrid(lon, lat, indexing="ij")
    shelf = COAST_DEPTH_M + SHELF_SLOPE_M_PER_DEG * (xg - COAST_LON)
    in_inlet = (yg > INLET_LAT[0]) & (yg < INLET_LAT[1])
    depth = np.where(
        xg >= COAST_LON, shelf, np.where(in_inlet, INLET_DEPTH_M, LAND_ELEVATION_M)
    )
    out = out_dir / "bathymetry.npz"
    np.savez_compressed(out, lon=lon, lat=lat, depth=depth)
    print(f"  Written: {out}  ({lon.size} x {lat.size} nodes, "
          f"depth {depth.min():.0f} to {depth.max():.0f} m)")


# ---------------------------------------------------------------------------
# Step 3: channels.geojson
# ---------------------------------------------------------------------------
def make_channels(out_dir: Path):
    print("Creating channels.geojson…")
    centre = 0.5 * (INLET_LAT[0] + INLET_LAT[1])
    coords = [[float(x), centre] for x in np.linspace(INLET_WEST_LON + 0.01, COAST_LON + 0.05, 13)]
    geojson = {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "properties": {"name": "inlet thalweg"},
                "geometry": {"type": "LineString", "coordinates": coords},
            }
        ],
    }
    out = out_dir / "channels.geojson"
    out.write_text(json.dumps(geojson, indent=2))
    print(f"  Written: {out}  ({len(coords)} vertices)")


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------
def main(out_dir=None):
    out_dir = Path(out_dir) if out_dir else OUT_DIR
    out_dir.mkdir(parents=True, exist_ok=True)

    make_boundary(out_dir)
    make_bathymetry(out_dir)
    make_channels(out_dir)

    print(f"\nDone. All inputs written to {out_dir}/")


if __name__ == "__main__":
    main(sys.argv[1] if len(sys.argv) > 1 else None)
