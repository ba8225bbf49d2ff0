"""
Default constants for sizing-field construction.

Physical constants and numerical thresholds used by the size criteria, the
bound/CFL pass and the gradient limiter.  Override the tunable ones through
``SizingConfig`` rather than editing them here.
"""

import math

# Physical constants
GRAVITY_MS2 = 9.807
"""Gravitational acceleration (m/s^2) used for shallow-water wave speeds."""

M2_PERIOD_S = 12.42 * 3600.0
"""Period (seconds) of the principal lunar semidiurnal (M2) tide."""

EARTH_RADIUS_M = 6378.137e3
"""Equatorial Earth radius (metres) for haversine distances and unit conversion."""

EARTH_ROTATION_RAD_S = 7.29e-5
"""Earth rotation rate (rad/s) for the Coriolis parameter f = 2 * omega * |sin(lat)|."""

METERS_PER_DEGREE = 111e3
"""Approximate length (metres) of one degree of latitude, used for grid spacing."""

# Caps
MAX_SIZE_M = 1e6
"""Ceiling (metres) on wavelength/slope sizes so the degree conversion stays defined."""

MAX_ROSSBY_RADIUS_M = 1000e3
"""Upper limit (metres) on the barotropic Rossby radius of deformation."""

LAND_CLIP_M = 50.0
"""Bathymetry above this elevation (metres) is clipped before computing slopes."""

MIN_CFL_DEPTH_M = 1.0
"""Minimum water depth (metres) assumed when computing CFL wave speeds."""

# Criteria thresholds
DEFAULT_DEPTH_BAND = (-50.0, -math.inf)
"""Depth band (upper, lower) applied when a wavelength/slope divisor has no explicit band."""

NEARSHORE_DISTANCE_DEG = 0.01
"""Distance to the boundary (degrees) within which ``max_el_ns`` applies."""

MEDIAL_GRADIENT_THRESHOLD = 0.90
"""Distance-gradient magnitude below which a node is a medial-axis candidate."""

MEDIAL_INTERIOR_FRACTION = 0.5
"""Candidates must lie deeper than this many grid spacings inside the domain."""

MEDIAL_PRUNE_CUTOFF = 2.0 * math.sqrt(2.0)
"""Neighbour distance cutoff (in grid spacings) for pruning isolated medial points."""

REPOSE_ANGLE_DEG = 60.0
"""Side-slope angle (degrees) assumed when estimating channel width from depth."""

MAX_STENCIL_CELLS = 100
"""Largest channel stencil half-width (cells); larger stencils are skipped."""

# CFL
CFL_STABILITY = 0.5
"""Target Courant number; sizes are shrunk wherever dt * u / h exceeds it."""

# Defaults for SizingConfig
DEFAULT_GRADE = 0.20
"""Default maximum size change per unit distance between adjacent nodes."""

DEFAULT_MIN_EL_CH = 100.0
"""Default minimum element size (metres) along channels."""

DEFAULT_DT = -1.0
"""Timestep sentinel: negative disables the CFL limiter, 0 selects it automatically."""
