"""
coastal_sizing — Mesh sizing fields for coastal and ocean simulation meshes.

Modules:
    pipeline      build_sizing_field(): criteria -> bounds -> grading -> CFL -> interpolant
    config        Pydantic SizingConfig model and tagged size criteria
    grid          Structured lon/lat evaluation grid and degree/metre conversions
    boundary      DistanceEvaluator / Bathymetry protocols and stock implementations
    distance      Signed distance field and distance criterion
    feature       Medial-axis feature size criterion
    wavelength    Tidal wavelength criterion
    slope         Bathymetric slope criterion and depth filters
    channels      Channel imprinting criterion
    combine       Layer combination, bounds and CFL limiter
    grading       Gradient limiter
    interpolant   SizingFunction, the finished queryable field
    diagnostics   Run summary for downstream diagnostics
    callbacks     SizingCallback protocol and implementations
    defaults      Physical constants and thresholds
"""

__version__ = "1.0.0"
