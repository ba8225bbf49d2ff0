"""
Pydantic configuration model for a sizing-field build.

Usage::

    from coastal_sizing.config import SizingConfig

    config = SizingConfig.from_file("/path/to/sizing.json")
    print(config.enabled)          # ("feature_size", "wavelength")
    print(config.model_dump())     # dict, suitable for JSON serialisation

Each size criterion is a tagged variant selected by its ``kind`` field and
carries only its own parameters.  Depth-banded parameters accept the compact
forms ``60``, ``[60]`` or ``[60, -50, -inf]`` as well as the explicit object.
"""

from __future__ import annotations

import json
import logging
import math
import os
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from coastal_sizing import defaults

logger = logging.getLogger(__name__)

CRITERION_KINDS = ("distance", "feature_size", "wavelength", "slope", "channel")


def _coerce_band(value):
    if isinstance(value, (int, float)):
        return {"divisor": value}
    if isinstance(value, (list, tuple)):
        if len(value) == 1:
            return {"divisor": value[0]}
        if len(value) == 3:
            return {"divisor": value[0], "depth_hi": value[1], "depth_lo": value[2]}
        raise ValueError(
            f"Banded parameters need 1 or 3 values (divisor, depth_hi, depth_lo), got {value!r}"
        )
    return value


class DepthBand(BaseModel):
    """A divisor that applies where ``depth_lo < depth < depth_hi``."""

    divisor: float = Field(gt=0)
    depth_hi: float = defaults.DEFAULT_DEPTH_BAND[0]
    depth_lo: float = defaults.DEFAULT_DEPTH_BAND[1]

    @model_validator(mode="after")
    def check_order(self):
        if self.depth_lo >= self.depth_hi:
            raise ValueError(
                f"depth_lo ({self.depth_lo}) must be below depth_hi ({self.depth_hi})"
            )
        return self


class FilterBand(BaseModel):
    """Bathymetry filter length scales (metres), as ``[lambda1, lambda2]``.

    Both non-zero is a band-pass, ``high == 0`` a low-pass at ``low`` and
    ``low == 0`` a high-pass at ``high``.
    """

    low: float = Field(ge=0)
    high: float = Field(ge=0)

    @model_validator(mode="before")
    @classmethod
    def from_pair(cls, value):
        if isinstance(value, (list, tuple)):
            if len(value) != 2:
                raise ValueError(f"Filter bands need two length scales, got {value!r}")
            return {"low": value[0], "high": value[1]}
        return value

    @model_validator(mode="after")
    def check_not_empty(self):
        if self.low == 0 and self.high == 0:
            raise ValueError("At least one filter length scale must be non-zero")
        return self

    @property
    def mode(self) -> str:
        if self.low and self.high:
            return "bandpass"
        if self.high == 0:
            return "lowpass"
        return "highpass"


class DistanceCriterion(BaseModel):
    """Size grows linearly away from the boundary at ``rate`` (degrees per degree)."""

    kind: Literal["distance"] = "distance"
    rate: float = Field(gt=0)


class FeatureSizeCriterion(BaseModel):
    """Resolve the local channel/estuary width with ``elements_per_feature`` elements."""

    kind: Literal["feature_size"] = "feature_size"
    elements_per_feature: float = Field(gt=0)


class WavelengthCriterion(BaseModel):
    """Resolve the tidal wavelength with ``divisor`` elements per depth band."""

    kind: Literal["wavelength"] = "wavelength"
    bands: List[DepthBand]
    period_s: float = Field(default=defaults.M2_PERIOD_S, gt=0)

    @field_validator("bands", mode="before")
    @classmethod
    def coerce_bands(cls, v):
        if not isinstance(v, (list, tuple)) or (v and isinstance(v[0], (int, float))):
            v = [v]
        return [_coerce_band(b) for b in v]


class SlopeCriterion(BaseModel):
    """Resolve the bathymetric slope length scale with ``divisor`` elements per depth band."""

    kind: Literal["slope"] = "slope"
    bands: List[DepthBand]
    filter: Union[Literal["rossby", "off"], List[FilterBand]] = "rossby"

    @field_validator("bands", mode="before")
    @classmethod
    def coerce_bands(cls, v):
        if not isinstance(v, (list, tuple)) or (v and isinstance(v[0], (int, float))):
            v = [v]
        return [_coerce_band(b) for b in v]


class ChannelCriterion(BaseModel):
    """Resolve channel cross-sections with size ``|depth| / divisor``."""

    kind: Literal["channel"] = "channel"
    divisor: float = Field(gt=0)
    repose_angle_deg: float = Field(default=defaults.REPOSE_ANGLE_DEG, gt=0, lt=90)


Criterion = Annotated[
    Union[
        DistanceCriterion,
        FeatureSizeCriterion,
        WavelengthCriterion,
        SlopeCriterion,
        ChannelCriterion,
    ],
    Field(discriminator="kind"),
]


class MaxElementBand(BaseModel):
    """Upper size bound (metres) applied where ``depth_lo < depth < depth_hi``."""

    max_el: float = Field(gt=0)
    depth_hi: float
    depth_lo: float

    @model_validator(mode="before")
    @classmethod
    def from_triple(cls, value):
        if isinstance(value, (list, tuple)):
            if len(value) != 3:
                raise ValueError(f"Banded max_el needs (max_el, depth_hi, depth_lo), got {value!r}")
            return {"max_el": value[0], "depth_hi": value[1], "depth_lo": value[2]}
        return value


class InputFiles(BaseModel):
    """Collaborator data files, relative to the configuration file (CLI only)."""

    boundary: str
    bathymetry: Optional[str] = None
    channels: Optional[str] = None


class SizingConfig(BaseModel):
    """Validated, immutable configuration for one sizing-field build."""

    format_version: str = "1.0"
    name: Optional[str] = None
    h0: float = Field(gt=0)
    max_el: Union[float, List[MaxElementBand]] = math.inf
    max_el_ns: float = Field(default=math.inf, gt=0)
    min_el_ch: float = Field(default=defaults.DEFAULT_MIN_EL_CH, gt=0)
    grade: float = Field(default=defaults.DEFAULT_GRADE, gt=0)
    dt: float = defaults.DEFAULT_DT
    grading_max_iterations: Optional[int] = Field(default=None, gt=0)
    criteria: List[Criterion] = Field(default_factory=list)
    inputs: Optional[InputFiles] = None

    model_config = {"frozen": True}

    @model_validator(mode="before")
    @classmethod
    def drop_unknown_criteria(cls, data):
        if not isinstance(data, dict) or not data.get("criteria"):
            return data
        kept = {}
        for entry in data["criteria"]:
            kind = entry.get("kind") if isinstance(entry, dict) else getattr(entry, "kind", None)
            if kind not in CRITERION_KINDS:
                logger.warning("Ignoring unrecognised size criterion %r", kind)
                continue
            if kind in kept:
                logger.warning("Size criterion %r given twice; using the last one", kind)
                del kept[kind]
            kept[kind] = entry
        return {**data, "criteria": list(kept.values())}

    @field_validator("format_version")
    @classmethod
    def check_format_version(cls, v: str) -> str:
        if v != "1.0":
            raise ValueError(
                f"Unsupported format_version '{v}'. "
                "This version of coastal_sizing supports '1.0'."
            )
        return v

    @field_validator("max_el", mode="before")
    @classmethod
    def coerce_max_el(cls, v):
        if v is None:
            return math.inf
        return v

    @field_validator("max_el")
    @classmethod
    def check_max_el(cls, v):
        if isinstance(v, float) and v <= 0:
            raise ValueError("max_el must be positive")
        return v

    @property
    def enabled(self) -> tuple:
        """Kinds of the configured criteria, in configuration order."""
        return tuple(c.kind for c in self.criteria)

    def criterion(self, kind: str):
        """Return the configured criterion of ``kind`` or None."""
        for c in self.criteria:
            if c.kind == kind:
                return c
        return None

    @property
    def cfl_enabled(self) -> bool:
        return self.dt >= 0

    @property
    def banded_max_el(self) -> bool:
        return isinstance(self.max_el, list)

    @property
    def global_max_el(self) -> float:
        """The single global ``max_el`` (``inf`` when only banded bounds are given)."""
        return math.inf if self.banded_max_el else float(self.max_el)

    @property
    def requires_bathymetry(self) -> bool:
        needs = {"wavelength", "slope", "channel"}
        return bool(needs.intersection(self.enabled)) or self.cfl_enabled or self.banded_max_el

    @classmethod
    def from_file(cls, path: str) -> "SizingConfig":
        """Load and validate a JSON configuration file."""
        if not os.path.isfile(path):
            raise FileNotFoundError(f'Could not find sizing configuration "{path}"')
        with open(path) as f:
            data = json.load(f)
        return cls.model_validate(data)
