"""YAML schema validation and config loading.

Validates spline configuration files with pydantic:
    - Spline schema (spline.v1.yaml): control points, lane width, curve
      resolution, arc-length table size, sampling mode, logging

The limits mirror the editing tool: 2..10 control points, curve resolution
10..200, distance mode 0.1..20 units, count mode 2..100 points.  The
geometry kernel accepts wider ranges; the schema is what keeps user
configs inside the supported envelope.

Usage:
    from bezier_road.utils import validators

    cfg = validators.load_spline_config("configs/spline.v1.yaml")
    lanes = sample_lanes(cfg.control_points, cfg.lane_width, cfg.sample_plan())
"""

from pathlib import Path
from typing import List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bezier_road.geometry.control_points import (
    DEFAULT_CONTROL_POINTS,
    MAX_CONTROL_POINTS,
    MIN_CONTROL_POINTS,
)
from bezier_road.geometry.lanes import CountPlan, DistancePlan, SamplePlan


# ============================================================================
# SPLINE SCHEMA V1
# ============================================================================

class SamplingConfig(BaseModel):
    """Node placement mode and its parameter."""
    mode: Literal["distance", "count"] = Field("distance", description="Active sampling mode")
    distance: float = Field(1.0, ge=0.1, le=20.0, description="Spacing between nodes (distance mode)")
    count: int = Field(5, ge=2, le=100, description="Number of node pairs (count mode)")


class LoggingConfig(BaseModel):
    """Arguments forwarded to logging_config.setup_logging()."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    file: Optional[str] = Field(None, description="Log file path; None disables file logging")
    json_lines: bool = Field(False, description="Write JSON lines instead of human format")
    color: bool = True


class SplineConfigV1(BaseModel):
    """Spline definition (spline.v1.yaml schema).

    Positions are 3D, +Y up.
    """
    model_config = ConfigDict(populate_by_name=True)

    schema_version: str = Field("spline.v1", alias="schema", description="Schema version")
    control_points: List[Tuple[float, float, float]] = Field(
        default_factory=lambda: list(DEFAULT_CONTROL_POINTS),
        min_length=MIN_CONTROL_POINTS,
        max_length=MAX_CONTROL_POINTS,
        description="Ordered Bézier control points",
    )
    lane_width: float = Field(4.0, gt=0.0, le=20.0, description="Distance between the two lanes")
    curve_resolution: int = Field(50, ge=10, le=200, description="Segments per preview polyline")
    arc_length_samples: int = Field(1000, ge=1, description="Arc-length table intervals")
    sampling: SamplingConfig = Field(default_factory=SamplingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator('schema_version')
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != "spline.v1":
            raise ValueError(f"Expected schema 'spline.v1', got '{v}'")
        return v

    def sample_plan(self) -> SamplePlan:
        """Sample plan for the configured mode."""
        if self.sampling.mode == "count":
            return CountPlan(self.sampling.count)
        return DistancePlan(self.sampling.distance)


# ============================================================================
# PUBLIC API
# ============================================================================

def load_spline_config(path: Union[str, Path]) -> SplineConfigV1:
    """Load and validate a spline config from YAML.

    Parameters
    ----------
    path : Union[str, Path]
        Path to spline.v1.yaml file

    Returns
    -------
    SplineConfigV1
        Validated spline configuration

    Raises
    ------
    FileNotFoundError
        If path doesn't exist
    ValueError
        If validation fails (with actionable error message)
    """
    from . import fs

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Spline config not found: {path}")

    data = fs.load_yaml(path) or {}
    try:
        return SplineConfigV1(**data)
    except Exception as e:
        raise ValueError(f"Spline config validation failed at {path}: {e}") from e


def save_spline_config(cfg: SplineConfigV1, path: Union[str, Path]) -> None:
    """Write ``cfg`` as YAML atomically, using the ``schema`` alias."""
    from . import fs

    fs.atomic_yaml_dump(cfg.model_dump(mode="json", by_alias=True), path)
