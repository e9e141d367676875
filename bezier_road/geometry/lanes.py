"""Lane sampling: aligned left/right point sequences along a Bézier curve.

Both lanes are derived from **one** arc-length table built over the
center curve.  For every sample index ``i`` a single parameter ``t_i`` is
computed and both lane points are evaluated from it::

    left_i  = P(t_i) + N(t_i) * lane_width / 2
    right_i = P(t_i) - N(t_i) * lane_width / 2

Offset curves are longer or shorter than the center curve, so lanes
spaced along their own length would not pair up point-for-point.

Offsets are per-sample normal displacements, not true parallel curves, so
rail separation is only approximately ``lane_width`` through tight turns.

Sample plans:
    - DistancePlan(spacing): points every ``spacing`` units, at least 2
    - CountPlan(count): ``count`` points (clamped to >= 2) spread evenly
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Union

import numpy as np

from bezier_road.geometry import bezier
from bezier_road.geometry.arc_length import DEFAULT_SAMPLE_COUNT, ArcLengthTable
from bezier_road.geometry.control_points import validate_control_points
from bezier_road.geometry.errors import DegenerateGeometry, InvalidSamplingParameter

logger = logging.getLogger(__name__)

MIN_LANE_POINTS = 2


# ---------------------------------------------------------------------------
# Sample plans
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class DistancePlan:
    """Sample every ``spacing`` units of center-curve length.

    Parameters
    ----------
    spacing : float
        Distance between consecutive samples.  Must be > 0.
    """

    spacing: float

    def __post_init__(self) -> None:
        if not self.spacing > 0.0:
            raise InvalidSamplingParameter(
                f"Sample spacing must be > 0, got {self.spacing!r}"
            )


@dataclass(frozen=True, slots=True)
class CountPlan:
    """Sample a fixed number of evenly spaced points.

    Counts below 2 are accepted here and clamped when sampling.
    """

    count: int


SamplePlan = Union[DistancePlan, CountPlan]


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass(frozen=True, eq=False)
class LanePoints:
    """Index-aligned lane samples.

    ``left[i]``, ``right[i]`` and ``center[i]`` were all evaluated at the
    same curve parameter ``t[i]``.
    """

    left: np.ndarray
    right: np.ndarray
    center: np.ndarray
    t: np.ndarray
    total_length: float
    spacing: float

    def __post_init__(self) -> None:
        n = self.t.shape[0]
        for name in ("left", "right", "center"):
            arr = getattr(self, name)
            if arr.shape != (n, 3):
                raise DegenerateGeometry(
                    f"Lane array {name!r} has shape {arr.shape}, expected ({n}, 3)"
                )

    def __len__(self) -> int:
        return self.t.shape[0]

    @property
    def midpoints(self) -> np.ndarray:
        return (self.left + self.right) / 2.0


@dataclass(frozen=True, eq=False)
class LanePreview:
    """Uniform-``t`` polylines for drawing the curve and both lane edges."""

    center: np.ndarray
    left: np.ndarray
    right: np.ndarray


# ---------------------------------------------------------------------------
# Sampling
# ---------------------------------------------------------------------------


def _check_lane_width(lane_width: float) -> float:
    if not lane_width > 0.0:
        raise InvalidSamplingParameter(f"Lane width must be > 0, got {lane_width!r}")
    return float(lane_width)


def _lanes_at(
    points: np.ndarray,
    table: ArcLengthTable,
    lane_width: float,
    distances: np.ndarray,
    spacing: float,
) -> LanePoints:
    t = table.distances_to_t(distances)
    center = bezier.position(points, t)
    offset = bezier.normal(points, t) * (lane_width / 2.0)
    lanes = LanePoints(
        left=center + offset,
        right=center - offset,
        center=center,
        t=t,
        total_length=table.total_length,
        spacing=spacing,
    )
    logger.debug(
        "Sampled %d lane pairs over length %.4f (spacing %.4f, width %.3f)",
        len(lanes), lanes.total_length, spacing, lane_width,
    )
    return lanes


def _center_table(points: np.ndarray, sample_count: int) -> ArcLengthTable:
    table = ArcLengthTable.build(points, sample_count)
    if table.is_zero_length:
        raise DegenerateGeometry("Center curve has zero length; control points coincide")
    return table


def sample_by_distance(
    points: np.ndarray,
    lane_width: float,
    spacing: float,
    *,
    sample_count: int = DEFAULT_SAMPLE_COUNT,
) -> LanePoints:
    """Lane pairs every ``spacing`` units along the center curve.

    Parameters
    ----------
    points : array-like
        Control points, shape ``(n, 3)``, n >= 2
    lane_width : float
        Full distance between the two lanes (> 0)
    spacing : float
        Distance between consecutive samples (> 0)
    sample_count : int
        Arc-length table resolution, default 1000

    Returns
    -------
    LanePoints
        ``max(2, floor(total / spacing) + 1)`` aligned pairs.  The last
        distance may exceed the curve length; it clamps to ``t = 1``.

    Raises
    ------
    InvalidControlPoints, InvalidSamplingParameter, DegenerateGeometry
    """
    if not spacing > 0.0:
        raise InvalidSamplingParameter(f"Sample spacing must be > 0, got {spacing!r}")
    width = _check_lane_width(lane_width)
    pts = validate_control_points(points)
    table = _center_table(pts, sample_count)

    count = max(MIN_LANE_POINTS, math.floor(table.total_length / spacing) + 1)
    distances = np.arange(count) * spacing
    return _lanes_at(pts, table, width, distances, float(spacing))


def sample_by_count(
    points: np.ndarray,
    lane_width: float,
    count: int,
    *,
    sample_count: int = DEFAULT_SAMPLE_COUNT,
) -> LanePoints:
    """``count`` lane pairs spread evenly by arc length.

    Counts below 2 are clamped to 2 with a warning.  The first and last
    pairs sit exactly on the curve endpoints.
    """
    if count < MIN_LANE_POINTS:
        logger.warning(
            "Lane point count %d below minimum; clamped to %d", count, MIN_LANE_POINTS
        )
        count = MIN_LANE_POINTS
    width = _check_lane_width(lane_width)
    pts = validate_control_points(points)
    table = _center_table(pts, sample_count)

    distances = np.linspace(0.0, table.total_length, int(count))
    spacing = table.total_length / (count - 1)
    return _lanes_at(pts, table, width, distances, spacing)


def sample_lanes(
    points: np.ndarray,
    lane_width: float,
    plan: SamplePlan,
    *,
    sample_count: int = DEFAULT_SAMPLE_COUNT,
) -> LanePoints:
    """Dispatch on the sample plan type."""
    if isinstance(plan, DistancePlan):
        return sample_by_distance(points, lane_width, plan.spacing, sample_count=sample_count)
    if isinstance(plan, CountPlan):
        return sample_by_count(points, lane_width, plan.count, sample_count=sample_count)
    raise TypeError(f"Unknown sample plan: {plan!r}")


def preview_polylines(
    points: np.ndarray,
    lane_width: float,
    resolution: int,
) -> LanePreview:
    """Center and lane-edge polylines for drawing.

    Evaluated at ``resolution + 1`` uniform parameters, not by arc length.
    ``resolution`` only controls how smooth the drawn lines look and is
    independent of the arc-length table size.
    """
    if resolution < 1:
        raise InvalidSamplingParameter(f"Preview resolution must be >= 1, got {resolution}")
    width = _check_lane_width(lane_width)
    pts = validate_control_points(points)

    t = np.arange(resolution + 1) / resolution
    center = bezier.position(pts, t)
    offset = bezier.normal(pts, t) * (width / 2.0)
    return LanePreview(center=center, left=center + offset, right=center - offset)
