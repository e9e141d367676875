"""Editable Bézier road spline.

:class:`BezierSpline` is the stateful object an editor or script works
with.  It owns:

    - an immutable snapshot of the control points (tuple of 3-tuples)
    - lane width, preview resolution and arc-length table size
    - a :class:`~bezier_road.nodes.NodeSet` holding the markers and road
      mesh placed in the host scene

Edits replace the snapshot; they never touch nodes already placed.  Nodes
change only through ``create_nodes_*`` and ``clear_nodes``.

Usage:
    host = InMemorySceneHost()
    spline = BezierSpline(host, lane_width=4.0)
    spline.create_nodes_by_distance(2.0)
    spline.set_point_count(6)
    spline.create_nodes_by_count(12)
    spline.clear_nodes()
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional, Sequence

import numpy as np

from bezier_road.geometry import bezier
from bezier_road.geometry.arc_length import DEFAULT_SAMPLE_COUNT, ArcLengthTable
from bezier_road.geometry.control_points import (
    DEFAULT_CONTROL_POINTS,
    MAX_CONTROL_POINTS,
    MIN_CONTROL_POINTS,
    next_control_point,
    resize_control_points,
    validate_control_points,
)
from bezier_road.geometry.errors import InvalidControlPoints, InvalidSamplingParameter
from bezier_road.geometry.lanes import (
    CountPlan,
    DistancePlan,
    LanePoints,
    LanePreview,
    SamplePlan,
    preview_polylines,
    sample_lanes,
)
from bezier_road.geometry.mesh import StripMesh
from bezier_road.nodes.host import SceneHost
from bezier_road.nodes.node_set import NodeSet

if TYPE_CHECKING:
    from bezier_road.utils.validators import SplineConfigV1

logger = logging.getLogger(__name__)

Point = tuple[float, float, float]

MIN_CURVE_RESOLUTION = 1


def _snapshot(points: np.ndarray) -> tuple[Point, ...]:
    return tuple(tuple(float(c) for c in row) for row in points)


class BezierSpline:
    """Bézier center curve with two lanes and the nodes placed for them.

    Parameters
    ----------
    host : SceneHost
        Scene adapter that owns markers and meshes.
    control_points : sequence of 3D points, optional
        2..10 points; defaults to a gentle S-curve.
    lane_width : float
        Distance between the lanes, > 0. Default 4.0.
    curve_resolution : int
        Segments in preview polylines, >= 1. Default 50.
    arc_length_samples : int
        Arc-length table intervals, >= 1. Default 1000.
    """

    def __init__(
        self,
        host: SceneHost,
        control_points: Optional[Sequence[Sequence[float]]] = None,
        *,
        lane_width: float = 4.0,
        curve_resolution: int = 50,
        arc_length_samples: int = DEFAULT_SAMPLE_COUNT,
    ) -> None:
        if control_points is None:
            control_points = DEFAULT_CONTROL_POINTS
        self._points = _snapshot(
            validate_control_points(control_points, max_points=MAX_CONTROL_POINTS)
        )
        self.lane_width = lane_width
        self.curve_resolution = curve_resolution
        self.arc_length_samples = arc_length_samples
        self._nodes = NodeSet(host)
        self._lanes: Optional[LanePoints] = None

    @classmethod
    def from_config(cls, cfg: "SplineConfigV1", host: SceneHost) -> BezierSpline:
        """Build a spline from a validated ``spline.v1`` config."""
        return cls(
            host,
            cfg.control_points,
            lane_width=cfg.lane_width,
            curve_resolution=cfg.curve_resolution,
            arc_length_samples=cfg.arc_length_samples,
        )

    # ------------------------------------------------------------------
    # Parameters
    # ------------------------------------------------------------------

    @property
    def control_points(self) -> tuple[Point, ...]:
        return self._points

    @property
    def points_array(self) -> np.ndarray:
        """Control points as a fresh ``(n, 3)`` array."""
        return np.array(self._points, dtype=np.float64)

    @property
    def degree(self) -> int:
        return len(self._points) - 1

    @property
    def lane_width(self) -> float:
        return self._lane_width

    @lane_width.setter
    def lane_width(self, value: float) -> None:
        if not value > 0.0:
            raise InvalidSamplingParameter(f"Lane width must be > 0, got {value!r}")
        self._lane_width = float(value)

    @property
    def curve_resolution(self) -> int:
        return self._curve_resolution

    @curve_resolution.setter
    def curve_resolution(self, value: int) -> None:
        if value < MIN_CURVE_RESOLUTION:
            raise InvalidSamplingParameter(f"Curve resolution must be >= 1, got {value!r}")
        self._curve_resolution = int(value)

    @property
    def arc_length_samples(self) -> int:
        return self._arc_length_samples

    @arc_length_samples.setter
    def arc_length_samples(self, value: int) -> None:
        if value < 1:
            raise InvalidSamplingParameter(f"Arc-length sample count must be >= 1, got {value!r}")
        self._arc_length_samples = int(value)

    @property
    def nodes(self) -> NodeSet:
        return self._nodes

    @property
    def lanes(self) -> Optional[LanePoints]:
        """Lane samples behind the currently placed nodes, if any."""
        return self._lanes

    @property
    def mesh(self) -> Optional[StripMesh]:
        return self._nodes.mesh

    # ------------------------------------------------------------------
    # Control-point editing
    # ------------------------------------------------------------------

    def set_control_points(self, points: Sequence[Sequence[float]]) -> None:
        """Replace the whole control polygon (2..10 points)."""
        self._points = _snapshot(validate_control_points(points, max_points=MAX_CONTROL_POINTS))

    def move_control_point(self, index: int, position: Sequence[float]) -> None:
        pts = self.points_array
        try:
            pts[index] = position
        except IndexError as e:
            raise InvalidControlPoints(
                f"Control point index {index} out of range for {len(self._points)} points"
            ) from e
        self.set_control_points(pts)

    def add_control_point(self, position: Optional[Sequence[float]] = None) -> None:
        """Append a point; by default continues the last segment's direction."""
        if len(self._points) >= MAX_CONTROL_POINTS:
            raise InvalidControlPoints(
                f"Cannot add control point: already at the maximum of {MAX_CONTROL_POINTS}"
            )
        pts = self.points_array
        new = next_control_point(pts) if position is None else np.asarray(position, dtype=np.float64)
        self.set_control_points(np.vstack([pts, new]))

    def remove_control_point(self, index: int = -1) -> None:
        if len(self._points) <= MIN_CONTROL_POINTS:
            raise InvalidControlPoints(
                f"Cannot remove control point: at least {MIN_CONTROL_POINTS} required"
            )
        pts = list(self._points)
        try:
            del pts[index]
        except IndexError as e:
            raise InvalidControlPoints(
                f"Control point index {index} out of range for {len(self._points)} points"
            ) from e
        self.set_control_points(pts)

    def set_point_count(self, count: int) -> int:
        """Grow or shrink to ``count`` points, clamped to 2..10.

        Returns the point count actually applied.
        """
        self._points = _snapshot(resize_control_points(self._points, count))
        return len(self._points)

    # ------------------------------------------------------------------
    # Curve queries
    # ------------------------------------------------------------------

    def position(self, t: bezier.ParamLike) -> np.ndarray:
        return bezier.position(self.points_array, t)

    def tangent(self, t: bezier.ParamLike) -> np.ndarray:
        return bezier.tangent(self.points_array, t)

    def normal(self, t: bezier.ParamLike) -> np.ndarray:
        return bezier.normal(self.points_array, t)

    def total_length(self) -> float:
        return ArcLengthTable.build(self.points_array, self.arc_length_samples).total_length

    def left_lane_control_points(self) -> np.ndarray:
        return bezier.offset_control_points(self.points_array, self._lane_width / 2.0)

    def right_lane_control_points(self) -> np.ndarray:
        return bezier.offset_control_points(self.points_array, -self._lane_width / 2.0)

    def preview(self) -> LanePreview:
        """Center and lane polylines at ``curve_resolution`` segments."""
        return preview_polylines(self.points_array, self._lane_width, self._curve_resolution)

    # ------------------------------------------------------------------
    # Node placement
    # ------------------------------------------------------------------

    def create_nodes(self, plan: SamplePlan) -> LanePoints:
        """Sample both lanes and replace the placed markers and mesh.

        Sampling and mesh building happen before anything is torn down, so
        a geometry error leaves the previous nodes in place.  Once the old
        nodes are being replaced, ``lanes`` is None until the new set exists.
        """
        lanes = sample_lanes(
            self.points_array, self._lane_width, plan, sample_count=self._arc_length_samples
        )
        self._lanes = None
        self._nodes.regenerate(lanes.left, lanes.right)
        self._lanes = lanes
        logger.debug(
            "Placed %d lane pairs over %.3f units (spacing %.3f)",
            len(lanes), lanes.total_length, lanes.spacing,
        )
        return lanes

    def create_nodes_by_distance(self, spacing: float) -> LanePoints:
        return self.create_nodes(DistancePlan(spacing))

    def create_nodes_by_count(self, count: int) -> LanePoints:
        return self.create_nodes(CountPlan(count))

    def clear_nodes(self) -> None:
        """Remove every placed marker and the road mesh."""
        self._nodes.clear()
        self._lanes = None
