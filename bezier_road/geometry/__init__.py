"""
Lane geometry kernel.

Pure, stateless functions from control points to lane samples and strip
meshes.  Nothing here touches files, scene objects or global state.

All positions are 3D with +Y up.
"""

from bezier_road.geometry.arc_length import DEFAULT_SAMPLE_COUNT, ArcLengthTable
from bezier_road.geometry.bezier import (
    bernstein,
    binomial,
    normal,
    offset_control_points,
    offset_point,
    position,
    tangent,
)
from bezier_road.geometry.control_points import (
    DEFAULT_CONTROL_POINTS,
    MAX_CONTROL_POINTS,
    MIN_CONTROL_POINTS,
    clamp_point_count,
    resize_control_points,
    validate_control_points,
)
from bezier_road.geometry.errors import (
    DegenerateGeometry,
    GeometryError,
    InvalidControlPoints,
    InvalidSamplingParameter,
)
from bezier_road.geometry.lanes import (
    CountPlan,
    DistancePlan,
    LanePoints,
    LanePreview,
    SamplePlan,
    preview_polylines,
    sample_by_count,
    sample_by_distance,
    sample_lanes,
)
from bezier_road.geometry.mesh import Bounds, StripMesh, build_strip_mesh

__all__ = [
    "ArcLengthTable",
    "Bounds",
    "CountPlan",
    "DEFAULT_CONTROL_POINTS",
    "DEFAULT_SAMPLE_COUNT",
    "DegenerateGeometry",
    "DistancePlan",
    "GeometryError",
    "InvalidControlPoints",
    "InvalidSamplingParameter",
    "LanePoints",
    "LanePreview",
    "MAX_CONTROL_POINTS",
    "MIN_CONTROL_POINTS",
    "SamplePlan",
    "StripMesh",
    "bernstein",
    "binomial",
    "build_strip_mesh",
    "clamp_point_count",
    "normal",
    "offset_control_points",
    "offset_point",
    "position",
    "preview_polylines",
    "resize_control_points",
    "sample_by_count",
    "sample_by_distance",
    "sample_lanes",
    "tangent",
    "validate_control_points",
]
