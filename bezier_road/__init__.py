"""Bézier road lanes.

Two-lane road geometry from a Bézier center curve:

    - geometry: curve evaluation, arc-length tables, lane sampling, strip meshes
    - nodes: scene-host port and bookkeeping for placed markers and meshes
    - spline: the editable BezierSpline entity
    - utils: config validation, atomic I/O and logging setup

Layering: geometry has no dependencies on the other packages; nodes
depends on geometry; spline ties both together; utils sits at the edge.
"""

from bezier_road.spline import BezierSpline

__version__ = "0.1.0"

__all__ = ["BezierSpline", "__version__"]
