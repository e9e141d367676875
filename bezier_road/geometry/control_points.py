"""Control-point sequence validation and editing rules.

A control-point sequence is an ordered ``(n, 3)`` float array with
``2 <= n <= 10``; the curve degree is ``n - 1``.  The upper bound is what
keeps the factorial-based binomial coefficients in
:mod:`bezier_road.geometry.bezier` exact, so it is enforced here, at the
editing boundary, and not re-checked by the evaluator.

Editing helpers return **new** arrays.  Kernel functions never mutate the
sequence they are given.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import numpy as np

from bezier_road.geometry.errors import InvalidControlPoints

logger = logging.getLogger(__name__)

MIN_CONTROL_POINTS = 2
MAX_CONTROL_POINTS = 10

# Distance between the last point and a newly appended one.
APPEND_STEP = 5.0

DEFAULT_DIRECTION = np.array([0.0, 0.0, 1.0])

# Gentle S-curve in the XZ plane used for new splines.
DEFAULT_CONTROL_POINTS = (
    (0.0, 0.0, 0.0),
    (5.0, 0.0, 5.0),
    (10.0, 0.0, -5.0),
    (15.0, 0.0, 0.0),
)


def validate_control_points(
    points: Sequence[Sequence[float]] | np.ndarray,
    *,
    min_points: int = MIN_CONTROL_POINTS,
    max_points: Optional[int] = None,
) -> np.ndarray:
    """Coerce ``points`` to a float64 ``(n, 3)`` array and check it.

    Parameters
    ----------
    points : array-like
        Ordered 3D positions.
    min_points : int
        Minimum accepted length, default 2.
    max_points : int, optional
        Maximum accepted length; ``None`` skips the check.

    Returns
    -------
    np.ndarray
        Control points, shape ``(n, 3)``, dtype float64.

    Raises
    ------
    InvalidControlPoints
        On ragged input, wrong shape, too few/many points or non-finite
        coordinates.
    """
    try:
        arr = np.asarray(points, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidControlPoints(f"Control points are not numeric 3D positions: {e}") from e

    if arr.ndim != 2 or arr.shape[1] != 3:
        raise InvalidControlPoints(
            f"Control points must have shape (n, 3), got {arr.shape}"
        )
    if arr.shape[0] < min_points:
        raise InvalidControlPoints(
            f"At least {min_points} control points required, got {arr.shape[0]}"
        )
    if max_points is not None and arr.shape[0] > max_points:
        raise InvalidControlPoints(
            f"At most {max_points} control points supported, got {arr.shape[0]}"
        )
    if not np.all(np.isfinite(arr)):
        raise InvalidControlPoints("Control points contain NaN or infinite coordinates")
    return arr


def clamp_point_count(count: int) -> int:
    """Clamp a requested control-point count to ``[2, 10]``."""
    clamped = max(MIN_CONTROL_POINTS, min(MAX_CONTROL_POINTS, int(count)))
    if clamped != count:
        logger.warning(
            "Requested %d control points; clamped to %d (supported range %d..%d)",
            count, clamped, MIN_CONTROL_POINTS, MAX_CONTROL_POINTS,
        )
    return clamped


def next_control_point(points: np.ndarray) -> np.ndarray:
    """Position for a point appended after the last one.

    Continues ``APPEND_STEP`` units along the direction of the last two
    points.  Coincident last points fall back to ``DEFAULT_DIRECTION``.
    """
    direction = points[-1] - points[-2]
    length = np.linalg.norm(direction)
    if length > 0.0:
        direction = direction / length
    else:
        direction = DEFAULT_DIRECTION
    return points[-1] + direction * APPEND_STEP


def resize_control_points(
    points: Sequence[Sequence[float]] | np.ndarray,
    count: int,
) -> np.ndarray:
    """Grow or shrink a sequence to ``count`` points (clamped to 2..10).

    Growing appends points with :func:`next_control_point`; shrinking drops
    points from the end.  The first point never moves.

    Returns
    -------
    np.ndarray
        New control-point array, shape ``(clamp(count), 3)``.
    """
    arr = validate_control_points(points)
    target = clamp_point_count(count)

    if target <= arr.shape[0]:
        return arr[:target].copy()

    grown = [row for row in arr]
    while len(grown) < target:
        grown.append(next_control_point(np.asarray(grown[-2:])))
    return np.asarray(grown)
