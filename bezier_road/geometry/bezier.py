"""Bernstein-basis Bézier evaluation for arbitrary degree.

Provides:
    - Binomial coefficients and Bernstein basis polynomials
    - Curve position, first derivative (tangent) and lane normal
    - Offset helpers used by lane previews

All evaluation uses the explicit Bernstein form (no de Casteljau lerps):

    B(t) = sum_{i=0..n} C(n,i) * t^i * (1-t)^(n-i) * P_i

Parameters ``t`` may be a scalar (result shape ``(3,)``) or a 1-D array
(result shape ``(m, 3)``).  ``t`` outside ``[0, 1]`` is not clamped; the
same polynomial extrapolates.

Coordinate frame: +Y is up.  Lanes lie to either side of the curve in the
plane perpendicular to +Y, so for a curve heading +X the left lane is +Z.

Limitation: ``binomial`` goes through factorials.  Python integers keep
this exact, but the float Bernstein weights are only trusted up to the
10-control-point ceiling of :mod:`bezier_road.geometry.control_points`.
"""

from __future__ import annotations

import math
from typing import Union

import numpy as np

from bezier_road.geometry.control_points import validate_control_points

ParamLike = Union[float, np.ndarray]

UP = np.array([0.0, 1.0, 0.0])
FORWARD = np.array([0.0, 0.0, 1.0])

# Below this |tangent x UP| the tangent is treated as parallel to UP.
NORMAL_FALLBACK_THRESHOLD = 1e-3

_ZERO_TANGENT = 1e-12


def binomial(n: int, k: int) -> int:
    """Binomial coefficient C(n, k) = n! / (k! (n-k)!)."""
    return math.factorial(n) // (math.factorial(k) * math.factorial(n - k))


def bernstein(i: int, n: int, t: ParamLike) -> np.ndarray:
    """Bernstein basis polynomial B(i, n, t) = C(n,i) t^i (1-t)^(n-i)."""
    t = np.asarray(t, dtype=np.float64)
    return binomial(n, i) * t ** i * (1.0 - t) ** (n - i)


def _evaluate(points: np.ndarray, t: ParamLike) -> np.ndarray:
    """Weighted Bernstein sum over ``points`` with no validation."""
    n = points.shape[0] - 1
    t = np.asarray(t, dtype=np.float64)
    weights = np.stack([bernstein(i, n, t) for i in range(n + 1)], axis=-1)
    return weights @ points


def _broadcast_vector(vector: np.ndarray, t: ParamLike) -> np.ndarray:
    if np.ndim(t) == 0:
        return vector.copy()
    return np.tile(vector, (np.size(t), 1))


def position(points: np.ndarray, t: ParamLike) -> np.ndarray:
    """Evaluate the curve at parameter(s) ``t``.

    Parameters
    ----------
    points : array-like
        Control points, shape ``(n, 3)``, n >= 2
    t : float or np.ndarray
        Curve parameter(s); values outside [0, 1] extrapolate

    Returns
    -------
    np.ndarray
        Point(s) on the curve, shape ``(3,)`` or ``(m, 3)``

    Raises
    ------
    InvalidControlPoints
        If fewer than 2 control points are given.
    """
    pts = validate_control_points(points)
    return _evaluate(pts, t)


def tangent(points: np.ndarray, t: ParamLike) -> np.ndarray:
    """First derivative of the curve (not normalized).

    B'(t) = n * sum_{i=0..n-1} B(i, n-1, t) * (P[i+1] - P[i])

    A single control point has no derivative; ``FORWARD`` is returned so
    callers always get a usable direction.
    """
    pts = validate_control_points(points, min_points=1)
    n = pts.shape[0] - 1
    if n < 1:
        return _broadcast_vector(FORWARD, t)
    return n * _evaluate(np.diff(pts, axis=0), t)


def normal(points: np.ndarray, t: ParamLike) -> np.ndarray:
    """Unit lane normal: ``normalize(unit_tangent x UP)``.

    Falls back to ``unit_tangent x FORWARD`` when the tangent is (nearly)
    parallel to UP.  A zero tangent, e.g. from coincident control points,
    is replaced by ``FORWARD`` first.  The result is always a finite unit
    vector.

    Returns
    -------
    np.ndarray
        Normal(s), shape ``(3,)`` or ``(m, 3)``
    """
    pts = validate_control_points(points)
    tan = np.atleast_2d(tangent(pts, t))

    length = np.linalg.norm(tan, axis=1, keepdims=True)
    safe_length = np.where(length > _ZERO_TANGENT, length, 1.0)
    unit = np.where(length > _ZERO_TANGENT, tan / safe_length, FORWARD)

    primary = np.cross(unit, UP)
    magnitude = np.linalg.norm(primary, axis=1, keepdims=True)
    fallback = np.cross(unit, FORWARD)
    chosen = np.where(magnitude < NORMAL_FALLBACK_THRESHOLD, fallback, primary)
    result = chosen / np.linalg.norm(chosen, axis=1, keepdims=True)

    return result[0] if np.ndim(t) == 0 else result


def offset_point(points: np.ndarray, t: ParamLike, offset: float) -> np.ndarray:
    """Point displaced ``offset`` units along the lane normal at ``t``.

    Positive offsets land on the left lane, negative on the right.
    """
    pts = validate_control_points(points)
    return _evaluate(pts, t) + normal(pts, t) * offset


def offset_control_points(points: np.ndarray, offset: float) -> np.ndarray:
    """Approximate offset control polygon.

    Shifts control point ``i`` along the normal at ``t = i / n``.  This is
    a cheap visual approximation of a parallel curve and is not used for
    lane sampling, which offsets sampled points instead.
    """
    pts = validate_control_points(points)
    t = np.arange(pts.shape[0]) / (pts.shape[0] - 1)
    return pts + normal(pts, t) * offset
