"""Exceptions raised by the lane geometry kernel.

Every failure is local and synchronous.  Callers receive one of these
directly; nothing is retried, because the kernel is deterministic and a
repeated call with the same input fails the same way.
"""

from __future__ import annotations


class GeometryError(Exception):
    """Base class for all lane-kernel errors."""

    pass


class InvalidControlPoints(GeometryError):
    """Control-point sequence is unusable (too few points, bad shape, NaN)."""

    pass


class InvalidSamplingParameter(GeometryError):
    """Sampling input cannot be clamped to anything meaningful.

    Raised for a non-positive spacing or lane width, or a table/preview
    resolution below one.  Point *counts* below two are clamped instead.
    """

    pass


class DegenerateGeometry(GeometryError):
    """Geometry collapses: zero-length curve or fewer than 2 lane pairs."""

    pass
