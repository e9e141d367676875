"""Arc-length lookup table for distance-uniform sampling.

The Bézier parameter ``t`` is not distributed uniformly along the curve.
:class:`ArcLengthTable` samples the curve at ``sample_count + 1`` uniform
parameters, accumulates chord lengths, and inverts distance -> ``t`` by
binary search plus linear interpolation between neighbouring samples.

Tables are cheap to rebuild and are never cached: every sampling call
builds a fresh one from the control points it was given.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from bezier_road.geometry import bezier
from bezier_road.geometry.control_points import validate_control_points
from bezier_road.geometry.errors import InvalidSamplingParameter

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_COUNT = 1000

# Totals at or below this fraction of the largest coordinate (min 1 unit)
# are rounding noise, not curve length.
ZERO_LENGTH_EPS = 1e-9


@dataclass(frozen=True, eq=False)
class ArcLengthTable:
    """Cumulative curve length at uniform parameter steps.

    Parameters
    ----------
    lengths : np.ndarray
        Shape ``(sample_count + 1,)``; ``lengths[i]`` is the polyline length
        from ``t = 0`` to ``t = i / sample_count``.  Non-decreasing, starts
        at 0.
    """

    lengths: np.ndarray

    @classmethod
    def build(
        cls,
        points: np.ndarray,
        sample_count: int = DEFAULT_SAMPLE_COUNT,
    ) -> ArcLengthTable:
        """Sample ``points`` and accumulate Euclidean step lengths.

        Raises
        ------
        InvalidControlPoints
            Fewer than 2 control points.
        InvalidSamplingParameter
            ``sample_count < 1``.

        Notes
        -----
        Coincident control points do not evaluate to exactly one point in
        floating point once there are three or more of them.  Such tables,
        and any total below ``ZERO_LENGTH_EPS`` times the largest
        coordinate, are snapped to all zeros.
        """
        if sample_count < 1:
            raise InvalidSamplingParameter(
                f"Arc-length sample count must be >= 1, got {sample_count}"
            )
        pts = validate_control_points(points)

        t = np.arange(sample_count + 1) / sample_count
        samples = bezier.position(pts, t)
        steps = np.linalg.norm(np.diff(samples, axis=0), axis=1)
        lengths = np.concatenate(([0.0], np.cumsum(steps)))

        coincident = float(np.ptp(pts, axis=0).max()) == 0.0
        scale = max(1.0, float(np.abs(pts).max()))
        if coincident or lengths[-1] <= ZERO_LENGTH_EPS * scale:
            lengths = np.zeros_like(lengths)
        lengths.setflags(write=False)

        logger.debug(
            "Built arc-length table: %d samples, total length %.6f",
            sample_count, lengths[-1],
        )
        return cls(lengths)

    def __len__(self) -> int:
        return self.lengths.shape[0]

    @property
    def sample_count(self) -> int:
        return self.lengths.shape[0] - 1

    @property
    def total_length(self) -> float:
        return float(self.lengths[-1])

    @property
    def is_zero_length(self) -> bool:
        """True when the curve collapses to a single point."""
        return self.total_length == 0.0

    @property
    def t_values(self) -> np.ndarray:
        """Parameters the table was sampled at."""
        return np.arange(self.sample_count + 1) / self.sample_count

    def distances_to_t(self, distances: np.ndarray) -> np.ndarray:
        """Vectorized :meth:`distance_to_t`.

        Parameters
        ----------
        distances : np.ndarray
            Distances along the curve, any shape

        Returns
        -------
        np.ndarray
            Parameters in ``[0, 1]``, same shape as ``distances``

        Notes
        -----
        Distances are clamped to ``[0, total_length]``; the bounds map to
        exactly 0 and 1.  A zero-length table maps everything to 0.
        Inside the range, the first index whose cumulative length is
        ``>= distance`` is found by binary search (``searchsorted``) and
        ``t`` is interpolated linearly against its predecessor.
        """
        d = np.asarray(distances, dtype=np.float64)
        if self.is_zero_length:
            return np.zeros_like(d)

        total = self.total_length
        n = self.sample_count
        idx = np.clip(np.searchsorted(self.lengths, d, side="left"), 1, n)
        before = self.lengths[idx - 1]
        span = self.lengths[idx] - before
        frac = np.divide(d - before, span, out=np.zeros_like(d), where=span > 0.0)
        t = (idx - 1 + frac) / n

        t = np.where(d >= total, 1.0, t)
        t = np.where(d <= 0.0, 0.0, t)
        return t

    def distance_to_t(self, distance: float) -> float:
        """Parameter ``t`` at which the curve has travelled ``distance``."""
        return float(self.distances_to_t(np.asarray([distance]))[0])
