"""Bookkeeping for host-owned lane markers and the road mesh.

A :class:`NodeSet` remembers the handles produced by one sampling pass:
one marker per lane point on each side plus one mesh object.  The set is
replaced as a unit.  :meth:`NodeSet.regenerate` builds the new mesh first
(pure; it may fail without side effects), then tears down every tracked
object, then creates the new ones and records them only once every
create has succeeded, so a caller never sees old and new markers side by
side or a partial new set.

Handles are dropped from tracking only after the host has destroyed them.
If a host call raises, the exception propagates and the remaining handles
stay tracked; calling :meth:`NodeSet.clear` again finishes the teardown.
"""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from bezier_road.geometry.mesh import StripMesh, build_strip_mesh
from bezier_road.nodes.host import Handle, SceneHost

logger = logging.getLogger(__name__)


class NodeSet:
    """Tracks marker and mesh handles for one spline.

    Parameters
    ----------
    host : SceneHost
        Creates and destroys the actual scene objects.
    left_prefix, right_prefix : str
        Marker names are ``f"{prefix}_{index}"``.
    mesh_name : str
        Name passed to :meth:`SceneHost.create_mesh`.
    """

    def __init__(
        self,
        host: SceneHost,
        *,
        left_prefix: str = "LeftNode",
        right_prefix: str = "RightNode",
        mesh_name: str = "RoadMesh",
    ) -> None:
        self._host = host
        self._left_prefix = left_prefix
        self._right_prefix = right_prefix
        self._mesh_name = mesh_name
        self._left: list[Handle] = []
        self._right: list[Handle] = []
        self._mesh_handle: Optional[Handle] = None
        self._mesh: Optional[StripMesh] = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._left) + len(self._right)

    @property
    def host(self) -> SceneHost:
        return self._host

    @property
    def left_markers(self) -> tuple[Handle, ...]:
        return tuple(self._left)

    @property
    def right_markers(self) -> tuple[Handle, ...]:
        return tuple(self._right)

    @property
    def mesh_handle(self) -> Optional[Handle]:
        return self._mesh_handle

    @property
    def mesh(self) -> Optional[StripMesh]:
        """Mesh currently placed in the scene, if any."""
        return self._mesh

    @property
    def is_empty(self) -> bool:
        return not self._left and not self._right and self._mesh_handle is None

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def regenerate(self, left: np.ndarray, right: np.ndarray) -> StripMesh:
        """Replace all tracked objects with markers and a mesh for new rails.

        Parameters
        ----------
        left, right : array-like
            Aligned lane rails, shape ``(k, 3)`` each, ``k >= 2``

        Returns
        -------
        StripMesh
            The mesh handed to the host.

        Raises
        ------
        DegenerateGeometry
            Rails are misaligned or too short.  Tracked state is untouched.
        Exception
            Whatever the host raises while creating.  Markers created by
            this call are destroyed again and the set is left empty.
        """
        mesh = build_strip_mesh(left, right)

        self.clear()

        created: list[Handle] = []
        try:
            for prefix, rail in ((self._left_prefix, mesh.left), (self._right_prefix, mesh.right)):
                for i, point in enumerate(rail):
                    created.append(
                        self._host.create_marker(f"{prefix}_{i}", tuple(point.tolist()))
                    )
            mesh_handle = self._host.create_mesh(self._mesh_name, mesh)
        except Exception:
            logger.error("Host failed after %d marker creates; rolling back", len(created))
            for handle in reversed(created):
                self._host.destroy_marker(handle)
            raise

        k = mesh.pair_count
        self._left = created[:k]
        self._right = created[k:]
        self._mesh_handle = mesh_handle
        self._mesh = mesh

        logger.info(
            "Regenerated %d lane markers and %s (%d triangles)",
            len(self), self._mesh_name, mesh.triangle_count,
        )
        return mesh

    def clear(self) -> None:
        """Destroy every tracked marker and the mesh.  Safe to call when empty."""
        if self.is_empty:
            return

        destroyed = len(self)
        for markers in (self._left, self._right):
            while markers:
                self._host.destroy_marker(markers[-1])
                markers.pop()

        if self._mesh_handle is not None:
            self._host.destroy_mesh(self._mesh_handle)
            self._mesh_handle = None
        self._mesh = None

        logger.info("Cleared %d lane markers and %s", destroyed, self._mesh_name)
