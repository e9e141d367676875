"""Scene host port.

The lane kernel never creates scene objects itself.  Whatever owns the
scene (an editor, a game engine bridge, a test double) implements
:class:`SceneHost` and hands out opaque handles; :class:`NodeSet` only
stores those handles and gives them back for destruction.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from bezier_road.geometry.mesh import StripMesh

Handle = Any
"""Opaque reference to a host-owned object."""


class SceneHost(ABC):
    """Create/destroy interface for marker and mesh objects."""

    @abstractmethod
    def create_marker(self, name: str, position: tuple[float, float, float]) -> Handle:
        """Create a visual marker at ``position`` and return its handle."""

    @abstractmethod
    def destroy_marker(self, handle: Handle) -> None:
        """Destroy a marker previously returned by :meth:`create_marker`."""

    @abstractmethod
    def create_mesh(self, name: str, mesh: StripMesh) -> Handle:
        """Place ``mesh`` in the scene and return its handle."""

    @abstractmethod
    def destroy_mesh(self, handle: Handle) -> None:
        """Destroy a mesh object previously returned by :meth:`create_mesh`."""
