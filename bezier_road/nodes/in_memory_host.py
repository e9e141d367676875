"""In-process scene host.

Keeps created objects in a dict keyed by integer handle.  Used by the
``build_road`` script and by tests; it also records every create/destroy
call in order so tests can check teardown happens before creation.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Literal, Optional

import numpy as np

from bezier_road.geometry.mesh import StripMesh
from bezier_road.nodes.host import SceneHost


class SceneObjectError(LookupError):
    """Raised when a handle does not refer to a live object of the right kind."""

    pass


@dataclass
class SceneObject:
    """One live object owned by the host."""

    name: str
    kind: Literal["marker", "mesh"]
    position: Optional[np.ndarray] = None
    mesh: Optional[StripMesh] = None


@dataclass
class InMemorySceneHost(SceneHost):
    """Dictionary-backed :class:`SceneHost`."""

    objects: dict[int, SceneObject] = field(default_factory=dict)
    events: list[tuple[str, int]] = field(default_factory=list)
    _ids: itertools.count = field(default_factory=lambda: itertools.count(1), repr=False)

    def create_marker(self, name: str, position: tuple[float, float, float]) -> int:
        handle = next(self._ids)
        self.objects[handle] = SceneObject(
            name=name, kind="marker", position=np.asarray(position, dtype=np.float64)
        )
        self.events.append(("create_marker", handle))
        return handle

    def destroy_marker(self, handle: int) -> None:
        self._destroy(handle, "marker")

    def create_mesh(self, name: str, mesh: StripMesh) -> int:
        handle = next(self._ids)
        self.objects[handle] = SceneObject(name=name, kind="mesh", mesh=mesh)
        self.events.append(("create_mesh", handle))
        return handle

    def destroy_mesh(self, handle: int) -> None:
        self._destroy(handle, "mesh")

    def _destroy(self, handle: int, kind: str) -> None:
        obj = self.objects.get(handle)
        if obj is None or obj.kind != kind:
            raise SceneObjectError(f"No live {kind} with handle {handle!r}")
        del self.objects[handle]
        self.events.append((f"destroy_{kind}", handle))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def markers(self) -> list[SceneObject]:
        return [obj for obj in self.objects.values() if obj.kind == "marker"]

    @property
    def meshes(self) -> list[SceneObject]:
        return [obj for obj in self.objects.values() if obj.kind == "mesh"]

    def get(self, handle: int) -> SceneObject:
        try:
            return self.objects[handle]
        except KeyError as e:
            raise SceneObjectError(f"No live object with handle {handle!r}") from e
