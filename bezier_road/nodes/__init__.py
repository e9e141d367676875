"""Lane marker and road-mesh bookkeeping against an injected scene host."""

from bezier_road.nodes.host import Handle, SceneHost
from bezier_road.nodes.in_memory_host import InMemorySceneHost, SceneObject, SceneObjectError
from bezier_road.nodes.node_set import NodeSet

__all__ = [
    "Handle",
    "InMemorySceneHost",
    "NodeSet",
    "SceneHost",
    "SceneObject",
    "SceneObjectError",
]
