"""Tests for marker/mesh bookkeeping and the in-memory scene host."""

from __future__ import annotations

import numpy as np
import pytest

from bezier_road.geometry.errors import DegenerateGeometry
from bezier_road.geometry.lanes import sample_by_count
from bezier_road.nodes import InMemorySceneHost, NodeSet, SceneObjectError


def _rails(k: int) -> tuple[np.ndarray, np.ndarray]:
    x = np.linspace(0.0, 10.0, k)
    return (
        np.stack([x, np.zeros(k), np.full(k, 2.0)], axis=1),
        np.stack([x, np.zeros(k), np.full(k, -2.0)], axis=1),
    )


class FailingHost(InMemorySceneHost):
    """Raises on the n-th marker destroy."""

    def __init__(self, fail_on: int) -> None:
        super().__init__()
        self.fail_on = fail_on
        self.destroyed = 0

    def destroy_marker(self, handle: int) -> None:
        self.destroyed += 1
        if self.destroyed == self.fail_on:
            raise RuntimeError("host busy")
        super().destroy_marker(handle)


class FailingCreateHost(InMemorySceneHost):
    """Raises on the n-th marker create."""

    def __init__(self, fail_on: int) -> None:
        super().__init__()
        self.fail_on = fail_on
        self.created = 0

    def create_marker(self, name: str, position: tuple[float, float, float]) -> int:
        self.created += 1
        if self.created == self.fail_on:
            raise RuntimeError("host full")
        return super().create_marker(name, position)


# ---------------------------------------------------------------------------
# Regenerate
# ---------------------------------------------------------------------------


class TestRegenerate:
    def test_creates_markers_and_mesh(self, host: InMemorySceneHost) -> None:
        nodes = NodeSet(host)
        mesh = nodes.regenerate(*_rails(4))
        assert len(nodes) == 8
        assert len(host.markers) == 8
        assert len(host.meshes) == 1
        assert nodes.mesh is mesh
        assert host.get(nodes.mesh_handle).mesh is mesh

    def test_marker_names_and_positions(self, host: InMemorySceneHost) -> None:
        nodes = NodeSet(host)
        left, right = _rails(3)
        nodes.regenerate(left, right)
        names = [host.get(h).name for h in nodes.left_markers]
        assert names == ["LeftNode_0", "LeftNode_1", "LeftNode_2"]
        assert host.get(nodes.right_markers[2]).name == "RightNode_2"
        np.testing.assert_allclose(host.get(nodes.left_markers[1]).position, left[1])
        np.testing.assert_allclose(host.get(nodes.right_markers[0]).position, right[0])

    def test_custom_names(self, host: InMemorySceneHost) -> None:
        nodes = NodeSet(host, left_prefix="L", right_prefix="R", mesh_name="Lane")
        nodes.regenerate(*_rails(2))
        assert host.get(nodes.left_markers[0]).name == "L_0"
        assert host.get(nodes.mesh_handle).name == "Lane"

    def test_regenerate_replaces_previous(self, host: InMemorySceneHost) -> None:
        nodes = NodeSet(host)
        nodes.regenerate(*_rails(5))
        old = set(nodes.left_markers) | set(nodes.right_markers) | {nodes.mesh_handle}
        nodes.regenerate(*_rails(3))
        assert len(host.markers) == 6
        assert len(host.meshes) == 1
        assert old.isdisjoint(host.objects)

    def test_teardown_precedes_creation(self, host: InMemorySceneHost) -> None:
        nodes = NodeSet(host)
        nodes.regenerate(*_rails(3))
        host.events.clear()
        nodes.regenerate(*_rails(3))
        kinds = [kind for kind, _ in host.events]
        last_destroy = max(i for i, k in enumerate(kinds) if k.startswith("destroy"))
        first_create = min(i for i, k in enumerate(kinds) if k.startswith("create"))
        assert last_destroy < first_create
        assert kinds.count("destroy_marker") == 6
        assert kinds.count("destroy_mesh") == 1

    def test_bad_rails_leave_state_untouched(self, host: InMemorySceneHost) -> None:
        nodes = NodeSet(host)
        nodes.regenerate(*_rails(4))
        before = (nodes.left_markers, nodes.right_markers, nodes.mesh_handle)
        host.events.clear()
        left, right = _rails(3)
        with pytest.raises(DegenerateGeometry):
            nodes.regenerate(left, right[:2])
        assert (nodes.left_markers, nodes.right_markers, nodes.mesh_handle) == before
        assert host.events == []

    def test_from_sampled_lanes(self, host: InMemorySceneHost, s_curve: np.ndarray) -> None:
        lanes = sample_by_count(s_curve, 4.0, 7)
        nodes = NodeSet(host)
        mesh = nodes.regenerate(lanes.left, lanes.right)
        assert mesh.vertex_count == 14
        assert len(host.markers) == 14

    def test_failed_create_rolls_back(self) -> None:
        host = FailingCreateHost(fail_on=8)
        nodes = NodeSet(host)
        nodes.regenerate(*_rails(2))
        host.events.clear()
        with pytest.raises(RuntimeError, match="host full"):
            nodes.regenerate(*_rails(3))
        assert nodes.is_empty
        assert nodes.mesh is None
        assert nodes.mesh_handle is None
        assert host.objects == {}
        created = [h for kind, h in host.events if kind == "create_marker"]
        assert len(created) == 3
        assert host.events[-3:] == [("destroy_marker", h) for h in reversed(created)]

    def test_failed_create_then_regenerate(self) -> None:
        host = FailingCreateHost(fail_on=2)
        nodes = NodeSet(host)
        with pytest.raises(RuntimeError):
            nodes.regenerate(*_rails(2))
        nodes.regenerate(*_rails(2))
        assert len(nodes) == 4
        assert len(host.markers) == 4
        assert len(host.meshes) == 1


# ---------------------------------------------------------------------------
# Clear
# ---------------------------------------------------------------------------


class TestClear:
    def test_clear_destroys_everything(self, host: InMemorySceneHost) -> None:
        nodes = NodeSet(host)
        nodes.regenerate(*_rails(4))
        nodes.clear()
        assert nodes.is_empty
        assert nodes.mesh is None
        assert host.objects == {}

    def test_double_clear_is_noop(self, host: InMemorySceneHost) -> None:
        nodes = NodeSet(host)
        nodes.regenerate(*_rails(4))
        nodes.clear()
        events = list(host.events)
        nodes.clear()
        assert host.events == events
        assert nodes.is_empty

    def test_clear_empty_set(self, host: InMemorySceneHost) -> None:
        nodes = NodeSet(host)
        nodes.clear()
        assert host.events == []

    def test_failed_destroy_keeps_remaining_handles(self) -> None:
        host = FailingHost(fail_on=3)
        nodes = NodeSet(host)
        nodes.regenerate(*_rails(3))
        with pytest.raises(RuntimeError):
            nodes.clear()
        assert len(nodes) == 4
        assert len(host.markers) == 4
        # Every tracked handle still refers to a live host object.
        for handle in nodes.left_markers + nodes.right_markers:
            host.get(handle)

        nodes.clear()
        assert nodes.is_empty
        assert host.objects == {}


# ---------------------------------------------------------------------------
# In-memory host
# ---------------------------------------------------------------------------


class TestInMemoryHost:
    def test_handles_unique(self, host: InMemorySceneHost) -> None:
        a = host.create_marker("a", (0.0, 0.0, 0.0))
        b = host.create_marker("b", (1.0, 0.0, 0.0))
        assert a != b

    def test_destroy_unknown_handle(self, host: InMemorySceneHost) -> None:
        with pytest.raises(SceneObjectError):
            host.destroy_marker(99)

    def test_destroy_wrong_kind(self, host: InMemorySceneHost) -> None:
        handle = host.create_marker("a", (0.0, 0.0, 0.0))
        with pytest.raises(SceneObjectError):
            host.destroy_mesh(handle)

    def test_double_destroy(self, host: InMemorySceneHost) -> None:
        handle = host.create_marker("a", (0.0, 0.0, 0.0))
        host.destroy_marker(handle)
        with pytest.raises(SceneObjectError):
            host.destroy_marker(handle)

    def test_get_unknown(self, host: InMemorySceneHost) -> None:
        with pytest.raises(SceneObjectError):
            host.get(1)
