"""Strip-mesh triangulation between two aligned lane rails.

Layout for ``k`` lane pairs (vertex index in brackets)::

    left[0] (0) ---- right[0] (1)
       |  \\             |
       |     \\          |
    left[1] (2) ---- right[1] (3)
       |  \\             |
    left[2] (4) ---- right[2] (5)

Each quad ``i`` becomes two triangles, ``(2i, 2i+2, 2i+1)`` and
``(2i+1, 2i+2, 2i+3)``.  With rails ordered start-to-end and left-to-right
the triangle winding is counter-clockwise seen from +Y, so front faces
point up.

UVs: ``u = 0`` on the left rail and ``1`` on the right; ``v`` runs from 0
at the first pair to 1 at the last.

Normals and bounds are derived from the finished triangle set.  A mesh is
always built whole; there is no incremental patching.
"""

from __future__ import annotations

from dataclasses import dataclass
from io import StringIO

import numpy as np

from bezier_road.geometry.errors import DegenerateGeometry

MIN_LANE_PAIRS = 2

# Pairs needed before a host should attach a collider.
MIN_COLLIDER_PAIRS = 3

_UP = np.array([0.0, 1.0, 0.0])


@dataclass(frozen=True, eq=False)
class Bounds:
    """Axis-aligned bounding box."""

    minimum: np.ndarray
    maximum: np.ndarray

    @classmethod
    def from_points(cls, points: np.ndarray) -> Bounds:
        return cls(points.min(axis=0), points.max(axis=0))

    @property
    def center(self) -> np.ndarray:
        return (self.minimum + self.maximum) / 2.0

    @property
    def size(self) -> np.ndarray:
        return self.maximum - self.minimum

    @property
    def extents(self) -> np.ndarray:
        return self.size / 2.0


@dataclass(frozen=True, eq=False)
class StripMesh:
    """Triangulated road surface.

    Attributes
    ----------
    vertices : np.ndarray
        ``(2k, 3)`` interleaved ``[left0, right0, left1, right1, ...]``
    triangles : np.ndarray
        ``(2(k-1), 3)`` int32 vertex indices
    uvs : np.ndarray
        ``(2k, 2)`` texture coordinates
    normals : np.ndarray
        ``(2k, 3)`` unit vertex normals
    bounds : Bounds
        Axis-aligned bounds of ``vertices``
    """

    vertices: np.ndarray
    triangles: np.ndarray
    uvs: np.ndarray
    normals: np.ndarray
    bounds: Bounds

    @property
    def vertex_count(self) -> int:
        return self.vertices.shape[0]

    @property
    def triangle_count(self) -> int:
        return self.triangles.shape[0]

    @property
    def pair_count(self) -> int:
        return self.vertex_count // 2

    @property
    def indices(self) -> np.ndarray:
        """Flat index buffer, three entries per triangle."""
        return self.triangles.reshape(-1)

    @property
    def left(self) -> np.ndarray:
        return self.vertices[0::2]

    @property
    def right(self) -> np.ndarray:
        return self.vertices[1::2]

    @property
    def is_collidable(self) -> bool:
        return self.pair_count >= MIN_COLLIDER_PAIRS

    def to_obj(self, name: str = "RoadMesh") -> str:
        """Serialize as Wavefront OBJ text (1-based ``v/vt/vn`` faces)."""
        out = StringIO()
        out.write(f"o {name}\n")
        for x, y, z in self.vertices:
            out.write(f"v {x:.6f} {y:.6f} {z:.6f}\n")
        for u, v in self.uvs:
            out.write(f"vt {u:.6f} {v:.6f}\n")
        for x, y, z in self.normals:
            out.write(f"vn {x:.6f} {y:.6f} {z:.6f}\n")
        for tri in self.triangles + 1:
            out.write("f " + " ".join(f"{i}/{i}/{i}" for i in tri) + "\n")
        return out.getvalue()


def _as_rail(points: np.ndarray, name: str) -> np.ndarray:
    arr = np.asarray(points, dtype=np.float64)
    if arr.ndim != 2 or arr.shape[1] != 3:
        raise DegenerateGeometry(f"{name} rail must have shape (k, 3), got {arr.shape}")
    return arr


def compute_vertex_normals(vertices: np.ndarray, triangles: np.ndarray) -> np.ndarray:
    """Area-weighted vertex normals.

    Each face contributes its unnormalized cross product (length = twice
    its area) to its three corners.  Vertices whose sum vanishes get +Y.
    """
    a = vertices[triangles[:, 0]]
    b = vertices[triangles[:, 1]]
    c = vertices[triangles[:, 2]]
    face_normals = np.cross(b - a, c - a)

    accum = np.zeros_like(vertices)
    for corner in range(3):
        np.add.at(accum, triangles[:, corner], face_normals)

    length = np.linalg.norm(accum, axis=1, keepdims=True)
    ok = length > 1e-12
    return np.where(ok, accum / np.where(ok, length, 1.0), _UP)


def build_strip_mesh(left: np.ndarray, right: np.ndarray) -> StripMesh:
    """Triangulate the strip between two index-aligned rails.

    Parameters
    ----------
    left, right : array-like
        Rail points, shape ``(k, 3)`` each, ``k >= 2``

    Returns
    -------
    StripMesh
        ``2k`` vertices and ``2(k-1)`` triangles

    Raises
    ------
    DegenerateGeometry
        Rails differ in length, have fewer than 2 points, or are not 3D.
    """
    left = _as_rail(left, "left")
    right = _as_rail(right, "right")
    if left.shape[0] != right.shape[0]:
        raise DegenerateGeometry(
            f"Lane rails must be aligned: {left.shape[0]} left vs {right.shape[0]} right points"
        )
    k = left.shape[0]
    if k < MIN_LANE_PAIRS:
        raise DegenerateGeometry(f"At least {MIN_LANE_PAIRS} lane pairs required, got {k}")

    vertices = np.empty((2 * k, 3), dtype=np.float64)
    vertices[0::2] = left
    vertices[1::2] = right

    bl = 2 * np.arange(k - 1, dtype=np.int32)
    br = bl + 1
    tl = bl + 2
    tr = bl + 3
    triangles = np.empty((2 * (k - 1), 3), dtype=np.int32)
    triangles[0::2] = np.stack([bl, tl, br], axis=1)
    triangles[1::2] = np.stack([br, tl, tr], axis=1)

    v = np.arange(k) / (k - 1)
    uvs = np.empty((2 * k, 2), dtype=np.float64)
    uvs[0::2] = np.stack([np.zeros(k), v], axis=1)
    uvs[1::2] = np.stack([np.ones(k), v], axis=1)

    normals = compute_vertex_normals(vertices, triangles)
    return StripMesh(
        vertices=vertices,
        triangles=triangles,
        uvs=uvs,
        normals=normals,
        bounds=Bounds.from_points(vertices),
    )
