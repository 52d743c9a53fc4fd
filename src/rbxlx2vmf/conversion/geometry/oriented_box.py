"""
Oriented bounding boxes.

Every block, cylinder, truss and skybox slab is built from one of these.  The
optimizer also works on them directly: a merge is only ever a change of
center and half-extent along one local axis.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Tuple

from rbxlx2vmf.conversion.plane_math import EPSILON, Vec3, _add, _dot, _normalize, _scale
from rbxlx2vmf.scene.scene_types import IDENTITY, Mat3, SceneNode

# Cyclic corner order of a face in its two in-plane axes
_FACE_CYCLE = ((-1, -1), (1, -1), (1, 1), (-1, 1))


@dataclass(frozen=True)
class OrientedBox:
    center: Vec3
    axes: Mat3  # local unit axes in world space
    half: Vec3

    @classmethod
    def from_node(cls, node: SceneNode) -> "OrientedBox":
        r = node.rotation
        axes = tuple(_normalize((r[0][i], r[1][i], r[2][i])) for i in range(3))
        return cls(center=node.position, axes=axes, half=node.half_extents)

    @classmethod
    def from_bounds(cls, mins: Vec3, maxs: Vec3) -> "OrientedBox":
        center = tuple((lo + hi) / 2.0 for lo, hi in zip(mins, maxs))
        half = tuple((hi - lo) / 2.0 for lo, hi in zip(mins, maxs))
        return cls(center=center, axes=IDENTITY, half=half)

    @property
    def is_degenerate(self) -> bool:
        return min(self.half) <= EPSILON

    def point(self, su: float, sv: float, sw: float) -> Vec3:
        """Point at signed fractions (-1..1) of the half-extents."""
        p = self.center
        for axis, s in enumerate((su, sv, sw)):
            p = _add(p, _scale(self.axes[axis], s * self.half[axis]))
        return p

    def corners(self) -> List[Vec3]:
        return [
            self.point(sx, sy, sz)
            for sx in (-1, 1)
            for sy in (-1, 1)
            for sz in (-1, 1)
        ]

    def face_polygon(self, axis: int, sign: int) -> Tuple[Vec3, Vec3, Vec3, Vec3]:
        """Four corners of one face in cyclic order (direction unspecified)."""
        u, v = (axis + 1) % 3, (axis + 2) % 3
        points = []
        for su, sv in _FACE_CYCLE:
            signs = [0.0, 0.0, 0.0]
            signs[axis] = sign
            signs[u] = su
            signs[v] = sv
            points.append(self.point(*signs))
        return tuple(points)

    def span(self, axis: int) -> Tuple[float, float]:
        """Extent along one local axis, measured from the world origin."""
        c = _dot(self.center, self.axes[axis])
        return c - self.half[axis], c + self.half[axis]

    def bounds(self) -> Tuple[Vec3, Vec3]:
        pts = self.corners()
        mins = tuple(min(p[i] for p in pts) for i in range(3))
        maxs = tuple(max(p[i] for p in pts) for i in range(3))
        return mins, maxs
