"""
Plane and vector math for Source brush faces.

Vectors are plain 3-tuples.  A plane is kept both as its three defining
points (what the VMF ``plane`` key stores) and as normal + distance.  With the
points in VMF order the normal computed here points *into* the solid, the
same convention Hammer uses when it reads the file back.
"""

from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

Vec3 = Tuple[float, float, float]

EPSILON = 1e-6

# Thinnest brush the writer can express and vbsp will accept (Source units)
MIN_BRUSH_EXTENT = 1e-3


def _cross(a: Vec3, b: Vec3) -> Vec3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def _dot(a: Vec3, b: Vec3) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def _sub(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def _add(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def _scale(v: Vec3, s: float) -> Vec3:
    return (v[0] * s, v[1] * s, v[2] * s)


def _length(v: Vec3) -> float:
    return math.sqrt(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])


def _normalize(v: Vec3) -> Vec3:
    ln = _length(v)
    if ln < EPSILON:
        return (0.0, 0.0, 1.0)
    return (v[0] / ln, v[1] / ln, v[2] / ln)


def _lerp(a: Vec3, b: Vec3, t: float) -> Vec3:
    return (
        a[0] + (b[0] - a[0]) * t,
        a[1] + (b[1] - a[1]) * t,
        a[2] + (b[2] - a[2]) * t,
    )


def centroid(points: Iterable[Vec3]) -> Vec3:
    pts = list(points)
    n = float(len(pts))
    return (
        sum(p[0] for p in pts) / n,
        sum(p[1] for p in pts) / n,
        sum(p[2] for p in pts) / n,
    )


@dataclass(frozen=True)
class PlaneGeometry:
    """A brush face plane.

    ``points`` are kept verbatim so the serializer can write exactly the
    coordinates the shape builder produced.  ``normal`` points inward.
    """

    points: Tuple[Vec3, Vec3, Vec3]
    normal: Vec3
    dist: float

    # ---------------------------------------------------------------
    # Constructors
    # ---------------------------------------------------------------

    @classmethod
    def from_three_points(cls, p1: Vec3, p2: Vec3, p3: Vec3) -> "PlaneGeometry":
        """Compute plane from three non-collinear points (winding order matters)."""
        v1 = _sub(p2, p1)
        v2 = _sub(p3, p1)
        normal = _normalize(_cross(v1, v2))
        return cls(points=(p1, p2, p3), normal=normal, dist=_dot(normal, p1))

    # ---------------------------------------------------------------
    # Queries
    # ---------------------------------------------------------------

    @property
    def outward(self) -> Vec3:
        return (-self.normal[0] + 0.0, -self.normal[1] + 0.0, -self.normal[2] + 0.0)

    def signed_distance(self, p: Vec3) -> float:
        """Positive inside the solid, negative outside."""
        return _dot(self.normal, p) - self.dist

    def is_degenerate(self, tolerance: float = EPSILON) -> bool:
        p1, p2, p3 = self.points
        return _length(_cross(_sub(p2, p1), _sub(p3, p1))) < tolerance


def intersect_three_planes(a: PlaneGeometry, b: PlaneGeometry,
                           c: PlaneGeometry) -> Optional[Vec3]:
    """Find the intersection point of three planes, or None if degenerate."""
    n1, n2, n3 = a.normal, b.normal, c.normal
    denom = _dot(n1, _cross(n2, n3))
    if abs(denom) < EPSILON:
        return None
    c23 = _cross(n2, n3)
    c31 = _cross(n3, n1)
    c12 = _cross(n1, n2)
    d1, d2, d3 = a.dist, b.dist, c.dist
    return (
        (d1 * c23[0] + d2 * c31[0] + d3 * c12[0]) / denom,
        (d1 * c23[1] + d2 * c31[1] + d3 * c12[1]) / denom,
        (d1 * c23[2] + d2 * c31[2] + d3 * c12[2]) / denom,
    )


def solid_vertices(planes: Sequence[PlaneGeometry],
                   tolerance: float = 1e-3) -> List[Vec3]:
    """Vertices of the convex solid bounded by ``planes``.

    Every triple intersection that lies inside all half-spaces is a vertex.
    Duplicates (within tolerance) are collapsed.
    """
    vertices: List[Vec3] = []
    n = len(planes)
    for i in range(n):
        for j in range(i + 1, n):
            for k in range(j + 1, n):
                pt = intersect_three_planes(planes[i], planes[j], planes[k])
                if pt is None:
                    continue
                if any(p.signed_distance(pt) < -tolerance for p in planes):
                    continue
                if any(_length(_sub(pt, v)) < tolerance for v in vertices):
                    continue
                vertices.append(pt)
    return vertices


def wind_inward(polygon: Sequence[Vec3], interior: Vec3) -> Tuple[Vec3, ...]:
    """Order a convex face polygon so that its first three points define a
    plane whose normal faces ``interior``.

    The cyclic order is preserved; only the direction is reversed if needed.
    """
    plane = PlaneGeometry.from_three_points(polygon[0], polygon[1], polygon[2])
    if plane.signed_distance(interior) >= 0.0:
        return tuple(polygon)
    return (polygon[0],) + tuple(reversed(polygon[1:]))
