"""
In-memory VMF document model.

Sides, solids and entities as produced by the geometry stages and consumed by
the format writers.  All types are immutable; stages build new instances.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Dict, Iterator, List, Optional, Tuple

from rbxlx2vmf.conversion.plane_math import PlaneGeometry, Vec3, _lerp
from rbxlx2vmf.materials.material_types import MaterialKey
from rbxlx2vmf.scene.scene_types import ShapeKind

if TYPE_CHECKING:
    from rbxlx2vmf.conversion.geometry.oriented_box import OrientedBox


class TextureFace(Enum):
    """Dominant outward axis of a side; selects its UV basis.

    Values are (u axis, v axis) in world space, Hammer's world alignment with
    the u direction flipped on back faces so textures read left to right.
    """

    X_POS = ((0, 1, 0), (0, 0, -1))
    X_NEG = ((0, -1, 0), (0, 0, -1))
    Y_POS = ((-1, 0, 0), (0, 0, -1))
    Y_NEG = ((1, 0, 0), (0, 0, -1))
    Z_POS = ((1, 0, 0), (0, -1, 0))
    Z_NEG = ((-1, 0, 0), (0, -1, 0))

    @property
    def u_axis(self) -> Vec3:
        return self.value[0]

    @property
    def v_axis(self) -> Vec3:
        return self.value[1]

    @property
    def orientation(self) -> str:
        """'top', 'bottom' or 'side'."""
        if self is TextureFace.Z_POS:
            return "top"
        if self is TextureFace.Z_NEG:
            return "bottom"
        return "side"

    @classmethod
    def from_normal(cls, n: Vec3) -> "TextureFace":
        ax, ay, az = abs(n[0]), abs(n[1]), abs(n[2])
        if ax >= ay and ax >= az:
            return cls.X_POS if n[0] > 0 else cls.X_NEG
        if ay >= az:
            return cls.Y_POS if n[1] > 0 else cls.Y_NEG
        return cls.Z_POS if n[2] > 0 else cls.Z_NEG


@dataclass(frozen=True)
class Displacement:
    """A displaced vertex grid on a four-sided side.

    Grid vertex (row i, column j) sits on the flat face at
    ``lerp(lerp(c0, c1, i/N), lerp(c3, c2, i/N), j/N)`` and is moved by
    ``normals[i][j] * distances[i][j]``.
    """

    power: int
    corners: Tuple[Vec3, Vec3, Vec3, Vec3]
    normals: Tuple[Tuple[Vec3, ...], ...]
    distances: Tuple[Tuple[float, ...], ...]
    offset_normal: Vec3

    @property
    def resolution(self) -> int:
        return 2 ** self.power + 1

    @property
    def start_position(self) -> Vec3:
        return self.corners[0]

    def flat_point(self, i: int, j: int) -> Vec3:
        n = self.resolution - 1
        c0, c1, c2, c3 = self.corners
        edge0 = _lerp(c0, c1, i / n)
        edge1 = _lerp(c3, c2, i / n)
        return _lerp(edge0, edge1, j / n)

    def vertices(self) -> Iterator[Vec3]:
        for i in range(self.resolution):
            for j in range(self.resolution):
                p = self.flat_point(i, j)
                n = self.normals[i][j]
                d = self.distances[i][j]
                yield (p[0] + n[0] * d, p[1] + n[1] * d, p[2] + n[2] * d)


@dataclass(frozen=True)
class Side:
    plane: PlaneGeometry
    material: MaterialKey
    texture_face: TextureFace
    polygon: Tuple[Vec3, ...]
    displacement: Optional[Displacement] = None


@dataclass(frozen=True)
class Solid:
    """A convex brush.

    ``box`` is set for box-shaped solids; ``source_index`` is the document
    order of the scene node the solid came from.
    """

    sides: Tuple[Side, ...]
    kind: ShapeKind = ShapeKind.BLOCK
    entity_group: Optional[str] = None
    box: Optional[OrientedBox] = None
    source_index: int = 0
    name: str = ""

    @property
    def has_displacement(self) -> bool:
        return any(s.displacement is not None for s in self.sides)

    @property
    def is_detail(self) -> bool:
        return self.entity_group is not None

    def vertices(self) -> List[Vec3]:
        seen: Dict[Vec3, None] = {}
        for side in self.sides:
            for p in side.polygon:
                seen.setdefault(p, None)
        return list(seen)

    def bounds(self) -> Tuple[Vec3, Vec3]:
        pts = self.vertices()
        mins = tuple(min(p[i] for p in pts) for i in range(3))
        maxs = tuple(max(p[i] for p in pts) for i in range(3))
        return mins, maxs


@dataclass(frozen=True)
class MapEntity:
    """Represents a brush entity: the world, or one detail group."""

    classname: str
    solids: Tuple[Solid, ...] = ()
    properties: Tuple[Tuple[str, str], ...] = ()
    group: Optional[str] = None


@dataclass(frozen=True)
class VmfDocument:
    world: MapEntity
    entities: Tuple[MapEntity, ...] = ()
    skyname: str = "sky_day01_01"
    editor_version: int = 400
    editor_build: int = 3325
    map_version: int = 0

    def all_solids(self) -> Iterator[Solid]:
        yield from self.world.solids
        for entity in self.entities:
            yield from entity.solids

    def all_sides(self) -> Iterator[Side]:
        for solid in self.all_solids():
            yield from solid.sides

    @property
    def solid_count(self) -> int:
        return sum(1 for _ in self.all_solids())
