"""
Typed scene tree decoded from an RBXLX document.

A SceneNode is immutable; stages that need to change a node build a new one
with ``dataclasses.replace``.  Face directions are ``(axis, sign)`` pairs in
the node's local frame.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterator, NamedTuple, Optional, Tuple

Vec3 = Tuple[float, float, float]
Mat3 = Tuple[Vec3, Vec3, Vec3]
FaceDir = Tuple[int, int]

IDENTITY: Mat3 = ((1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 1.0))

DETAIL_MARKER = "func_detail"

# Roblox NormalId enumeration order: Right, Top, Back, Left, Bottom, Front
NORMAL_IDS: Tuple[FaceDir, ...] = ((0, 1), (1, 1), (2, 1), (0, -1), (1, -1), (2, -1))

# Local face order used for every box-shaped solid
BOX_FACES: Tuple[FaceDir, ...] = ((0, 1), (0, -1), (1, 1), (1, -1), (2, 1), (2, -1))


class ShapeKind(Enum):
    BLOCK = "block"
    CYLINDER = "cylinder"
    TRUSS = "truss"
    SPHERE = "sphere"
    GROUP = "group"

    @property
    def is_geometry(self) -> bool:
        return self is not ShapeKind.GROUP

    def __str__(self) -> str:
        return self.value


class Color3(NamedTuple):
    r: int
    g: int
    b: int

    @classmethod
    def from_packed(cls, value: int) -> "Color3":
        """Decode a ``Color3uint8`` value (0xAARRGGBB, alpha ignored)."""
        return cls((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)

    @classmethod
    def white(cls) -> "Color3":
        return cls(255, 255, 255)


@dataclass(frozen=True)
class SceneNode:
    """One authored object, or a container of objects.

    Attributes:
        kind: Shape variant; GROUP nodes carry no geometry of their own
        referent: Document-unique id (the ``referent`` attribute)
        position: Center in world space
        rotation: Row-major rotation; world = rotation @ local + position
        size: Full extents along the local axes
        surfaces: Per-face surface overrides as ``((axis, sign), tag)`` pairs
        detail_marker: The node itself carries the detail marker
        is_detail: The node or any ancestor carries the detail marker
        detail_group: Referent of the topmost marked ancestor
    """

    kind: ShapeKind
    name: str = ""
    referent: str = ""
    position: Vec3 = (0.0, 0.0, 0.0)
    rotation: Mat3 = IDENTITY
    size: Vec3 = (0.0, 0.0, 0.0)
    color: Color3 = Color3(163, 162, 165)
    material: str = "plastic"
    transparency: float = 0.0
    reflectance: float = 0.0
    surfaces: Tuple[Tuple[FaceDir, str], ...] = ()
    detail_marker: bool = False
    is_detail: bool = False
    detail_group: Optional[str] = None
    children: Tuple["SceneNode", ...] = ()

    @property
    def half_extents(self) -> Vec3:
        return (self.size[0] / 2.0, self.size[1] / 2.0, self.size[2] / 2.0)

    def surface(self, face: FaceDir) -> Optional[str]:
        for key, tag in self.surfaces:
            if key == face:
                return tag
        return None

    def walk(self) -> Iterator["SceneNode"]:
        """Pre-order traversal including this node."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def geometry_count(self) -> int:
        return sum(1 for n in self.walk() if n.kind.is_geometry)


def resolve_detail(node: SceneNode, inherited: bool = False,
                   group: Optional[str] = None) -> SceneNode:
    """Return a copy of the tree with ``is_detail`` and ``detail_group`` set.

    A single top-down pass: each node ORs its own marker with the flag it
    inherited, and the first marked node on a path names the group for its
    whole subtree.
    """
    is_detail = inherited or node.detail_marker
    if is_detail and group is None:
        group = node.referent
    children = tuple(resolve_detail(c, is_detail, group) for c in node.children)
    return replace(
        node,
        is_detail=is_detail,
        detail_group=group if is_detail else None,
        children=children,
    )
