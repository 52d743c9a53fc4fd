"""
Scene node → brush conversion.

Each geometric SceneNode becomes exactly one Solid:

* block, cylinder and truss parts become the six-sided oriented box of the
  part (cylinders and trusses are approximated by their bounding box);
* balls become a cube whose six sides carry displacements projecting the
  face grid onto the sphere.

Group nodes contribute nothing themselves.  Nodes are visited in post-order
and never inherit geometry from their parents.
"""

from __future__ import annotations
import logging
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from rbxlx2vmf.conversion.geometry.oriented_box import OrientedBox
from rbxlx2vmf.conversion.plane_math import (
    EPSILON,
    MIN_BRUSH_EXTENT,
    PlaneGeometry,
    Vec3,
    wind_inward,
)
from rbxlx2vmf.conversion.vmf_model import Displacement, Side, Solid, TextureFace
from rbxlx2vmf.errors import GeometryWarning
from rbxlx2vmf.materials.material_types import MaterialKey
from rbxlx2vmf.scene.scene_types import BOX_FACES, IDENTITY, FaceDir, Mat3, SceneNode, ShapeKind

logger = logging.getLogger(__name__)

MIN_SPHERE_POWER = 2
MAX_SPHERE_POWER = 4


@dataclass
class GeometrySettings:
    """Configuration for brush generation"""
    sphere_power: int = 2
    workers: int = 1
    min_extent: float = MIN_BRUSH_EXTENT  # parts thinner than this are skipped


@dataclass
class BuildResult:
    solids: List[Solid] = field(default_factory=list)
    warnings: List[GeometryWarning] = field(default_factory=list)
    approximated: Dict[str, int] = field(default_factory=dict)
    skipped: int = 0


# ---------------------------------------------------------------
# Faces
# ---------------------------------------------------------------

def face_materials(node: SceneNode) -> Tuple[MaterialKey, ...]:
    """Material key of each local box face, in BOX_FACES order."""
    return tuple(
        MaterialKey.for_surface(
            node.surface(face) or node.material,
            node.color,
            node.transparency,
            node.reflectance,
        )
        for face in BOX_FACES
    )


def local_face(rotation: Mat3, face: FaceDir) -> FaceDir:
    """Local face of a part whose outward normal is closest to world ``face``."""
    axis, sign = face
    row = np.asarray(rotation, dtype=float)[axis] * sign
    local_axis = int(np.argmax(np.abs(row)))
    return local_axis, 1 if row[local_axis] > 0 else -1


def world_face_materials(node: SceneNode) -> Tuple[MaterialKey, ...]:
    """Material key of each world-aligned face, in BOX_FACES order.

    Spheres are built on world axes, so their surface overrides are looked
    up through the part rotation.
    """
    return tuple(
        MaterialKey.for_surface(
            node.surface(local_face(node.rotation, face)) or node.material,
            node.color,
            node.transparency,
            node.reflectance,
        )
        for face in BOX_FACES
    )


def box_sides(box: OrientedBox, materials: Sequence[MaterialKey],
              sphere_power: Optional[int] = None) -> Tuple[Side, ...]:
    """Six sides of ``box``; with ``sphere_power`` each carries a sphere
    displacement of radius ``box.half[0]``."""
    sides = []
    for (axis, sign), key in zip(BOX_FACES, materials):
        polygon = wind_inward(box.face_polygon(axis, sign), box.center)
        plane = PlaneGeometry.from_three_points(*polygon[:3])
        displacement = None
        if sphere_power is not None:
            displacement = sphere_displacement(
                polygon, box.center, box.half[0], plane.outward, sphere_power)
        sides.append(Side(
            plane=plane,
            material=key,
            texture_face=TextureFace.from_normal(plane.outward),
            polygon=polygon,
            displacement=displacement,
        ))
    return tuple(sides)


def sphere_displacement(polygon: Sequence[Vec3], center: Vec3, radius: float,
                        outward: Vec3, power: int) -> Displacement:
    """Project the face grid radially onto the sphere around ``center``."""
    n = 2 ** power
    t = np.linspace(0.0, 1.0, n + 1)
    c = np.asarray(polygon, dtype=float)
    origin = np.asarray(center, dtype=float)

    edge0 = c[0] + (c[1] - c[0]) * t[:, None]
    edge1 = c[3] + (c[2] - c[3]) * t[:, None]
    flat = edge0[:, None, :] + (edge1 - edge0)[:, None, :] * t[None, :, None]

    rel = flat - origin
    on_sphere = origin + rel / np.linalg.norm(rel, axis=2, keepdims=True) * radius
    delta = on_sphere - flat
    dist = np.linalg.norm(delta, axis=2)
    safe = np.maximum(dist, EPSILON)[..., None]
    normals = np.where(dist[..., None] > EPSILON, delta / safe, np.asarray(outward))
    dist = np.where(dist > EPSILON, dist, 0.0)

    return Displacement(
        power=power,
        corners=tuple(polygon),
        normals=tuple(
            tuple((float(v[0]) + 0.0, float(v[1]) + 0.0, float(v[2]) + 0.0) for v in row)
            for row in normals
        ),
        distances=tuple(tuple(float(d) for d in row) for row in dist),
        offset_normal=outward,
    )


# ---------------------------------------------------------------
# Builder
# ---------------------------------------------------------------

class ShapeBuilder:
    """Converts a scene tree into an ordered list of solids."""

    def __init__(self, settings: Optional[GeometrySettings] = None):
        self.settings = settings or GeometrySettings()

    def build(self, root: SceneNode) -> BuildResult:
        if self.settings.workers > 1 and len(root.children) > 1:
            result = self._build_parallel(root)
        else:
            result = BuildResult()
            self._visit(root, result)

        # Document order over the merged list
        result.solids = [replace(s, source_index=i) for i, s in enumerate(result.solids)]

        for kind, count in sorted(result.approximated.items()):
            result.warnings.append(GeometryWarning(
                f"{count} {kind} part(s) approximated by their bounding box"))
        logger.info("Built %d solids (%d skipped)", len(result.solids), result.skipped)
        return result

    def _build_parallel(self, root: SceneNode) -> BuildResult:
        logger.debug("Building %d subtrees on %d workers",
                     len(root.children), self.settings.workers)
        tasks = [(child, self.settings) for child in root.children]
        result = BuildResult()
        with ProcessPoolExecutor(max_workers=self.settings.workers) as executor:
            # map() yields in submission order
            for part in executor.map(_build_subtree, tasks):
                result.solids.extend(part.solids)
                result.warnings.extend(part.warnings)
                result.skipped += part.skipped
                for kind, count in part.approximated.items():
                    result.approximated[kind] = result.approximated.get(kind, 0) + count
        if root.kind.is_geometry:
            self._emit(root, result)
        return result

    def _visit(self, node: SceneNode, result: BuildResult) -> None:
        for child in node.children:
            self._visit(child, result)
        if node.kind.is_geometry:
            self._emit(node, result)

    def _emit(self, node: SceneNode, result: BuildResult) -> None:
        solid = self.build_node(node, result)
        if solid is not None:
            result.solids.append(solid)

    def build_node(self, node: SceneNode, result: BuildResult) -> Optional[Solid]:
        thickness = 2.0 * min(node.half_extents)
        if thickness <= self.settings.min_extent:
            message = (f"Skipping degenerate {node.kind} '{node.name}' ({node.referent}): "
                       f"thickness {thickness:.6g} is below {self.settings.min_extent:g}")
            logger.warning(message)
            result.warnings.append(GeometryWarning(message))
            result.skipped += 1
            return None

        group = node.detail_group if node.is_detail else None

        if node.kind is ShapeKind.SPHERE:
            radius = min(node.size) / 2.0
            box = OrientedBox(center=node.position, axes=IDENTITY,
                              half=(radius, radius, radius))
            sides = box_sides(box, world_face_materials(node), self.settings.sphere_power)
            return Solid(sides=sides, kind=node.kind, entity_group=group,
                         box=box, name=node.name)

        if node.kind in (ShapeKind.CYLINDER, ShapeKind.TRUSS):
            logger.debug("Approximating %s '%s' by its bounding box", node.kind, node.name)
            key = str(node.kind)
            result.approximated[key] = result.approximated.get(key, 0) + 1

        box = OrientedBox.from_node(node)
        return Solid(sides=box_sides(box, face_materials(node)), kind=node.kind,
                     entity_group=group, box=box, name=node.name)


def _build_subtree(task: Tuple[SceneNode, GeometrySettings]) -> BuildResult:
    node, settings = task
    builder = ShapeBuilder(GeometrySettings(
        sphere_power=settings.sphere_power, workers=1, min_extent=settings.min_extent))
    result = BuildResult()
    builder._visit(node, result)
    return result
