"""
Skybox shell synthesis.

Encloses the world in six axis-aligned slabs textured with the sky tool
texture.  The interior of the shell is the world bounding box (detail solids
excluded) raised by the clearance on top and grown by the margin on the
other five sides.  Slabs sit outside that interior and do not overlap each
other: the X slabs span the full outer Y/Z range, the Y slabs the interior
X and outer Z, and the Z slabs only the interior X/Y.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from rbxlx2vmf.conversion.geometry.oriented_box import OrientedBox
from rbxlx2vmf.conversion.geometry.shape_builder import box_sides
from rbxlx2vmf.conversion.plane_math import EPSILON, Vec3
from rbxlx2vmf.conversion.vmf_model import Solid
from rbxlx2vmf.errors import ConfigurationError
from rbxlx2vmf.materials.material_types import SKYBOX_TOOL, MaterialKey
from rbxlx2vmf.scene.scene_types import ShapeKind

logger = logging.getLogger(__name__)


@dataclass
class SkyboxSettings:
    clearance: float = 0.0   # extra height above the world, target units
    margin: float = 0.0      # growth on the other five sides, target units
    thickness: float = 15.0  # slab thickness, one stud at the default scale
    material: str = SKYBOX_TOOL


def world_bounds(solids: Sequence[Solid]) -> Tuple[Vec3, Vec3]:
    """Axis-aligned bound of all world (non-detail) solids."""
    world = [s for s in solids if not s.is_detail]
    if not world:
        raise ConfigurationError("Auto-skybox needs at least one world brush, found none")
    mins = [float("inf")] * 3
    maxs = [float("-inf")] * 3
    for solid in world:
        lo, hi = solid.bounds()
        for i in range(3):
            mins[i] = min(mins[i], lo[i])
            maxs[i] = max(maxs[i], hi[i])
    return tuple(mins), tuple(maxs)


def build_skybox(solids: Sequence[Solid],
                 settings: SkyboxSettings = SkyboxSettings()) -> List[Solid]:
    """Return the six shell slabs for ``solids``.

    Raises:
        ConfigurationError: the world is empty or its bound has no volume.
    """
    lo, hi = world_bounds(solids)
    m = settings.margin
    inner_lo = (lo[0] - m, lo[1] - m, lo[2] - m)
    inner_hi = (hi[0] + m, hi[1] + m, hi[2] + settings.clearance)
    if any(b - a <= EPSILON for a, b in zip(inner_lo, inner_hi)):
        raise ConfigurationError(
            f"World bounding box {lo} - {hi} is degenerate; cannot build a skybox")

    t = settings.thickness
    outer_lo = tuple(v - t for v in inner_lo)
    outer_hi = tuple(v + t for v in inner_hi)
    (x0, y0, z0), (x1, y1, z1) = inner_lo, inner_hi
    (X0, Y0, Z0), (X1, Y1, Z1) = outer_lo, outer_hi

    slabs = [
        ((x1, Y0, Z0), (X1, Y1, Z1)),   # +X
        ((X0, Y0, Z0), (x0, Y1, Z1)),   # -X
        ((x0, y1, Z0), (x1, Y1, Z1)),   # +Y
        ((x0, Y0, Z0), (x1, y0, Z1)),   # -Y
        ((x0, y0, z1), (x1, y1, Z1)),   # +Z
        ((x0, y0, Z0), (x1, y1, z0)),   # -Z
    ]

    key = MaterialKey.tool(settings.material)
    shell = []
    for mins, maxs in slabs:
        box = OrientedBox.from_bounds(mins, maxs)
        shell.append(Solid(
            sides=box_sides(box, [key] * 6),
            kind=ShapeKind.BLOCK,
            box=box,
            source_index=len(solids) + len(shell),
            name="skybox",
        ))
    logger.info("Skybox interior %s - %s", inner_lo, inner_hi)
    return shell
