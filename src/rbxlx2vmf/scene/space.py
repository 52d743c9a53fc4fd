"""
Roblox → Source coordinate conversion.

Roblox is Y-up, Source is Z-up.  The axis map (x, y, z) → (x, -z, y) is a
proper rotation, so handedness and face winding survive the transform.
"""

from __future__ import annotations
from dataclasses import replace
from typing import Tuple

import numpy as np

from rbxlx2vmf.scene.scene_types import FaceDir, Mat3, SceneNode, Vec3

AXIS_MAP = np.array(
    [
        [1.0, 0.0, 0.0],
        [0.0, 0.0, -1.0],
        [0.0, 1.0, 0.0],
    ]
)


def _vec(a: np.ndarray) -> Vec3:
    # +0.0 clears negative zero
    return (float(a[0]) + 0.0, float(a[1]) + 0.0, float(a[2]) + 0.0)


def _mat(m: np.ndarray) -> Mat3:
    return (_vec(m[0]), _vec(m[1]), _vec(m[2]))


def remap_face(face: FaceDir) -> FaceDir:
    """Map a local face direction through the axis map."""
    axis, sign = face
    column = AXIS_MAP[:, axis] * sign
    new_axis = int(np.argmax(np.abs(column)))
    return new_axis, 1 if column[new_axis] > 0 else -1


def remap_size(size: Vec3) -> Vec3:
    extents = np.abs(AXIS_MAP) @ np.asarray(size, dtype=float)
    return _vec(extents)


def to_target_space(node: SceneNode, scale: float) -> SceneNode:
    """Return a copy of the tree in Source coordinates, scaled by ``scale``.

    Positions become ``scale * M p``, rotations ``M R Mᵀ`` and sizes are
    permuted to the new local axes.  Surface keys are re-keyed through M.
    """
    position = AXIS_MAP @ np.asarray(node.position, dtype=float) * scale
    rotation = AXIS_MAP @ np.asarray(node.rotation, dtype=float) @ AXIS_MAP.T
    size = remap_size(node.size)
    surfaces = sorted(
        ((remap_face(face), tag) for face, tag in node.surfaces),
        key=lambda pair: (pair[0][0], -pair[0][1]),
    )
    return replace(
        node,
        position=_vec(position),
        rotation=_mat(rotation),
        size=(size[0] * scale, size[1] * scale, size[2] * scale),
        surfaces=tuple(surfaces),
        children=tuple(to_target_space(c, scale) for c in node.children),
    )
