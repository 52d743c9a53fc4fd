"""
Scene document decoding and coordinate conversion.
"""

from .scene_types import (
    BOX_FACES,
    DETAIL_MARKER,
    NORMAL_IDS,
    Color3,
    SceneNode,
    ShapeKind,
    resolve_detail,
)
from .parser import SceneParser, parse_scene, MATERIAL_TOKENS
from .space import to_target_space, remap_face

__all__ = [
    'BOX_FACES',
    'DETAIL_MARKER',
    'NORMAL_IDS',
    'Color3',
    'SceneNode',
    'ShapeKind',
    'resolve_detail',
    'SceneParser',
    'parse_scene',
    'MATERIAL_TOKENS',
    'to_target_space',
    'remap_face',
]
