"""
Materials package.

Material keys and modes, the developer palette, VMT descriptors and
procedural textures.  The registry that ties them to a document lives in
``rbxlx2vmf.materials.registry``.
"""

from .material_types import (
    CLIP_TOOL,
    SKYBOX_TOOL,
    Material,
    MaterialKey,
    TextureMode,
)
from .dev_palette import DEV_PALETTE, DEV_TEXTURE_SCALE, dev_texture
from .vmt import MATERIAL_SURFACEPROP_MAP, build_flat_vmt, build_vmt, surfaceprop_for
from .texture_synth import render_texture, synthesize

__all__ = [
    'CLIP_TOOL',
    'SKYBOX_TOOL',
    'Material',
    'MaterialKey',
    'TextureMode',
    'DEV_PALETTE',
    'DEV_TEXTURE_SCALE',
    'dev_texture',
    'MATERIAL_SURFACEPROP_MAP',
    'build_vmt',
    'build_flat_vmt',
    'surfaceprop_for',
    'render_texture',
    'synthesize',
]
