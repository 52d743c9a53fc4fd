"""
Material registry.

Resolves every side's MaterialKey to a concrete Material exactly once per
run and remembers the order in which materials were first seen, so the
serializer and the asset bundle both come out in document order.

Resolution depends on the texture mode:

* GENERATED: one synthesized PNG plus one VMT per distinct key.
* DEVELOPER: the dev palette, picked by the orientation of the side.
* FLAT: every face shares one descriptor (no image) on a stock white texture.

Tool textures (``tools/...``) pass through untouched in every mode.
"""

from __future__ import annotations
import logging
from typing import Dict, Iterator, List, NamedTuple, Tuple

from rbxlx2vmf.conversion.plane_math import EPSILON, Vec3, _dot
from rbxlx2vmf.conversion.vmf_model import Side, TextureFace, VmfDocument
from rbxlx2vmf.materials.dev_palette import DEV_TEXTURE_SCALE, dev_texture
from rbxlx2vmf.materials.material_types import (
    FILL_TAGS,
    TEXELS_PER_STUD,
    Material,
    MaterialKey,
    TextureMode,
)
from rbxlx2vmf.materials.texture_synth import render_texture
from rbxlx2vmf.materials.vmt import build_flat_vmt, build_vmt

logger = logging.getLogger(__name__)

GENERATED_PREFIX = "rbx/"
FLAT_MATERIAL = "rbx/flat"


class TextureAxis(NamedTuple):
    """One UV axis of a side: ``[x y z offset] scale`` in VMF terms."""
    axis: Vec3
    offset: float
    scale: float


class MaterialRegistry:
    def __init__(self, mode: TextureMode = TextureMode.GENERATED,
                 map_scale: float = 15.0, texture_size: int = 64):
        self.mode = mode
        self.map_scale = map_scale
        self.texture_size = texture_size
        self._materials: Dict[Tuple[MaterialKey, str], Material] = {}

    def __len__(self) -> int:
        return len(self._materials)

    def __iter__(self) -> Iterator[Material]:
        return iter(self._materials.values())

    # ---------------------------------------------------------------
    # Resolution
    # ---------------------------------------------------------------

    def _slot(self, key: MaterialKey, face: TextureFace) -> str:
        if self.mode is TextureMode.DEVELOPER and not key.is_tool:
            return face.orientation
        return ""

    def resolve(self, key: MaterialKey, face: TextureFace) -> Material:
        entry = (key, self._slot(key, face))
        material = self._materials.get(entry)
        if material is None:
            material = self._create(key, entry[1])
            self._materials[entry] = material
            logger.debug("Registered material %s", material.name)
        return material

    def material_for(self, side: Side) -> Material:
        return self.resolve(side.material, side.texture_face)

    def _create(self, key: MaterialKey, slot: str) -> Material:
        if key.is_tool:
            return Material(name=key.tag, fixed_scale=DEV_TEXTURE_SCALE, apply_offset=False)

        if self.mode is TextureMode.DEVELOPER:
            return Material(name=dev_texture(key.tag, slot),
                            fixed_scale=DEV_TEXTURE_SCALE, apply_offset=False)

        size = self.texture_size
        tile_studs = key.dimension / TEXELS_PER_STUD
        fill = key.tag in FILL_TAGS

        if self.mode is TextureMode.FLAT:
            return Material(name=FLAT_MATERIAL, width=size, height=size,
                            tile_studs=tile_studs, fill=fill, descriptor=build_flat_vmt())

        name = key.texture_name(GENERATED_PREFIX)
        return Material(
            name=name,
            width=size,
            height=size,
            tile_studs=tile_studs,
            fill=fill,
            image=render_texture(key, size),
            descriptor=build_vmt(name, key),
        )

    def build(self, document: VmfDocument) -> "MaterialRegistry":
        """Resolve every side of ``document`` in serialization order."""
        for side in document.all_sides():
            self.material_for(side)
        logger.info("Resolved %d materials (%s mode)", len(self), self.mode)
        return self

    # ---------------------------------------------------------------
    # Texture coordinates
    # ---------------------------------------------------------------

    def texture_axes(self, side: Side) -> Tuple[TextureAxis, TextureAxis]:
        material = self.material_for(side)
        face = side.texture_face
        u = self._axis(side, material, face.u_axis, material.width)
        v = self._axis(side, material, face.v_axis, material.height)
        return u, v

    def _axis(self, side: Side, material: Material, axis: Vec3, pixels: int) -> TextureAxis:
        projections = [_dot(p, axis) for p in side.polygon]
        lo, hi = min(projections), max(projections)

        if material.fixed_scale is not None:
            scale = material.fixed_scale
        elif material.fill and hi - lo > EPSILON:
            scale = (hi - lo) / pixels
        else:
            scale = material.tile_studs * self.map_scale / pixels

        offset = 0.0
        if material.apply_offset:
            # Texture starts at the low edge of the face along the axis
            offset = (-lo / scale) % pixels
        return TextureAxis(axis, offset, scale)

    # ---------------------------------------------------------------
    # Assets
    # ---------------------------------------------------------------

    def assets(self) -> Iterator[Tuple[str, bytes]]:
        """``(relative path, bytes)`` of every generated file, first-seen order."""
        seen = set()
        for material in self:
            if not material.has_assets or material.name in seen:
                continue
            seen.add(material.name)
            if material.image is not None:
                yield f"materials/{material.name}.png", material.image
            if material.descriptor is not None:
                yield f"materials/{material.name}.vmt", material.descriptor.encode("utf-8")

    def names(self) -> List[str]:
        return list(dict.fromkeys(m.name for m in self))
