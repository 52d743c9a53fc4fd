"""
Material keys, texture modes and resolved materials.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional

from rbxlx2vmf.scene.scene_types import Color3

SKYBOX_TOOL = "tools/toolsskybox"
CLIP_TOOL = "tools/toolsclip"

# Source texels per Roblox stud for the stock Roblox textures
TEXELS_PER_STUD = 32

# Stock texture edge length in texels; anything not listed is 1024
TEXTURE_DIMENSIONS = {
    "plastic": 32,
    "smoothplastic": 32,
    "diamondplate": 512,
    "aluminium": 512,
    "pebble": 512,
    "fabric": 512,
    "metal": 512,
    "glass": 512,
    "studs": 32,
    "inlet": 32,
    "decal": 32,
}
DEFAULT_DIMENSION = 1024

# Surface tags whose texture is stretched over the whole face
FILL_TAGS = {"spawnlocation"}

# Surface overrides that keep their own colors
UNTINTED_TAGS = {"decal", "spawnlocation"}


class TextureMode(Enum):
    GENERATED = "generated"
    DEVELOPER = "developer"
    FLAT = "flat"

    @classmethod
    def resolve(cls, texture_output: bool, dev_textures: bool) -> "TextureMode":
        if dev_textures:
            return cls.DEVELOPER
        if texture_output:
            return cls.GENERATED
        return cls.FLAT

    def __str__(self) -> str:
        return self.value


class MaterialKey(NamedTuple):
    """Identity of one face appearance.

    ``opacity`` and ``reflectance`` are 0-255 as in the generated texture
    names: opacity 255 is fully opaque.
    """

    tag: str
    color: Color3 = Color3(255, 255, 255)
    opacity: int = 255
    reflectance: int = 0

    @classmethod
    def for_surface(cls, tag: str, color: Color3, transparency: float,
                    reflectance: float) -> "MaterialKey":
        refl = int(255.0 * reflectance)
        if tag in UNTINTED_TAGS:
            return cls(tag, Color3.white(), 255, refl)
        return cls(tag, Color3(*color), int(255.0 * (1.0 - transparency)), refl)

    @classmethod
    def tool(cls, texture: str) -> "MaterialKey":
        return cls(texture)

    @property
    def is_tool(self) -> bool:
        return "/" in self.tag

    @property
    def dimension(self) -> int:
        return TEXTURE_DIMENSIONS.get(self.tag, DEFAULT_DIMENSION)

    def texture_name(self, prefix: str = "rbx/") -> str:
        c = self.color
        return (f"{prefix}{self.tag}_{c.r:x}-{c.g:x}-{c.b:x}"
                f"-{self.opacity:x}-{self.reflectance:x}")


@dataclass(frozen=True)
class Material:
    """A resolved material as referenced by serialized sides.

    Scale rules, in order: ``fixed_scale`` applies as-is; ``fill`` stretches
    the texture over the face; otherwise one texture tile covers
    ``tile_studs`` studs.
    """

    name: str
    width: int = 64
    height: int = 64
    tile_studs: float = 1.0
    fill: bool = False
    fixed_scale: Optional[float] = None
    apply_offset: bool = True
    image: Optional[bytes] = None
    descriptor: Optional[str] = None

    @property
    def has_assets(self) -> bool:
        return self.image is not None or self.descriptor is not None
