"""
Source material (VMT) descriptors for generated textures.
"""

from __future__ import annotations
from typing import Dict, List

from rbxlx2vmf.materials.material_types import MaterialKey

SHADER = "LightmappedGeneric"
DEFAULT_SURFACEPROP = "concrete"
FLAT_BASETEXTURE = "vgui/white"

# Surface tag -> Source $surfaceprop
MATERIAL_SURFACEPROP_MAP: Dict[str, str] = {
    "metal": "metal",
    "diamondplate": "metal",
    "rust": "metal",
    "aluminium": "metal",
    "wood": "wood",
    "woodplanks": "wood",
    "grass": "grass",
    "sand": "sand",
    "glass": "glass",
    "ice": "ice",
    "fabric": "cloth",
    "cobblestone": "rock",
    "concrete": "concrete",
    "brick": "brick",
}


def surfaceprop_for(tag: str) -> str:
    return MATERIAL_SURFACEPROP_MAP.get(tag, DEFAULT_SURFACEPROP)


def _fraction(value: int) -> str:
    return f"{value / 255.0:.4g}"


def build_vmt(name: str, key: MaterialKey) -> str:
    """Descriptor text for the generated texture ``name``.

    Translucency follows the key opacity; a non-zero reflectance adds a
    cubemap reflection tinted by the reflectance fraction.
    """
    lines: List[str] = [f'"{SHADER}"', "{"]
    lines.append(f'\t"$basetexture" "{name}"')
    lines.append(f'\t"$surfaceprop" "{surfaceprop_for(key.tag)}"')
    if key.opacity != 255:
        lines.append('\t"$translucent" "1"')
        lines.append(f'\t"$alpha" "{_fraction(key.opacity)}"')
    if key.reflectance != 0:
        tint = _fraction(key.reflectance)
        lines.append('\t"$envmap" "env_cubemap"')
        lines.append(f'\t"$envmaptint" "[{tint} {tint} {tint}]"')
    lines.append("}")
    return "\n".join(lines) + "\n"


def build_flat_vmt() -> str:
    """Descriptor shared by every face when texture output is off: a plain
    white stock texture, so no image has to ship with the map."""
    return "\n".join([
        f'"{SHADER}"',
        "{",
        f'\t"$basetexture" "{FLAT_BASETEXTURE}"',
        f'\t"$surfaceprop" "{DEFAULT_SURFACEPROP}"',
        "}",
    ]) + "\n"
