"""
Developer texture palette.

Stock Source dev textures chosen by which way a side faces, so layouts read
clearly in Hammer before any real texturing.  Force fields become player
clip brushes.
"""

from typing import Dict

from rbxlx2vmf.materials.material_types import CLIP_TOOL

DEV_TEXTURE_SCALE = 0.25

DEV_PALETTE: Dict[str, str] = {
    "top": "dev/dev_measuregeneric01b",
    "bottom": "dev/graygrid",
    "side": "dev/dev_measuregeneric01",
}

DEV_OVERRIDES: Dict[str, str] = {
    "forcefield": CLIP_TOOL,
}


def dev_texture(tag: str, orientation: str) -> str:
    """Palette texture for a surface tag on a side facing ``orientation``."""
    if tag in DEV_OVERRIDES:
        return DEV_OVERRIDES[tag]
    return DEV_PALETTE.get(orientation, DEV_PALETTE["side"])
