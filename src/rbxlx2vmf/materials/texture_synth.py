"""
Procedural texture synthesis.

Every generated material gets one square RGBA image: a per-tag shading
pattern multiplied by the key color, with the key opacity in the alpha
channel.  Patterns are deterministic; any randomness is seeded from the
texture name so identical keys always produce identical bytes.
"""

from __future__ import annotations
import io
import logging
import zlib
from typing import Callable, Dict

import numpy as np
from PIL import Image

from rbxlx2vmf.materials.material_types import MaterialKey

logger = logging.getLogger(__name__)

MIN_TEXTURE_SIZE = 16

# Fallback pattern for decals that are not downloaded
DECAL_COLORS = ((255, 0, 255), (0, 0, 0))

# Spawn pad base and marker colors
SPAWN_COLORS = ((99, 95, 98), (242, 243, 243))


def _coords(size: int):
    y, x = np.mgrid[0:size, 0:size]
    return x, y


def _line(size: int) -> int:
    return max(1, size // 32)


# ---------------------------------------------------------------
# Shade patterns (values around 1.0, multiplied into the tint)
# ---------------------------------------------------------------

def _solid(size: int, rng: np.random.Generator) -> np.ndarray:
    return np.ones((size, size))


def _noise(size: int, rng: np.random.Generator, strength: float = 0.15) -> np.ndarray:
    return 1.0 - strength * rng.random((size, size))


def _bricks(size: int, rng: np.random.Generator) -> np.ndarray:
    x, y = _coords(size)
    row_h = max(2, size // 4)
    brick_w = max(2, size // 2)
    row = y // row_h
    shifted = (x + (row % 2) * (brick_w // 2)) % size
    mortar = (y % row_h < _line(size)) | (shifted % brick_w < _line(size))
    return np.where(mortar, 0.6, _noise(size, rng, 0.1))


def _planks(size: int, rng: np.random.Generator) -> np.ndarray:
    x, y = _coords(size)
    plank_h = max(2, size // 4)
    plank = y // plank_h
    phase = rng.random(size)[plank]
    grain = 0.9 + 0.08 * np.sin((x / size) * 2.0 * np.pi * 3.0 + phase * 2.0 * np.pi)
    seam = y % plank_h < _line(size)
    return np.where(seam, 0.55, grain)


def _grid(size: int, rng: np.random.Generator) -> np.ndarray:
    x, y = _coords(size)
    cell = max(2, size // 4)
    lines = (x % cell < _line(size)) | (y % cell < _line(size))
    return np.where(lines, 0.7, 1.0)


def _radius(size: int) -> np.ndarray:
    x, y = _coords(size)
    c = (size - 1) / 2.0
    return np.hypot(x - c, y - c)


def _studs(size: int, rng: np.random.Generator) -> np.ndarray:
    r = _radius(size)
    stud = size * 0.3
    shade = np.where(r < stud, 1.08, 0.95)
    return np.where(np.abs(r - stud) < _line(size), 0.75, shade)


def _inlet(size: int, rng: np.random.Generator) -> np.ndarray:
    r = _radius(size)
    hole = size * 0.3
    shade = np.where(r < hole, 0.78, 1.0)
    return np.where(np.abs(r - hole) < _line(size), 1.1, shade)


SHADE_PATTERNS: Dict[str, Callable[[int, np.random.Generator], np.ndarray]] = {
    "plastic": _solid,
    "smoothplastic": _solid,
    "forcefield": _solid,
    "glass": _solid,
    "ice": lambda size, rng: _noise(size, rng, 0.05),
    "brick": _bricks,
    "wood": _planks,
    "woodplanks": _planks,
    "diamondplate": _grid,
    "aluminium": _grid,
    "metal": lambda size, rng: _noise(size, rng, 0.08),
    "rust": lambda size, rng: _noise(size, rng, 0.3),
    "concrete": _noise,
    "granite": _noise,
    "marble": lambda size, rng: _noise(size, rng, 0.08),
    "slate": _noise,
    "pebble": lambda size, rng: _noise(size, rng, 0.25),
    "cobblestone": lambda size, rng: _noise(size, rng, 0.3),
    "grass": lambda size, rng: _noise(size, rng, 0.2),
    "sand": lambda size, rng: _noise(size, rng, 0.1),
    "fabric": lambda size, rng: _noise(size, rng, 0.12),
    "studs": _studs,
    "inlet": _inlet,
}


# ---------------------------------------------------------------
# Untinted patterns (full RGB)
# ---------------------------------------------------------------

def _decal(size: int) -> np.ndarray:
    x, y = _coords(size)
    cell = max(1, size // 8)
    checker = ((x // cell) + (y // cell)) % 2 == 0
    a, b = (np.array(c, dtype=float) for c in DECAL_COLORS)
    return np.where(checker[..., None], a, b)


def _spawnlocation(size: int) -> np.ndarray:
    r = _radius(size)
    base, mark = (np.array(c, dtype=float) for c in SPAWN_COLORS)
    ring = np.abs(r - size * 0.35) < max(1, size // 16)
    x, y = _coords(size)
    c = (size - 1) / 2.0
    cross = (r < size * 0.25) & ((np.abs(x - c) < size / 16) | (np.abs(y - c) < size / 16))
    return np.where((ring | cross)[..., None], mark, base)


RGB_PATTERNS: Dict[str, Callable[[int], np.ndarray]] = {
    "decal": _decal,
    "spawnlocation": _spawnlocation,
}


# ---------------------------------------------------------------
# Public API
# ---------------------------------------------------------------

def texture_seed(key: MaterialKey) -> int:
    return zlib.crc32(key.texture_name().encode("utf-8"))


def synthesize(key: MaterialKey, size: int = 64) -> Image.Image:
    """Render the texture image for ``key``.

    Raises:
        ValueError: ``size`` is smaller than MIN_TEXTURE_SIZE
    """
    if size < MIN_TEXTURE_SIZE:
        raise ValueError(f"Texture size must be at least {MIN_TEXTURE_SIZE}, got {size}")

    if key.tag in RGB_PATTERNS:
        rgb = RGB_PATTERNS[key.tag](size)
    else:
        rng = np.random.default_rng(texture_seed(key))
        pattern = SHADE_PATTERNS.get(key.tag, _solid)
        shade = pattern(size, rng)
        rgb = shade[..., None] * np.array(key.color, dtype=float)

    pixels = np.empty((size, size, 4), dtype=np.uint8)
    pixels[..., :3] = np.clip(np.rint(rgb), 0, 255).astype(np.uint8)
    pixels[..., 3] = key.opacity
    return Image.fromarray(pixels)


def encode_png(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG", optimize=False)
    return buffer.getvalue()


def render_texture(key: MaterialKey, size: int = 64) -> bytes:
    """PNG bytes of the synthesized texture for ``key``."""
    data = encode_png(synthesize(key, size))
    logger.debug("Rendered %s (%dx%d, %d bytes)", key.texture_name(), size, size, len(data))
    return data
