"""
Conversion settings.

One dataclass carries every knob of a run.  ``validate()`` checks the whole
set at once and reports every problem in a single ConfigurationError.
"""

from __future__ import annotations
import math
from dataclasses import dataclass, field
from typing import List, Optional

from rbxlx2vmf.conversion.geometry.shape_builder import MAX_SPHERE_POWER, MIN_SPHERE_POWER
from rbxlx2vmf.errors import ConfigurationError
from rbxlx2vmf.generators.profiles import PROFILE_CATALOG, GameProfile, ProfileCatalog
from rbxlx2vmf.materials.material_types import TextureMode
from rbxlx2vmf.materials.texture_synth import MIN_TEXTURE_SIZE
from rbxlx2vmf.scene.scene_types import DETAIL_MARKER

DEFAULT_OUTPUT_NAME = "rbxlx_out.vmf"
DEFAULT_MAP_SCALE = 15.0
MAX_TEXTURE_SIZE = 1024


@dataclass
class ConversionSettings:
    # Output
    output_name: str = DEFAULT_OUTPUT_NAME
    texture_output: bool = True
    dev_textures: bool = False
    texture_size: int = 64

    # Geometry
    map_scale: float = DEFAULT_MAP_SCALE   # Source units per stud
    sphere_power: int = 2
    optimize: bool = False
    workers: int = 1
    detail_marker: str = DETAIL_MARKER

    # Skybox (clearance and margin in studs)
    auto_skybox: bool = False
    skybox_clearance: float = 0.0
    skybox_margin: float = 0.0

    # Target game
    game: str = "hl2"
    skybox_name: Optional[str] = None  # None = profile default
    # Games ``game`` is looked up in; built-ins unless the caller loads more
    profiles: ProfileCatalog = field(default=PROFILE_CATALOG, repr=False, compare=False)

    # Run the export validation gate
    validate_geometry: bool = True

    @property
    def texture_mode(self) -> TextureMode:
        return TextureMode.resolve(self.texture_output, self.dev_textures)

    def resolve_profile(self) -> GameProfile:
        profile = self.profiles.get_profile(self.game)
        if profile is None:
            raise ConfigurationError(
                f"Unknown game '{self.game}'. Available: {self.profiles.list_profiles()}")
        return profile

    def resolve_skyname(self) -> str:
        return self.skybox_name or self.resolve_profile().skyname

    def problems(self) -> List[str]:
        errors = []
        if not (math.isfinite(self.map_scale) and self.map_scale > 0):
            errors.append(f"Map scale must be a positive finite number, got {self.map_scale!r}")
        for name in ("skybox_clearance", "skybox_margin"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                errors.append(f"{name} must be a non-negative finite number, got {value!r}")
        if not MIN_SPHERE_POWER <= self.sphere_power <= MAX_SPHERE_POWER:
            errors.append(f"Sphere power must be between {MIN_SPHERE_POWER} and "
                          f"{MAX_SPHERE_POWER}, got {self.sphere_power}")
        if self.workers < 1:
            errors.append(f"Workers must be at least 1, got {self.workers}")
        if not MIN_TEXTURE_SIZE <= self.texture_size <= MAX_TEXTURE_SIZE:
            errors.append(f"Texture size must be between {MIN_TEXTURE_SIZE} and "
                          f"{MAX_TEXTURE_SIZE}, got {self.texture_size}")
        if not self.output_name:
            errors.append("Output name must not be empty")
        if self.profiles.get_profile(self.game) is None:
            errors.append(f"Unknown game '{self.game}'. Available: "
                          f"{', '.join(self.profiles.list_profiles())}")
        return errors

    def validate(self) -> "ConversionSettings":
        """Raise ConfigurationError listing every problem; returns self."""
        errors = self.problems()
        if errors:
            raise ConfigurationError(f"Invalid settings: {'; '.join(errors)}", errors)
        return self
