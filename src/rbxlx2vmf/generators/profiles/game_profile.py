"""
GameProfile dataclass and ProfileCatalog: target Source engine games.

Each profile names the sky the world uses by default, the Hammer editor
version stamped into the document header, the entity class that carries
detail geometry and any extra worldspawn keys the game expects.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional


@dataclass
class GameProfile:
    """
    Settings for one target game.

    Attributes:
        name: Short game code used on the command line (e.g. "hl2", "css")
        engine: Writer name the document is serialized with ("source")
        description: Human-readable game title
        skyname: Default 2D skybox name for worldspawn
        editor_version: ``versioninfo`` editorversion
        editor_build: ``versioninfo`` editorbuild
        detail_classname: Brush entity class for detail geometry
        worldspawn: Extra worldspawn key/values
    """

    # Identity
    name: str
    engine: str
    description: str

    skyname: str = "sky_day01_01"
    editor_version: int = 400
    editor_build: int = 3325
    detail_classname: str = "func_detail"

    # Worldspawn properties for this game
    worldspawn: Dict[str, str] = field(default_factory=dict)

    def get_worldspawn_properties(self) -> Dict[str, str]:
        """Copy of the extra worldspawn properties."""
        return dict(self.worldspawn)


class ProfileCatalog:
    """
    Registry of game profiles.

    Lookup is case-insensitive.  Catalogs are only ever filled explicitly:
    the shared PROFILE_CATALOG holds the built-in games, and callers that
    want custom profiles build their own catalog on top of it.
    """

    def __init__(self, profiles: Iterable[GameProfile] = ()):
        self._profiles: Dict[str, GameProfile] = {}
        for profile in profiles:
            self.register(profile)

    def register(self, profile: GameProfile) -> None:
        self._profiles[profile.name] = profile

    def get_profile(self, name: str) -> Optional[GameProfile]:
        """
        Get a profile by name (case-insensitive).

        Returns:
            GameProfile if found, None otherwise
        """
        if name in self._profiles:
            return self._profiles[name]

        name_lower = name.lower()
        for pname, profile in self._profiles.items():
            if pname.lower() == name_lower:
                return profile

        return None

    def list_profiles(self) -> List[str]:
        return sorted(self._profiles.keys())
