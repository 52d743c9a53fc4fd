"""
Game profile system for multiple Source engine games.

Usage:
    from rbxlx2vmf.generators.profiles import PROFILE_CATALOG

    profile = PROFILE_CATALOG.get_profile("css")
    print(profile.skyname)

    # Built-ins plus custom profiles from a directory of JSON files
    from rbxlx2vmf.generators.profiles import catalog_with_custom_profiles
    catalog = catalog_with_custom_profiles(Path("my-profiles"))
    ConversionSettings(game="mymod", profiles=catalog)
"""

import logging
from pathlib import Path

from .game_profile import GameProfile, ProfileCatalog
from .profile_storage import (
    default_profiles_dir,
    load_profile_file,
    load_profiles,
    profile_from_dict,
)
from .builtin import SOURCE_GAME_PROFILES

logger = logging.getLogger(__name__)

# Built-in games only; never extended from disk
PROFILE_CATALOG = ProfileCatalog(SOURCE_GAME_PROFILES)

BUILTIN_PROFILE_NAMES = frozenset(p.name for p in SOURCE_GAME_PROFILES)


def is_builtin_profile(name: str) -> bool:
    return name.lower() in BUILTIN_PROFILE_NAMES


def catalog_with_custom_profiles(directory: Path) -> ProfileCatalog:
    """
    New catalog holding the built-in games plus the profiles in ``directory``.

    Custom profiles never shadow a built-in game; such files are skipped
    with a warning.
    """
    catalog = ProfileCatalog(SOURCE_GAME_PROFILES)
    for profile in load_profiles(directory):
        if is_builtin_profile(profile.name):
            logger.warning("Custom profile '%s' clashes with a built-in game, skipped",
                           profile.name)
            continue
        catalog.register(profile)
        logger.debug("Loaded custom profile '%s'", profile.name)
    return catalog


__all__ = [
    # Core classes
    'GameProfile',
    'ProfileCatalog',
    'PROFILE_CATALOG',
    # Built-in profiles
    'SOURCE_GAME_PROFILES',
    'BUILTIN_PROFILE_NAMES',
    # Custom profile files
    'default_profiles_dir',
    'load_profile_file',
    'load_profiles',
    'profile_from_dict',
    'catalog_with_custom_profiles',
    'is_builtin_profile',
]
