"""
Custom game profiles read from JSON files.

A profile file holds one object; every key except ``name`` is optional::

    {"name": "mymod", "description": "My Mod", "skyname": "sky_mymod",
     "worldspawn": {"detailvbsp": "mymod.vbsp"}}

Nothing here runs on import.  The command line reads a directory of these
files (``~/.config/rbxlx2vmf/profiles`` unless told otherwise) and hands the
resulting catalog to the conversion settings.
"""

from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from .game_profile import GameProfile

logger = logging.getLogger(__name__)


def default_profiles_dir() -> Path:
    return Path.home() / ".config" / "rbxlx2vmf" / "profiles"


def profile_from_dict(data: Dict[str, Any]) -> GameProfile:
    """Build a profile from parsed JSON; raises ValueError without a name."""
    name = str(data.get("name", "")).strip()
    if not name:
        raise ValueError("profile has no name")

    base = GameProfile(name=name, engine="source", description=name)
    return GameProfile(
        name=name,
        engine=str(data.get("engine", base.engine)),
        description=str(data.get("description", base.description)),
        skyname=str(data.get("skyname", base.skyname)),
        editor_version=int(data.get("editor_version", base.editor_version)),
        editor_build=int(data.get("editor_build", base.editor_build)),
        detail_classname=str(data.get("detail_classname", base.detail_classname)),
        worldspawn={str(k): str(v) for k, v in data.get("worldspawn", {}).items()},
    )


def load_profile_file(path: Path) -> Optional[GameProfile]:
    """Read one profile file; unreadable or invalid files are logged and
    return None."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            return profile_from_dict(json.load(f))
    except (OSError, json.JSONDecodeError, AttributeError, TypeError, ValueError) as e:
        logger.warning("Ignoring invalid profile file %s: %s", path, e)
        return None


def load_profiles(directory: Path) -> List[GameProfile]:
    """Every valid ``*.json`` profile in ``directory``, in file name order."""
    if not directory.is_dir():
        logger.debug("No custom profile directory at %s", directory)
        return []

    profiles = []
    for path in sorted(directory.glob("*.json")):
        profile = load_profile_file(path)
        if profile is not None:
            profiles.append(profile)
    return profiles
