"""
Source engine game profiles: default sky per game.

Hammer stamps the same editor version into every Source game's VMF, so the
profiles differ mainly in their sky.
"""

from rbxlx2vmf.generators.profiles.game_profile import GameProfile

SOURCE_WORLDSPAWN = {
    "detailmaterial": "detail/detailsprites",
    "detailvbsp": "detail.vbsp",
    "maxpropscreenwidth": "-1",
}


def _source_game(name: str, description: str, skyname: str) -> GameProfile:
    return GameProfile(
        name=name,
        engine="source",
        description=description,
        skyname=skyname,
        worldspawn=dict(SOURCE_WORLDSPAWN),
    )


SOURCE_GAME_PROFILES = (
    _source_game("css", "Counter-Strike: Source", "sky_day01_05"),
    _source_game("csgo", "Counter-Strike: Global Offensive", "sky_day02_05"),
    _source_game("gmod", "Garry's Mod", "painted"),
    _source_game("hl2", "Half-Life 2", "sky_day01_04"),
    _source_game("hl2e1", "Half-Life 2: Episode One", "sky_ep01_01"),
    _source_game("hl2e2", "Half-Life 2: Episode Two", "sky_ep02_01_hdr"),
    _source_game("hl", "Half-Life: Source", "city"),
    _source_game("hls", "Half-Life Deathmatch: Source", "sky_wasteland02"),
    _source_game("l4d", "Left 4 Dead", "river_hdr"),
    _source_game("l4d2", "Left 4 Dead 2", "sky_l4d_c1_2_hdr"),
    _source_game("portal", "Portal", "sky_day01_05_hdr"),
    _source_game("portal2", "Portal 2", "sky_day01_01"),
    _source_game("tf2", "Team Fortress 2", "sky_day01_01"),
)
