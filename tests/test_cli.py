"""Tests for rbxlx2vmf.cli: the command line front end."""

from __future__ import annotations

import zipfile

import pytest

from rbxlx2vmf.cli import build_parser, main, settings_from_args

from tests.scenes import document, model, part

SCENE = document(part(name="Floor", size=(10, 1, 10)),
                 model("func_detail", part(name="Crate", position=(0, 1, 0))))


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    return home


@pytest.fixture
def scene_file(tmp_path):
    path = tmp_path / "place.rbxlx"
    path.write_text(SCENE, encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# TestArguments
# ---------------------------------------------------------------------------

class TestArguments:
    def test_defaults(self):
        args = build_parser().parse_args(["-i", "x.rbxlx", "-g", "css"])
        settings = settings_from_args(args)
        assert settings.output_name == "rbxlx_out.vmf"
        assert settings.texture_output
        assert not settings.dev_textures
        assert settings.map_scale == 15.0
        assert settings.skybox_clearance == 0.0
        assert settings.game == "css"
        assert str(args.texture_output) == "textures-out"

    def test_flags(self):
        args = build_parser().parse_args([
            "-i", "x.rbxlx", "-o", "out/map.vmf", "-g", "TF2", "--no-textures",
            "--dev-textures", "--auto-skybox", "--skybox-height", "12.5",
            "--optimize", "--map-scale", "16",
        ])
        settings = settings_from_args(args)
        assert settings.output_name == "map.vmf"
        assert settings.game == "tf2"
        assert not settings.texture_output
        assert settings.dev_textures
        assert settings.auto_skybox
        assert settings.skybox_clearance == 12.5
        assert settings.optimize
        assert settings.map_scale == 16.0

    def test_game_is_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["-i", "x.rbxlx"])

    def test_unknown_game(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["-i", "x.rbxlx", "-g", "quake"])


# ---------------------------------------------------------------------------
# TestMain
# ---------------------------------------------------------------------------

class TestMain:
    def test_writes_map_and_textures(self, scene_file, tmp_path):
        out = tmp_path / "maps" / "place.vmf"
        textures = tmp_path / "tex"
        code = main(["-i", str(scene_file), "-o", str(out), "-g", "hl2",
                     "--texture-output", str(textures)])
        assert code == 0
        assert out.read_text(encoding="utf-8").startswith("versioninfo\n")
        assert list((textures / "materials" / "rbx").glob("*.png"))
        assert list((textures / "materials" / "rbx").glob("*.vmt"))

    def test_zip(self, scene_file, tmp_path):
        out = tmp_path / "place.vmf"
        assert main(["-i", str(scene_file), "-o", str(out), "-g", "css", "--zip"]) == 0
        with zipfile.ZipFile(tmp_path / "place.zip") as archive:
            assert "place.vmf" in archive.namelist()
        assert not out.exists()

    def test_missing_input(self, tmp_path):
        assert main(["-i", str(tmp_path / "missing.rbxlx"), "-g", "css"]) == 1

    def test_conversion_failure(self, tmp_path):
        bad = tmp_path / "bad.rbxlx"
        bad.write_text("<notroblox/>", encoding="utf-8")
        assert main(["-i", str(bad), "-o", str(tmp_path / "o.vmf"), "-g", "css"]) == 1

    def test_empty_scene_with_skybox_fails(self, tmp_path):
        empty = tmp_path / "empty.rbxlx"
        empty.write_text(document(), encoding="utf-8")
        args = ["-i", str(empty), "-o", str(tmp_path / "o.vmf"), "-g", "css", "--auto-skybox"]
        assert main(args) == 1
        assert not (tmp_path / "o.vmf").exists()


# ---------------------------------------------------------------------------
# TestCustomProfiles
# ---------------------------------------------------------------------------

MYMOD = '{"name": "mymod", "skyname": "sky_mymod", "worldspawn": {"detailvbsp": "mymod.vbsp"}}'


class TestCustomProfiles:
    def test_profiles_dir(self, scene_file, tmp_path):
        profiles = tmp_path / "profiles"
        profiles.mkdir()
        (profiles / "mymod.json").write_text(MYMOD, encoding="utf-8")
        out = tmp_path / "place.vmf"
        code = main(["-i", str(scene_file), "-o", str(out), "-g", "mymod", "--no-textures",
                     "--profiles-dir", str(profiles)])
        assert code == 0
        text = out.read_text(encoding="utf-8")
        assert '"skyname" "sky_mymod"' in text
        assert '"detailvbsp" "mymod.vbsp"' in text

    def test_default_profiles_dir_under_home(self, scene_file, tmp_path, isolated_home):
        profiles = isolated_home / ".config" / "rbxlx2vmf" / "profiles"
        profiles.mkdir(parents=True)
        (profiles / "mymod.json").write_text(MYMOD, encoding="utf-8")
        out = tmp_path / "place.vmf"
        assert main(["-i", str(scene_file), "-o", str(out), "-g", "mymod", "--no-textures"]) == 0
        assert (tmp_path / "textures-out" / "materials" / "rbx" / "flat.vmt").is_file()

    def test_unknown_custom_game_without_profiles(self, scene_file, tmp_path):
        with pytest.raises(SystemExit):
            main(["-i", str(scene_file), "-o", str(tmp_path / "o.vmf"), "-g", "mymod"])
