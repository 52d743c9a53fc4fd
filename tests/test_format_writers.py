"""Tests for rbxlx2vmf.conversion.format_writers: VMF serialization."""

from __future__ import annotations

import re

import pytest

from rbxlx2vmf.conversion import VmfWriter, get_writer
from rbxlx2vmf.conversion.format_writers import _fmt
from rbxlx2vmf.conversion.geometry import ShapeBuilder
from rbxlx2vmf.conversion.vmf_model import MapEntity, VmfDocument
from rbxlx2vmf.materials import TextureMode
from rbxlx2vmf.materials.registry import MaterialRegistry
from rbxlx2vmf.scene import SceneNode, ShapeKind


def _document() -> VmfDocument:
    nodes = (
        SceneNode(kind=ShapeKind.BLOCK, name="floor", position=(0.0, 0.0, -7.5),
                  size=(300.0, 300.0, 15.0)),
        SceneNode(kind=ShapeKind.SPHERE, name="ball", position=(0.0, 0.0, 50.0),
                  size=(30.0, 30.0, 30.0), is_detail=True, detail_group="D1"),
        SceneNode(kind=ShapeKind.BLOCK, name="crate", position=(80.0, 0.0, 15.0),
                  size=(30.0, 30.0, 30.0), is_detail=True, detail_group="D1"),
    )
    solids = ShapeBuilder().build(SceneNode(kind=ShapeKind.GROUP, children=nodes)).solids
    return VmfDocument(
        world=MapEntity("worldspawn", solids=tuple(s for s in solids if not s.is_detail),
                        properties=(("detailvbsp", "detail.vbsp"),)),
        entities=(MapEntity("func_detail", solids=tuple(s for s in solids if s.is_detail),
                            group="D1"),),
        skyname="sky_day01_05",
    )


def _write(mode: TextureMode = TextureMode.GENERATED) -> str:
    document = _document()
    registry = MaterialRegistry(mode).build(document)
    return VmfWriter().write_document(document, registry)


def _top_level_blocks(text: str):
    return [line for line in text.splitlines() if line and not line[0].isspace()
            and line not in ("{", "}")]


# ---------------------------------------------------------------------------
# TestNumberFormat
# ---------------------------------------------------------------------------

class TestNumberFormat:
    @pytest.mark.parametrize("value, text", [
        (0.0, "0"),
        (-0.0, "0"),
        (1.0, "1"),
        (-7.5, "-7.5"),
        (2.0000000001, "2"),
        (1e-15, "0"),
        (-1e-9, "0"),
        (0.123456, "0.1235"),
        (15.0 / 64, "0.2344"),
    ])
    def test_fmt(self, value, text):
        assert _fmt(value) == text


# ---------------------------------------------------------------------------
# TestVmfLayout
# ---------------------------------------------------------------------------

class TestVmfLayout:
    def test_block_order(self):
        assert _top_level_blocks(_write()) == [
            "versioninfo", "visgroups", "viewsettings", "world", "entity", "cameras", "cordon",
        ]

    def test_world_header(self):
        text = _write()
        world = text[text.index("world\n"):]
        assert world.startswith('world\n{\n\t"id" "1"\n\t"mapversion" "0"\n'
                                '\t"classname" "worldspawn"\n\t"skyname" "sky_day01_05"\n'
                                '\t"detailvbsp" "detail.vbsp"\n')

    def test_detail_entity(self):
        text = _write()
        entity = text[text.index("entity\n"):text.index("cameras\n")]
        assert '\t"id" "2"\n\t"classname" "func_detail"\n' in entity
        assert entity.count("\tsolid\n") == 2

    def test_ids_are_sequential(self):
        text = _write()
        solid_ids = re.findall(r'^\t\t"id" "(\d+)"$', text, re.M)
        side_ids = re.findall(r'^\t\t\t"id" "(\d+)"$', text, re.M)
        assert solid_ids == ["1", "2", "3"]
        assert side_ids == [str(i) for i in range(1, 19)]

    def test_side_keys(self):
        text = _write()
        side = text[text.index("\t\tside\n"):]
        keys = re.findall(r'^\t\t\t"(\w+)"', side, re.M)[:8]
        assert keys == ["id", "plane", "material", "uaxis", "vaxis", "rotation",
                        "lightmapscale", "smoothing_groups"]

    def test_plane_format(self):
        planes = re.findall(r'"plane" "(.*)"', _write())
        assert len(planes) == 18
        point = r"\(-?[\d.]+ -?[\d.]+ -?[\d.]+\)"
        for plane in planes:
            assert re.fullmatch(f"{point} {point} {point}", plane)

    def test_uv_axis_format(self):
        for axis in re.findall(r'"[uv]axis" "(.*)"', _write()):
            assert re.fullmatch(r"\[-?\d+ -?\d+ -?\d+ [\d.]+\] [\d.]+", axis)

    def test_no_negative_zero(self):
        assert not re.search(r"(?<![\d.])-0(?![.\d])", _write())

    def test_material_names(self):
        text = _write(TextureMode.DEVELOPER)
        materials = set(re.findall(r'"material" "(.*)"', text))
        assert materials == {"dev/dev_measuregeneric01b", "dev/graygrid",
                             "dev/dev_measuregeneric01"}


# ---------------------------------------------------------------------------
# TestDispinfo
# ---------------------------------------------------------------------------

class TestDispinfo:
    def test_six_dispinfo_blocks(self):
        assert _write().count("\t\t\tdispinfo\n") == 6

    def test_grid_rows(self):
        text = _write()
        disp = text[text.index("\t\t\tdispinfo\n"):]
        disp = disp[:disp.index("\n\t\t\t}\n")]
        assert '"power" "2"' in disp
        normals = disp[disp.index("normals"):disp.index("distances")]
        rows = re.findall(r'"row\d+" "(.*)"', normals)
        assert len(rows) == 5
        assert all(len(row.split()) == 15 for row in rows)
        tags = disp[disp.index("triangle_tags"):disp.index("allowed_verts")]
        tag_rows = re.findall(r'"row\d+" "(.*)"', tags)
        assert len(tag_rows) == 4
        assert all(len(row.split()) == 8 for row in tag_rows)
        assert '"10" "-1 -1 -1 -1 -1 -1 -1 -1 -1 -1"' in disp


# ---------------------------------------------------------------------------
# TestDeterminism
# ---------------------------------------------------------------------------

class TestDeterminism:
    def test_identical_output(self):
        assert _write() == _write()

    def test_writer_is_reusable(self):
        document = _document()
        registry = MaterialRegistry().build(document)
        writer = VmfWriter()
        assert writer.write_document(document, registry) == \
            writer.write_document(document, registry)


# ---------------------------------------------------------------------------
# TestWriterRegistry
# ---------------------------------------------------------------------------

class TestWriterRegistry:
    def test_source(self):
        writer = get_writer("Source")
        assert isinstance(writer, VmfWriter)
        assert writer.format_name() == "source"

    def test_unknown(self):
        with pytest.raises(ValueError, match="Available"):
            get_writer("idtech4")
