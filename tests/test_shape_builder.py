"""Tests for rbxlx2vmf.conversion.geometry.shape_builder: scene nodes to brushes."""

from __future__ import annotations

import math

import pytest

from rbxlx2vmf.conversion.geometry import GeometrySettings, OrientedBox, ShapeBuilder
from rbxlx2vmf.conversion.plane_math import _dot, _length, _sub
from rbxlx2vmf.errors import GeometryWarning
from rbxlx2vmf.scene import SceneNode, ShapeKind
from rbxlx2vmf.scene.scene_types import Color3


def _node(kind=ShapeKind.BLOCK, **kwargs) -> SceneNode:
    kwargs.setdefault("size", (60.0, 30.0, 15.0))
    return SceneNode(kind=kind, **kwargs)


def _root(*children: SceneNode) -> SceneNode:
    return SceneNode(kind=ShapeKind.GROUP, children=children)


def _build(*children: SceneNode, **settings):
    return ShapeBuilder(GeometrySettings(**settings)).build(_root(*children))


# ---------------------------------------------------------------------------
# TestBlock
# ---------------------------------------------------------------------------

class TestBlock:
    def test_six_sides(self):
        result = _build(_node())
        assert len(result.solids) == 1
        assert len(result.solids[0].sides) == 6

    def test_normals_are_opposite_orthogonal_pairs(self):
        sides = _build(_node()).solids[0].sides
        normals = [s.plane.normal for s in sides]
        for i in range(0, 6, 2):
            assert _dot(normals[i], normals[i + 1]) == pytest.approx(-1.0)
            for j in range(i + 2, 6):
                assert _dot(normals[i], normals[j]) == pytest.approx(0.0, abs=1e-9)

    def test_plane_normals_point_inward(self):
        node = _node(position=(10.0, 20.0, 30.0))
        for side in _build(node).solids[0].sides:
            assert side.plane.signed_distance(node.position) > 0

    def test_bounds_match_size(self):
        solid = _build(_node(position=(0.0, 0.0, 7.5))).solids[0]
        lo, hi = solid.bounds()
        assert lo == pytest.approx((-30, -15, 0))
        assert hi == pytest.approx((30, 15, 15))

    def test_rotated_block(self):
        c, s = math.cos(math.pi / 4), math.sin(math.pi / 4)
        node = _node(rotation=((c, -s, 0.0), (s, c, 0.0), (0.0, 0.0, 1.0)), size=(10, 10, 10))
        lo, hi = _build(node).solids[0].bounds()
        assert hi[0] == pytest.approx(10 * math.sqrt(2) / 2)
        assert hi[2] == pytest.approx(5)

    def test_surface_override_sets_face_material(self):
        node = _node(material="brick", color=Color3(10, 20, 30),
                     surfaces=(((2, 1), "studs"),))
        sides = _build(node).solids[0].sides
        top = [s for s in sides if s.plane.outward == pytest.approx((0, 0, 1))][0]
        bottom = [s for s in sides if s.plane.outward == pytest.approx((0, 0, -1))][0]
        assert top.material.tag == "studs"
        assert bottom.material.tag == "brick"
        assert bottom.material.color == (10, 20, 30)

    def test_transparency_becomes_opacity(self):
        key = _build(_node(transparency=0.5)).solids[0].sides[0].material
        assert key.opacity == 127

    def test_texture_face_follows_outward_normal(self):
        for side in _build(_node()).solids[0].sides:
            axis = max(range(3), key=lambda i: abs(side.plane.outward[i]))
            assert abs(_dot(side.texture_face.u_axis, side.plane.outward)) < 1e-9
            assert side.texture_face.u_axis[axis] == 0


# ---------------------------------------------------------------------------
# TestApproximations
# ---------------------------------------------------------------------------

class TestApproximations:
    @pytest.mark.parametrize("kind", [ShapeKind.CYLINDER, ShapeKind.TRUSS])
    def test_bounding_cuboid(self, kind):
        result = _build(_node(kind))
        assert len(result.solids) == 1
        assert len(result.solids[0].sides) == 6
        assert result.approximated == {str(kind): 1}
        assert any(str(kind) in str(w) for w in result.warnings)

    def test_one_warning_per_kind(self):
        result = _build(_node(ShapeKind.CYLINDER), _node(ShapeKind.CYLINDER))
        assert result.approximated == {"cylinder": 2}
        assert len(result.warnings) == 1
        assert isinstance(result.warnings[0], GeometryWarning)

    def test_degenerate_part_is_skipped(self):
        result = _build(_node(size=(10.0, 0.0, 10.0)), _node())
        assert len(result.solids) == 1
        assert result.skipped == 1
        assert "degenerate" in str(result.warnings[0])

    def test_part_thinner_than_a_brush_is_skipped(self):
        result = _build(_node(size=(10.0, 0.0005, 10.0), name="Sheet"), _node())
        assert len(result.solids) == 1
        assert result.skipped == 1
        assert "Sheet" in str(result.warnings[0])
        assert "thickness 0.0005" in str(result.warnings[0])

    def test_min_extent_is_configurable(self):
        assert len(_build(_node(size=(10.0, 0.5, 10.0)), min_extent=1.0).solids) == 0
        assert len(_build(_node(size=(10.0, 0.5, 10.0))).solids) == 1


# ---------------------------------------------------------------------------
# TestSphere
# ---------------------------------------------------------------------------

class TestSphere:
    def test_one_solid_with_six_displacements(self):
        solid = _build(_node(ShapeKind.SPHERE, size=(30.0, 30.0, 30.0))).solids[0]
        assert len(solid.sides) == 6
        assert solid.has_displacement
        assert all(s.displacement.power == 2 for s in solid.sides)

    def test_cube_side_is_smallest_dimension(self):
        solid = _build(_node(ShapeKind.SPHERE, size=(40.0, 30.0, 50.0))).solids[0]
        lo, hi = solid.bounds()
        assert [h - l for l, h in zip(lo, hi)] == pytest.approx([30, 30, 30])

    @pytest.mark.parametrize("power", [2, 3, 4])
    def test_vertices_lie_on_sphere(self, power):
        center = (5.0, -10.0, 20.0)
        node = _node(ShapeKind.SPHERE, size=(30.0, 30.0, 30.0), position=center)
        solid = _build(node, sphere_power=power).solids[0]
        for side in solid.sides:
            disp = side.displacement
            assert len(disp.normals) == 2 ** power + 1
            for v in disp.vertices():
                assert _length(_sub(v, center)) == pytest.approx(15.0, abs=1e-6)

    def test_face_center_needs_no_displacement(self):
        solid = _build(_node(ShapeKind.SPHERE, size=(30.0, 30.0, 30.0))).solids[0]
        disp = solid.sides[0].displacement
        mid = (disp.resolution - 1) // 2
        assert disp.distances[mid][mid] == pytest.approx(0.0, abs=1e-9)
        assert disp.distances[0][0] == pytest.approx(15.0 * (math.sqrt(3) - 1))

    def test_rotated_surface_lands_on_world_face(self):
        # Quarter turn about x: local +z faces world -y, local +y faces world +z
        node = _node(ShapeKind.SPHERE, size=(30.0, 30.0, 30.0), material="brick",
                     rotation=((1.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 1.0, 0.0)),
                     surfaces=(((2, 1), "studs"), ((1, 1), "inlet")))
        sides = _build(node).solids[0].sides
        by_normal = {tuple(round(c) for c in s.plane.outward): s.material.tag for s in sides}
        assert by_normal[(0, -1, 0)] == "studs"
        assert by_normal[(0, 0, 1)] == "inlet"
        assert by_normal[(0, 0, -1)] == "brick"
        assert by_normal[(1, 0, 0)] == "brick"


# ---------------------------------------------------------------------------
# TestTraversal
# ---------------------------------------------------------------------------

class TestTraversal:
    def test_post_order_and_source_index(self):
        child = _node(name="child", position=(100.0, 0.0, 0.0))
        parent = _node(name="parent", children=(child,))
        result = _build(parent, _node(name="last"))
        assert [s.name for s in result.solids] == ["child", "parent", "last"]
        assert [s.source_index for s in result.solids] == [0, 1, 2]

    def test_detail_group_is_carried(self):
        node = _node(is_detail=True, detail_group="G1")
        solid = _build(node).solids[0]
        assert solid.entity_group == "G1"
        assert solid.is_detail

    def test_world_solid_has_no_group(self):
        solid = _build(_node()).solids[0]
        assert solid.entity_group is None
        assert isinstance(solid.box, OrientedBox)

    def test_parallel_matches_serial(self):
        nodes = [_node(name=f"p{i}", position=(i * 100.0, 0.0, 0.0)) for i in range(4)]
        serial = _build(*nodes)
        parallel = _build(*nodes, workers=2)
        assert parallel.solids == serial.solids
