"""Tests for rbxlx2vmf.conversion.geometry.skybox: enclosing shell synthesis."""

from __future__ import annotations

import pytest

from rbxlx2vmf.conversion.geometry import ShapeBuilder, SkyboxSettings, build_skybox, world_bounds
from rbxlx2vmf.errors import ConfigurationError
from rbxlx2vmf.materials import SKYBOX_TOOL
from rbxlx2vmf.scene import SceneNode, ShapeKind


def _box(position, size, **kwargs) -> SceneNode:
    return SceneNode(kind=ShapeKind.BLOCK, position=position, size=size, **kwargs)


def _solids(*nodes: SceneNode):
    root = SceneNode(kind=ShapeKind.GROUP, children=nodes)
    return ShapeBuilder().build(root).solids


def _interior(shell):
    """Interior box implied by the six slabs (+X, -X, +Y, -Y, +Z, -Z)."""
    px, nx, py, ny, pz, nz = (s.bounds() for s in shell)
    lo = (nx[1][0], ny[1][1], nz[1][2])
    hi = (px[0][0], py[0][1], pz[0][2])
    return lo, hi


def _overlap(a, b, tol=1e-6) -> bool:
    (alo, ahi), (blo, bhi) = a, b
    return all(alo[i] < bhi[i] - tol and blo[i] < ahi[i] - tol for i in range(3))


WORLD = (_box((0.0, 0.0, 0.0), (200.0, 100.0, 50.0)),
         _box((300.0, 0.0, 100.0), (100.0, 100.0, 100.0)))


# ---------------------------------------------------------------------------
# TestSkyboxShell
# ---------------------------------------------------------------------------

class TestSkyboxShell:
    def test_six_slabs(self):
        shell = build_skybox(_solids(*WORLD))
        assert len(shell) == 6
        for slab in shell:
            assert len(slab.sides) == 6
            assert all(side.material.tag == SKYBOX_TOOL for side in slab.sides)
            assert not slab.is_detail

    def test_interior_equals_world_bound(self):
        solids = _solids(*WORLD)
        lo, hi = _interior(build_skybox(solids))
        wlo, whi = world_bounds(solids)
        assert lo == pytest.approx(wlo)
        assert hi == pytest.approx(whi)

    def test_clearance_raises_top_only(self):
        solids = _solids(*WORLD)
        lo, hi = _interior(build_skybox(solids, SkyboxSettings(clearance=64.0)))
        wlo, whi = world_bounds(solids)
        assert hi[2] == pytest.approx(whi[2] + 64.0)
        assert hi[:2] == pytest.approx(whi[:2])
        assert lo == pytest.approx(wlo)

    def test_margin_grows_other_sides(self):
        solids = _solids(*WORLD)
        lo, hi = _interior(build_skybox(solids, SkyboxSettings(clearance=10.0, margin=5.0)))
        wlo, whi = world_bounds(solids)
        assert lo == pytest.approx(tuple(v - 5.0 for v in wlo))
        assert hi == pytest.approx((whi[0] + 5.0, whi[1] + 5.0, whi[2] + 10.0))

    def test_slab_thickness(self):
        shell = build_skybox(_solids(*WORLD), SkyboxSettings(thickness=30.0))
        lo, hi = shell[4].bounds()
        assert hi[2] - lo[2] == pytest.approx(30.0)

    def test_slabs_do_not_overlap(self):
        bounds = [s.bounds() for s in build_skybox(_solids(*WORLD))]
        for i in range(6):
            for j in range(i + 1, 6):
                assert not _overlap(bounds[i], bounds[j])

    def test_slabs_do_not_touch_world(self):
        solids = _solids(*WORLD)
        for slab in build_skybox(solids):
            for solid in solids:
                assert not _overlap(slab.bounds(), solid.bounds())

    def test_detail_is_excluded_from_bound(self):
        far_detail = _box((5000.0, 0.0, 0.0), (10.0, 10.0, 10.0),
                          is_detail=True, detail_group="G")
        solids = _solids(*WORLD, far_detail)
        _, hi = _interior(build_skybox(solids))
        assert hi[0] == pytest.approx(350.0)

    def test_source_indices_follow_world(self):
        solids = _solids(*WORLD)
        shell = build_skybox(solids)
        assert [s.source_index for s in shell] == list(range(2, 8))


# ---------------------------------------------------------------------------
# TestSkyboxErrors
# ---------------------------------------------------------------------------

class TestSkyboxErrors:
    def test_empty_world(self):
        with pytest.raises(ConfigurationError):
            build_skybox([])

    def test_only_detail(self):
        detail = _box((0.0, 0.0, 0.0), (10.0, 10.0, 10.0), is_detail=True, detail_group="G")
        with pytest.raises(ConfigurationError):
            build_skybox(_solids(detail))
