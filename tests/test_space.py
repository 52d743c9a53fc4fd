"""Tests for rbxlx2vmf.scene.space: Roblox to Source coordinates."""

from __future__ import annotations

import numpy as np
import pytest

from rbxlx2vmf.scene import SceneNode, ShapeKind, remap_face, to_target_space
from rbxlx2vmf.scene.space import AXIS_MAP


def _node(**kwargs) -> SceneNode:
    return SceneNode(kind=ShapeKind.BLOCK, **kwargs)


class TestAxisMap:
    def test_is_proper_rotation(self):
        assert np.linalg.det(AXIS_MAP) == pytest.approx(1.0)
        assert AXIS_MAP @ AXIS_MAP.T == pytest.approx(np.eye(3))

    def test_roblox_up_becomes_source_up(self):
        assert AXIS_MAP @ np.array([0, 1, 0]) == pytest.approx([0, 0, 1])

    @pytest.mark.parametrize("face, expected", [
        ((0, 1), (0, 1)),
        ((1, 1), (2, 1)),
        ((1, -1), (2, -1)),
        ((2, 1), (1, -1)),
        ((2, -1), (1, 1)),
    ])
    def test_remap_face(self, face, expected):
        assert remap_face(face) == expected


class TestToTargetSpace:
    def test_position_and_size(self):
        node = to_target_space(_node(position=(1, 2, 3), size=(4, 1, 2)), 15.0)
        assert node.position == pytest.approx((15, -45, 30))
        assert node.size == pytest.approx((60, 30, 15))

    def test_identity_rotation_stays_identity(self):
        node = to_target_space(_node(size=(1, 1, 1)), 1.0)
        assert np.asarray(node.rotation) == pytest.approx(np.eye(3))

    def test_rotation_is_conjugated(self):
        # 90 degrees about Roblox Y (up) is 90 degrees about Source Z
        r = ((0.0, 0.0, 1.0), (0.0, 1.0, 0.0), (-1.0, 0.0, 0.0))
        node = to_target_space(_node(rotation=r, size=(1, 1, 1)), 1.0)
        rot = np.asarray(node.rotation)
        assert rot @ np.array([0, 0, 1]) == pytest.approx([0, 0, 1])
        assert np.linalg.det(rot) == pytest.approx(1.0)

    def test_surfaces_are_rekeyed(self):
        node = to_target_space(_node(size=(1, 1, 1), surfaces=(((1, 1), "studs"),)), 1.0)
        assert node.surface((2, 1)) == "studs"
        assert node.surface((1, 1)) is None

    def test_children_are_transformed(self):
        child = _node(position=(0, 1, 0), size=(1, 1, 1))
        root = SceneNode(kind=ShapeKind.GROUP, children=(child,))
        out = to_target_space(root, 10.0)
        assert out.children[0].position == pytest.approx((0, 0, 10))

    def test_input_is_untouched(self):
        node = _node(position=(1, 2, 3), size=(1, 1, 1))
        to_target_space(node, 2.0)
        assert node.position == (1, 2, 3)
