"""
Brush geometry: shape building, adjacency merging and skybox synthesis.
"""

from .oriented_box import OrientedBox
from .shape_builder import (
    BuildResult,
    GeometrySettings,
    ShapeBuilder,
    MAX_SPHERE_POWER,
    MIN_SPHERE_POWER,
    box_sides,
    sphere_displacement,
)
from .optimizer import AdjacencyOptimizer, OptimizeResult
from .skybox import SkyboxSettings, build_skybox, world_bounds

__all__ = [
    'OrientedBox',
    'BuildResult',
    'GeometrySettings',
    'ShapeBuilder',
    'MAX_SPHERE_POWER',
    'MIN_SPHERE_POWER',
    'box_sides',
    'sphere_displacement',
    'AdjacencyOptimizer',
    'OptimizeResult',
    'SkyboxSettings',
    'build_skybox',
    'world_bounds',
]
