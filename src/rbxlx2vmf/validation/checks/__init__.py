"""
Validation check modules.

- geometry_checks: side count, plane points, closed volumes, displacements
- document_checks: world/detail separation
"""

from .geometry_checks import (
    validate_brushes,
    validate_solid,
    check_side_count,
    check_collinear_points,
    check_closed_volume,
    check_map_limits,
    check_displacement,
)
from .document_checks import (
    validate_document,
    check_world_separation,
    check_detail_groups,
)

__all__ = [
    # Geometry
    'validate_brushes',
    'validate_solid',
    'check_side_count',
    'check_collinear_points',
    'check_closed_volume',
    'check_map_limits',
    'check_displacement',
    # Document
    'validate_document',
    'check_world_separation',
    'check_detail_groups',
]
