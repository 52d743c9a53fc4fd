"""
Geometry validation checks.

Validates brush geometry before it is written:
- Minimum side count (GEOM-001)
- Collinear and duplicate plane points (GEOM-002, GEOM-005)
- Closed convex volume (GEOM-003, GEOM-004)
- Map coordinate limit (GEOM-006)
- Displacement grids (DISP-001, DISP-002)
"""

from typing import List, Optional, Sequence

from rbxlx2vmf.conversion.plane_math import (
    MIN_BRUSH_EXTENT,
    Vec3,
    _cross,
    _length,
    _sub,
    solid_vertices,
)
from rbxlx2vmf.conversion.vmf_model import Side, Solid

from ..core import ValidationIssue, ValidationReport, ValidationStage
from ..rules import (
    DISP_001,
    DISP_002,
    GEOM_001,
    GEOM_002,
    GEOM_003,
    GEOM_004,
    GEOM_005,
    GEOM_006,
)

MAP_LIMIT = 16384.0


def check_side_count(solid: Solid, location: Optional[str] = None) -> List[ValidationIssue]:
    if len(solid.sides) < 4:
        return [GEOM_001.issue(location, side_count=len(solid.sides))]
    return []


def check_collinear_points(
    p1: Vec3,
    p2: Vec3,
    p3: Vec3,
    location: Optional[str] = None,
    side: Optional[int] = None,
    tolerance: float = 1e-6
) -> List[ValidationIssue]:
    """Check that three plane points are distinct and not collinear."""
    points = f"{p1}, {p2}, {p3}"
    if p1 == p2 or p2 == p3 or p1 == p3:
        return [GEOM_005.issue(location, side, points=points)]

    if _length(_cross(_sub(p2, p1), _sub(p3, p1))) < tolerance:
        return [GEOM_002.issue(location, side, points=points)]
    return []


def check_closed_volume(solid: Solid, location: Optional[str] = None) -> List[ValidationIssue]:
    """Intersect the side planes and make sure they bound a real volume."""
    vertices = solid_vertices([side.plane for side in solid.sides])
    if len(vertices) < 4:
        return [GEOM_003.issue(location, vertex_count=len(vertices))]

    issues = []
    for axis, name in enumerate("xyz"):
        values = [v[axis] for v in vertices]
        extent = max(values) - min(values)
        if extent <= MIN_BRUSH_EXTENT:
            issues.append(GEOM_004.issue(location, axis=name, extent=round(extent, 6)))
    return issues


def check_map_limits(solid: Solid, location: Optional[str] = None,
                     limit: float = MAP_LIMIT) -> List[ValidationIssue]:
    mins, maxs = solid.bounds()
    worst = max(max(abs(c) for c in mins), max(abs(c) for c in maxs))
    if worst > limit:
        return [GEOM_006.issue(location, value=round(worst, 3), limit=limit)]
    return []


def check_displacement(side: Side, location: Optional[str] = None,
                       index: Optional[int] = None) -> List[ValidationIssue]:
    disp = side.displacement
    if disp is None:
        return []

    if len(side.polygon) != 4:
        return [DISP_001.issue(location, index, corner_count=len(side.polygon))]

    expected = disp.resolution
    rows = len(disp.normals)
    cols = min((len(r) for r in disp.normals), default=0)
    if (rows != expected or cols != expected
            or len(disp.distances) != expected
            or any(len(r) != expected for r in disp.normals)
            or any(len(r) != expected for r in disp.distances)):
        return [DISP_002.issue(location, index, rows=rows, cols=cols,
                               expected=expected, power=disp.power)]
    return []


def validate_solid(solid: Solid, location: Optional[str] = None) -> List[ValidationIssue]:
    """Run every per-solid check."""
    issues = check_side_count(solid, location)
    for i, side in enumerate(solid.sides):
        issues.extend(check_collinear_points(*side.plane.points, location=location, side=i))
        issues.extend(check_displacement(side, location, i))
    if issues:
        # Volume checks are meaningless on broken planes
        return issues
    issues.extend(check_closed_volume(solid, location))
    issues.extend(check_map_limits(solid, location))
    return issues


def validate_brushes(solids: Sequence[Solid],
                     stage: ValidationStage = ValidationStage.GENERATION) -> ValidationReport:
    """Validate a list of solids; issues are located as ``"<index>:<name>"``."""
    report = ValidationReport(stage=stage)
    for index, solid in enumerate(solids):
        location = f"{index}:{solid.name}" if solid.name else str(index)
        report.extend(validate_solid(solid, location))
    return report
