"""
Validation rules.

Each rule has a code (e.g. "GEOM-001"), a severity, the compiler or format
requirement behind it, a message template and a suggested fix.  Checks
create issues through ``rule.issue(...)``.

Categories:
- GEOM: Per-solid geometry
- DISP: Displacement grids
- MAP: Document structure
"""

from dataclasses import dataclass
from typing import Optional

from .core import Severity, ValidationIssue


@dataclass(frozen=True)
class ValidationRule:
    code: str
    severity: Severity
    requirement: str
    message_template: str
    remediation: Optional[str] = None

    def issue(self, solid: Optional[str] = None, side: Optional[int] = None,
              **kwargs) -> ValidationIssue:
        return ValidationIssue(rule=self, message=self.message_template.format(**kwargs),
                               solid=solid, side=side)


# =============================================================================
# GEOMETRY RULES (GEOM)
# =============================================================================

GEOM_001 = ValidationRule(
    code="GEOM-001",
    severity=Severity.FAIL,
    requirement="vbsp: a brush needs at least 4 sides",
    message_template="Open brush with only {side_count} sides (minimum 4 required)",
    remediation="Add sides to close the brush volume",
)

GEOM_002 = ValidationRule(
    code="GEOM-002",
    severity=Severity.FAIL,
    requirement="VMF plane: three points must span a plane",
    message_template="Collinear points in plane definition: {points}",
    remediation="Ensure three points define a valid plane (non-zero cross product)",
)

GEOM_003 = ValidationRule(
    code="GEOM-003",
    severity=Severity.FAIL,
    requirement="vbsp: brushes must be closed convex volumes",
    message_template="Brush planes enclose no volume ({vertex_count} vertices)",
    remediation="Check side winding; every plane normal must face into the solid",
)

GEOM_004 = ValidationRule(
    code="GEOM-004",
    severity=Severity.FAIL,
    requirement="vbsp: brushes must be closed convex volumes",
    message_template="Brush is flat along {axis} (extent {extent})",
    remediation="Give the part a non-zero size on every axis",
)

GEOM_005 = ValidationRule(
    code="GEOM-005",
    severity=Severity.FAIL,
    requirement="VMF plane: three points must span a plane",
    message_template="Duplicate points in plane definition: {points}",
    remediation="Ensure all three plane points are distinct",
)

GEOM_006 = ValidationRule(
    code="GEOM-006",
    severity=Severity.WARN,
    requirement="Hammer: coordinates outside +/-16384 are off the grid",
    message_template="Brush extends to {value}, outside the map limit of {limit}",
    remediation="Lower the map scale or move the part closer to the origin",
)


# =============================================================================
# DISPLACEMENT RULES (DISP)
# =============================================================================

DISP_001 = ValidationRule(
    code="DISP-001",
    severity=Severity.FAIL,
    requirement="VMF dispinfo: only four-sided faces can carry a displacement",
    message_template="Displacement on a {corner_count}-sided face",
    remediation="Only attach displacements to quad sides",
)

DISP_002 = ValidationRule(
    code="DISP-002",
    severity=Severity.FAIL,
    requirement="VMF dispinfo: power 2-4, (2^power+1)^2 vertices",
    message_template="Displacement grid is {rows}x{cols}, expected {expected}x{expected} for power {power}",
    remediation="Rebuild the displacement with a matching grid",
)


# =============================================================================
# MAP STRUCTURE RULES (MAP)
# =============================================================================

MAP_001 = ValidationRule(
    code="MAP-001",
    severity=Severity.FAIL,
    requirement="worldspawn holds world geometry only",
    message_template="Detail solid {name} (group {group}) placed in worldspawn",
    remediation="Move the solid into its func_detail entity",
)

MAP_002 = ValidationRule(
    code="MAP-002",
    severity=Severity.WARN,
    requirement="vbsp: a map without world brushes leaks",
    message_template="Document has no world brushes",
    remediation="Enable the auto-skybox or add non-detail parts",
)

MAP_003 = ValidationRule(
    code="MAP-003",
    severity=Severity.FAIL,
    requirement="Each detail entity carries one detail group",
    message_template="Entity {classname} mixes groups {groups}",
    remediation="Split the entity by detail group",
)

