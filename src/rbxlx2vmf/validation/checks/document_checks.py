"""
Document structure checks: world/detail separation.
"""

from typing import List

from rbxlx2vmf.conversion.vmf_model import VmfDocument

from ..core import ValidationIssue, ValidationReport, ValidationStage
from ..rules import MAP_001, MAP_002, MAP_003
from .geometry_checks import validate_brushes


def check_world_separation(document: VmfDocument) -> List[ValidationIssue]:
    issues = []
    for index, solid in enumerate(document.world.solids):
        if solid.is_detail:
            issues.append(MAP_001.issue(str(index), name=solid.name or "<unnamed>",
                                        group=solid.entity_group))
    if not document.world.solids:
        issues.append(MAP_002.issue())
    return issues


def check_detail_groups(document: VmfDocument) -> List[ValidationIssue]:
    issues = []
    for entity in document.entities:
        groups = sorted({s.entity_group or "" for s in entity.solids} | {entity.group or ""})
        if len(groups) > 1:
            issues.append(MAP_003.issue(entity.group, classname=entity.classname,
                                        groups=", ".join(groups)))
    return issues


def validate_document(document: VmfDocument) -> ValidationReport:
    """Validate the assembled document (EXPORT stage)."""
    report = validate_brushes(list(document.all_solids()), ValidationStage.EXPORT)
    report.extend(check_world_separation(document))
    report.extend(check_detail_groups(document))
    return report
