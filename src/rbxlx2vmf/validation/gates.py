"""
Validation gates at pipeline stage boundaries.

run_gate() checks the built solids (GENERATION) or the assembled document
(EXPORT); FAIL issues raise ValidationError, a GeometryError.
"""

import logging

from .core import ValidationError, ValidationReport, ValidationStage

logger = logging.getLogger(__name__)


def run_gate(
    stage: ValidationStage,
    target,
    fail_fast: bool = True,
    log_warnings: bool = True
) -> ValidationReport:
    """Validate ``target`` for ``stage``.

    ``target`` is a sequence of solids for GENERATION and a VmfDocument for
    EXPORT.

    Raises:
        ValidationError: If fail_fast=True and any FAIL issue was found
    """
    # Import here to avoid circular imports
    from .checks import validate_brushes, validate_document

    if stage is ValidationStage.EXPORT:
        report = validate_document(target)
    else:
        report = validate_brushes(target)

    if log_warnings:
        for issue in report.warnings:
            logger.warning(str(issue))

    if fail_fast and report.failed:
        logger.error("Validation failed at %s: %d errors", stage, len(report.errors))
        raise ValidationError(report)

    return report
