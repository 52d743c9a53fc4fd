"""
Issue and report types shared by the brush and document checks.

An issue always points at the rule it breaks and, where it applies, at the
solid (``"<index>:<part name>"``) and side it was found on.  A report is the
ordered list of issues for one gate.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Dict, List, Optional

from rbxlx2vmf.errors import GeometryError

if TYPE_CHECKING:
    from .rules import ValidationRule


class Severity(Enum):
    """WARN issues are reported and the document is still written; FAIL
    issues stop the conversion."""
    WARN = "WARN"
    FAIL = "FAIL"

    def __str__(self) -> str:
        return self.value


class ValidationStage(Enum):
    GENERATION = "generation"  # solids straight out of the shape builder
    EXPORT = "export"          # assembled document, before serialization

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ValidationIssue:
    rule: ValidationRule
    message: str
    solid: Optional[str] = None
    side: Optional[int] = None

    @property
    def code(self) -> str:
        return self.rule.code

    @property
    def severity(self) -> Severity:
        return self.rule.severity

    def format(self) -> str:
        """``[FAIL] GEOM-004 solid=3:Wall side=2 :: message :: fix=...``"""
        where = f"solid={self.solid or '-'}"
        if self.side is not None:
            where += f" side={self.side}"
        text = f"[{self.severity}] {self.code} {where} :: {self.message}"
        if self.rule.remediation:
            text += f" :: fix={self.rule.remediation}"
        return text

    def __str__(self) -> str:
        return self.format()


@dataclass
class ValidationReport:
    stage: ValidationStage
    issues: List[ValidationIssue] = field(default_factory=list)

    def extend(self, issues: List[ValidationIssue]) -> None:
        self.issues.extend(issues)

    @property
    def errors(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity is Severity.FAIL]

    @property
    def warnings(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity is Severity.WARN]

    @property
    def failed(self) -> bool:
        return any(i.severity is Severity.FAIL for i in self.issues)

    @property
    def passed(self) -> bool:
        return not self.failed

    def counts(self) -> Dict[str, int]:
        """Issue count per rule code, in first-seen order."""
        counts: Dict[str, int] = {}
        for issue in self.issues:
            counts[issue.code] = counts.get(issue.code, 0) + 1
        return counts

    def summary(self) -> str:
        status = "FAILED" if self.failed else "PASSED"
        lines = [f"Validation {status} ({self.stage}): "
                 f"{len(self.errors)} error(s), {len(self.warnings)} warning(s)"]
        # Errors first, each group in check order
        lines.extend(i.format() for i in self.errors)
        lines.extend(i.format() for i in self.warnings)
        return "\n".join(lines)


class ValidationError(GeometryError):
    """The export gate found FAIL issues; ``report`` holds all of them."""

    def __init__(self, report: ValidationReport):
        self.report = report
        super().__init__(report.summary())
