"""
Validation package.

Public API:
    - ValidationReport, ValidationIssue, Severity: Core result types
    - ValidationRule: Coded rules the checks report against
    - ValidationStage: Pipeline stage enumeration
    - ValidationError: Exception raised on FAIL issues
    - run_gate: Stage boundary checks
"""

from .core import (
    Severity,
    ValidationStage,
    ValidationIssue,
    ValidationReport,
    ValidationError,
)
from .rules import ValidationRule
from .gates import run_gate

__all__ = [
    # Core types
    'Severity',
    'ValidationStage',
    'ValidationIssue',
    'ValidationReport',
    'ValidationError',
    'ValidationRule',
    # Gates
    'run_gate',
]
