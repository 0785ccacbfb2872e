"""Data schemas for deploygate."""

from .report import ComponentFailure, TestFailure, ValidationReport
from .verdict import StaticAnalysisVerdict, Verdict
from .pmd_report import PmdReport, PmdViolation

__all__ = [
    "ComponentFailure",
    "TestFailure",
    "ValidationReport",
    "Verdict",
    "StaticAnalysisVerdict",
    "PmdReport",
    "PmdViolation",
]
