"""Verdict data models - output of the deploy and static analysis gates."""

from typing import Literal

from pydantic import BaseModel, Field

from .report import ComponentFailure, TestFailure

Outcome = Literal["skipped", "passed", "failed"]


class Verdict(BaseModel):
    """Gate decision for one validation report."""

    outcome: Outcome = Field(..., description="skipped, passed or failed")
    reason: str = Field(..., description="Human-readable explanation")
    component_failure_count: int = Field(0, ge=0, description="Failed metadata components")
    test_failure_count: int = Field(0, ge=0, description="Failing Apex tests")
    component_failures: tuple[ComponentFailure, ...] = Field(
        default=(), description="Failed components, in report order"
    )
    test_failures: tuple[TestFailure, ...] = Field(
        default=(), description="Failing test methods, in report order"
    )

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "outcome": "failed",
                "reason": "success=False, component failures=1, test failures=0",
                "component_failure_count": 1,
                "test_failure_count": 0,
                "component_failures": [
                    {"file_name": "classes/Foo.cls", "problem": "Missing field"}
                ],
                "test_failures": [],
            }
        }

    @property
    def blocking(self) -> bool:
        return self.outcome == "failed"

    @property
    def exit_code(self) -> int:
        """Process exit code for the CI host: only a failure blocks."""
        return 1 if self.blocking else 0

    def summary(self) -> str:
        """Multi-line summary for console output and the build archive."""
        if self.outcome == "skipped":
            return f"Validation SKIPPED\n  Reason: {self.reason}"
        if self.outcome == "passed":
            return f"Validation PASS ✓\n  Reason: {self.reason}"

        lines = [
            "Validation FAIL ✗",
            f"  Reason: {self.reason}",
            f"  Component failures: {self.component_failure_count}",
        ]
        lines.extend(f"    - {failure.describe()}" for failure in self.component_failures)
        lines.append(f"  Test failures: {self.test_failure_count}")
        lines.extend(f"    - {failure.describe()}" for failure in self.test_failures)
        return "\n".join(lines)

    def __str__(self):
        return self.summary()


class StaticAnalysisVerdict(BaseModel):
    """Gate decision for one PMD report."""

    outcome: Literal["passed", "failed"] = Field(..., description="passed or failed")
    reason: str = Field(..., description="Human-readable explanation")
    max_priority: int = Field(..., ge=1, le=5, description="Most lenient blocking priority")
    violation_count: int = Field(0, ge=0, description="All violations in the report")
    blocking_count: int = Field(0, ge=0, description="Violations at or above the threshold")
    processing_error_count: int = Field(0, ge=0, description="Files PMD could not analyse")
    findings: tuple[str, ...] = Field(default=(), description="Blocking findings, rendered")

    class Config:
        frozen = True

    @property
    def blocking(self) -> bool:
        return self.outcome == "failed"

    @property
    def exit_code(self) -> int:
        return 1 if self.blocking else 0

    def summary(self) -> str:
        status = "FAIL ✗" if self.blocking else "PASS ✓"
        lines = [
            f"Static analysis {status}",
            f"  Reason: {self.reason}",
            f"  Violations: {self.blocking_count} blocking / {self.violation_count} total"
            f" (priority <= {self.max_priority} blocks)",
            f"  Processing errors: {self.processing_error_count}",
        ]
        lines.extend(f"    - {finding}" for finding in self.findings)
        return "\n".join(lines)

    def __str__(self):
        return self.summary()
