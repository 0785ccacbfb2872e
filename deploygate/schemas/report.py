"""ValidationReport data model - JSON output of a check-only deployment."""

import json
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, Field

# Result status values the CLI reports for a clean check-only deploy.
SUCCESS_STATUSES = {"0", "succeeded"}


def as_sequence(value: Any) -> Any:
    """Normalize a field that the CLI emits as one object or a list of them."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def coerce_int(value: Any) -> int:
    """Coerce a JSON number or numeric string to an integer.

    Numeric fields arrive as numbers or strings depending on the CLI
    version. Anything else is rejected rather than read as zero.
    """
    if isinstance(value, bool):
        raise ValueError(f"expected a number, got boolean {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"expected a whole number, got {value!r}")
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            raise ValueError(f"expected a numeric value, got {value!r}") from None
    raise ValueError(f"expected a numeric value, got {type(value).__name__}")


def coerce_count(value: Any) -> int:
    """Coerce a failure count; absent (null) means zero."""
    if value is None:
        return 0
    count = coerce_int(value)
    if count < 0:
        raise ValueError(f"count must not be negative, got {count}")
    return count


def coerce_status(value: Any) -> int | None:
    if value is None:
        return None
    return coerce_int(value)


def coerce_text(value: Any) -> str | None:
    """Read free-text fields as strings; their type never decides a verdict."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        return json.dumps(value, sort_keys=True)
    return str(value)


Count = Annotated[int, BeforeValidator(coerce_count)]
StatusCode = Annotated[int | None, BeforeValidator(coerce_status)]
TextField = Annotated[str | None, BeforeValidator(coerce_text)]
# Only a JSON true skips; anything else is an ordinary report.
SkipFlag = Annotated[bool, BeforeValidator(lambda value: value is True)]


class ComponentFailure(BaseModel):
    """A single metadata component that failed to validate."""

    file_name: TextField = Field(None, alias="fileName", description="Source file path")
    full_name: TextField = Field(None, alias="fullName", description="API name of the component")
    component_type: TextField = Field(
        None, alias="componentType", description="Metadata type (ApexClass, CustomObject, ...)"
    )
    problem: TextField = Field(None, description="Problem description")
    problem_type: TextField = Field(None, alias="problemType", description="Error or Warning")
    line_number: TextField = Field(None, alias="lineNumber", description="Line of the problem")

    class Config:
        populate_by_name = True
        frozen = True

    def describe(self) -> str:
        location = self.file_name or self.full_name or "<unknown component>"
        if self.line_number not in (None, ""):
            location = f"{location}:{self.line_number}"
        return f"{location}: {self.problem or 'no problem description'}"


class TestFailure(BaseModel):
    """A failing Apex test method reported by runTestResult."""

    __test__ = False

    name: TextField = Field(None, description="Test class name")
    method_name: TextField = Field(None, alias="methodName", description="Test method name")
    message: TextField = Field(None, description="Assertion or exception message")
    stack_trace: TextField = Field(None, alias="stackTrace", description="Apex stack trace")

    class Config:
        populate_by_name = True
        frozen = True

    def describe(self) -> str:
        test = ".".join(part for part in (self.name, self.method_name) if part) or "<unknown test>"
        return f"{test}: {self.message or 'no message'}"


ComponentFailureList = Annotated[list[ComponentFailure], BeforeValidator(as_sequence)]
TestFailureList = Annotated[list[TestFailure], BeforeValidator(as_sequence)]


class RunTestResult(BaseModel):
    """Apex test summary nested in the deploy details."""

    num_failures: Count = Field(0, alias="numFailures", description="Number of failing tests")
    failures: TestFailureList = Field(default_factory=list, description="Failing test methods")

    class Config:
        populate_by_name = True
        frozen = True


class DeployDetails(BaseModel):
    """The `result.details` block of a deploy report."""

    component_failures: ComponentFailureList = Field(
        default_factory=list, alias="componentFailures", description="Failed components"
    )
    run_test_result: RunTestResult | None = Field(
        None, alias="runTestResult", description="Apex test outcome"
    )

    class Config:
        populate_by_name = True
        frozen = True


class DeployResult(BaseModel):
    """The nested `result` object carrying the validation outcome."""

    success: bool | None = Field(None, description="Whether the check-only deploy succeeded")
    status: TextField = Field(None, description="Secondary status code or name")
    details: DeployDetails | None = Field(None, description="Component and test details")

    class Config:
        frozen = True

    @property
    def succeeded(self) -> bool:
        if self.success is True:
            return True
        if self.status is None:
            return False
        return str(self.status).strip().lower() in SUCCESS_STATUSES


class ValidationReport(BaseModel):
    """Parsed JSON document produced by the deploy/validate CLI."""

    status: StatusCode = Field(None, description="Top-level CLI exit indicator")
    message: TextField = Field(None, description="Top-level CLI error text")
    result: DeployResult | None = Field(None, description="Validation outcome")
    skipped: SkipFlag = Field(False, description="Set by the caller when nothing was deployable")
    reason: TextField = Field(None, description="Why the validation was skipped")

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "status": 1,
                "result": {
                    "success": False,
                    "status": "Failed",
                    "details": {
                        "componentFailures": {
                            "fileName": "force-app/main/default/classes/Foo.cls",
                            "problem": "Variable does not exist: bar",
                            "problemType": "Error",
                            "lineNumber": "12",
                        },
                        "runTestResult": {"numFailures": "0"},
                    },
                },
            }
        }

    @property
    def cli_error(self) -> bool:
        """True when the CLI itself exited with a non-zero status."""
        return self.status is not None and self.status != 0

    @property
    def has_details(self) -> bool:
        return self.result is not None and self.result.details is not None

    @property
    def component_failures(self) -> list[ComponentFailure]:
        if not self.has_details:
            return []
        return self.result.details.component_failures

    @property
    def test_result(self) -> RunTestResult | None:
        if not self.has_details:
            return None
        return self.result.details.run_test_result
