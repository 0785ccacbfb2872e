"""
Validation Outcome Evaluator

Classifies the JSON report of a check-only deployment into a gate verdict.

Decision order (first match wins):
- An explicit `skipped` marker from the pipeline -> skipped
- A CLI-level error status with no `result.details` -> failed
- `result.success`/`result.status`, component failures and failing tests
  -> failed if any of them reports a problem, otherwise passed

Evaluation is a pure function of the input bytes: no I/O, no logging.
"""

import json
from typing import Any

from pydantic import ValidationError

from deploygate.errors import MalformedReportError
from deploygate.schemas import ValidationReport, Verdict

DEFAULT_SKIP_REASON = "no deployable metadata"
DEFAULT_CLI_ERROR_REASON = "CLI error with no details"


def load_document(raw: bytes | str) -> dict[str, Any]:
    """Decode a report into a JSON object, or raise MalformedReportError."""
    try:
        document = json.loads(raw)
    except (ValueError, RecursionError) as e:
        # JSONDecodeError and UnicodeDecodeError are ValueErrors; deep nesting recurses
        raise MalformedReportError(f"Report is not valid JSON: {e}") from e

    if not isinstance(document, dict):
        raise MalformedReportError(
            f"Report must be a JSON object, got {type(document).__name__}"
        )
    return document


def describe_validation_error(error: ValidationError) -> str:
    """Flatten a pydantic error into `path: message` pairs."""
    problems = []
    for item in error.errors():
        path = ".".join(str(part) for part in item["loc"]) or "<root>"
        problems.append(f"{path}: {item['msg']}")
    return "; ".join(problems)


def evaluate(raw: bytes | str) -> Verdict:
    """
    Evaluate a raw validation report.

    Args:
        raw: JSON text or bytes as written by the deploy/validate CLI

    Returns:
        Verdict with outcome, reason and failure counts

    Raises:
        MalformedReportError: input is not a JSON object, or a numeric
            field holds a non-numeric value
    """
    return evaluate_document(load_document(raw))


def evaluate_document(document: dict[str, Any]) -> Verdict:
    """Evaluate an already-decoded report object."""
    # The skip marker wins over every other field, valid or not.
    if document.get("skipped") is True:
        reason = document.get("reason")
        return Verdict(
            outcome="skipped",
            reason=str(reason) if reason else DEFAULT_SKIP_REASON,
        )

    try:
        report = ValidationReport.model_validate(document)
    except ValidationError as e:
        raise MalformedReportError(
            f"Report has invalid fields: {describe_validation_error(e)}"
        ) from e

    return _decide(report)


def _decide(report: ValidationReport) -> Verdict:
    if report.cli_error and not report.has_details:
        return Verdict(
            outcome="failed",
            reason=report.message or DEFAULT_CLI_ERROR_REASON,
        )

    success = report.result is not None and report.result.succeeded
    component_failures = tuple(report.component_failures)
    test_result = report.test_result
    test_failure_count = test_result.num_failures if test_result else 0
    test_failures = tuple(test_result.failures) if test_result else ()

    counts = (
        f"success={success}, "
        f"component failures={len(component_failures)}, "
        f"test failures={test_failure_count}"
    )

    if success and not component_failures and not test_failure_count:
        return Verdict(outcome="passed", reason=counts)

    parts = [counts]
    if report.cli_error and report.message:
        parts.insert(0, report.message)
    parts.extend(failure.describe() for failure in component_failures)
    parts.extend(failure.describe() for failure in test_failures)

    return Verdict(
        outcome="failed",
        reason="; ".join(parts),
        component_failure_count=len(component_failures),
        test_failure_count=test_failure_count,
        component_failures=component_failures,
        test_failures=test_failures,
    )
