"""Static analysis gate over PMD JSON reports."""

from pydantic import ValidationError

from deploygate.errors import MalformedReportError
from deploygate.evaluator import describe_validation_error, load_document
from deploygate.schemas import PmdReport, PmdViolation, StaticAnalysisVerdict

# PMD priorities run from 1 (blocker) to 5 (informational).
DEFAULT_MAX_PRIORITY = 2


def _render_violation(filename: str, violation: PmdViolation) -> str:
    location = filename if violation.beginline is None else f"{filename}:{violation.beginline}"
    return f"{location} [{violation.rule}] P{violation.priority} {violation.description}".rstrip()


def evaluate_pmd(
    raw: bytes | str,
    max_priority: int = DEFAULT_MAX_PRIORITY,
) -> StaticAnalysisVerdict:
    """
    Evaluate a PMD JSON report.

    A violation blocks when its priority is `max_priority` or more severe.
    Processing errors always block: a file PMD could not analyse is not
    known to be clean.

    Args:
        raw: JSON text or bytes from PMD's `json` renderer
        max_priority: Least severe priority that still blocks (1-5)

    Returns:
        StaticAnalysisVerdict

    Raises:
        ValueError: max_priority outside 1-5
        MalformedReportError: report is not valid PMD JSON
    """
    if not 1 <= max_priority <= 5:
        raise ValueError(f"max_priority must be between 1 and 5, got {max_priority}")

    document = load_document(raw)
    try:
        report = PmdReport.model_validate(document)
    except ValidationError as e:
        raise MalformedReportError(
            f"PMD report has invalid fields: {describe_validation_error(e)}"
        ) from e

    violation_count = 0
    findings = []
    for filename, violation in report.iter_violations():
        violation_count += 1
        if violation.priority <= max_priority:
            findings.append(_render_violation(filename, violation))
    blocking_count = len(findings)

    for error in report.processing_errors:
        findings.append(f"{error.filename or '<unknown file>'}: processing error: {error.message}")

    error_count = len(report.processing_errors)
    if findings:
        outcome = "failed"
        reason = (
            f"{blocking_count} blocking violation(s), "
            f"{error_count} processing error(s)"
        )
    else:
        outcome = "passed"
        reason = (
            f"no violations at priority {max_priority} or above "
            f"({violation_count} lower-priority)"
        )

    return StaticAnalysisVerdict(
        outcome=outcome,
        reason=reason,
        max_priority=max_priority,
        violation_count=violation_count,
        blocking_count=blocking_count,
        processing_error_count=error_count,
        findings=tuple(findings),
    )
