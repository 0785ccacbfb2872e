"""Exceptions raised by deploygate."""


class DeployGateError(Exception):
    """Base class for deploygate errors."""


class MalformedReportError(DeployGateError, ValueError):
    """A report could not be parsed, or a numeric field holds a non-numeric value.

    Callers must treat this as a blocking result. An unparsable report can
    never be taken as a pass.
    """
