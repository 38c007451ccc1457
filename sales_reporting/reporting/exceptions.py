"""
Reporting Errors

Failures raised by the reporting engine. Empty data is never an error.
"""


class ReportingError(Exception):
    """Base class for reporting failures"""


class UnauthenticatedError(ReportingError):
    """No acting identity was supplied for an actor-scoped report"""

    def __init__(self, message: str = "User not authenticated"):
        super().__init__(message)


class ForbiddenError(ReportingError):
    """The acting identity may not request this report"""


class ReportValidationError(ReportingError):
    """Report parameters are invalid (inverted range, bad pagination, bad rate)"""
