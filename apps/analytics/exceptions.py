"""
Errors raised by the inventory reporting queries.

Views catch AnalyticsServiceError and answer 400 with {'error': message}.
"""


class AnalyticsServiceError(Exception):
    """Base class for reporting errors."""

    pass


class InvalidDateRangeError(AnalyticsServiceError):
    """The reporting window ends before it starts."""

    pass
