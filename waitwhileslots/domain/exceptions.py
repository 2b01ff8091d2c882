"""
Domain-specific exception hierarchy for the waitwhileslots application.
"""

from __future__ import annotations

from typing import Iterable, Optional


class WaitwhileError(Exception):
    """Base class for all application-level errors."""


class ScheduleError(WaitwhileError):
    """Raised when hours data does not have the expected structure."""


class MissingScheduleDay(ScheduleError):
    """Raised when a weekly schedule lacks one or more weekday entries."""

    def __init__(self, missing: Iterable[str]):
        self.missing = tuple(missing)
        super().__init__(
            f"Weekly schedule is missing weekday(s): {', '.join(self.missing)}"
        )


class UnknownWeekday(ScheduleError):
    """Raised when a weekly schedule uses a weekday code we do not know."""


class InvalidConfiguration(WaitwhileError):
    """Raised for settings that make slot planning impossible."""


class WaitwhileAPIError(WaitwhileError):
    """Raised when the Waitwhile API cannot be reached or returns an error."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class ApiKeyError(WaitwhileError):
    """Raised when no Waitwhile API key can be found."""
