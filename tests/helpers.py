"""
Shared builders for schedule test data.
"""

from waitwhileslots.domain.models import DaySchedule, Period, WEEKDAY_CODES

HOUR = 60 * 60 * 1000
HALF_HOUR = 30 * 60 * 1000


def open_day(*periods):
    """Open day with (from_hour, to_hour) periods."""
    return DaySchedule(
        is_open=True,
        periods=tuple(Period(int(start * HOUR), int(end * HOUR)) for start, end in periods),
    )


CLOSED = DaySchedule(is_open=False)


def weekly_hours(**days):
    """Weekly schedule open 09:00-11:00 every day unless overridden by code."""
    weekly = {code: open_day((9, 11)) for code in WEEKDAY_CODES}
    weekly.update(days)
    return weekly
