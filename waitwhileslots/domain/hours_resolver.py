"""
Turns recurring weekly hours into concrete per-date schedules.

Pure domain logic: no API calls and no I/O.
"""

from datetime import date
from typing import Any, Dict, List, Tuple

import pendulum

from .exceptions import MissingScheduleDay
from .models import (
    AbsoluteWeek,
    DateOverrideMap,
    Weekday,
    WeeklyHours,
    WEEKDAY_CODES,
    date_key,
)


class HoursResolver:
    """
    Resolves Waitwhile hour schedules.

    Waitwhile describes opening hours as a weekly pattern (``mon``..``sun``)
    plus a sparse map of date overrides (holidays, special hours). The
    resolver overlays both onto the calendar dates of the current week.
    """

    def week_dates(self, today: date) -> List[Tuple[int, str]]:
        """
        List the ``(YYYYMMDD, weekday code)`` pairs of the week containing today.

        Weeks start on Monday.
        """
        current = pendulum.date(today.year, today.month, today.day).start_of("week")
        days: List[Tuple[int, str]] = []

        for code in WEEKDAY_CODES:
            days.append((date_key(current), code))
            current = current.add(days=1)

        return days

    def resolve_week(
        self,
        weekly: WeeklyHours,
        overrides: DateOverrideMap,
        today: date
    ) -> AbsoluteWeek:
        """
        Build the absolute schedule for the current week.

        Args:
            weekly: Weekly pattern keyed by weekday code
            overrides: Date overrides keyed by ``YYYYMMDD``
            today: Any date inside the week to resolve

        Returns:
            Schedules keyed by ``YYYYMMDD``: the seven days of the week in
            order, followed by every override outside the week, unchanged.

        Raises:
            MissingScheduleDay: If ``weekly`` lacks a weekday code
        """
        missing = [code for code in WEEKDAY_CODES if code not in weekly]
        if missing:
            raise MissingScheduleDay(missing)

        absolute: AbsoluteWeek = {}

        for key, code in self.week_dates(today):
            if key in overrides:
                absolute[key] = overrides[key]
            else:
                absolute[key] = weekly[code]

        # Overrides outside this week are carried through as-is
        for key, schedule in overrides.items():
            if key not in absolute:
                absolute[key] = schedule

        return absolute

    def format_weekly_display(self, weekly: WeeklyHours) -> List[Tuple[int, Dict[str, Any]]]:
        """
        Format a weekly schedule for display.

        The API returns weekday keys in no particular order, so entries are
        reindexed Monday=0 .. Sunday=6 and sorted. Period bounds become
        ``HH:MM`` strings.

        Example:
            {"tue": ..., "mon": ...} -> [(0, {...mon...}), (1, {...tue...})]
        """
        formatted = [
            (int(Weekday.from_code(code)), schedule.to_display())
            for code, schedule in weekly.items()
        ]
        formatted.sort(key=lambda item: item[0])

        return formatted
