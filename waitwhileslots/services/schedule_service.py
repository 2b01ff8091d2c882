"""
Application services for opening hours and booking slots.

The service pulls raw schedule data through a provider adapter and hands it
to the domain-level ``HoursResolver`` and ``SlotPlanner``. Depending on a
protocol rather than the HTTP client keeps the CLI thin and lets tests plug
in a stub provider.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Optional, Protocol, Tuple

import pendulum
from pendulum import DateTime

from ..domain.hours_resolver import HoursResolver
from ..domain.models import (
    AbsoluteWeek,
    Booking,
    DateOverrideMap,
    DayPlan,
    HoursKind,
    MS_PER_MINUTE,
    Weekday,
    WeeklyHours,
    date_key,
)
from ..domain.slot_planner import SlotPlanner

logger = logging.getLogger(__name__)


class ScheduleDataProvider(Protocol):
    """Protocol describing the schedule data the service needs."""

    def fetch_waitlist_hours(self, kind: HoursKind) -> WeeklyHours:
        """Return the weekly hours of the given kind."""

    def fetch_hour_overrides(self, kind: HoursKind) -> DateOverrideMap:
        """Return the date overrides of the given kind."""

    def fetch_bookings_from(self, epoch_ms: int) -> List[Booking]:
        """Return bookings starting at or after ``epoch_ms``."""

    def fetch_booking_slot_length_minutes(self) -> int:
        """Return the configured booking length."""


class ScheduleService:
    """
    Orchestrates schedule retrieval, hour resolution and slot planning.
    """

    def __init__(
        self,
        provider: ScheduleDataProvider,
        timezone: str = "Europe/Berlin",
        hours_resolver: Optional[HoursResolver] = None,
        slot_planner: Optional[SlotPlanner] = None,
    ) -> None:
        self._provider = provider
        self._timezone = timezone
        self._hours_resolver = hours_resolver or HoursResolver()
        self._slot_planner = slot_planner or SlotPlanner()

    @property
    def timezone(self) -> str:
        return self._timezone

    def now(self) -> DateTime:
        return pendulum.now(self._timezone)

    def get_absolute_hours(self, kind: HoursKind, today: Optional[date] = None) -> AbsoluteWeek:
        """
        Hours of the given kind for each date of the current week.

        Override dates outside the week are included as well.
        """
        today = today or self.now().date()
        return self._hours_resolver.resolve_week(
            self._provider.fetch_waitlist_hours(kind),
            self._provider.fetch_hour_overrides(kind),
            today,
        )

    def get_weekly_display(self, kind: HoursKind) -> List[Tuple[int, Dict[str, Any]]]:
        """Weekly hours of the given kind, Monday first, with ``HH:MM`` times."""
        return self._hours_resolver.format_weekly_display(
            self._provider.fetch_waitlist_hours(kind)
        )

    def get_booking_slots_for_date(self, day: date, now: Optional[DateTime] = None) -> DayPlan:
        """
        Bookable slots for a calendar date, based on the waitlist hours.

        Dates inside the current week (or with an override) use the absolute
        hours; any other date falls back to the weekly pattern.

        Args:
            day: Calendar date to plan
            now: Current time, defaults to now in the configured timezone

        Returns:
            DayPlan with the day's opening state and its slots
        """
        now = now or self.now()
        day_start = pendulum.datetime(day.year, day.month, day.day, tz=self._timezone)
        day_start_ms = int(day_start.timestamp() * 1000)
        now_ms = int(now.timestamp() * 1000)

        duration_ms = self._provider.fetch_booking_slot_length_minutes() * MS_PER_MINUTE

        absolute = self.get_absolute_hours(
            HoursKind.WAITLIST,
            today=now.in_timezone(self._timezone).date()
        )
        key = date_key(day)

        if key in absolute:
            schedule = absolute[key]
        else:
            logger.debug("No absolute hours for %s, using weekly pattern", key)
            weekly = self._provider.fetch_waitlist_hours(HoursKind.WAITLIST)
            schedule = weekly[Weekday.for_date(day).code]

        bookings = self._provider.fetch_bookings_from(day_start_ms)

        slots = self._slot_planner.plan_day(
            periods=schedule.periods,
            duration_ms=duration_ms,
            day_start_epoch_ms=day_start_ms,
            now_epoch_ms=now_ms,
            bookings=bookings,
            is_open=schedule.is_open,
        )

        return DayPlan(date=day, is_open=schedule.is_open, slots=tuple(slots))
