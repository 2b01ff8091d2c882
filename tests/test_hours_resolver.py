"""
Tests for hours resolver.
"""

import pendulum
import pytest

from waitwhileslots.domain.exceptions import MissingScheduleDay, UnknownWeekday
from waitwhileslots.domain.hours_resolver import HoursResolver

from .helpers import CLOSED, open_day, weekly_hours


class TestWeekDates:
    """Tests for the current-week window."""

    def test_week_starts_on_monday(self):
        """A Wednesday resolves to the Monday-Sunday around it."""
        resolver = HoursResolver()

        days = resolver.week_dates(pendulum.date(2024, 11, 27))

        assert days == [
            (20241125, "mon"),
            (20241126, "tue"),
            (20241127, "wed"),
            (20241128, "thu"),
            (20241129, "fri"),
            (20241130, "sat"),
            (20241201, "sun"),
        ]

    def test_sunday_belongs_to_previous_monday(self):
        """Sunday is the last day of its week."""
        days = HoursResolver().week_dates(pendulum.date(2024, 12, 1))

        assert days[0] == (20241125, "mon")

    def test_week_across_year_end(self):
        """Keys follow the calendar across a year boundary."""
        days = HoursResolver().week_dates(pendulum.date(2025, 1, 1))

        assert days[0] == (20241230, "mon")
        assert days[-1] == (20250105, "sun")


class TestResolveWeek:
    """Tests for HoursResolver.resolve_week."""

    def test_weekly_pattern_without_overrides(self):
        """Each date gets the schedule of its weekday."""
        resolver = HoursResolver()
        weekly = weekly_hours(sun=CLOSED)

        absolute = resolver.resolve_week(weekly, {}, pendulum.date(2024, 11, 27))

        assert list(absolute) == [
            20241125, 20241126, 20241127, 20241128, 20241129, 20241130, 20241201
        ]
        assert absolute[20241125] == weekly["mon"]
        assert absolute[20241201] is CLOSED

    def test_override_replaces_weekday(self):
        """An override for a date in the week is used verbatim."""
        resolver = HoursResolver()
        special = open_day((12, 14))

        absolute = resolver.resolve_week(
            weekly_hours(),
            {20241128: special},
            pendulum.date(2024, 11, 27),
        )

        assert absolute[20241128] is special
        assert absolute[20241127] == open_day((9, 11))

    def test_overrides_outside_week_pass_through(self):
        """Overrides for other weeks are carried along unchanged."""
        resolver = HoursResolver()
        christmas = CLOSED

        absolute = resolver.resolve_week(
            weekly_hours(),
            {20241224: christmas, 20241126: open_day((10, 12))},
            pendulum.date(2024, 11, 27),
        )

        assert len(absolute) == 8
        assert list(absolute)[-1] == 20241224
        assert absolute[20241224] is christmas
        assert absolute[20241126] == open_day((10, 12))

    def test_missing_weekday_raises(self):
        """Every weekday code must be present."""
        weekly = weekly_hours()
        del weekly["sat"]
        del weekly["sun"]

        with pytest.raises(MissingScheduleDay) as exc_info:
            HoursResolver().resolve_week(weekly, {}, pendulum.date(2024, 11, 27))

        assert exc_info.value.missing == ("sat", "sun")

    def test_missing_weekday_raises_even_when_overridden(self):
        """Validation happens before overrides are applied."""
        weekly = weekly_hours()
        del weekly["mon"]

        with pytest.raises(MissingScheduleDay):
            HoursResolver().resolve_week(weekly, {20241125: CLOSED}, pendulum.date(2024, 11, 27))


class TestFormatWeeklyDisplay:
    """Tests for HoursResolver.format_weekly_display."""

    def test_orders_days_monday_first(self):
        """API key order does not matter for the output order."""
        weekly = {
            "sun": CLOSED,
            "wed": open_day((9, 17)),
            "mon": open_day((0, 12)),
        }

        formatted = HoursResolver().format_weekly_display(weekly)

        assert [index for index, _ in formatted] == [0, 2, 6]

    def test_formats_period_times(self):
        """Period bounds become HH:MM strings."""
        formatted = HoursResolver().format_weekly_display({"mon": open_day((0, 9), (9.5, 17.75))})

        index, day = formatted[0]
        assert index == 0
        assert day == {
            "isOpen": True,
            "periods": [
                {"from": "00:00", "to": "09:00"},
                {"from": "09:30", "to": "17:45"},
            ],
        }

    def test_unknown_weekday_raises(self):
        """Unknown weekday codes are rejected."""
        with pytest.raises(UnknownWeekday):
            HoursResolver().format_weekly_display({"funday": CLOSED})
