"""
Tests for the ScheduleService orchestration layer.
"""

from typing import Dict, List

import pendulum
import pytest

from waitwhileslots.domain.exceptions import InvalidConfiguration
from waitwhileslots.domain.models import Booking, HoursKind
from waitwhileslots.services.schedule_service import ScheduleService

from .helpers import CLOSED, HALF_HOUR, HOUR, open_day, weekly_hours

TZ = "Europe/Berlin"


class StubProvider:
    """Minimal stub matching ScheduleDataProvider."""

    def __init__(self, weekly, overrides=None, bookings=None, booking_length=30):
        self._weekly = weekly
        self._overrides = overrides or {}
        self._bookings = bookings or []
        self._booking_length = booking_length
        self.calls: List[Dict[str, object]] = []

    def fetch_waitlist_hours(self, kind):
        self.calls.append({"call": "hours", "kind": kind})
        return self._weekly

    def fetch_hour_overrides(self, kind):
        self.calls.append({"call": "overrides", "kind": kind})
        return self._overrides

    def fetch_bookings_from(self, epoch_ms):
        self.calls.append({"call": "bookings", "from": epoch_ms})
        return [b for b in self._bookings if b.time_ms >= epoch_ms]

    def fetch_booking_slot_length_minutes(self):
        return self._booking_length


def _day_start_ms(year, month, day):
    return int(pendulum.datetime(year, month, day, tz=TZ).timestamp() * 1000)


WEDNESDAY_MORNING = pendulum.datetime(2024, 11, 27, 8, 0, tz=TZ)


def _build_service(**kwargs) -> ScheduleService:
    provider = StubProvider(
        weekly=kwargs.pop("weekly", weekly_hours(sun=CLOSED)),
        overrides=kwargs.pop("overrides", {20241128: open_day((12, 13)), 20241224: CLOSED}),
        **kwargs
    )
    return ScheduleService(provider=provider, timezone=TZ)


class TestAbsoluteHours:
    """Tests for ScheduleService.get_absolute_hours."""

    def test_uses_requested_kind(self):
        """Provider calls carry the requested hours kind."""
        service = _build_service()

        absolute = service.get_absolute_hours(HoursKind.BUSINESS, today=pendulum.date(2024, 11, 27))

        assert absolute[20241128] == open_day((12, 13))
        assert 20241224 in absolute
        assert {c["kind"] for c in service._provider.calls} == {HoursKind.BUSINESS}

    def test_weekly_display(self):
        """Weekly display is Monday first with HH:MM strings."""
        service = _build_service()

        display = service.get_weekly_display(HoursKind.WAITLIST)

        assert display[0] == (0, {"isOpen": True, "periods": [{"from": "09:00", "to": "11:00"}]})
        assert display[6] == (6, {"isOpen": False, "periods": []})


class TestBookingSlots:
    """Tests for ScheduleService.get_booking_slots_for_date."""

    def test_day_in_week_uses_weekly_hours(self):
        """A plain day in the current week uses its weekday schedule."""
        day_start = _day_start_ms(2024, 11, 29)
        service = _build_service(bookings=[Booking(time_ms=day_start + 10 * HOUR)])

        plan = service.get_booking_slots_for_date(pendulum.date(2024, 11, 29), now=WEDNESDAY_MORNING)

        assert plan.is_open
        assert [(s.start_label, s.available) for s in plan.slots] == [
            ("09:00", True),
            ("09:30", True),
            ("10:00", False),
            ("10:30", True),
        ]
        assert plan.slots[0].start_epoch_ms == day_start + 9 * HOUR

    def test_override_in_week_wins(self):
        """Special hours replace the weekday schedule."""
        service = _build_service()

        plan = service.get_booking_slots_for_date(pendulum.date(2024, 11, 28), now=WEDNESDAY_MORNING)

        assert [s.start_label for s in plan.slots] == ["12:00", "12:30"]

    def test_override_outside_week_is_used(self):
        """Override dates beyond the current week are found too."""
        service = _build_service()

        plan = service.get_booking_slots_for_date(pendulum.date(2024, 12, 24), now=WEDNESDAY_MORNING)

        assert not plan.is_open
        assert plan.slots == ()

    def test_day_outside_week_falls_back_to_weekly_pattern(self):
        """Days of other weeks without override use the weekday schedule."""
        service = _build_service(weekly=weekly_hours(tue=open_day((14, 15))))

        plan = service.get_booking_slots_for_date(pendulum.date(2024, 12, 3), now=WEDNESDAY_MORNING)

        assert [s.start_label for s in plan.slots] == ["14:00", "14:30"]

    def test_closed_day(self):
        """Closed days report is_open False and no slots."""
        service = _build_service()

        plan = service.get_booking_slots_for_date(pendulum.date(2024, 12, 1), now=WEDNESDAY_MORNING)

        assert not plan.is_open
        assert plan.slots == ()

    def test_today_hides_started_slots(self):
        """Slots already started today are left out."""
        service = _build_service()
        now = pendulum.datetime(2024, 11, 27, 10, 0, tz=TZ)

        plan = service.get_booking_slots_for_date(pendulum.date(2024, 11, 27), now=now)

        assert [s.start_label for s in plan.slots] == ["10:30"]

    def test_bookings_fetched_from_day_start(self):
        """Bookings are requested from the local midnight of the date."""
        service = _build_service()

        service.get_booking_slots_for_date(pendulum.date(2024, 11, 29), now=WEDNESDAY_MORNING)

        booking_calls = [c for c in service._provider.calls if c["call"] == "bookings"]
        assert booking_calls == [{"call": "bookings", "from": _day_start_ms(2024, 11, 29)}]

    def test_slot_length_from_provider(self):
        """Slot length comes from the provider's booking length."""
        service = _build_service(booking_length=60)

        plan = service.get_booking_slots_for_date(pendulum.date(2024, 11, 29), now=WEDNESDAY_MORNING)

        assert [s.start_label for s in plan.slots] == ["09:00", "10:00"]
        assert plan.slots[0].duration_ms == 2 * HALF_HOUR

    def test_invalid_booking_length_raises(self):
        """A zero booking length is a configuration error."""
        service = _build_service(booking_length=0)

        with pytest.raises(InvalidConfiguration):
            service.get_booking_slots_for_date(pendulum.date(2024, 11, 29), now=WEDNESDAY_MORNING)
