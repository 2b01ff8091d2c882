"""
Tests for the mock Waitwhile client.
"""

import pendulum

from waitwhileslots.adapters.mock_waitwhile_client import MockWaitwhileClient
from waitwhileslots.adapters.payloads import GuestRequest
from waitwhileslots.domain.models import HoursKind, WEEKDAY_CODES

TODAY = pendulum.date(2024, 11, 25)


class TestMockWaitwhileClient:
    """Tests for MockWaitwhileClient."""

    def test_weekly_hours_cover_all_days(self):
        """The sample data has every weekday for every kind."""
        client = MockWaitwhileClient(today=TODAY)

        for kind in HoursKind:
            assert set(client.fetch_waitlist_hours(kind)) == set(WEEKDAY_CODES)

    def test_relative_overrides_are_anchored(self):
        """Relative overrides land on real dates."""
        client = MockWaitwhileClient(today=TODAY)

        overrides = client.fetch_hour_overrides(HoursKind.WAITLIST)

        assert set(overrides) == {20241128, 20241205}
        assert not overrides[20241205].is_open

    def test_bookings_are_anchored_to_today(self):
        """Relative bookings become epoch times after local midnight."""
        client = MockWaitwhileClient(today=TODAY, timezone="Europe/Berlin")
        midnight = int(pendulum.datetime(2024, 11, 25, tz="Europe/Berlin").timestamp() * 1000)

        bookings = client.fetch_bookings_from(midnight)

        assert len(bookings) == 4
        assert bookings[0].time_ms == midnight + 55800000

    def test_bookings_from_filters_by_time(self):
        """Only bookings at or after the given time are returned."""
        client = MockWaitwhileClient(today=TODAY)
        tomorrow = int(pendulum.datetime(2024, 11, 26, tz="Europe/Berlin").timestamp() * 1000)

        assert len(client.get_bookings_from(tomorrow)) == 3

    def test_created_guests_are_waiting(self):
        """Guests added through the mock show up as waiting."""
        client = MockWaitwhileClient(today=TODAY)

        response = client.create_waiting_guest(GuestRequest(name="Max"))

        assert response["name"] == "Max"
        assert response["state"] == "waiting"
        assert client.get_waiting_guests() == [response]
        assert client.get_waitlist_status()["numWaiting"] == 1
