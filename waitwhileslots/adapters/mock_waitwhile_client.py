"""
Mock Waitwhile API client for trying the tool without an API key.
"""

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional

import pendulum

from ..domain.models import (
    Booking,
    DateOverrideMap,
    HoursKind,
    WeeklyHours,
    date_key,
)
from .payloads import BookingRequest, GuestRequest
from .waitwhile_client import (
    overrides_from_waitlist,
    parse_bookings,
    weekly_hours_from_waitlist,
)

logger = logging.getLogger(__name__)


class MockWaitwhileClient:
    """
    Mock client that simulates Waitwhile API responses.

    Loads a sample waitlist from mock_waitlist_data.json. Overrides and
    bookings in that file are stored relative to today so the data never
    goes stale; they are anchored to real dates when the client is built.
    """

    def __init__(
        self,
        booking_length_minutes: int = 30,
        timezone: str = "Europe/Berlin",
        today: Optional[date] = None,
        data_file: Optional[Path] = None
    ):
        """
        Initialize the mock client.

        Args:
            booking_length_minutes: Length of one booking slot
            timezone: IANA timezone the relative data is anchored in
            today: Anchor date, defaults to today in ``timezone``
            data_file: Alternative JSON file with the same layout
        """
        self.booking_length_minutes = booking_length_minutes
        self.timezone = timezone
        self.today = today or pendulum.today(timezone).date()
        self.data_file = data_file or Path(__file__).parent / "mock_waitlist_data.json"
        self.created_guests: List[Dict[str, Any]] = []
        self.created_bookings: List[Dict[str, Any]] = []
        self._load_waitlist_data()

    def _load_waitlist_data(self) -> None:
        """Load mock data from the JSON file."""
        if self.data_file.exists():
            with open(self.data_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        else:
            logger.warning("Mock data file %s not found, using an empty waitlist", self.data_file)
            data = {}

        anchor = pendulum.datetime(
            self.today.year, self.today.month, self.today.day, tz=self.timezone
        )

        self.waitlist: Dict[str, Any] = dict(data.get("waitlist", {}))
        for kind in HoursKind:
            self.waitlist.setdefault(kind.by_date_key, {})

        for override in data.get("relativeOverrides", []):
            day = anchor.add(days=override["daysFromToday"])
            kind = HoursKind(override["kind"])
            self.waitlist[kind.by_date_key][str(date_key(day))] = {
                "isOpen": override["isOpen"],
                "periods": override["periods"],
            }

        self.bookings: List[Dict[str, Any]] = []
        for booking in data.get("relativeBookings", []):
            day_start = anchor.add(days=booking["daysFromToday"])
            entry = {
                key: value for key, value in booking.items()
                if key not in ("daysFromToday", "timeOfDayMs")
            }
            entry["time"] = int(day_start.timestamp() * 1000) + booking["timeOfDayMs"]
            self.bookings.append(entry)

    def get_waitlist(self) -> Dict[str, Any]:
        return self.waitlist

    def get_all_waitlists(self) -> List[Dict[str, Any]]:
        return [self.waitlist]

    def get_waitlist_status(self) -> Dict[str, Any]:
        return {"isOpen": True, "numWaiting": len(self.created_guests)}

    def get_waiting_guests(self) -> List[Dict[str, Any]]:
        return list(self.created_guests)

    def get_bookings(self) -> List[Dict[str, Any]]:
        return list(self.bookings)

    def get_bookings_from(self, from_time_ms: int = 0) -> List[Dict[str, Any]]:
        return [b for b in self.bookings if b["time"] >= from_time_ms]

    def get_resources(self) -> List[Dict[str, Any]]:
        return []

    def create_waiting_guest(self, guest: GuestRequest) -> Dict[str, Any]:
        entry = {"_id": f"mock-guest-{len(self.created_guests) + 1}", **guest.to_payload()}
        self.created_guests.append(entry)
        return entry

    def create_booking(self, booking: BookingRequest) -> Dict[str, Any]:
        entry = {"_id": f"mock-booking-new-{len(self.created_bookings) + 1}", **booking.to_payload()}
        self.created_bookings.append(entry)
        self.bookings.append(entry)
        return entry

    def test_connection(self) -> Dict[str, Any]:
        """Mock connection test."""
        return self.waitlist

    def fetch_waitlist_hours(self, kind: HoursKind) -> WeeklyHours:
        return weekly_hours_from_waitlist(self.waitlist, kind)

    def fetch_hour_overrides(self, kind: HoursKind) -> DateOverrideMap:
        return overrides_from_waitlist(self.waitlist, kind)

    def fetch_bookings_from(self, epoch_ms: int) -> List[Booking]:
        return parse_bookings(self.get_bookings_from(epoch_ms))

    def fetch_booking_slot_length_minutes(self) -> int:
        return self.booking_length_minutes
