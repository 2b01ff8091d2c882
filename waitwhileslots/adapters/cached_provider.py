"""
Time-boxed caching of raw Waitwhile responses.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Hashable, List, Protocol, Tuple

from ..domain.models import Booking, DateOverrideMap, HoursKind, WeeklyHours
from .payloads import BookingRequest, GuestRequest
from .waitwhile_client import (
    overrides_from_waitlist,
    parse_bookings,
    weekly_hours_from_waitlist,
)

logger = logging.getLogger(__name__)


class WaitwhileClientProtocol(Protocol):
    """Raw endpoints shared by the real and the mock client."""

    def get_waitlist(self) -> Dict[str, Any]: ...

    def get_all_waitlists(self) -> List[Dict[str, Any]]: ...

    def get_waitlist_status(self) -> Dict[str, Any]: ...

    def get_waiting_guests(self) -> List[Dict[str, Any]]: ...

    def get_bookings(self) -> List[Dict[str, Any]]: ...

    def get_bookings_from(self, from_time_ms: int = 0) -> List[Dict[str, Any]]: ...

    def get_resources(self) -> List[Dict[str, Any]]: ...

    def create_waiting_guest(self, guest: GuestRequest) -> Dict[str, Any]: ...

    def create_booking(self, booking: BookingRequest) -> Dict[str, Any]: ...

    def fetch_booking_slot_length_minutes(self) -> int: ...


class CachedScheduleProvider:
    """
    Wraps a Waitwhile client and caches its raw GET responses.

    The waitlist payload is fetched once per ``ttl_seconds`` and both the
    weekly hours and the date overrides are read from that one response.
    Bookings from a given time are always fetched fresh since they decide
    slot availability. A TTL of 0 turns caching off.
    """

    def __init__(
        self,
        client: WaitwhileClientProtocol,
        ttl_seconds: float = 300,
        clock: Callable[[], float] = time.monotonic
    ):
        self._client = client
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[Hashable, Tuple[float, Any]] = {}

    def _get_or_set(self, key: Hashable, loader: Callable[[], Any]) -> Any:
        now = self._clock()
        entry = self._entries.get(key)

        if entry is not None and entry[0] > now:
            logger.debug("Cache hit for %s", key)
            return entry[1]

        logger.debug("Cache miss for %s", key)
        value = loader()
        if self._ttl_seconds > 0:
            self._entries[key] = (now + self._ttl_seconds, value)
        return value

    def clear(self) -> None:
        """Drop all cached responses."""
        self._entries.clear()

    def get_waitlist(self) -> Dict[str, Any]:
        return self._get_or_set("waitlist", self._client.get_waitlist)

    def get_all_waitlists(self) -> List[Dict[str, Any]]:
        return self._get_or_set("all_waitlists", self._client.get_all_waitlists)

    def get_waitlist_status(self) -> Dict[str, Any]:
        return self._get_or_set("waitlist_status", self._client.get_waitlist_status)

    def get_waiting_guests(self) -> List[Dict[str, Any]]:
        return self._get_or_set("waiting_guests", self._client.get_waiting_guests)

    def get_bookings(self) -> List[Dict[str, Any]]:
        return self._get_or_set("bookings", self._client.get_bookings)

    def get_resources(self) -> List[Dict[str, Any]]:
        return self._get_or_set("resources", self._client.get_resources)

    def get_bookings_from(self, from_time_ms: int = 0) -> List[Dict[str, Any]]:
        return self._client.get_bookings_from(from_time_ms)

    def create_waiting_guest(self, guest: GuestRequest) -> Dict[str, Any]:
        """Add a guest; cached queue state is dropped."""
        response = self._client.create_waiting_guest(guest)
        self._entries.pop("waiting_guests", None)
        self._entries.pop("waitlist_status", None)
        return response

    def create_booking(self, booking: BookingRequest) -> Dict[str, Any]:
        """Book a slot; cached booking lists are dropped."""
        response = self._client.create_booking(booking)
        self._entries.pop("bookings", None)
        return response

    # Schedule data provider

    def fetch_waitlist_hours(self, kind: HoursKind) -> WeeklyHours:
        return weekly_hours_from_waitlist(self.get_waitlist(), kind)

    def fetch_hour_overrides(self, kind: HoursKind) -> DateOverrideMap:
        return overrides_from_waitlist(self.get_waitlist(), kind)

    def fetch_bookings_from(self, epoch_ms: int) -> List[Booking]:
        return parse_bookings(self.get_bookings_from(epoch_ms))

    def fetch_booking_slot_length_minutes(self) -> int:
        return self._client.fetch_booking_slot_length_minutes()
