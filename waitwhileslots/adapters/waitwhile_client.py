"""
Waitwhile REST API client for fetching waitlist, hours and booking data.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from .. import __version__
from ..domain.exceptions import ScheduleError, WaitwhileAPIError
from ..domain.models import (
    Booking,
    DateOverrideMap,
    HoursKind,
    WeeklyHours,
    parse_hour_overrides,
    parse_weekly_hours,
)
from .payloads import BookingRequest, GuestRequest

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = "Received an invalid response from the Waitwhile API"


class WaitwhileClient:
    """
    Client for the Waitwhile v1 API.

    Authenticates with the ``apiKey`` header. Besides the raw endpoints it
    implements the schedule data provider used by ``ScheduleService``.
    """

    def __init__(
        self,
        api_key: str,
        waitlist_id: str,
        base_url: str = "https://api.waitwhile.com/v1/",
        booking_length_minutes: int = 30,
        timeout: float = 30,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the Waitwhile API client.

        Args:
            api_key: Waitwhile API key
            waitlist_id: Waitlist all waitlist-scoped calls refer to
            base_url: API root, ending with a slash
            booking_length_minutes: Length of one booking slot
            timeout: Request timeout in seconds
            session: Optional preconfigured requests session
        """
        self.waitlist_id = waitlist_id
        self.base_url = base_url
        self.booking_length_minutes = booking_length_minutes
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "User-Agent": f"waitwhileslots/{__version__} {requests.utils.default_user_agent()}",
            "apiKey": api_key,
        })

    def _request(
        self,
        endpoint: str,
        method: str = "GET",
        data: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None
    ) -> Any:
        """
        Perform an API call and decode the JSON body.

        Raises:
            WaitwhileAPIError: On transport errors, error statuses or bodies
                that are not JSON
        """
        url = f"{self.base_url}{endpoint}"
        logger.debug("%s %s params=%s", method, url, params)

        try:
            response = self.session.request(
                method,
                url,
                data=data,
                params=params,
                timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            raise WaitwhileAPIError(f"{DEFAULT_ERROR_MESSAGE}: {e}") from e

        if not response.ok:
            raise WaitwhileAPIError(
                self._error_message(response),
                status_code=response.status_code
            )

        try:
            return response.json()
        except ValueError as e:
            raise WaitwhileAPIError(DEFAULT_ERROR_MESSAGE, status_code=response.status_code) from e

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        """Use the API's own ``message`` when the error body carries one."""
        try:
            body = response.json()
        except ValueError:
            return DEFAULT_ERROR_MESSAGE

        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return DEFAULT_ERROR_MESSAGE

    def _waitlist_endpoint(self, suffix: str = "") -> str:
        return f"waitlists/{self.waitlist_id}{suffix}"

    def get_waitlist(self) -> Dict[str, Any]:
        return self._request(self._waitlist_endpoint())

    def get_all_waitlists(self) -> List[Dict[str, Any]]:
        return self._request("waitlists")

    def get_waitlist_status(self) -> Dict[str, Any]:
        return self._request(self._waitlist_endpoint("/status"))

    def get_waiting_guests(self) -> List[Dict[str, Any]]:
        return self._request(self._waitlist_endpoint("/waiting"))

    def get_bookings(self) -> List[Dict[str, Any]]:
        return self._request(self._waitlist_endpoint("/bookings"))

    def get_bookings_from(self, from_time_ms: int = 0) -> List[Dict[str, Any]]:
        """Bookings starting at or after ``from_time_ms`` (epoch ms)."""
        return self._request(
            self._waitlist_endpoint("/bookings"),
            params={"fromTime": from_time_ms}
        )

    def get_resources(self) -> List[Dict[str, Any]]:
        return self._request("resources")

    def create_waiting_guest(self, guest: GuestRequest) -> Dict[str, Any]:
        """Add a guest to the waitlist queue."""
        return self._request(
            self._waitlist_endpoint("/guests"),
            method="POST",
            data=guest.to_payload()
        )

    def create_booking(self, booking: BookingRequest) -> Dict[str, Any]:
        """Book a guest into a time slot."""
        return self._request(
            self._waitlist_endpoint("/bookings"),
            method="POST",
            data=booking.to_payload()
        )

    def test_connection(self) -> Dict[str, Any]:
        """
        Test the API key by fetching the configured waitlist.

        Raises:
            WaitwhileAPIError: If the call fails
        """
        return self.get_waitlist()

    # Schedule data provider

    def fetch_waitlist_hours(self, kind: HoursKind) -> WeeklyHours:
        """Weekly hours of the given kind, keyed by weekday code."""
        return weekly_hours_from_waitlist(self.get_waitlist(), kind)

    def fetch_hour_overrides(self, kind: HoursKind) -> DateOverrideMap:
        """Date overrides of the given kind, keyed by ``YYYYMMDD``."""
        return overrides_from_waitlist(self.get_waitlist(), kind)

    def fetch_bookings_from(self, epoch_ms: int) -> List[Booking]:
        return parse_bookings(self.get_bookings_from(epoch_ms))

    def fetch_booking_slot_length_minutes(self) -> int:
        return self.booking_length_minutes


def weekly_hours_from_waitlist(waitlist: Dict[str, Any], kind: HoursKind) -> WeeklyHours:
    """
    Pull the weekly hours of one kind out of a waitlist payload.

    Raises:
        ScheduleError: If the payload has no usable hours of that kind
    """
    try:
        return parse_weekly_hours(waitlist[kind.hours_key])
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise ScheduleError(
            f"Waitlist payload has no usable '{kind.hours_key}': {e}"
        ) from e


def overrides_from_waitlist(waitlist: Dict[str, Any], kind: HoursKind) -> DateOverrideMap:
    """Pull the date overrides of one kind out of a waitlist payload."""
    try:
        return parse_hour_overrides(waitlist.get(kind.by_date_key))
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise ScheduleError(
            f"Waitlist payload has no usable '{kind.by_date_key}': {e}"
        ) from e


def parse_bookings(items: Any) -> List[Booking]:
    """
    Convert raw booking dicts to ``Booking`` objects.

    Entries without a usable ``time`` are skipped with a warning.
    """
    bookings: List[Booking] = []

    for item in items or []:
        try:
            bookings.append(Booking.from_api(item))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Could not parse booking %r: %s", item, e)
            continue

    return bookings
