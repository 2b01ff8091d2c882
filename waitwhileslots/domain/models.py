"""
Domain models for opening hours, bookings and booking slots.

All times of day are plain integers counting milliseconds since local
midnight, which is how Waitwhile encodes opening hours. Absolute instants
(booking times, slot starts) are milliseconds since the Unix epoch.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum, IntEnum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .exceptions import UnknownWeekday

MS_PER_MINUTE = 60 * 1000
MINUTES_PER_DAY = 24 * 60
MS_PER_DAY = MINUTES_PER_DAY * MS_PER_MINUTE


class Weekday(IntEnum):
    """Weekday codes used by Waitwhile, indexed Monday=0 to Sunday=6."""
    MON = 0
    TUE = 1
    WED = 2
    THU = 3
    FRI = 4
    SAT = 5
    SUN = 6

    @property
    def code(self) -> str:
        """Lowercase three-letter code as used in the API payload."""
        return self.name.lower()

    @classmethod
    def from_code(cls, code: str) -> "Weekday":
        """Map an API weekday code (``mon``..``sun``) to its enum member."""
        try:
            return cls[code.upper()]
        except KeyError:
            raise UnknownWeekday(f"Unknown weekday code: '{code}'") from None

    @classmethod
    def for_date(cls, day: date) -> "Weekday":
        """Weekday of a calendar date."""
        return cls(day.weekday())


WEEKDAY_CODES: Tuple[str, ...] = tuple(day.code for day in Weekday)


class HoursKind(str, Enum):
    """The three hour schedules a Waitwhile waitlist carries."""
    BUSINESS = "business"
    WAITLIST = "waitlist"
    BOOKING = "booking"

    @property
    def hours_key(self) -> str:
        """Waitlist payload key holding the weekly schedule."""
        return f"{self.value}Hours"

    @property
    def by_date_key(self) -> str:
        """Waitlist payload key holding the date overrides."""
        return f"{self.value}HoursByDate"


@dataclass(frozen=True)
class Period:
    """
    An open interval within a day, in milliseconds since midnight.

    Periods of one day are not checked for overlap; upstream data is trusted.
    """
    start_ms: int
    end_ms: int

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "Period":
        return cls(start_ms=int(data["from"]), end_ms=int(data["to"]))

    def __str__(self) -> str:
        return f"{ms_to_human(self.start_ms)} - {ms_to_human(self.end_ms)}"


@dataclass(frozen=True)
class DaySchedule:
    """Opening state and open periods for one day."""
    is_open: bool
    periods: Tuple[Period, ...] = ()

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "DaySchedule":
        periods = data.get("periods") or []
        return cls(
            is_open=bool(data.get("isOpen", False)),
            periods=tuple(Period.from_api(period) for period in periods),
        )

    def to_display(self) -> Dict[str, Any]:
        """Same shape as the API payload, with ``HH:MM`` period bounds."""
        return {
            "isOpen": self.is_open,
            "periods": [
                {"from": ms_to_human(p.start_ms), "to": ms_to_human(p.end_ms)}
                for p in self.periods
            ],
        }


# Weekday code -> schedule
WeeklyHours = Dict[str, DaySchedule]
# YYYYMMDD -> schedule
DateOverrideMap = Dict[int, DaySchedule]
AbsoluteWeek = Dict[int, DaySchedule]


@dataclass(frozen=True)
class Booking:
    """An existing booking. Only ``time_ms`` matters for availability."""
    time_ms: int
    id: Optional[str] = None

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "Booking":
        booking_id = data.get("_id", data.get("id"))
        return cls(
            time_ms=int(data["time"]),
            id=str(booking_id) if booking_id is not None else None,
        )


@dataclass(frozen=True)
class Slot:
    """A fixed-length bookable window derived from an open period."""
    start_of_day_offset_ms: int
    start_epoch_ms: int
    duration_ms: int
    available: bool

    @property
    def start_label(self) -> str:
        """Human start time (``HH:MM``), also the slot's key within a day."""
        return ms_to_human(self.start_of_day_offset_ms)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start": self.start_label,
            "start_unix_ms": self.start_of_day_offset_ms,
            "start_real_unix_ms": self.start_epoch_ms,
            "duration": self.duration_ms,
            "available": self.available,
        }


@dataclass(frozen=True)
class DayPlan:
    """Booking slots for one calendar date."""
    date: date
    is_open: bool
    slots: Tuple[Slot, ...] = ()

    @property
    def available_slots(self) -> List[Slot]:
        return [slot for slot in self.slots if slot.available]


def ms_to_human(value: int) -> str:
    """
    Format milliseconds since midnight as a 24-hour ``HH:MM`` string.

    Values wrap at 24 hours, so ``86_400_000`` renders as ``00:00``.
    """
    minutes = (int(value) // MS_PER_MINUTE) % MINUTES_PER_DAY
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def ms_to_minutes(value: int) -> int:
    """Convert milliseconds to whole minutes, rounding to nearest."""
    return int(round(value / MS_PER_MINUTE))


def date_key(day: date) -> int:
    """Integer ``YYYYMMDD`` key for a calendar date."""
    return day.year * 10000 + day.month * 100 + day.day


def parse_weekly_hours(data: Mapping[str, Any]) -> WeeklyHours:
    """Parse the API's weekday-keyed hours mapping."""
    return {code: DaySchedule.from_api(value) for code, value in data.items()}


def parse_hour_overrides(data: Optional[Mapping[str, Any]]) -> DateOverrideMap:
    """
    Parse the API's date-keyed overrides.

    JSON object keys arrive as strings (``"20241224"``); they become ints.
    """
    if not data:
        return {}
    return {int(key): DaySchedule.from_api(value) for key, value in data.items()}
