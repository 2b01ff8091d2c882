"""
Domain layer - Pure business logic without external dependencies.
"""

from .exceptions import (
    ApiKeyError,
    InvalidConfiguration,
    MissingScheduleDay,
    ScheduleError,
    UnknownWeekday,
    WaitwhileAPIError,
    WaitwhileError,
)
from .hours_resolver import HoursResolver
from .models import Booking, DayPlan, DaySchedule, HoursKind, Period, Slot, Weekday
from .slot_planner import SlotPlanner

__all__ = [
    "ApiKeyError",
    "Booking",
    "DayPlan",
    "DaySchedule",
    "HoursKind",
    "HoursResolver",
    "InvalidConfiguration",
    "MissingScheduleDay",
    "Period",
    "ScheduleError",
    "Slot",
    "SlotPlanner",
    "UnknownWeekday",
    "WaitwhileAPIError",
    "WaitwhileError",
    "Weekday",
]
