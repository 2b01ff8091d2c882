"""
Core business logic for slicing opening hours into booking slots.

Pure domain logic without any external dependencies (no API calls, no I/O).
"""

from typing import Dict, List, Sequence

from .exceptions import InvalidConfiguration
from .models import Booking, Period, Slot


class SlotPlanner:
    """
    Plans the bookable slots of a single day.

    Algorithm:
    1. Walk each open period from its start in steps of the slot length
    2. Drop slots that have already started
    3. Mark a slot taken if any booking starts inside it
    4. Key slots by their ``HH:MM`` start so duplicates collapse
    """

    def plan_day(
        self,
        periods: Sequence[Period],
        duration_ms: int,
        day_start_epoch_ms: int,
        now_epoch_ms: int,
        bookings: Sequence[Booking],
        is_open: bool = True
    ) -> List[Slot]:
        """
        Produce the ordered slots for one day.

        Periods are processed in the order given. The last slot of a period
        starts before the period ends but may run past it.

        Args:
            periods: Open periods, milliseconds since midnight
            duration_ms: Slot length in milliseconds
            day_start_epoch_ms: Epoch milliseconds of the day's local midnight
            now_epoch_ms: Current epoch milliseconds
            bookings: Existing bookings for the day
            is_open: Whether the day is open at all

        Returns:
            Slots in period order, each flagged available or taken

        Raises:
            InvalidConfiguration: If ``duration_ms`` is not positive
        """
        if duration_ms <= 0:
            raise InvalidConfiguration(
                f"Slot duration must be greater than zero, got {duration_ms} ms"
            )

        if not is_open:
            return []

        now_offset = now_epoch_ms - day_start_epoch_ms
        slots: Dict[str, Slot] = {}

        for period in periods:
            cursor = period.start_ms

            while cursor < period.end_ms:
                next_cursor = cursor + duration_ms

                # Slots that started already are never offered
                if now_offset < cursor:
                    start_epoch = day_start_epoch_ms + cursor
                    end_epoch = day_start_epoch_ms + next_cursor

                    slot = Slot(
                        start_of_day_offset_ms=cursor,
                        start_epoch_ms=start_epoch,
                        duration_ms=duration_ms,
                        available=self._is_free(start_epoch, end_epoch, bookings),
                    )
                    slots[slot.start_label] = slot

                cursor = next_cursor

        return list(slots.values())

    @staticmethod
    def _is_free(start_epoch_ms: int, end_epoch_ms: int, bookings: Sequence[Booking]) -> bool:
        """True unless a booking time lies in ``[start, end)``."""
        for booking in bookings:
            if start_epoch_ms <= booking.time_ms < end_epoch_ms:
                return False
        return True
