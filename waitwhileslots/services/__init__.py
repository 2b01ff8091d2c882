"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .schedule_service import ScheduleDataProvider, ScheduleService

__all__ = ["ScheduleDataProvider", "ScheduleService"]
