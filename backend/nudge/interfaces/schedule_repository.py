"""
Schedule and completion repository interfaces.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional
from uuid import UUID

from nudge.models.schedule import Completion, CompletionCreate, DailySchedule


class IScheduleRepository(ABC):
    """Abstract interface for daily schedule persistence."""

    @abstractmethod
    async def get_daily_schedule(self, user_id: str, schedule_date: date) -> Optional[DailySchedule]:
        """Get the schedule for a date, or None if nothing was planned."""
        pass

    @abstractmethod
    async def upsert(self, schedule: DailySchedule) -> DailySchedule:
        """Create or replace the schedule for ``schedule.date``."""
        pass


class ICompletionRepository(ABC):
    """Abstract interface for completion persistence."""

    @abstractmethod
    async def get_completions_for_date(self, user_id: str, completion_date: date) -> list[Completion]:
        """List completions logged for a date."""
        pass

    @abstractmethod
    async def create(self, user_id: str, completion: CompletionCreate) -> Completion:
        """Log a completion."""
        pass

    @abstractmethod
    async def delete(self, user_id: str, completion_id: UUID) -> bool:
        """Remove a completion (un-check an activity)."""
        pass
