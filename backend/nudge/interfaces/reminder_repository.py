"""
Reminder repository interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional
from uuid import UUID

from nudge.models.reminder import Reminder, ReminderSync, ReminderSyncResult


class IReminderRepository(ABC):
    """Abstract interface for reminder persistence."""

    @abstractmethod
    async def get_reminders_for_date(self, user_id: str, reminder_date: date) -> list[Reminder]:
        """List reminders due on a date."""
        pass

    @abstractmethod
    async def sync(
        self,
        user_id: str,
        reminders: list[ReminderSync],
        timezone_name: Optional[str] = None,
    ) -> ReminderSyncResult:
        """
        Upsert reminders from the external source (matched by title and due date).

        Aware due dates are converted to wall-clock time in ``timezone_name``
        (UTC when omitted); naive ones are stored as given.

        Raises:
            ValueError: If ``timezone_name`` is unknown.
        """
        pass

    @abstractmethod
    async def set_completed(
        self,
        user_id: str,
        reminder_id: UUID,
        is_completed: bool = True,
    ) -> Optional[Reminder]:
        """Toggle completion from inside the app."""
        pass
