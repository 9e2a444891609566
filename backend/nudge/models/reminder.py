"""
Reminder model definitions.

Reminders come from an external task list and are synced per day.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class Reminder(BaseModel):
    """Task reminder due on a given day."""

    id: UUID
    user_id: str
    title: str = Field(..., max_length=500)
    due_date: datetime = Field(..., description="Wall-clock due time in the user's timezone")
    is_completed: bool = False
    is_all_day: bool = False
    # Completed from inside the app, as opposed to only in the source list
    completed_in_app: bool = False
    synced_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ReminderSync(BaseModel):
    """One reminder as delivered by the external source."""

    title: str = Field(..., min_length=1, max_length=500)
    due_date: datetime
    is_completed: bool = False
    is_all_day: bool = False


class ReminderSyncResult(BaseModel):
    added: int = 0
    updated: int = 0
