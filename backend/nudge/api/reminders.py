"""
Reminders API endpoints.

Reminders are synced in from an external list; completing one here marks it
as completed in the app so the next notification can mention it.
"""

from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from nudge.api.deps import AppSettings, CurrentUserId, ReminderRepo
from nudge.models.reminder import Reminder, ReminderSync, ReminderSyncResult
from nudge.utils.datetime_utils import is_valid_timezone

router = APIRouter()


@router.get("", response_model=list[Reminder])
async def list_reminders(
    user_id: CurrentUserId,
    reminder_repo: ReminderRepo,
    reminder_date: date = Query(..., alias="date"),
):
    """
    List reminders due on a day.
    """
    return await reminder_repo.get_reminders_for_date(user_id, reminder_date)


@router.post("/sync", response_model=ReminderSyncResult)
async def sync_reminders(
    reminders: list[ReminderSync],
    user_id: CurrentUserId,
    reminder_repo: ReminderRepo,
    settings: AppSettings,
    timezone: Optional[str] = Query(None, description="IANA timezone of the caller"),
):
    """
    Upsert reminders by title and due date.

    Due dates with an offset (e.g. toISOString() output) are stored as
    wall-clock time in the caller's timezone.
    """
    timezone = timezone or settings.DEFAULT_TIMEZONE
    if not is_valid_timezone(timezone):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown timezone: {timezone}",
        )
    return await reminder_repo.sync(user_id, reminders, timezone_name=timezone)


@router.post("/{reminder_id}/complete", response_model=Reminder)
async def complete_reminder(
    reminder_id: UUID,
    user_id: CurrentUserId,
    reminder_repo: ReminderRepo,
):
    """
    Mark a reminder as completed in the app.
    """
    reminder = await reminder_repo.set_completed(user_id, reminder_id, is_completed=True)
    if not reminder:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Reminder {reminder_id} not found",
        )
    return reminder
