"""
Daily schedule API endpoints.
"""

from datetime import date

from fastapi import APIRouter

from nudge.api.deps import CurrentUserId, ScheduleRepo
from nudge.models.schedule import DailySchedule, DailyScheduleUpdate

router = APIRouter()


@router.get("/{schedule_date}", response_model=DailySchedule)
async def get_schedule(
    schedule_date: date,
    user_id: CurrentUserId,
    schedule_repo: ScheduleRepo,
):
    """
    Get the schedule for a day. Days never planned return an empty schedule.
    """
    schedule = await schedule_repo.get_daily_schedule(user_id, schedule_date)
    if schedule is None:
        return DailySchedule(user_id=user_id, date=schedule_date)
    return schedule


@router.put("/{schedule_date}", response_model=DailySchedule)
async def put_schedule(
    schedule_date: date,
    update: DailyScheduleUpdate,
    user_id: CurrentUserId,
    schedule_repo: ScheduleRepo,
):
    """
    Replace the activities planned for a day.
    """
    return await schedule_repo.upsert(
        DailySchedule(user_id=user_id, date=schedule_date, activities=update.activities)
    )
