"""
SQLite implementation of reminder repository.
"""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional
from uuid import UUID, uuid4
from zoneinfo import ZoneInfo

from sqlalchemy import select

from nudge.infrastructure.local.database import ReminderORM, get_session_factory
from nudge.interfaces.reminder_repository import IReminderRepository
from nudge.models.reminder import Reminder, ReminderSync, ReminderSyncResult
from nudge.utils.datetime_utils import UTC, ensure_utc, get_zone, now_utc


def _wall_clock(dt: datetime, zone: Optional[ZoneInfo]) -> datetime:
    # Due dates are stored as naive wall-clock time in the user's zone
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(zone or UTC).replace(tzinfo=None)


class SqliteReminderRepository(IReminderRepository):
    """SQLite implementation of reminder repository."""

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or get_session_factory()

    def _orm_to_model(self, orm: ReminderORM) -> Reminder:
        return Reminder(
            id=UUID(orm.id),
            user_id=orm.user_id,
            title=orm.title,
            due_date=orm.due_date,
            is_completed=bool(orm.is_completed),
            is_all_day=bool(orm.is_all_day),
            completed_in_app=bool(orm.completed_in_app),
            synced_at=ensure_utc(orm.synced_at),
        )

    async def get_reminders_for_date(self, user_id: str, reminder_date: date) -> list[Reminder]:
        start = datetime.combine(reminder_date, time.min)
        end = datetime.combine(reminder_date, time.max)
        async with self._session_factory() as session:
            result = await session.execute(
                select(ReminderORM)
                .where(
                    ReminderORM.user_id == user_id,
                    ReminderORM.due_date >= start,
                    ReminderORM.due_date <= end,
                )
                .order_by(ReminderORM.due_date)
            )
            return [self._orm_to_model(orm) for orm in result.scalars().all()]

    async def sync(
        self,
        user_id: str,
        reminders: list[ReminderSync],
        timezone_name: Optional[str] = None,
    ) -> ReminderSyncResult:
        zone = get_zone(timezone_name) if timezone_name else None
        added = 0
        updated = 0
        async with self._session_factory() as session:
            now = now_utc()
            for item in reminders:
                due = _wall_clock(item.due_date, zone)
                result = await session.execute(
                    select(ReminderORM).where(
                        ReminderORM.user_id == user_id,
                        ReminderORM.title == item.title,
                        ReminderORM.due_date == due,
                    )
                )
                orm = result.scalar_one_or_none()
                if orm:
                    # Keep an in-app completion even if the source still shows it open
                    if not orm.completed_in_app:
                        orm.is_completed = item.is_completed
                    orm.is_all_day = item.is_all_day
                    orm.synced_at = now
                    updated += 1
                else:
                    session.add(
                        ReminderORM(
                            id=str(uuid4()),
                            user_id=user_id,
                            title=item.title,
                            due_date=due,
                            is_completed=item.is_completed,
                            is_all_day=item.is_all_day,
                            completed_in_app=False,
                            synced_at=now,
                        )
                    )
                    added += 1
            await session.commit()
        return ReminderSyncResult(added=added, updated=updated)

    async def set_completed(
        self,
        user_id: str,
        reminder_id: UUID,
        is_completed: bool = True,
    ) -> Optional[Reminder]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(ReminderORM).where(
                    ReminderORM.id == str(reminder_id),
                    ReminderORM.user_id == user_id,
                )
            )
            orm = result.scalar_one_or_none()
            if not orm:
                return None
            orm.is_completed = is_completed
            orm.completed_in_app = is_completed
            await session.commit()
            await session.refresh(orm)
            return self._orm_to_model(orm)
