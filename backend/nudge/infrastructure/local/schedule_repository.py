"""
SQLite implementation of schedule and completion repositories.
"""

from __future__ import annotations

from datetime import date
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import select

from nudge.infrastructure.local.database import (
    CompletionORM,
    DailyScheduleORM,
    get_session_factory,
)
from nudge.interfaces.schedule_repository import ICompletionRepository, IScheduleRepository
from nudge.models.enums import TimeBlock
from nudge.models.schedule import Completion, CompletionCreate, DailySchedule
from nudge.utils.datetime_utils import ensure_utc, now_utc


class SqliteScheduleRepository(IScheduleRepository):
    """SQLite implementation of daily schedule repository."""

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or get_session_factory()

    def _orm_to_model(self, orm: DailyScheduleORM) -> DailySchedule:
        return DailySchedule(
            user_id=orm.user_id,
            date=orm.date,
            activities=orm.activities or {},
            created_at=ensure_utc(orm.created_at),
            updated_at=ensure_utc(orm.updated_at),
        )

    async def get_daily_schedule(self, user_id: str, schedule_date: date) -> Optional[DailySchedule]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(DailyScheduleORM).where(
                    DailyScheduleORM.user_id == user_id,
                    DailyScheduleORM.date == schedule_date,
                )
            )
            orm = result.scalar_one_or_none()
            return self._orm_to_model(orm) if orm else None

    async def upsert(self, schedule: DailySchedule) -> DailySchedule:
        activities = {block.value: list(items) for block, items in schedule.activities.items()}
        async with self._session_factory() as session:
            result = await session.execute(
                select(DailyScheduleORM).where(
                    DailyScheduleORM.user_id == schedule.user_id,
                    DailyScheduleORM.date == schedule.date,
                )
            )
            orm = result.scalar_one_or_none()
            now = now_utc()
            if orm:
                orm.activities = activities
                orm.updated_at = now
            else:
                orm = DailyScheduleORM(
                    id=str(uuid4()),
                    user_id=schedule.user_id,
                    date=schedule.date,
                    activities=activities,
                    created_at=now,
                    updated_at=now,
                )
                session.add(orm)
            await session.commit()
            await session.refresh(orm)
            return self._orm_to_model(orm)


class SqliteCompletionRepository(ICompletionRepository):
    """SQLite implementation of completion repository."""

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or get_session_factory()

    def _orm_to_model(self, orm: CompletionORM) -> Completion:
        return Completion(
            id=UUID(orm.id),
            user_id=orm.user_id,
            date=orm.date,
            activity_id=orm.activity_id,
            time_block=TimeBlock(orm.time_block),
            completed_at=ensure_utc(orm.completed_at),
        )

    async def get_completions_for_date(self, user_id: str, completion_date: date) -> list[Completion]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(CompletionORM)
                .where(
                    CompletionORM.user_id == user_id,
                    CompletionORM.date == completion_date,
                )
                .order_by(CompletionORM.completed_at)
            )
            return [self._orm_to_model(orm) for orm in result.scalars().all()]

    async def create(self, user_id: str, completion: CompletionCreate) -> Completion:
        async with self._session_factory() as session:
            orm = CompletionORM(
                id=str(uuid4()),
                user_id=user_id,
                date=completion.date,
                activity_id=completion.activity_id,
                time_block=completion.time_block.value,
                completed_at=ensure_utc(completion.completed_at) or now_utc(),
            )
            session.add(orm)
            await session.commit()
            await session.refresh(orm)
            return self._orm_to_model(orm)

    async def delete(self, user_id: str, completion_id: UUID) -> bool:
        async with self._session_factory() as session:
            result = await session.execute(
                select(CompletionORM).where(
                    CompletionORM.id == str(completion_id),
                    CompletionORM.user_id == user_id,
                )
            )
            orm = result.scalar_one_or_none()
            if not orm:
                return False
            await session.delete(orm)
            await session.commit()
            return True
