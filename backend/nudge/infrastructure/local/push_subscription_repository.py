"""
SQLite implementation of push subscription repository.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import delete, select

from nudge.infrastructure.local.database import PushSubscriptionORM, get_session_factory
from nudge.interfaces.push_subscription_repository import IPushSubscriptionRepository
from nudge.models.push_subscription import (
    NotificationTimeSlot,
    PushSubscription,
    PushSubscriptionCreate,
    PushSubscriptionKeys,
)
from nudge.utils.datetime_utils import ensure_utc, now_utc


class SqlitePushSubscriptionRepository(IPushSubscriptionRepository):
    """SQLite implementation of push subscription repository."""

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or get_session_factory()

    def _orm_to_model(self, orm: PushSubscriptionORM) -> PushSubscription:
        return PushSubscription(
            id=UUID(orm.id),
            user_id=orm.user_id,
            endpoint=orm.endpoint,
            keys=PushSubscriptionKeys(p256dh=orm.p256dh or "", auth=orm.auth or ""),
            timezone=orm.timezone,
            notification_times=orm.notification_times or [],
            created_at=ensure_utc(orm.created_at),
            updated_at=ensure_utc(orm.updated_at),
        )

    async def _get_orm(self, session, endpoint: str) -> Optional[PushSubscriptionORM]:
        result = await session.execute(
            select(PushSubscriptionORM).where(PushSubscriptionORM.endpoint == endpoint)
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> list[PushSubscription]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(PushSubscriptionORM).order_by(PushSubscriptionORM.created_at)
            )
            return [self._orm_to_model(orm) for orm in result.scalars().all()]

    async def get_by_endpoint(self, endpoint: str) -> Optional[PushSubscription]:
        async with self._session_factory() as session:
            orm = await self._get_orm(session, endpoint)
            return self._orm_to_model(orm) if orm else None

    async def upsert(self, subscription: PushSubscriptionCreate) -> PushSubscription:
        times = [slot.model_dump() for slot in subscription.notification_times]
        async with self._session_factory() as session:
            orm = await self._get_orm(session, subscription.endpoint)
            now = now_utc()
            if orm:
                orm.user_id = subscription.user_id
                orm.p256dh = subscription.keys.p256dh
                orm.auth = subscription.keys.auth
                orm.notification_times = times
                orm.timezone = subscription.timezone
                orm.updated_at = now
            else:
                orm = PushSubscriptionORM(
                    id=str(uuid4()),
                    user_id=subscription.user_id,
                    endpoint=subscription.endpoint,
                    p256dh=subscription.keys.p256dh,
                    auth=subscription.keys.auth,
                    notification_times=times,
                    timezone=subscription.timezone,
                    created_at=now,
                    updated_at=now,
                )
                session.add(orm)
            await session.commit()
            await session.refresh(orm)
            return self._orm_to_model(orm)

    async def update_notification_times(
        self,
        endpoint: str,
        notification_times: list[NotificationTimeSlot],
    ) -> Optional[PushSubscription]:
        async with self._session_factory() as session:
            orm = await self._get_orm(session, endpoint)
            if not orm:
                return None
            orm.notification_times = [slot.model_dump() for slot in notification_times]
            orm.updated_at = now_utc()
            await session.commit()
            await session.refresh(orm)
            return self._orm_to_model(orm)

    async def delete(self, endpoint: str) -> bool:
        async with self._session_factory() as session:
            orm = await self._get_orm(session, endpoint)
            if not orm:
                return False
            await session.delete(orm)
            await session.commit()
            return True

    async def delete_all(self) -> int:
        async with self._session_factory() as session:
            result = await session.execute(delete(PushSubscriptionORM))
            await session.commit()
            return result.rowcount or 0
