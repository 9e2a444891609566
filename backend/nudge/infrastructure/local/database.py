"""
SQLite database configuration and ORM models.

This module defines the SQLAlchemy ORM models and database initialization.
"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from nudge.core.config import get_settings


class Base(DeclarativeBase):
    """SQLAlchemy declarative base."""

    pass


# ===========================================
# ORM Models
# ===========================================


class DailyScheduleORM(Base):
    """Daily schedule ORM model."""

    __tablename__ = "daily_schedules"
    __table_args__ = (UniqueConstraint("user_id", "date", name="uq_daily_schedules_user_date"),)

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id = Column(String(255), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    activities = Column(JSON, nullable=False, default=dict)  # {time_block: [activity_id]}
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class CompletionORM(Base):
    """Completion ORM model."""

    __tablename__ = "completions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id = Column(String(255), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    activity_id = Column(String(200), nullable=False)
    time_block = Column(String(20), nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=False)


class ReminderORM(Base):
    """Reminder ORM model."""

    __tablename__ = "reminders"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id = Column(String(255), nullable=False, index=True)
    title = Column(String(500), nullable=False)
    due_date = Column(DateTime, nullable=False, index=True)  # wall-clock, user's timezone
    is_completed = Column(Boolean, default=False)
    is_all_day = Column(Boolean, default=False)
    completed_in_app = Column(Boolean, default=False)
    synced_at = Column(DateTime(timezone=True), nullable=True)


class PushSubscriptionORM(Base):
    """Push subscription ORM model."""

    __tablename__ = "push_subscriptions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id = Column(String(255), nullable=False, index=True)
    endpoint = Column(Text, nullable=False, unique=True)
    p256dh = Column(Text, nullable=False, default="")
    auth = Column(Text, nullable=False, default="")
    notification_times = Column(JSON, nullable=False, default=list)  # [{hour, minute}]
    timezone = Column(String(64), nullable=False)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow)


# ===========================================
# Engine / Session
# ===========================================

_engine = None


def get_engine():
    """Get async engine instance."""
    global _engine
    if _engine is None:
        settings = get_settings()
        _engine = create_async_engine(settings.DATABASE_URL, echo=settings.DEBUG)
    return _engine


def get_session_factory():
    """Get async session factory."""
    engine = get_engine()
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_db():
    """Initialize database tables."""
    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

