"""
Integration tests for a full delivery pass over real SQLite repositories.
"""

import random
from datetime import date, datetime, timezone

import pytest
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import sessionmaker

from nudge.core.config import PushDeliveryConfig
from nudge.infrastructure.local.activity_catalog import StaticActivityCatalog
from nudge.infrastructure.local.push_subscription_repository import SqlitePushSubscriptionRepository
from nudge.infrastructure.local.reminder_repository import SqliteReminderRepository
from nudge.infrastructure.local.schedule_repository import (
    SqliteCompletionRepository,
    SqliteScheduleRepository,
)
from nudge.models.enums import TimeBlock
from nudge.models.push_subscription import (
    NotificationTimeSlot,
    PushSendResult,
    PushSubscriptionCreate,
    PushSubscriptionKeys,
)
from nudge.models.reminder import ReminderSync
from nudge.models.schedule import CompletionCreate, DailySchedule
from nudge.services.notification_composer import NotificationComposer
from nudge.services.notification_message_service import NotificationMessageGenerator
from nudge.services.push_dispatcher import PushDispatcher

# 16:30 UTC is 08:30 in Los Angeles on 2026-03-02 (PST)
PASS_TIME = datetime(2026, 3, 2, 16, 30, 5, tzinfo=timezone.utc)
LOCAL_DAY = date(2026, 3, 2)


class RecordingTransport:
    def __init__(self, gone=()):
        self.gone = set(gone)
        self.calls = []

    async def send(self, subscription, payload, ttl_seconds, urgency):
        self.calls.append((subscription.endpoint, payload))
        if subscription.endpoint in self.gone:
            return PushSendResult(success=False, status_code=410, message="Gone")
        return PushSendResult(success=True, status_code=201)


@pytest.fixture
def factory(db_engine):
    return sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def repos(factory):
    return {
        "subscriptions": SqlitePushSubscriptionRepository(factory),
        "schedules": SqliteScheduleRepository(factory),
        "completions": SqliteCompletionRepository(factory),
        "reminders": SqliteReminderRepository(factory),
    }


@pytest.fixture
def composer(repos):
    return NotificationComposer(
        schedule_repo=repos["schedules"],
        completion_repo=repos["completions"],
        reminder_repo=repos["reminders"],
        activity_catalog=StaticActivityCatalog(base={"meditate": "Meditation", "walk": "Walk"}),
        message_generator=NotificationMessageGenerator(rng=random.Random(3)),
    )


def _dispatcher(repos, composer, transport):
    return PushDispatcher(
        subscription_repo=repos["subscriptions"],
        composer=composer,
        transport=transport,
        config=PushDeliveryConfig(
            vapid_public_key="pub",
            vapid_private_key="priv",
            vapid_subject="mailto:test@example.com",
            # In-memory SQLite shares one connection
            max_concurrency=1,
        ),
    )


async def _subscribe(repos, endpoint, times=((8, 30),), tz="America/Los_Angeles"):
    await repos["subscriptions"].upsert(
        PushSubscriptionCreate(
            user_id="user-1",
            endpoint=endpoint,
            keys=PushSubscriptionKeys(p256dh="p", auth="a"),
            timezone=tz,
            notification_times=[NotificationTimeSlot(hour=h, minute=m) for h, m in times],
        )
    )


async def _seed_morning(repos):
    await repos["schedules"].upsert(
        DailySchedule(
            user_id="user-1",
            date=LOCAL_DAY,
            activities={TimeBlock.BEFORE_9AM: ["meditate"], TimeBlock.BEFORE_NOON: ["walk"]},
        )
    )
    await repos["completions"].create(
        "user-1",
        CompletionCreate(
            date=LOCAL_DAY,
            activity_id="meditate",
            time_block=TimeBlock.BEFORE_9AM,
            completed_at=datetime(2026, 3, 2, 16, 0, tzinfo=timezone.utc),
        ),
    )


@pytest.mark.asyncio
async def test_pass_sends_upcoming_summary(repos, composer):
    await _seed_morning(repos)
    await _subscribe(repos, "https://push.example.com/phone")
    await _subscribe(repos, "https://push.example.com/laptop", times=((9, 0),))
    transport = RecordingTransport()

    result = await _dispatcher(repos, composer, transport).run_delivery_pass(PASS_TIME)

    assert (result.checked, result.sent, result.failed, result.skipped) == (2, 1, 0, 1)
    endpoint, payload = transport.calls[0]
    assert endpoint == "https://push.example.com/phone"
    # Server pass has no last-notification time, so no "done!" title
    assert '"title":"Morning complete!"' in payload
    assert '"body":"Coming up in Late Morning: Walk"' in payload


@pytest.mark.asyncio
async def test_gone_endpoint_removed_before_next_pass(repos, composer):
    await _seed_morning(repos)
    await _subscribe(repos, "https://push.example.com/gone")
    await _subscribe(repos, "https://push.example.com/ok")
    transport = RecordingTransport(gone=["https://push.example.com/gone"])
    dispatcher = _dispatcher(repos, composer, transport)

    first = await dispatcher.run_delivery_pass(PASS_TIME)
    remaining = await repos["subscriptions"].list_all()
    second = await dispatcher.run_delivery_pass(PASS_TIME)

    assert (first.sent, first.failed) == (1, 1)
    assert [s.endpoint for s in remaining] == ["https://push.example.com/ok"]
    assert (second.checked, second.sent, second.failed) == (1, 1, 0)


@pytest.mark.asyncio
async def test_reminders_drive_pending(repos, composer):
    await repos["reminders"].sync(
        "user-1",
        [ReminderSync(title="Call dentist", due_date=datetime(2026, 3, 2, 8, 0))],
    )
    await _subscribe(repos, "https://push.example.com/phone")
    transport = RecordingTransport()

    await _dispatcher(repos, composer, transport).run_delivery_pass(PASS_TIME)

    _, payload = transport.calls[0]
    assert '"title":"Time for Call dentist"' in payload


@pytest.mark.asyncio
async def test_utc_reminder_due_date_matches_local_hour(repos, composer):
    # Browsers send toISOString() output; 16:00Z is 08:00 in Los Angeles
    await repos["reminders"].sync(
        "user-1",
        [ReminderSync(title="Call dentist", due_date=datetime(2026, 3, 2, 16, 0, tzinfo=timezone.utc))],
        timezone_name="America/Los_Angeles",
    )
    await _subscribe(repos, "https://push.example.com/phone")
    transport = RecordingTransport()

    await _dispatcher(repos, composer, transport).run_delivery_pass(PASS_TIME)

    _, payload = transport.calls[0]
    assert '"title":"Time for Call dentist"' in payload


@pytest.mark.asyncio
async def test_pass_never_writes_day_data(repos, composer):
    await _seed_morning(repos)
    await _subscribe(repos, "https://push.example.com/phone")

    await _dispatcher(repos, composer, RecordingTransport()).run_delivery_pass(PASS_TIME)

    schedule = await repos["schedules"].get_daily_schedule("user-1", LOCAL_DAY)
    completions = await repos["completions"].get_completions_for_date("user-1", LOCAL_DAY)
    assert schedule.activities_for(TimeBlock.BEFORE_9AM) == ["meditate"]
    assert len(completions) == 1
