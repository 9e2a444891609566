"""
Integration tests for notification and push subscription endpoints.

Endpoint functions are called directly with their dependencies.
"""

from datetime import date, datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import HTTPException

from nudge.api.deps import get_configured_dispatcher, get_current_user_id, verify_cron_secret
from nudge.api.notifications import (
    PreviewRequest,
    debug_notifications,
    preview_notification,
    send_notifications,
)
from nudge.api.push_subscriptions import (
    BrowserSubscription,
    SubscribeRequest,
    UpdateTimesRequest,
    list_subscriptions,
    subscribe,
    unsubscribe,
    update_notification_times,
)
from nudge.core.config import Settings
from nudge.core.exceptions import ConfigurationError
from nudge.infrastructure.local.activity_catalog import StaticActivityCatalog
from nudge.infrastructure.local.push_subscription_repository import SqlitePushSubscriptionRepository
from nudge.infrastructure.local.reminder_repository import SqliteReminderRepository
from nudge.infrastructure.local.schedule_repository import (
    SqliteCompletionRepository,
    SqliteScheduleRepository,
)
from nudge.models.enums import TimeBlock
from nudge.models.notification import (
    DeliveryPassResult,
    DeliveryStatus,
    ForceSendResult,
    NotificationMessage,
    NotificationPreferences,
    NotificationTime,
)
from nudge.models.push_subscription import NotificationTimeSlot, PushSubscriptionKeys
from nudge.models.schedule import DailySchedule
from nudge.services.notification_composer import NotificationComposer


@pytest.fixture
def settings():
    return Settings(_env_file=None, DEFAULT_TIMEZONE="America/Los_Angeles")


@pytest.fixture
def subscription_repo(session_factory):
    return SqlitePushSubscriptionRepository(session_factory=session_factory)


@pytest.fixture
def schedule_repo(session_factory):
    return SqliteScheduleRepository(session_factory=session_factory)


@pytest.fixture
def composer(session_factory, schedule_repo):
    return NotificationComposer(
        schedule_repo=schedule_repo,
        completion_repo=SqliteCompletionRepository(session_factory=session_factory),
        reminder_repo=SqliteReminderRepository(session_factory=session_factory),
        activity_catalog=StaticActivityCatalog(base={"walk": "Walk"}),
    )


def _subscribe_request(endpoint="https://push.example.com/a", **kwargs) -> SubscribeRequest:
    return SubscribeRequest(
        subscription=BrowserSubscription(
            endpoint=endpoint,
            keys=PushSubscriptionKeys(p256dh="p", auth="a"),
        ),
        **kwargs,
    )


class TestSendEndpoint:
    @pytest.mark.asyncio
    async def test_returns_counts(self):
        dispatcher = AsyncMock()
        dispatcher.run_delivery_pass.return_value = DeliveryPassResult(checked=3, sent=1, failed=1, skipped=1)

        response = await send_notifications(dispatcher=dispatcher)

        assert response.success is True
        assert (response.checked, response.sent, response.failed, response.skipped) == (3, 1, 1, 1)

    @pytest.mark.asyncio
    async def test_listing_failure_is_500(self):
        dispatcher = AsyncMock()
        dispatcher.run_delivery_pass.side_effect = RuntimeError("db down")

        with pytest.raises(HTTPException) as exc_info:
            await send_notifications(dispatcher=dispatcher)

        assert exc_info.value.status_code == 500
        assert exc_info.value.detail == "Failed to fetch subscriptions"

    def test_missing_vapid_keys_is_500(self):
        with patch(
            "nudge.api.deps.get_push_dispatcher",
            side_effect=ConfigurationError("VAPID keys not configured"),
        ):
            with pytest.raises(HTTPException) as exc_info:
                get_configured_dispatcher()

        assert exc_info.value.status_code == 500
        assert exc_info.value.detail == "VAPID keys not configured"


class TestDebugEndpoint:
    @pytest.mark.asyncio
    async def test_status_without_vapid(self, subscription_repo, settings):
        await subscribe(
            request=_subscribe_request(),
            user_id="user-1",
            subscription_repo=subscription_repo,
            settings=settings,
        )

        status = await debug_notifications(
            subscription_repo=subscription_repo,
            settings=settings,
            force=False,
            test=False,
        )

        assert isinstance(status, DeliveryStatus)
        assert status.vapid_configured is False
        assert status.subscription_count == 1

    @pytest.mark.asyncio
    async def test_force_send(self, subscription_repo, settings):
        dispatcher = AsyncMock()
        dispatcher.force_send_all.return_value = ForceSendResult(
            sent=1,
            failed=1,
            errors=["500: boom"],
            messages=[NotificationMessage(title="t", body="b")],
        )

        with patch("nudge.api.notifications.get_configured_dispatcher", return_value=dispatcher):
            response = await debug_notifications(
                subscription_repo=subscription_repo,
                settings=settings,
                force=True,
                test=False,
            )

        assert response.mode == "force"
        assert (response.sent, response.failed) == (1, 1)
        assert response.errors == ["500: boom"]

    @pytest.mark.asyncio
    async def test_test_mode_runs_normal_pass(self, subscription_repo, settings):
        dispatcher = AsyncMock()
        dispatcher.run_delivery_pass.return_value = DeliveryPassResult(checked=1, skipped=1)

        with patch("nudge.api.notifications.get_configured_dispatcher", return_value=dispatcher):
            response = await debug_notifications(
                subscription_repo=subscription_repo,
                settings=settings,
                force=False,
                test=True,
            )

        assert response.skipped == 1
        dispatcher.run_delivery_pass.assert_awaited_once()


class TestCronSecret:
    @pytest.mark.asyncio
    async def test_open_when_unset(self):
        with patch("nudge.api.deps.get_settings", return_value=MagicMock(CRON_SECRET="")):
            await verify_cron_secret(authorization=None)

    @pytest.mark.asyncio
    async def test_requires_bearer_token(self):
        with patch("nudge.api.deps.get_settings", return_value=MagicMock(CRON_SECRET="s3cret")):
            await verify_cron_secret(authorization="Bearer s3cret")
            with pytest.raises(HTTPException) as exc_info:
                await verify_cron_secret(authorization="Bearer wrong")

        assert exc_info.value.status_code == 401


class TestCurrentUser:
    @pytest.mark.asyncio
    async def test_header_wins(self):
        assert await get_current_user_id(x_user_id=" user-9 ") == "user-9"

    @pytest.mark.asyncio
    async def test_falls_back_to_default(self):
        with patch("nudge.api.deps.get_settings", return_value=MagicMock(DEFAULT_USER_ID="solo")):
            assert await get_current_user_id(x_user_id=None) == "solo"


class TestPushSubscriptionEndpoints:
    @pytest.mark.asyncio
    async def test_subscribe_uses_defaults(self, subscription_repo, settings):
        response = await subscribe(
            request=_subscribe_request(),
            user_id="user-1",
            subscription_repo=subscription_repo,
            settings=settings,
        )

        assert response.timezone == "America/Los_Angeles"
        assert [(t.hour, t.minute) for t in response.notification_times] == [
            (8, 15),
            (10, 30),
            (13, 0),
            (16, 0),
            (20, 45),
        ]

    @pytest.mark.asyncio
    async def test_subscribe_rejects_unknown_timezone(self, subscription_repo, settings):
        with pytest.raises(HTTPException) as exc_info:
            await subscribe(
                request=_subscribe_request(timezone="Mars/Olympus"),
                user_id="user-1",
                subscription_repo=subscription_repo,
                settings=settings,
            )
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_update_times(self, subscription_repo, settings):
        await subscribe(
            request=_subscribe_request(),
            user_id="user-1",
            subscription_repo=subscription_repo,
            settings=settings,
        )

        response = await update_notification_times(
            request=UpdateTimesRequest(
                endpoint="https://push.example.com/a",
                notification_times=[NotificationTimeSlot(hour=7, minute=0), "21:30"],
            ),
            subscription_repo=subscription_repo,
        )

        assert [(t.hour, t.minute) for t in response.notification_times] == [(7, 0), (21, 30)]

    @pytest.mark.asyncio
    async def test_update_rejects_bad_time_string(self, subscription_repo):
        with pytest.raises(HTTPException) as exc_info:
            await update_notification_times(
                request=UpdateTimesRequest(endpoint="https://push.example.com/a", notification_times=["7pm"]),
                subscription_repo=subscription_repo,
            )
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_update_unknown_endpoint_is_404(self, subscription_repo):
        with pytest.raises(HTTPException) as exc_info:
            await update_notification_times(
                request=UpdateTimesRequest(endpoint="https://nope", notification_times=[]),
                subscription_repo=subscription_repo,
            )
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_and_clear(self, subscription_repo, settings):
        for endpoint in ("https://push.example.com/a", "https://push.example.com/b", "https://push.example.com/c"):
            await subscribe(
                request=_subscribe_request(endpoint),
                user_id="user-1",
                subscription_repo=subscription_repo,
                settings=settings,
            )

        deleted = await unsubscribe(
            subscription_repo=subscription_repo,
            endpoint="https://push.example.com/a",
            delete_all=False,
        )
        listing = await list_subscriptions(subscription_repo=subscription_repo, clear=None)
        cleared = await list_subscriptions(subscription_repo=subscription_repo, clear="all")

        assert deleted.deleted == 1
        assert listing.count == 2
        assert cleared.deleted == 2

    @pytest.mark.asyncio
    async def test_delete_requires_endpoint(self, subscription_repo):
        with pytest.raises(HTTPException) as exc_info:
            await unsubscribe(subscription_repo=subscription_repo, endpoint=None, delete_all=False)
        assert exc_info.value.status_code == 400


class TestPreviewEndpoint:
    @pytest.mark.asyncio
    async def test_preview_in_caller_timezone(self, composer, schedule_repo, settings):
        await schedule_repo.upsert(
            DailySchedule(
                user_id="user-1",
                date=date(2026, 3, 2),
                activities={TimeBlock.BEFORE_NOON: ["walk"]},
            )
        )
        # 17:40 UTC is 09:40 in Los Angeles
        fixed_now = datetime(2026, 3, 2, 17, 40, tzinfo=timezone.utc)

        with patch("nudge.api.notifications.now_utc", return_value=fixed_now):
            response = await preview_notification(
                request=PreviewRequest(
                    timezone="America/Los_Angeles",
                    preferences=NotificationPreferences(
                        enabled=True,
                        times=[NotificationTime(hour=10, minute=30)],
                    ),
                ),
                user_id="user-1",
                composer=composer,
                settings=settings,
            )

        assert response.context.current_block == TimeBlock.BEFORE_NOON
        assert response.context.pending_items == ["walk"]
        assert response.message.title == "Time for Walk"
        assert response.seconds_until_next == 50 * 60
        assert response.next_notification_time == "10:30 AM"
