"""
Push dispatcher.

Runs one delivery pass over every subscription: eligibility, composition,
send, and cleanup of endpoints the push service reports as gone.

Features:
- Bounded fan-out (asyncio.Semaphore) over subscribers
- Error isolation (one subscriber's failure never aborts the pass)
- 404/410 responses delete the subscription; other failures keep it
- No retries: the next eligible tick is the retry
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from nudge.core.config import PushDeliveryConfig
from nudge.core.logger import setup_logger
from nudge.interfaces.push_subscription_repository import IPushSubscriptionRepository
from nudge.interfaces.push_transport import IPushTransport
from nudge.models.enums import DeliveryOutcome
from nudge.models.notification import (
    DeliveryPassResult,
    DeliveryStatus,
    ForceSendResult,
    NotificationMessage,
    PushPayload,
    SubscriptionSummary,
)
from nudge.models.push_subscription import PushSubscription
from nudge.services.delivery_scheduler import matches_any, resolve_local_time
from nudge.services.notification_composer import NotificationComposer
from nudge.utils.datetime_utils import ensure_utc, now_utc

logger = setup_logger(__name__)


def _short(endpoint: str) -> str:
    return f"{endpoint[:50]}..." if len(endpoint) > 50 else endpoint


@dataclass
class _Delivery:
    outcome: DeliveryOutcome
    message: Optional[NotificationMessage] = None
    error: Optional[str] = None


class PushDispatcher:
    """Deliver check-in notifications to all due subscribers."""

    def __init__(
        self,
        subscription_repo: IPushSubscriptionRepository,
        composer: NotificationComposer,
        transport: IPushTransport,
        config: PushDeliveryConfig,
    ):
        self._subscription_repo = subscription_repo
        self._composer = composer
        self._transport = transport
        self._config = config

    async def run_delivery_pass(self, now: Optional[datetime] = None) -> DeliveryPassResult:
        """
        Process every subscription once for the instant ``now`` (UTC).

        Returns aggregate counters. Only a failure to list subscriptions
        propagates; per-subscriber errors are counted as failed.
        """
        instant = ensure_utc(now) if now is not None else now_utc()
        subscriptions = await self._subscription_repo.list_all()
        result = DeliveryPassResult(checked=len(subscriptions))
        if not subscriptions:
            logger.info("No push subscriptions found")
            return result

        deliveries = await self._fan_out(subscriptions, instant, force=False)
        for delivery in deliveries:
            if delivery.outcome == DeliveryOutcome.SENT:
                result.sent += 1
            elif delivery.outcome == DeliveryOutcome.SKIPPED:
                result.skipped += 1
            else:
                result.failed += 1

        logger.info(
            f"Delivery pass completed: {result.checked} checked, {result.sent} sent, "
            f"{result.failed} failed, {result.skipped} skipped"
        )
        return result

    async def force_send_all(self, now: Optional[datetime] = None) -> ForceSendResult:
        """Send to every subscriber regardless of notification times (debugging)."""
        instant = ensure_utc(now) if now is not None else now_utc()
        subscriptions = await self._subscription_repo.list_all()
        result = ForceSendResult()
        if not subscriptions:
            return result

        deliveries = await self._fan_out(subscriptions, instant, force=True)
        for delivery in deliveries:
            if delivery.message is not None:
                result.messages.append(delivery.message)
            if delivery.outcome == DeliveryOutcome.SENT:
                result.sent += 1
            else:
                result.failed += 1
                if delivery.error:
                    result.errors.append(delivery.error)

        logger.info(f"Force send completed: {result.sent} sent, {result.failed} failed")
        return result

    async def _fan_out(
        self,
        subscriptions: list[PushSubscription],
        now: datetime,
        force: bool,
    ) -> list[_Delivery]:
        semaphore = asyncio.Semaphore(self._config.max_concurrency)

        async def guarded(subscription: PushSubscription) -> _Delivery:
            async with semaphore:
                try:
                    return await self._deliver(subscription, now, force)
                except Exception as exc:
                    logger.error(f"Delivery to {_short(subscription.endpoint)} failed: {exc}")
                    return _Delivery(DeliveryOutcome.FAILED, error=f"no-code: {exc}")

        return list(await asyncio.gather(*(guarded(sub) for sub in subscriptions)))

    async def _deliver(
        self,
        subscription: PushSubscription,
        now: datetime,
        force: bool,
    ) -> _Delivery:
        local_now = resolve_local_time(now, subscription.timezone)
        if not force and not matches_any(
            subscription.notification_times, local_now.hour, local_now.minute
        ):
            return _Delivery(DeliveryOutcome.SKIPPED)

        user_id = subscription.user_id or self._config.default_user_id
        preview = await self._composer.compose(user_id, local_now)
        message = preview.message

        payload = PushPayload(
            title=message.title,
            body=message.body,
            tag=self._config.notification_tag,
        ).model_dump_json()

        result = await self._transport.send(
            subscription,
            payload,
            ttl_seconds=self._config.ttl_seconds,
            urgency=self._config.urgency,
        )
        if result.success:
            logger.info(f"Sent to {_short(subscription.endpoint)}")
            return _Delivery(DeliveryOutcome.SENT, message=message)

        error = f"{result.status_code or 'no-code'}: {result.message or 'unknown error'}"
        logger.error(f"Failed for {_short(subscription.endpoint)}: {error}")

        if result.is_gone:
            await self._subscription_repo.delete(subscription.endpoint)
            logger.info(f"Removed expired subscription {_short(subscription.endpoint)}")
            return _Delivery(DeliveryOutcome.EXPIRED, message=message, error=error)

        return _Delivery(DeliveryOutcome.FAILED, message=message, error=error)


async def describe_subscriptions(
    subscription_repo: IPushSubscriptionRepository,
    vapid_configured: bool,
    now: Optional[datetime] = None,
) -> DeliveryStatus:
    """Debug snapshot of registered subscriptions. Works without push keys."""
    subscriptions = await subscription_repo.list_all()
    return DeliveryStatus(
        server_time=ensure_utc(now) if now is not None else now_utc(),
        vapid_configured=vapid_configured,
        subscription_count=len(subscriptions),
        subscriptions=[
            SubscriptionSummary(
                id=str(sub.id),
                timezone=sub.timezone,
                notification_times=[slot.model_dump() for slot in sub.notification_times],
                endpoint=_short(sub.endpoint),
            )
            for sub in subscriptions
        ],
    )
