"""
Dependency injection for API endpoints.

This module provides FastAPI dependencies that inject the correct
infrastructure implementations based on environment configuration.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from nudge.core.config import PushDeliveryConfig, Settings, get_settings
from nudge.core.exceptions import ConfigurationError
from nudge.interfaces.activity_catalog import IActivityCatalog
from nudge.interfaces.push_subscription_repository import IPushSubscriptionRepository
from nudge.interfaces.push_transport import IPushTransport
from nudge.interfaces.reminder_repository import IReminderRepository
from nudge.interfaces.schedule_repository import ICompletionRepository, IScheduleRepository
from nudge.services.notification_composer import NotificationComposer
from nudge.services.push_dispatcher import PushDispatcher


# ===========================================
# Repository Dependencies
# ===========================================


@lru_cache()
def get_schedule_repository() -> IScheduleRepository:
    """Get daily schedule repository instance."""
    from nudge.infrastructure.local.schedule_repository import SqliteScheduleRepository
    return SqliteScheduleRepository()


@lru_cache()
def get_completion_repository() -> ICompletionRepository:
    """Get completion repository instance."""
    from nudge.infrastructure.local.schedule_repository import SqliteCompletionRepository
    return SqliteCompletionRepository()


@lru_cache()
def get_reminder_repository() -> IReminderRepository:
    """Get reminder repository instance."""
    from nudge.infrastructure.local.reminder_repository import SqliteReminderRepository
    return SqliteReminderRepository()


@lru_cache()
def get_push_subscription_repository() -> IPushSubscriptionRepository:
    """Get push subscription repository instance."""
    from nudge.infrastructure.local.push_subscription_repository import (
        SqlitePushSubscriptionRepository,
    )
    return SqlitePushSubscriptionRepository()


@lru_cache()
def get_activity_catalog() -> IActivityCatalog:
    """Get activity catalog instance."""
    from nudge.infrastructure.local.activity_catalog import StaticActivityCatalog
    settings = get_settings()
    return StaticActivityCatalog(extra_path=settings.ACTIVITY_CATALOG_PATH or None)


# ===========================================
# Push Delivery Dependencies
# ===========================================


@lru_cache()
def get_delivery_config() -> PushDeliveryConfig:
    """
    Get the immutable push delivery configuration.

    Raises:
        ConfigurationError: If VAPID keys or the database are not configured.
    """
    return PushDeliveryConfig.from_settings(get_settings())


@lru_cache()
def get_push_transport() -> IPushTransport:
    """Get push transport instance."""
    from nudge.infrastructure.push.webpush_transport import WebPushTransport
    config = get_delivery_config()
    return WebPushTransport(
        vapid_private_key=config.vapid_private_key,
        vapid_subject=config.vapid_subject,
        timeout_seconds=config.timeout_seconds,
    )


@lru_cache()
def get_notification_composer() -> NotificationComposer:
    """Get notification composer instance."""
    return NotificationComposer(
        schedule_repo=get_schedule_repository(),
        completion_repo=get_completion_repository(),
        reminder_repo=get_reminder_repository(),
        activity_catalog=get_activity_catalog(),
    )


@lru_cache()
def get_push_dispatcher() -> PushDispatcher:
    """
    Get push dispatcher instance.

    Raises:
        ConfigurationError: If push delivery is not configured.
    """
    return PushDispatcher(
        subscription_repo=get_push_subscription_repository(),
        composer=get_notification_composer(),
        transport=get_push_transport(),
        config=get_delivery_config(),
    )


def get_configured_dispatcher() -> PushDispatcher:
    """Push dispatcher for request handlers; missing configuration is a 500."""
    try:
        return get_push_dispatcher()
    except ConfigurationError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=e.message,
        )


# ===========================================
# Request Identity
# ===========================================


async def get_current_user_id(
    x_user_id: Annotated[str | None, Header()] = None,
) -> str:
    """
    Get the calling user's id.

    Single-user deployments omit the header and fall back to DEFAULT_USER_ID.
    """
    if x_user_id and x_user_id.strip():
        return x_user_id.strip()
    return get_settings().DEFAULT_USER_ID


async def verify_cron_secret(
    authorization: Annotated[str | None, Header()] = None,
) -> None:
    """
    Guard the delivery trigger endpoints.

    When CRON_SECRET is set, require "Authorization: Bearer <secret>".
    """
    secret = get_settings().CRON_SECRET
    if not secret:
        return
    if authorization != f"Bearer {secret}":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )


# ===========================================
# Type Aliases for Dependency Injection
# ===========================================

AppSettings = Annotated[Settings, Depends(get_settings)]
ScheduleRepo = Annotated[IScheduleRepository, Depends(get_schedule_repository)]
CompletionRepo = Annotated[ICompletionRepository, Depends(get_completion_repository)]
ReminderRepo = Annotated[IReminderRepository, Depends(get_reminder_repository)]
PushSubscriptionRepo = Annotated[
    IPushSubscriptionRepository, Depends(get_push_subscription_repository)
]
Composer = Annotated[NotificationComposer, Depends(get_notification_composer)]
Dispatcher = Annotated[PushDispatcher, Depends(get_configured_dispatcher)]
CurrentUserId = Annotated[str, Depends(get_current_user_id)]
CronAuthorized = Depends(verify_cron_secret)
