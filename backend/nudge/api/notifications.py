"""
Notifications API endpoints.

Delivery pass trigger, debug/force-send surface and device preview.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel, Field

from nudge.api.deps import (
    AppSettings,
    Composer,
    CronAuthorized,
    CurrentUserId,
    Dispatcher,
    PushSubscriptionRepo,
    get_configured_dispatcher,
)
from nudge.core.logger import setup_logger
from nudge.models.notification import (
    DeliveryStatus,
    ForceSendResult,
    NotificationContext,
    NotificationMessage,
    NotificationPreferences,
)
from nudge.services.delivery_scheduler import (
    format_notification_time,
    next_notification_slot,
    resolve_local_time,
    seconds_until_next_notification,
)
from nudge.services.push_dispatcher import describe_subscriptions
from nudge.utils.datetime_utils import now_utc

logger = setup_logger(__name__)

router = APIRouter()


# ===========================================
# Request / Response Models
# ===========================================


class DeliveryPassResponse(BaseModel):
    """Aggregate result of one delivery pass."""

    success: bool = True
    checked: int
    sent: int
    failed: int
    skipped: int


class ForceSendResponse(BaseModel):
    success: bool = True
    mode: str = "force"
    sent: int
    failed: int
    errors: list[str] = Field(default_factory=list)
    messages: list[NotificationMessage] = Field(default_factory=list)

    @classmethod
    def from_model(cls, result: ForceSendResult) -> "ForceSendResponse":
        return cls(
            sent=result.sent,
            failed=result.failed,
            errors=result.errors,
            messages=result.messages,
        )


class PreviewRequest(BaseModel):
    """What the device knows that the server does not."""

    timezone: Optional[str] = Field(None, description="IANA timezone name")
    last_notification_time: Optional[datetime] = None
    preferences: Optional[NotificationPreferences] = None


class PreviewResponse(BaseModel):
    context: Optional[NotificationContext]
    message: NotificationMessage
    seconds_until_next: Optional[int] = None
    next_notification_time: Optional[str] = None


# ===========================================
# Endpoints
# ===========================================


async def _run_pass(dispatcher) -> DeliveryPassResponse:
    try:
        result = await dispatcher.run_delivery_pass()
    except Exception as e:
        logger.error(f"Failed to fetch subscriptions: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch subscriptions",
        )
    return DeliveryPassResponse(
        checked=result.checked,
        sent=result.sent,
        failed=result.failed,
        skipped=result.skipped,
    )


@router.post("/send", response_model=DeliveryPassResponse, dependencies=[CronAuthorized])
async def send_notifications(dispatcher: Dispatcher):
    """
    Run one delivery pass.

    Intended to be called once per minute by an external scheduler.
    """
    return await _run_pass(dispatcher)


@router.get(
    "/send",
    response_model=DeliveryStatus | ForceSendResponse | DeliveryPassResponse,
    dependencies=[CronAuthorized],
)
async def debug_notifications(
    subscription_repo: PushSubscriptionRepo,
    settings: AppSettings,
    force: bool = Query(False, description="Send to every subscriber now"),
    test: bool = Query(False, description="Run a normal delivery pass"),
):
    """
    Debug surface.

    Without flags, returns server time and registered subscriptions.
    """
    if force:
        dispatcher = get_configured_dispatcher()
        try:
            result = await dispatcher.force_send_all()
        except Exception as e:
            logger.error(f"Force send failed: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to fetch subscriptions",
            )
        return ForceSendResponse.from_model(result)

    if test:
        return await _run_pass(get_configured_dispatcher())

    return await describe_subscriptions(subscription_repo, settings.vapid_configured)


@router.post("/preview", response_model=PreviewResponse)
async def preview_notification(
    request: PreviewRequest,
    user_id: CurrentUserId,
    composer: Composer,
    settings: AppSettings,
):
    """
    Compose the notification this device would show right now.
    """
    local_now = resolve_local_time(now_utc(), request.timezone or settings.DEFAULT_TIMEZONE)
    preview = await composer.compose(
        user_id,
        local_now,
        last_notification_time=request.last_notification_time,
    )

    seconds = None
    next_time = None
    if request.preferences is not None:
        seconds = seconds_until_next_notification(request.preferences, local_now)
        slot = next_notification_slot(request.preferences, local_now)
        if slot is not None:
            next_time = format_notification_time(slot.hour, slot.minute)

    return PreviewResponse(
        context=preview.context,
        message=preview.message,
        seconds_until_next=seconds,
        next_notification_time=next_time,
    )
