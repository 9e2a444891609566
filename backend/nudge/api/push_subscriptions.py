"""
Push subscription API endpoints.

Register, update and remove browser push endpoints.
"""

from datetime import datetime
from typing import Optional, Union

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel, Field

from nudge.api.deps import AppSettings, CurrentUserId, PushSubscriptionRepo
from nudge.core.logger import setup_logger
from nudge.models.notification import DEFAULT_NOTIFICATION_TIMES
from nudge.models.push_subscription import (
    NotificationTimeSlot,
    PushSubscription,
    PushSubscriptionCreate,
    PushSubscriptionKeys,
)
from nudge.services.delivery_scheduler import parse_time_string
from nudge.utils.datetime_utils import is_valid_timezone

logger = setup_logger(__name__)

router = APIRouter()


# ===========================================
# Request / Response Models
# ===========================================


class BrowserSubscription(BaseModel):
    """PushSubscription.toJSON() as produced by the browser."""

    endpoint: str = Field(..., min_length=1)
    keys: PushSubscriptionKeys = Field(default_factory=PushSubscriptionKeys)


# {"hour": 8, "minute": 15} or "08:15"
TimeInput = Union[NotificationTimeSlot, str]


class SubscribeRequest(BaseModel):
    subscription: BrowserSubscription
    timezone: Optional[str] = None
    notification_times: Optional[list[TimeInput]] = None


class UpdateTimesRequest(BaseModel):
    endpoint: str = Field(..., min_length=1)
    notification_times: list[TimeInput]


class PushSubscriptionResponse(BaseModel):
    id: str
    user_id: str
    endpoint: str
    timezone: str
    notification_times: list[NotificationTimeSlot]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, subscription: PushSubscription) -> "PushSubscriptionResponse":
        return cls(
            id=str(subscription.id),
            user_id=subscription.user_id,
            endpoint=subscription.endpoint,
            timezone=subscription.timezone,
            notification_times=subscription.notification_times,
            created_at=subscription.created_at,
            updated_at=subscription.updated_at,
        )


class PushSubscriptionListResponse(BaseModel):
    count: int
    subscriptions: list[PushSubscriptionResponse]


class DeleteResponse(BaseModel):
    success: bool = True
    deleted: int


# ===========================================
# Endpoints
# ===========================================


def _to_slots(times: list[TimeInput]) -> list[NotificationTimeSlot]:
    slots = []
    for value in times:
        if isinstance(value, str):
            try:
                value = parse_time_string(value)
            except ValueError as e:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=str(e),
                )
        slots.append(value)
    return slots


@router.get("", response_model=PushSubscriptionListResponse | DeleteResponse)
async def list_subscriptions(
    subscription_repo: PushSubscriptionRepo,
    clear: Optional[str] = Query(None, description='"all" deletes every subscription'),
):
    """
    List registered subscriptions.
    """
    if clear == "all":
        deleted = await subscription_repo.delete_all()
        logger.info(f"Cleared {deleted} push subscriptions")
        return DeleteResponse(deleted=deleted)

    subscriptions = await subscription_repo.list_all()
    return PushSubscriptionListResponse(
        count=len(subscriptions),
        subscriptions=[PushSubscriptionResponse.from_model(s) for s in subscriptions],
    )


@router.post("", response_model=PushSubscriptionResponse)
async def subscribe(
    request: SubscribeRequest,
    user_id: CurrentUserId,
    subscription_repo: PushSubscriptionRepo,
    settings: AppSettings,
):
    """
    Register an endpoint, or replace the row already stored for it.
    """
    timezone = request.timezone or settings.DEFAULT_TIMEZONE
    if not is_valid_timezone(timezone):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown timezone: {timezone}",
        )

    if request.notification_times is not None:
        times = _to_slots(request.notification_times)
    else:
        times = [
            NotificationTimeSlot(hour=t.hour, minute=t.minute)
            for t in DEFAULT_NOTIFICATION_TIMES
        ]

    subscription = await subscription_repo.upsert(
        PushSubscriptionCreate(
            user_id=user_id,
            endpoint=request.subscription.endpoint,
            keys=request.subscription.keys,
            timezone=timezone,
            notification_times=times,
        )
    )
    return PushSubscriptionResponse.from_model(subscription)


@router.put("", response_model=PushSubscriptionResponse)
async def update_notification_times(
    request: UpdateTimesRequest,
    subscription_repo: PushSubscriptionRepo,
):
    """
    Replace the notification times of one endpoint.
    """
    subscription = await subscription_repo.update_notification_times(
        request.endpoint,
        _to_slots(request.notification_times),
    )
    if not subscription:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Subscription not found",
        )
    return PushSubscriptionResponse.from_model(subscription)


@router.delete("", response_model=DeleteResponse)
async def unsubscribe(
    subscription_repo: PushSubscriptionRepo,
    endpoint: Optional[str] = Query(None),
    delete_all: bool = Query(False, alias="all", description="Delete every subscription"),
):
    """
    Delete one endpoint, or every subscription with ?all=true.
    """
    if delete_all:
        deleted = await subscription_repo.delete_all()
        return DeleteResponse(deleted=deleted)

    if not endpoint:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="endpoint is required",
        )

    deleted = await subscription_repo.delete(endpoint)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Subscription not found",
        )
    return DeleteResponse(deleted=1)
