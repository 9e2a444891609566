"""
Push subscription model definitions.

One row per registered browser/device, keyed by its push endpoint.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class NotificationTimeSlot(BaseModel):
    """Local wall-clock time at which a subscriber wants a check-in."""

    hour: int = Field(..., ge=0, le=23)
    minute: int = Field(..., ge=0, le=59)


class PushSubscriptionKeys(BaseModel):
    p256dh: str = ""
    auth: str = ""


class PushSubscription(BaseModel):
    """Registered push endpoint plus its delivery preferences."""

    id: UUID
    user_id: str
    endpoint: str
    keys: PushSubscriptionKeys
    timezone: str = Field(..., description="IANA timezone name")
    notification_times: list[NotificationTimeSlot] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

    def to_subscription_info(self) -> dict:
        """Shape expected by Web Push libraries."""
        return {
            "endpoint": self.endpoint,
            "keys": {"p256dh": self.keys.p256dh, "auth": self.keys.auth},
        }


class PushSubscriptionCreate(BaseModel):
    """Schema for registering (or re-registering) an endpoint."""

    user_id: str
    endpoint: str = Field(..., min_length=1)
    keys: PushSubscriptionKeys = Field(default_factory=PushSubscriptionKeys)
    timezone: str
    notification_times: list[NotificationTimeSlot] = Field(default_factory=list)


class PushSendResult(BaseModel):
    """Outcome of one push attempt."""

    success: bool
    status_code: Optional[int] = None
    message: Optional[str] = None

    @property
    def is_gone(self) -> bool:
        """Endpoint will never accept messages again."""
        return not self.success and self.status_code in (404, 410)
