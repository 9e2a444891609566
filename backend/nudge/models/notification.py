"""
Notification model definitions.

Contexts and messages are computed fresh for every delivery and never stored.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from nudge.models.enums import TimeBlock


class NotificationTime(BaseModel):
    """Device-side notification time."""

    hour: int = Field(..., ge=0, le=23)
    minute: int = Field(..., ge=0, le=59)
    enabled: bool = True


class NotificationPreferences(BaseModel):
    """Per-device notification preferences."""

    enabled: bool = False
    times: list[NotificationTime] = Field(default_factory=list)
    last_notification_time: Optional[datetime] = None


DEFAULT_NOTIFICATION_TIMES: list[NotificationTime] = [
    NotificationTime(hour=8, minute=15),
    NotificationTime(hour=10, minute=30),
    NotificationTime(hour=13, minute=0),
    NotificationTime(hour=16, minute=0),
    NotificationTime(hour=20, minute=45),
]


class NotificationContext(BaseModel):
    """What's done, pending and next for one recipient at one instant."""

    completed_since_last_notification: list[str] = Field(default_factory=list)
    pending_items: list[str] = Field(default_factory=list)
    upcoming_items: list[str] = Field(default_factory=list)
    all_day_complete: bool = False
    current_block: TimeBlock
    next_block: Optional[TimeBlock] = None
    total_items: int = Field(0, ge=0, description="Scheduled activities plus reminders considered")


class NotificationMessage(BaseModel):
    title: str
    body: str


class PushPayload(BaseModel):
    """JSON body delivered to the service worker."""

    title: str
    body: str
    tag: str
    url: str = "/"


class DeliveryPassResult(BaseModel):
    """Aggregate counters for one delivery pass."""

    checked: int = 0
    sent: int = 0
    failed: int = 0
    skipped: int = 0


class ForceSendResult(BaseModel):
    sent: int = 0
    failed: int = 0
    errors: list[str] = Field(default_factory=list)
    messages: list[NotificationMessage] = Field(default_factory=list)


class SubscriptionSummary(BaseModel):
    id: str
    timezone: str
    notification_times: list[dict]
    endpoint: str


class DeliveryStatus(BaseModel):
    """Debug snapshot of the delivery surface."""

    server_time: datetime
    vapid_configured: bool
    subscription_count: int
    subscriptions: list[SubscriptionSummary] = Field(default_factory=list)


class NotificationPreview(BaseModel):
    context: Optional[NotificationContext] = None
    message: NotificationMessage
