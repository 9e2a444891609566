"""Pydantic models (schemas) for the application."""

from nudge.models.enums import DeliveryOutcome, TimeBlock
from nudge.models.notification import (
    NotificationContext,
    NotificationMessage,
    NotificationPreferences,
    NotificationTime,
    PushPayload,
)
from nudge.models.push_subscription import (
    NotificationTimeSlot,
    PushSubscription,
    PushSubscriptionCreate,
    PushSubscriptionKeys,
    PushSendResult,
)
from nudge.models.reminder import Reminder, ReminderSync
from nudge.models.schedule import Completion, CompletionCreate, DailySchedule

__all__ = [
    # Enums
    "TimeBlock",
    "DeliveryOutcome",
    # Schedule
    "DailySchedule",
    "Completion",
    "CompletionCreate",
    # Reminders
    "Reminder",
    "ReminderSync",
    # Notifications
    "NotificationContext",
    "NotificationMessage",
    "NotificationPreferences",
    "NotificationTime",
    "PushPayload",
    # Push subscriptions
    "NotificationTimeSlot",
    "PushSubscription",
    "PushSubscriptionCreate",
    "PushSubscriptionKeys",
    "PushSendResult",
]
