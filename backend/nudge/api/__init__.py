"""API routers."""

from nudge.api import (
    completions,
    notifications,
    push_subscriptions,
    reminders,
    schedules,
)

__all__ = [
    "notifications",
    "push_subscriptions",
    "schedules",
    "completions",
    "reminders",
]
