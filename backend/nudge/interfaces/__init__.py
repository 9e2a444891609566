"""Abstract interfaces for infrastructure abstraction."""

from nudge.interfaces.activity_catalog import IActivityCatalog
from nudge.interfaces.push_subscription_repository import IPushSubscriptionRepository
from nudge.interfaces.push_transport import IPushTransport
from nudge.interfaces.reminder_repository import IReminderRepository
from nudge.interfaces.schedule_repository import ICompletionRepository, IScheduleRepository

__all__ = [
    "IScheduleRepository",
    "ICompletionRepository",
    "IReminderRepository",
    "IPushSubscriptionRepository",
    "IPushTransport",
    "IActivityCatalog",
]
