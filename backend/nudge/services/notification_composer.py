"""
Compose the notification for one recipient.

Reads the recipient's day from the stores, then runs the context builder and
the message generator. Used by both the push dispatcher and the device preview
so both paths always produce the same text.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from nudge.core.logger import setup_logger
from nudge.interfaces.activity_catalog import IActivityCatalog
from nudge.interfaces.reminder_repository import IReminderRepository
from nudge.interfaces.schedule_repository import ICompletionRepository, IScheduleRepository
from nudge.models.notification import NotificationPreview
from nudge.services.notification_context_service import build_notification_context
from nudge.services.notification_message_service import (
    FALLBACK_MESSAGE,
    NotificationMessageGenerator,
)

logger = setup_logger(__name__)


class NotificationComposer:
    def __init__(
        self,
        schedule_repo: IScheduleRepository,
        completion_repo: ICompletionRepository,
        reminder_repo: IReminderRepository,
        activity_catalog: IActivityCatalog,
        message_generator: Optional[NotificationMessageGenerator] = None,
    ):
        self._schedule_repo = schedule_repo
        self._completion_repo = completion_repo
        self._reminder_repo = reminder_repo
        self._activity_catalog = activity_catalog
        self._message_generator = message_generator or NotificationMessageGenerator()

    async def compose(
        self,
        user_id: str,
        local_now: datetime,
        last_notification_time: Optional[datetime] = None,
    ) -> NotificationPreview:
        """
        Build context and message for ``user_id`` at ``local_now``.

        Malformed stored data yields the generic fallback message instead of
        an error, so the recipient still gets a check-in. Store outages
        propagate to the caller.
        """
        today = local_now.date()
        try:
            schedule = await self._schedule_repo.get_daily_schedule(user_id, today)
            completions = await self._completion_repo.get_completions_for_date(user_id, today)
            reminders = await self._reminder_repo.get_reminders_for_date(user_id, today)
            context = build_notification_context(
                schedule=schedule,
                completions=completions,
                reminders=reminders,
                last_notification_time=last_notification_time,
                now=local_now,
            )
            message = self._message_generator.generate(
                context,
                self._activity_catalog.get_name_map(),
            )
        except (ValueError, TypeError, KeyError) as exc:
            logger.warning(f"No usable notification context for user {user_id}: {exc}")
            return NotificationPreview(context=None, message=FALLBACK_MESSAGE)

        return NotificationPreview(context=context, message=message)
