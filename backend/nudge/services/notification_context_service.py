"""
Notification context builder.

Diffs today's schedule, completion log and reminders against the time block
model to produce what is done, pending and coming up. Pure: no I/O, and the
result depends only on the arguments.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from nudge.models.enums import TimeBlock
from nudge.models.notification import NotificationContext
from nudge.models.reminder import Reminder
from nudge.models.schedule import Completion, DailySchedule
from nudge.utils.datetime_utils import ensure_utc, to_local_naive
from nudge.utils.time_blocks import (
    all_blocks,
    block_for,
    block_index,
    bounds_of,
    hour_decimal,
    next_block,
)


def _completion_lookup(completions: list[Completion]) -> dict[tuple[TimeBlock, str], Completion]:
    # Latest completion wins when an activity was checked more than once
    lookup: dict[tuple[TimeBlock, str], Completion] = {}
    for completion in completions:
        key = (completion.time_block, completion.activity_id)
        current = lookup.get(key)
        if current is None or ensure_utc(completion.completed_at) > ensure_utc(current.completed_at):
            lookup[key] = completion
    return lookup


def _find_completion(
    block: TimeBlock,
    activity_id: str,
    by_block: dict[tuple[TimeBlock, str], Completion],
    by_activity: dict[str, Completion],
) -> Optional[Completion]:
    return by_block.get((block, activity_id)) or by_activity.get(activity_id)


def _reminder_hour(reminder: Reminder, now: datetime) -> float:
    return hour_decimal(to_local_naive(reminder.due_date, now))


def build_notification_context(
    schedule: Optional[DailySchedule],
    completions: list[Completion],
    reminders: list[Reminder],
    last_notification_time: Optional[datetime],
    now: datetime,
) -> NotificationContext:
    """
    Build the notification context for one recipient.

    Args:
        schedule: Today's schedule, or None if nothing was planned.
        completions: Completions logged today.
        reminders: Reminders due today.
        last_notification_time: When this device last showed a notification.
            None means never; nothing is then reported as just completed.
        now: Evaluation instant, in the recipient's local time.
    """
    current_block = block_for(hour_decimal(now))
    following_block = next_block(current_block)
    current_index = block_index(current_block)

    by_block = _completion_lookup(completions)
    by_activity: dict[str, Completion] = {}
    for completion in by_block.values():
        existing = by_activity.get(completion.activity_id)
        if existing is None or ensure_utc(completion.completed_at) > ensure_utc(existing.completed_at):
            by_activity[completion.activity_id] = completion
    completed_ids = set(by_activity)

    def planned(block: TimeBlock) -> list[str]:
        return schedule.activities_for(block) if schedule is not None else []

    completed_since: list[str] = []
    if last_notification_time is not None:
        threshold = ensure_utc(last_notification_time)
        for block in all_blocks()[: current_index + 1]:
            for activity_id in planned(block):
                if activity_id not in completed_ids:
                    continue
                completion = _find_completion(block, activity_id, by_block, by_activity)
                if completion and ensure_utc(completion.completed_at) > threshold:
                    completed_since.append(activity_id)

        # Only reminders checked off in the app; ones closed in the source list are not re-announced
        for reminder in reminders:
            if reminder.is_completed and reminder.completed_in_app:
                completed_since.append(reminder.title)

    pending: list[str] = []
    for block in all_blocks()[: current_index + 1]:
        for activity_id in planned(block):
            if activity_id not in completed_ids:
                pending.append(activity_id)

    current_end = bounds_of(current_block).end
    for reminder in reminders:
        if reminder.is_completed:
            continue
        if reminder.is_all_day or _reminder_hour(reminder, now) <= current_end:
            pending.append(reminder.title)

    upcoming = planned(following_block) if following_block is not None else []

    activity_ids = schedule.all_activity_ids() if schedule is not None else []
    total_items = len(activity_ids) + len(reminders)
    all_day_complete = (
        total_items > 0
        and all(activity_id in completed_ids for activity_id in activity_ids)
        and all(reminder.is_completed for reminder in reminders)
    )

    return NotificationContext(
        completed_since_last_notification=completed_since,
        pending_items=pending,
        upcoming_items=list(upcoming),
        all_day_complete=all_day_complete,
        current_block=current_block,
        next_block=following_block,
        total_items=total_items,
    )
