"""
Notification message generator.

Turns a NotificationContext into a short title/body pair. Phrase selection
goes through an injected random.Random so tests can seed it.
"""

from __future__ import annotations

import random
from typing import Optional, Sequence

from nudge.models.notification import NotificationContext, NotificationMessage
from nudge.utils.time_blocks import block_label

ALL_DONE_TITLE = "You crushed it today!"

ALL_DONE_PHRASES: tuple[str, ...] = (
    "Every single item done. Tomorrow's looking even better.",
    "100% complete. That's how it's done.",
    "All done! Rest well, you've earned it.",
    "Perfect day. Your consistency is building something great.",
)

COUNTDOWN_PHRASES: tuple[str, ...] = (
    "Don't think, just count down and start. 5-4-3-2-1...",
    "Two minutes is all it takes. 5-4-3-2-1, go!",
    "Overthinking? Stop. 5-4-3-2-1, just begin.",
    "Your brain will thank you once you start. 5-4-3-2-1...",
)

ENCOURAGEMENT_PHRASES: tuple[str, ...] = (
    "You got this!",
    "Almost there!",
    "Keep going!",
)

EVENING_PHRASES: tuple[str, ...] = (
    "Tomorrow's looking good! Take a peek at your plan.",
    "Quick check: here's what's on deck for tomorrow.",
    "Ready to set yourself up for success tomorrow?",
    "Evening check-in: tomorrow's plan is ready for you.",
)

EVENING_TITLE = "Evening check-in"

# Sent when no usable context could be computed
FALLBACK_MESSAGE = NotificationMessage(
    title="Time to check in!",
    body="See what's on your schedule today.",
)


class NotificationMessageGenerator:
    """Compose notification text from a context."""

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()

    def _pick(self, pool: Sequence[str]) -> str:
        return self._rng.choice(pool)

    def generate(
        self,
        context: NotificationContext,
        activity_names: dict[str, str],
    ) -> NotificationMessage:
        def name_of(item_id: str) -> str:
            return activity_names.get(item_id, item_id)

        if context.all_day_complete and context.total_items > 0:
            return NotificationMessage(title=ALL_DONE_TITLE, body=self._pick(ALL_DONE_PHRASES))

        title = ""
        body = ""

        completed = context.completed_since_last_notification
        if completed:
            if len(completed) == 1:
                title = f"{name_of(completed[0])} done!"
            elif len(completed) <= 3:
                title = f"{len(completed)} items done!"
            else:
                title = f"{len(completed)} items crushed!"

        if context.pending_items:
            pending_names = [name_of(item) for item in context.pending_items[:2]]
            if not title:
                title = f"Time for {pending_names[0]}"
            if len(context.pending_items) == 1:
                body = f"{pending_names[0]} is waiting. {self._pick(COUNTDOWN_PHRASES)}"
            else:
                body = (
                    f"{' and '.join(pending_names)} are still on deck. "
                    f"{self._pick(ENCOURAGEMENT_PHRASES)}"
                )
        elif context.upcoming_items and context.next_block is not None:
            upcoming_names = [name_of(item) for item in context.upcoming_items[:2]]
            if not title:
                title = f"{block_label(context.current_block)} complete!"
            body = f"Coming up in {block_label(context.next_block)}: {', '.join(upcoming_names)}"

        if not body:
            if not title:
                title = EVENING_TITLE
            body = self._pick(EVENING_PHRASES)

        return NotificationMessage(title=title, body=body)
