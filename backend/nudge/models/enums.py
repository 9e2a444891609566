"""
Enum definitions for the application.
"""

from enum import Enum


class TimeBlock(str, Enum):
    """
    Fixed hour-range buckets a day is partitioned into.

    Declaration order is the chronological order of the day.
    """

    BEFORE_6AM = "before6am"
    BEFORE_9AM = "before9am"
    BEFORE_NOON = "beforeNoon"
    BEFORE_230PM = "before230pm"
    BEFORE_5PM = "before5pm"
    BEFORE_9PM = "before9pm"


class DeliveryOutcome(str, Enum):
    """Result of processing one subscription during a delivery pass."""

    SENT = "sent"
    FAILED = "failed"
    EXPIRED = "expired"  # failed with 404/410, subscription removed
    SKIPPED = "skipped"
