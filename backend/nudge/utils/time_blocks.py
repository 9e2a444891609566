"""
Time block lookups.

A day is split into six ordered, half-open hour ranges. Anything at or after
the start of the last block (including late night) belongs to the last block.
"""

from datetime import datetime
from typing import NamedTuple, Optional

from nudge.models.enums import TimeBlock


class BlockBounds(NamedTuple):
    start: float
    end: float


_BOUNDS: dict[TimeBlock, BlockBounds] = {
    TimeBlock.BEFORE_6AM: BlockBounds(0, 6),
    TimeBlock.BEFORE_9AM: BlockBounds(6, 9),
    TimeBlock.BEFORE_NOON: BlockBounds(9, 12),
    TimeBlock.BEFORE_230PM: BlockBounds(12, 14.5),
    TimeBlock.BEFORE_5PM: BlockBounds(14.5, 17),
    TimeBlock.BEFORE_9PM: BlockBounds(17, 21),
}

BLOCK_LABELS: dict[TimeBlock, str] = {
    TimeBlock.BEFORE_6AM: "Early Morning",
    TimeBlock.BEFORE_9AM: "Morning",
    TimeBlock.BEFORE_NOON: "Late Morning",
    TimeBlock.BEFORE_230PM: "Early Afternoon",
    TimeBlock.BEFORE_5PM: "Afternoon",
    TimeBlock.BEFORE_9PM: "Evening",
}

_ORDER: tuple[TimeBlock, ...] = tuple(TimeBlock)


def all_blocks() -> list[TimeBlock]:
    """Return all blocks in chronological order."""
    return list(_ORDER)


def bounds_of(block: TimeBlock) -> BlockBounds:
    return _BOUNDS[block]


def block_label(block: TimeBlock) -> str:
    return BLOCK_LABELS[block]


def block_index(block: TimeBlock) -> int:
    return _ORDER.index(block)


def hour_decimal(dt: datetime) -> float:
    """Hour of day as a real number, e.g. 14:30 -> 14.5."""
    return dt.hour + dt.minute / 60


def block_for(hour: float) -> TimeBlock:
    """
    Return the block containing ``hour`` (``hour + minute / 60``).

    Hours past the last block's start fall into the last block.
    """
    for block in _ORDER[:-1]:
        bounds = _BOUNDS[block]
        if bounds.start <= hour < bounds.end:
            return block
    return _ORDER[-1]


def next_block(block: TimeBlock) -> Optional[TimeBlock]:
    """Return the block after ``block``, or None for the last block."""
    index = block_index(block)
    if index == len(_ORDER) - 1:
        return None
    return _ORDER[index + 1]
