"""
Daily schedule and completion models.

A schedule maps each time block to the activities planned for it; a
completion marks one scheduled activity as done.
"""

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from nudge.models.enums import TimeBlock


class DailySchedule(BaseModel):
    """Activities planned for one calendar date."""

    user_id: str
    date: date
    activities: dict[TimeBlock, list[str]] = Field(
        default_factory=dict,
        description="Activity IDs per time block, in display order",
    )
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @field_validator("activities", mode="before")
    @classmethod
    def _drop_unknown_blocks(cls, value):
        # Stored rows may carry keys from older block layouts
        if isinstance(value, dict):
            known = {block.value for block in TimeBlock}
            return {key: items for key, items in value.items() if str(getattr(key, "value", key)) in known}
        return value

    def activities_for(self, block: TimeBlock) -> list[str]:
        return list(self.activities.get(block, []))

    def all_activity_ids(self) -> list[str]:
        return [activity_id for block in TimeBlock for activity_id in self.activities_for(block)]


class DailyScheduleUpdate(BaseModel):
    """Schema for replacing a day's schedule."""

    activities: dict[TimeBlock, list[str]] = Field(default_factory=dict)


class Completion(BaseModel):
    """One scheduled activity marked done."""

    id: UUID
    user_id: str
    date: date
    activity_id: str
    time_block: TimeBlock
    completed_at: datetime

    class Config:
        from_attributes = True


class CompletionCreate(BaseModel):
    """Schema for logging a completion."""

    date: date
    activity_id: str = Field(..., min_length=1, max_length=200)
    time_block: TimeBlock
    completed_at: Optional[datetime] = Field(
        None,
        description="Defaults to the time the completion is stored",
    )
