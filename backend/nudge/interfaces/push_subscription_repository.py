"""
Push subscription repository interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from nudge.models.push_subscription import (
    NotificationTimeSlot,
    PushSubscription,
    PushSubscriptionCreate,
)


class IPushSubscriptionRepository(ABC):
    """Abstract interface for push subscription persistence."""

    @abstractmethod
    async def list_all(self) -> list[PushSubscription]:
        """List every registered subscription."""
        pass

    @abstractmethod
    async def get_by_endpoint(self, endpoint: str) -> Optional[PushSubscription]:
        pass

    @abstractmethod
    async def upsert(self, subscription: PushSubscriptionCreate) -> PushSubscription:
        """Insert, or update the row with the same endpoint."""
        pass

    @abstractmethod
    async def update_notification_times(
        self,
        endpoint: str,
        notification_times: list[NotificationTimeSlot],
    ) -> Optional[PushSubscription]:
        pass

    @abstractmethod
    async def delete(self, endpoint: str) -> bool:
        """Delete by endpoint. Returns False if no row matched."""
        pass

    @abstractmethod
    async def delete_all(self) -> int:
        """Delete every subscription. Returns the number removed."""
        pass
