"""
Push transport interface.
"""

from abc import ABC, abstractmethod

from nudge.models.push_subscription import PushSendResult, PushSubscription


class IPushTransport(ABC):
    """Encrypts a payload and POSTs it to a subscription's endpoint."""

    @abstractmethod
    async def send(
        self,
        subscription: PushSubscription,
        payload: str,
        ttl_seconds: int,
        urgency: str,
    ) -> PushSendResult:
        """
        Send one push message.

        Delivery failures are reported through the result, not raised.
        """
        pass
