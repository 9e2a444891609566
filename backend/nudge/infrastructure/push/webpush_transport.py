"""
Web Push transport backed by pywebpush.

pywebpush is synchronous (requests), so each send runs in a worker thread.
"""

from __future__ import annotations

import asyncio

import requests
from pywebpush import WebPushException, webpush

from nudge.core.logger import setup_logger
from nudge.interfaces.push_transport import IPushTransport
from nudge.models.push_subscription import PushSendResult, PushSubscription

logger = setup_logger(__name__)


class WebPushTransport(IPushTransport):
    """Send VAPID-signed, encrypted push messages."""

    def __init__(self, vapid_private_key: str, vapid_subject: str, timeout_seconds: float = 10.0):
        self._vapid_private_key = vapid_private_key
        self._vapid_subject = vapid_subject
        self._timeout_seconds = timeout_seconds

    def _send_blocking(
        self,
        subscription: PushSubscription,
        payload: str,
        ttl_seconds: int,
        urgency: str,
    ) -> PushSendResult:
        try:
            response = webpush(
                subscription_info=subscription.to_subscription_info(),
                data=payload,
                vapid_private_key=self._vapid_private_key,
                # pywebpush adds "aud"/"exp" to the claims dict, so pass a fresh one
                vapid_claims={"sub": self._vapid_subject},
                ttl=ttl_seconds,
                # No Topic header: Apple rejects topics it does not recognise
                headers={"Urgency": urgency},
                timeout=self._timeout_seconds,
            )
        except WebPushException as exc:
            status_code = None
            if exc.response is not None:
                status_code = exc.response.status_code
            return PushSendResult(success=False, status_code=status_code, message=str(exc))
        except requests.Timeout:
            return PushSendResult(
                success=False,
                message=f"Timed out after {self._timeout_seconds:g}s",
            )
        except requests.RequestException as exc:
            return PushSendResult(success=False, message=str(exc))

        status_code = getattr(response, "status_code", None)
        return PushSendResult(success=True, status_code=status_code)

    async def send(
        self,
        subscription: PushSubscription,
        payload: str,
        ttl_seconds: int,
        urgency: str,
    ) -> PushSendResult:
        return await asyncio.to_thread(
            self._send_blocking,
            subscription,
            payload,
            ttl_seconds,
            urgency,
        )
