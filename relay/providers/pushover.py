"""Pushover notifier."""

from enum import IntEnum

import httpx

from relay.config import settings

from .base import BaseNotifier, NotificationPayload


class Priority(IntEnum):
    LOWEST = -2      # No notification, just badge
    LOW = -1         # Quiet notification
    NORMAL = 0       # Normal notification
    HIGH = 1         # Bypass quiet hours


# Pushover field limits
MAX_TITLE = 250
MAX_MESSAGE = 1024
MAX_URL = 512


class PushoverNotifier(BaseNotifier):
    """Sends a push notification through the Pushover messages API."""

    def __init__(
        self,
        base_url: str | None = None,
        priority: Priority = Priority.NORMAL,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.pushover_api_url).rstrip("/")
        self.priority = priority
        self._transport = transport

    @property
    def provider_name(self) -> str:
        return "pushover"

    async def send(self, payload: NotificationPayload, *, user: str, token: str) -> httpx.Response:
        data = {
            "token": token,
            "user": user,
            "message": (payload.text or payload.title or "")[:MAX_MESSAGE],
            "priority": int(self.priority),
        }

        if payload.title:
            data["title"] = payload.title[:MAX_TITLE]
        if payload.url:
            data["url"] = payload.url[:MAX_URL]

        async with httpx.AsyncClient(timeout=settings.upstream_timeout_seconds, transport=self._transport) as client:
            return await client.post(f"{self.base_url}/1/messages.json", data=data)
