"""IFTTT Maker webhooks notifier."""

import httpx

from relay.config import settings

from .base import BaseNotifier, NotificationPayload


class IftttNotifier(BaseNotifier):
    """Triggers an IFTTT applet.

    The applet receives ``value1`` (title), ``value2`` (text) and ``value3``
    (the URL to open on tap).
    """

    def __init__(self, base_url: str | None = None, transport: httpx.AsyncBaseTransport | None = None):
        self.base_url = (base_url or settings.ifttt_url).rstrip("/")
        self._transport = transport

    @property
    def provider_name(self) -> str:
        return "ifttt"

    async def send(self, payload: NotificationPayload, *, event: str, key: str) -> httpx.Response:
        body = {"value1": payload.title, "value2": payload.text, "value3": payload.url}

        async with httpx.AsyncClient(timeout=settings.upstream_timeout_seconds, transport=self._transport) as client:
            return await client.post(
                f"{self.base_url}/trigger/{event}/with/key/{key}",
                headers={"Accept": "application/json"},
                json={k: v for k, v in body.items() if v is not None},
            )
