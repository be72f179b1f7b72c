"""Caller-side notification transports (implement INotificationSender)."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from helpfromfounder.application.services.notification_dispatcher import NotificationDispatcher

logger = logging.getLogger(__name__)


class NotificationDeliveryError(Exception):
    """The dispatcher reported that no recipient was reached."""


class InProcessNotificationSender:
    """Calls the dispatcher running in this process."""

    def __init__(self, dispatcher: NotificationDispatcher) -> None:
        self._dispatcher = dispatcher

    async def send(self, payload: dict[str, Any]) -> None:
        result = await self._dispatcher.dispatch(payload)
        if not result.success:
            raise NotificationDeliveryError(result.error or result.message)
        logger.info("Notification %s for issue %s: %s", payload.get("type"), payload.get("issueId"), result.message)


class HttpNotificationSender:
    """POSTs the payload to a separately deployed dispatcher."""

    def __init__(self, url: str, http_client: httpx.AsyncClient) -> None:
        self._url = url
        self._http = http_client

    async def send(self, payload: dict[str, Any]) -> None:
        resp = await self._http.post(self._url, json=payload, timeout=15.0)
        if resp.status_code not in (200, 207):
            raise NotificationDeliveryError(
                f"Dispatcher returned HTTP {resp.status_code}: {resp.text[:200]}"
            )
        logger.info("Notification %s for issue %s delivered (HTTP %s)", payload.get("type"), payload.get("issueId"), resp.status_code)
