"""Notifier that delivers events to an HTTP webhook."""

import logging

import httpx

from argumentor.debate_engine.exceptions import NotificationFailedError
from .base import DebateNotification

logger = logging.getLogger(__name__)


class WebhookNotifier:
    """POSTs each notification as JSON to a configured URL."""

    def __init__(
        self,
        webhook_url: str,
        timeout: float = 5.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.webhook_url = webhook_url
        self.timeout = timeout
        self._client = client

    async def notify(self, target_user_id: str, notification: DebateNotification) -> None:
        body = {"target_user_id": target_user_id, **notification.model_dump()}
        try:
            if self._client is not None:
                response = await self._client.post(self.webhook_url, json=body)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(self.webhook_url, json=body)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise NotificationFailedError(
                f"Webhook delivery to {target_user_id} failed: {e}"
            ) from e

        logger.debug(f"Delivered {notification.type} for {notification.debate_id} to webhook")
