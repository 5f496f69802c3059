"""Notification contracts and the default logging notifier."""

import logging
import time
from typing import Protocol

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


def _now_millis() -> int:
    return int(time.time() * 1000)


class DebateNotification(BaseModel):
    """Payload announcing a newly created debate."""

    type: str = "new_debate"
    debate_id: str
    topic_name: str
    timestamp: int = Field(default_factory=_now_millis)  # epoch milliseconds


class Notifier(Protocol):
    """Best-effort push of events to a user.

    Implementations raise NotificationFailedError when delivery fails.
    """

    async def notify(self, target_user_id: str, notification: DebateNotification) -> None: ...


class LoggingNotifier:
    """Notifier that only records the event in the log."""

    async def notify(self, target_user_id: str, notification: DebateNotification) -> None:
        logger.info(
            f"Notify {target_user_id}: {notification.type} "
            f"(debate {notification.debate_id}, topic {notification.topic_name})"
        )
