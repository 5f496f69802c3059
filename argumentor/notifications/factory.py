"""Factory for creating the configured notifier."""

import logging

from argumentor.config.settings import NotificationConfig
from .base import LoggingNotifier, Notifier
from .webhook import WebhookNotifier

logger = logging.getLogger(__name__)


def create_notifier(config: NotificationConfig) -> Notifier:
    """Webhook notifier when a URL is configured and enabled, else log only."""
    if config.enabled and config.webhook_url:
        logger.info(f"Using webhook notifier: {config.webhook_url}")
        return WebhookNotifier(config.webhook_url, timeout=config.timeout_seconds)

    logger.info("No notification webhook configured - notifications will only be logged")
    return LoggingNotifier()
