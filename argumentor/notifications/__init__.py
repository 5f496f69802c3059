"""Delivery of debate events to users."""

from .base import DebateNotification, LoggingNotifier, Notifier
from .factory import create_notifier
from .webhook import WebhookNotifier

__all__ = [
    "DebateNotification",
    "LoggingNotifier",
    "Notifier",
    "WebhookNotifier",
    "create_notifier",
]
