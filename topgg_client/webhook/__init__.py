"""Webhook receiver for vote notifications pushed by the directory."""

from .app import create_webhook_app
from .queue import OverflowPolicy, VoteQueue
from .receiver import WebhookReceiver, start_webhook
from .settings import WebhookSettings

__all__ = [
    "create_webhook_app",
    "OverflowPolicy",
    "VoteQueue",
    "WebhookReceiver",
    "start_webhook",
    "WebhookSettings",
]
