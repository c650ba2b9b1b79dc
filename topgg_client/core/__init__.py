"""Core exceptions for topgg_client."""

from .exceptions import (
    TopggError,
    VoteQueueFullError,
    WebhookBindError,
    WebhookError,
    WebhookStoppedError,
)

__all__ = [
    "TopggError",
    "VoteQueueFullError",
    "WebhookBindError",
    "WebhookError",
    "WebhookStoppedError",
]
