"""Exceptions raised by topgg_client."""

from typing import Optional


class TopggError(Exception):
    """Base exception for topgg_client errors."""

    pass


# Webhook exceptions
class WebhookError(TopggError):
    """Base exception for webhook receiver errors."""

    pass


class WebhookBindError(WebhookError):
    """Raised when the webhook listener cannot bind its socket."""

    def __init__(self, message: str, host: Optional[str] = None, port: Optional[int] = None):
        super().__init__(message)
        self.host = host
        self.port = port


class VoteQueueFullError(WebhookError):
    """Raised when a bounded vote queue refuses a new vote."""

    def __init__(self, max_size: int):
        super().__init__(f"Vote queue is full ({max_size} pending votes)")
        self.max_size = max_size


class WebhookStoppedError(WebhookError):
    """Raised when waiting for a vote on a receiver that has been stopped."""

    def __init__(self) -> None:
        super().__init__("Webhook receiver stopped and no votes are pending")
