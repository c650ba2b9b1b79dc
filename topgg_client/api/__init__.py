"""API clients for the top.gg directory."""

from .base_client import RateLimitedAPIClient
from .topgg_client import TopggClient

__all__ = [
    "RateLimitedAPIClient",
    "TopggClient",
]
