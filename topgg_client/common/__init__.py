"""Common utilities and shared components for topgg_client."""

from .config import (
    DEFAULT_BASE_URL,
    Config,
    ClientConfig,
    HTTPConfig,
    LoggingConfig,
    RateLimitConfig,
)
from .logging_config import setup_logging
from .http_client import AsyncHTTPClient
from .rate_limiter import RateLimiter

__all__ = [
    "DEFAULT_BASE_URL",
    "Config",
    "ClientConfig",
    "HTTPConfig",
    "LoggingConfig",
    "RateLimitConfig",
    "setup_logging",
    "AsyncHTTPClient",
    "RateLimiter",
]
