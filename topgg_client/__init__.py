"""topgg_client package initialization."""

from .common.config import (
    DEFAULT_BASE_URL,
    Config,
    ClientConfig,
    HTTPConfig,
    LoggingConfig,
    RateLimitConfig,
)
from .common.logging_config import setup_logging
from .common.http_client import AsyncHTTPClient
from .common.rate_limiter import RateLimiter
from .api.base_client import RateLimitedAPIClient
from .api.topgg_client import TopggClient
from .parsers import (
    Bot,
    BotStats,
    BotStatsUpdate,
    PartialUser,
    User,
    VoteCheck,
    WebhookVote,
    TopggParser,
    parse_snowflake,
)
from .core.exceptions import (
    TopggError,
    VoteQueueFullError,
    WebhookBindError,
    WebhookError,
    WebhookStoppedError,
)
from .webhook import (
    OverflowPolicy,
    VoteQueue,
    WebhookReceiver,
    WebhookSettings,
    create_webhook_app,
    start_webhook,
)

__version__ = "0.1.0"
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
    "RateLimitedAPIClient",
    "TopggClient",
    "Bot",
    "BotStats",
    "BotStatsUpdate",
    "PartialUser",
    "User",
    "VoteCheck",
    "WebhookVote",
    "TopggParser",
    "parse_snowflake",
    "TopggError",
    "VoteQueueFullError",
    "WebhookBindError",
    "WebhookError",
    "WebhookStoppedError",
    "OverflowPolicy",
    "VoteQueue",
    "WebhookReceiver",
    "WebhookSettings",
    "create_webhook_app",
    "start_webhook",
]
