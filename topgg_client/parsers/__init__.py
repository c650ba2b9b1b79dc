"""Models and parsers for top.gg payloads."""

from .topgg_models import (
    MAX_SNOWFLAKE,
    SOCIAL_KEYS,
    Bot,
    BotStats,
    BotStatsUpdate,
    PartialUser,
    User,
    VoteCheck,
    WebhookVote,
    parse_snowflake,
)
from .topgg_parser import TopggParser

__all__ = [
    "MAX_SNOWFLAKE",
    "SOCIAL_KEYS",
    "Bot",
    "BotStats",
    "BotStatsUpdate",
    "PartialUser",
    "User",
    "VoteCheck",
    "WebhookVote",
    "parse_snowflake",
    "TopggParser",
]
