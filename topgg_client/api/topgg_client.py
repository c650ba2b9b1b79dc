"""top.gg API client for bot listing data, votes and server statistics."""

from typing import Any, Callable, Dict, List, Optional, TypeVar

import httpx
import structlog

from .base_client import RateLimitedAPIClient
from ..common.config import DEFAULT_BASE_URL, ClientConfig, HTTPConfig
from ..common.rate_limiter import RateLimiter
from ..parsers.topgg_models import (
    MAX_SNOWFLAKE,
    Bot,
    BotStats,
    BotStatsUpdate,
    PartialUser,
    User,
)
from ..parsers.topgg_parser import TopggParser

logger = structlog.get_logger(__name__)

T = TypeVar("T")

# Published directory limit
DEFAULT_REQUESTS_PER_MINUTE = 60


class TopggClient(RateLimitedAPIClient):
    """
    Client for the top.gg bot directory API.

    The client is bound to one bot (the owner of the token). Every method
    waits for a permit from the client's own rate limiter and then issues
    exactly one request. Read methods return ``None`` when the request fails,
    the body is not JSON, or the JSON has the wrong shape; they never raise
    for those cases. Nothing is retried.

    API Rate Limit: 60 requests per minute

    Example:
        >>> import asyncio
        >>> from topgg_client import TopggClient
        >>>
        >>> async def main():
        ...     async with TopggClient(668701133069352961, "topgg-token") as client:
        ...         bot = await client.get_my_bot()
        ...         voters = await client.get_my_voters()
        ...         voted = await client.has_voted_for_me(195512978634833920)
        ...         await client.post_bot_stats(server_count=978, shard_count=3)
        >>>
        >>> asyncio.run(main())
    """

    def __init__(
        self,
        bot_id: int,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        http_config: Optional[HTTPConfig] = None,
        rate_limiter: Optional[RateLimiter] = None,
    ):
        """
        Initialize the top.gg API client.

        Args:
            bot_id: ID of the bot the token belongs to
            token: top.gg API token, sent verbatim as the Authorization header
            base_url: Base URL of the directory API
            http_config: HTTP configuration (defaults to HTTPConfig())
            rate_limiter: Rate limiter to use; a fresh 60 requests/minute
                limiter owned by this client is created when omitted

        Raises:
            ValueError: If bot_id is outside the unsigned 64-bit range or token is empty
        """
        if not 0 <= bot_id <= MAX_SNOWFLAKE:
            raise ValueError(f"bot_id out of range: {bot_id}")
        if not token:
            raise ValueError("token must not be empty")

        if rate_limiter is None:
            rate_limiter = RateLimiter(requests_per_minute=DEFAULT_REQUESTS_PER_MINUTE)

        super().__init__(
            http_config=http_config or HTTPConfig(),
            base_url=base_url.rstrip("/"),
            rate_limiter=rate_limiter,
            auth_headers={"Authorization": token},
        )
        self._bot_id = bot_id
        self.logger = self.logger.bind(client_bot_id=bot_id)

        self.logger.info("topgg_client_initialized", base_url=self.base_url)

    @property
    def bot_id(self) -> int:
        """ID of the bot this client acts for."""
        return self._bot_id

    @classmethod
    def from_config(cls, config: ClientConfig) -> "TopggClient":
        """
        Create a top.gg client from ClientConfig.

        Args:
            config: Client configuration

        Returns:
            Configured TopggClient instance

        Raises:
            ValueError: If no token is configured or set in TOPGG_TOKEN

        Example:
            >>> config = ClientConfig(bot_id=668701133069352961, token="topgg-token")
            >>> client = TopggClient.from_config(config)
        """
        rate_limiter = RateLimiter(
            requests_per_minute=config.rate_limit.requests_per_minute,
            burst_size=config.rate_limit.burst_size,
        )

        return cls(
            bot_id=config.bot_id,
            token=config.resolve_token(),
            base_url=config.base_url,
            http_config=config.http,
            rate_limiter=rate_limiter,
        )

    async def _fetch(
        self,
        operation: str,
        path: str,
        parse: Callable[[Any], T],
        params: Optional[Dict[str, Any]] = None,
    ) -> Optional[T]:
        """
        GET a path and parse the JSON body, collapsing every failure to None.

        Args:
            operation: Operation name used in log events
            path: Request path relative to the base URL
            parse: Callable turning decoded JSON into the result
            params: Optional query parameters

        Returns:
            Parsed result, or None if the request or decoding failed
        """
        try:
            response = await self.get(path, params=params)
            response.raise_for_status()
            return parse(response.json())
        except httpx.HTTPError as e:
            self.logger.warning(
                "topgg_request_failed",
                operation=operation,
                path=path,
                error=str(e),
                error_type=type(e).__name__,
            )
        except ValueError as e:
            # Covers json.JSONDecodeError and pydantic.ValidationError
            self.logger.warning(
                "topgg_response_invalid",
                operation=operation,
                path=path,
                error=str(e),
                error_type=type(e).__name__,
            )
        return None

    async def get_bot(self, bot_id: int) -> Optional[Bot]:
        """
        Get the listing of a bot.

        Args:
            bot_id: Bot ID

        Returns:
            Bot model, or None if the bot could not be fetched

        Example:
            >>> bot = await client.get_bot(668701133069352961)
            >>> print(f"{bot.username} has {bot.points} votes")
        """
        self.logger.info("topgg_get_bot", bot_id=bot_id)
        return await self._fetch("get_bot", f"/bots/{bot_id}", TopggParser.parse_bot)

    async def get_my_bot(self) -> Optional[Bot]:
        """Get the listing of this client's own bot."""
        return await self.get_bot(self._bot_id)

    async def get_user(self, user_id: int) -> Optional[User]:
        """
        Get a user's directory profile.

        Args:
            user_id: User ID

        Returns:
            User model, or None if the user could not be fetched

        Example:
            >>> user = await client.get_user(195512978634833920)
            >>> print(user.github)
        """
        self.logger.info("topgg_get_user", user_id=user_id)
        return await self._fetch("get_user", f"/users/{user_id}", TopggParser.parse_user)

    async def get_votes(self, bot_id: int) -> Optional[List[PartialUser]]:
        """
        Get the users who recently voted for a bot.

        The directory returns at most the last 1000 votes.

        Args:
            bot_id: Bot ID

        Returns:
            List of PartialUser models, or None on failure
        """
        self.logger.info("topgg_get_votes", bot_id=bot_id)
        return await self._fetch("get_votes", f"/bots/{bot_id}/votes", TopggParser.parse_votes)

    async def get_my_votes(self) -> Optional[List[PartialUser]]:
        """Get the users who recently voted for this client's own bot."""
        return await self.get_votes(self._bot_id)

    async def get_voters(self, bot_id: int) -> Optional[List[int]]:
        """
        Get the IDs of the users who recently voted for a bot.

        Args:
            bot_id: Bot ID

        Returns:
            Voter IDs in the order the directory returned them, or None on failure

        Example:
            >>> voters = await client.get_voters(668701133069352961)
            >>> print(f"{len(voters)} recent voters")
        """
        self.logger.info("topgg_get_voters", bot_id=bot_id)
        return await self._fetch(
            "get_voters", f"/bots/{bot_id}/votes", TopggParser.parse_voter_ids
        )

    async def get_my_voters(self) -> Optional[List[int]]:
        """Get the IDs of the users who recently voted for this client's own bot."""
        return await self.get_voters(self._bot_id)

    async def has_voted(self, bot_id: int, user_id: int) -> Optional[bool]:
        """
        Check whether a user has voted for a bot in the last 12 hours.

        Args:
            bot_id: Bot ID
            user_id: User ID

        Returns:
            True if the user has voted, False if not, None on failure

        Example:
            >>> if await client.has_voted(668701133069352961, 195512978634833920):
            ...     print("Thanks for voting!")
        """
        self.logger.info("topgg_has_voted", bot_id=bot_id, user_id=user_id)
        return await self._fetch(
            "has_voted",
            f"/bots/{bot_id}/check",
            TopggParser.parse_vote_check,
            params={"userId": user_id},
        )

    async def has_voted_for_me(self, user_id: int) -> Optional[bool]:
        """Check whether a user has voted for this client's own bot."""
        return await self.has_voted(self._bot_id, user_id)

    async def get_bot_stats(self, bot_id: int) -> Optional[BotStats]:
        """
        Get a bot's published server statistics.

        Args:
            bot_id: Bot ID

        Returns:
            BotStats model, or None on failure
        """
        self.logger.info("topgg_get_bot_stats", bot_id=bot_id)
        return await self._fetch(
            "get_bot_stats", f"/bots/{bot_id}/stats", TopggParser.parse_bot_stats
        )

    async def get_my_bot_stats(self) -> Optional[BotStats]:
        """Get this client's own bot's published server statistics."""
        return await self.get_bot_stats(self._bot_id)

    async def post_bot_stats(
        self,
        server_count: Optional[int] = None,
        shards: Optional[List[int]] = None,
        shard_id: Optional[int] = None,
        shard_count: Optional[int] = None,
    ) -> bool:
        """
        Publish server statistics for this client's own bot.

        Either ``server_count`` or ``shards`` must be given; otherwise nothing
        is sent and no rate-limit permit is used. ``shard_id`` marks
        ``server_count`` as the count of a single shard. Absent fields are
        left out of the request body.

        Args:
            server_count: Total server count (or the count of shard ``shard_id``)
            shards: Server count of every shard, by shard index
            shard_id: Index of the shard ``server_count`` belongs to
            shard_count: Total number of shards

        Returns:
            True if the directory accepted the stats, False if nothing was
            sent, the request failed, or the directory answered with an error

        Raises:
            pydantic.ValidationError: If a count or index is negative

        Example:
            >>> await client.post_bot_stats(shards=[142, 532, 304])
            >>> await client.post_bot_stats(server_count=142, shard_id=0)
            >>> await client.post_bot_stats(server_count=978, shard_count=3)
        """
        update = BotStatsUpdate(
            server_count=server_count,
            shards=shards,
            shard_id=shard_id,
            shard_count=shard_count,
        )

        if not update.has_counts:
            self.logger.debug("topgg_post_bot_stats_skipped", reason="no_counts")
            return False

        path = f"/bots/{self._bot_id}/stats"
        self.logger.info("topgg_post_bot_stats", **update.to_payload())

        try:
            response = await self.post(path, json=update.to_payload())
        except httpx.HTTPError as e:
            self.logger.warning(
                "topgg_post_bot_stats_failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

        if not response.is_success:
            self.logger.warning(
                "topgg_post_bot_stats_rejected",
                status_code=response.status_code,
            )
            return False

        return True
