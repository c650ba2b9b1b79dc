"""Parser for top.gg API responses and webhook payloads."""

from typing import Any, Dict, List, Union

from .topgg_models import (
    Bot,
    BotStats,
    PartialUser,
    User,
    VoteCheck,
    WebhookVote,
)


class TopggParser:
    """Parser for top.gg API responses."""

    @staticmethod
    def parse_bot(data: Dict[str, Any]) -> Bot:
        """
        Parse a bot response into a validated model.

        Args:
            data: Raw ``GET /bots/{id}`` response

        Returns:
            Validated Bot model

        Raises:
            ValidationError: If the response does not match the bot shape or
                any ID other than the DonateBot guild ID is malformed

        Example:
            >>> response = await client.get("/bots/668701133069352961")
            >>> bot = TopggParser.parse_bot(response.json())
            >>> bot.owners
            [195512978634833920]
        """
        return Bot.model_validate(data)

    @staticmethod
    def parse_user(data: Dict[str, Any]) -> User:
        """
        Parse a user response into a validated model.

        Social links are looked up by fixed key in the ``social`` mapping;
        unknown keys are ignored.

        Args:
            data: Raw ``GET /users/{id}`` response

        Returns:
            Validated User model

        Raises:
            ValidationError: If response data is invalid
        """
        return User.model_validate(data)

    @staticmethod
    def parse_votes(data: List[Dict[str, Any]]) -> List[PartialUser]:
        """
        Parse a vote list response.

        Args:
            data: Raw ``GET /bots/{id}/votes`` response (a JSON array)

        Returns:
            List of PartialUser models in response order

        Raises:
            ValueError: If the response is not a list
            ValidationError: If an entry is invalid
        """
        if not isinstance(data, list):
            raise ValueError(f"Expected a list of voters, got {type(data).__name__}")
        return [PartialUser.model_validate(item) for item in data]

    @staticmethod
    def parse_voter_ids(data: List[Dict[str, Any]]) -> List[int]:
        """
        Parse a vote list response down to voter IDs.

        Args:
            data: Raw ``GET /bots/{id}/votes`` response

        Returns:
            Voter user IDs in response order
        """
        return [voter.id for voter in TopggParser.parse_votes(data)]

    @staticmethod
    def parse_vote_check(data: Dict[str, Any]) -> bool:
        """
        Parse a vote check response.

        Args:
            data: Raw ``GET /bots/{id}/check`` response, e.g. ``{"voted": 1}``

        Returns:
            False for ``voted == 0``, True for any other value

        Example:
            >>> TopggParser.parse_vote_check({"voted": 0})
            False
            >>> TopggParser.parse_vote_check({"voted": -1})
            True
        """
        return VoteCheck.model_validate(data).has_voted

    @staticmethod
    def parse_bot_stats(data: Dict[str, Any]) -> BotStats:
        """
        Parse a bot stats response.

        Args:
            data: Raw ``GET /bots/{id}/stats`` response

        Returns:
            Validated BotStats model
        """
        return BotStats.model_validate(data)

    @staticmethod
    def parse_webhook_vote(data: Union[str, bytes, Dict[str, Any]]) -> WebhookVote:
        """
        Parse a webhook request body.

        Args:
            data: Raw JSON body (str/bytes) or an already decoded mapping

        Returns:
            Validated WebhookVote model

        Raises:
            ValidationError: If the body is not JSON or misses required fields
        """
        if isinstance(data, (str, bytes)):
            return WebhookVote.model_validate_json(data)
        return WebhookVote.model_validate(data)
