"""Pydantic models for top.gg API responses and webhook payloads."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

MAX_SNOWFLAKE = 2**64 - 1

# Keys of the user "social" mapping that are surfaced as fields
SOCIAL_KEYS = ("youtube", "reddit", "twitter", "instagram", "github")


def parse_snowflake(value: Any) -> int:
    """
    Parse a Discord snowflake from its wire form.

    The directory encodes every ID as a decimal string so that 64-bit values
    survive JavaScript number precision. Plain integers are accepted too.

    Args:
        value: Decimal string (or int) to parse

    Returns:
        The ID as an int in the unsigned 64-bit range

    Raises:
        ValueError: If the value is not a non-negative decimal that fits in 64 bits

    Example:
        >>> parse_snowflake("668701133069352961")
        668701133069352961
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid snowflake: {value!r}")
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str) and value.isascii() and value.isdigit():
        parsed = int(value)
    else:
        raise ValueError(f"Invalid snowflake: {value!r}")

    if not 0 <= parsed <= MAX_SNOWFLAKE:
        raise ValueError(f"Snowflake out of range: {value!r}")
    return parsed


class Bot(BaseModel):
    """Model for a bot listed on the directory."""

    id: int = Field(description="Bot user ID")
    username: str = Field(description="Bot username")
    discriminator: str = Field(description="Bot discriminator")
    avatar: Optional[str] = Field(default=None, description="Avatar hash")
    def_avatar: str = Field(alias="defAvatar", description="Default avatar hash")
    lib: str = Field(description="Library the bot is written with")
    prefix: str = Field(description="Command prefix")
    short_desc: str = Field(alias="shortdesc", description="Short description")
    long_desc: Optional[str] = Field(
        default=None, alias="longdesc", description="Long description (may contain HTML/markdown)"
    )
    tags: List[str] = Field(default_factory=list, description="Tags")
    website: Optional[str] = Field(default=None, description="Website URL")
    support: Optional[str] = Field(default=None, description="Support server invite code")
    github: Optional[str] = Field(default=None, description="GitHub repository URL")
    owners: List[int] = Field(default_factory=list, description="Owner user IDs")
    guilds: List[int] = Field(default_factory=list, description="Featured guild IDs")
    invite: Optional[str] = Field(default=None, description="Custom bot invite URL")
    date: str = Field(description="Date the bot was approved")
    certified_bot: bool = Field(alias="certifiedBot", description="Certified status")
    vanity: Optional[str] = Field(default=None, description="Vanity URL slug")
    points: int = Field(ge=0, description="Total upvotes")
    monthly_points: int = Field(alias="monthlyPoints", ge=0, description="Upvotes this month")
    donate_bot_guild_id: Optional[int] = Field(
        default=None, alias="donatebotguildid", description="DonateBot guild ID"
    )

    model_config = {
        "extra": "ignore",
        "frozen": True,
        "populate_by_name": True,
    }

    @field_validator("id", mode="before")
    @classmethod
    def parse_id(cls, v: Any) -> int:
        """Parse the string-encoded bot ID."""
        return parse_snowflake(v)

    @field_validator("owners", "guilds", mode="before")
    @classmethod
    def parse_id_list(cls, v: Any) -> List[int]:
        """Parse string-encoded ID lists, keeping their order."""
        if v is None:
            return []
        if not isinstance(v, list):
            raise ValueError("Expected a list of IDs")
        return [parse_snowflake(item) for item in v]

    @field_validator("donate_bot_guild_id", mode="before")
    @classmethod
    def parse_optional_guild_id(cls, v: Any) -> Optional[int]:
        """Treat an unparsable DonateBot guild ID as absent."""
        try:
            return parse_snowflake(v)
        except ValueError:
            return None


class User(BaseModel):
    """Model for a directory user profile."""

    id: int = Field(description="User ID")
    username: str = Field(description="Username")
    discriminator: str = Field(description="Discriminator")
    avatar: Optional[str] = Field(default=None, description="Avatar hash")
    def_avatar: str = Field(alias="defAvatar", description="Default avatar hash")
    bio: Optional[str] = Field(default=None, description="Profile bio")
    banner: Optional[str] = Field(default=None, description="Profile banner URL")
    youtube: Optional[str] = Field(default=None, description="YouTube channel")
    reddit: Optional[str] = Field(default=None, description="Reddit username")
    twitter: Optional[str] = Field(default=None, description="Twitter username")
    instagram: Optional[str] = Field(default=None, description="Instagram username")
    github: Optional[str] = Field(default=None, description="GitHub username")
    color: Optional[str] = Field(default=None, description="Custom profile color (hex)")
    supporter: bool = Field(description="Supporter status")
    certified_dev: bool = Field(alias="certifiedDev", description="Certified developer status")
    moderator: bool = Field(alias="mod", description="Moderator status")
    web_moderator: bool = Field(alias="webMod", description="Website moderator status")
    admin: bool = Field(description="Admin status")

    model_config = {
        "extra": "ignore",
        "frozen": True,
        "populate_by_name": True,
    }

    @model_validator(mode="before")
    @classmethod
    def flatten_social(cls, data: Any) -> Any:
        """Lift the known keys of the wire ``social`` mapping into fields."""
        if not isinstance(data, dict) or "social" not in data:
            return data

        data = dict(data)
        social = data.pop("social") or {}
        if not isinstance(social, dict):
            raise ValueError("social must be a mapping")

        for key in SOCIAL_KEYS:
            if key in social:
                data[key] = social[key]
        return data

    @field_validator("id", mode="before")
    @classmethod
    def parse_id(cls, v: Any) -> int:
        """Parse the string-encoded user ID."""
        return parse_snowflake(v)


class PartialUser(BaseModel):
    """Model for the abbreviated user entries in vote lists."""

    id: int = Field(description="User ID")
    username: str = Field(description="Username")
    discriminator: Optional[str] = Field(default=None, description="Discriminator")
    avatar: Optional[str] = Field(default=None, description="Avatar hash")

    model_config = {
        "extra": "ignore",
        "frozen": True,
    }

    @field_validator("id", mode="before")
    @classmethod
    def parse_id(cls, v: Any) -> int:
        """Parse the string-encoded user ID."""
        return parse_snowflake(v)


class VoteCheck(BaseModel):
    """Model for the vote check response."""

    voted: int = Field(description="0 if the user has not voted, non-zero otherwise")

    model_config = {
        "extra": "ignore",
        "frozen": True,
    }

    @property
    def has_voted(self) -> bool:
        """Whether the user has voted."""
        return self.voted != 0


class BotStats(BaseModel):
    """Model for a bot's published server statistics."""

    server_count: Optional[int] = Field(default=None, ge=0, description="Total server count")
    shards: List[int] = Field(default_factory=list, description="Server count per shard")
    shard_count: Optional[int] = Field(default=None, ge=0, description="Number of shards")

    model_config = {
        "extra": "ignore",
        "frozen": True,
    }

    @field_validator("shards", mode="before")
    @classmethod
    def default_shards(cls, v: Any) -> Any:
        """The directory sends null when no shard list was ever posted."""
        return [] if v is None else v


class BotStatsUpdate(BaseModel):
    """Request body for publishing bot statistics.

    ``shard_id`` is only meaningful together with ``server_count``: it tells
    the directory which shard the count belongs to.
    """

    server_count: Optional[int] = Field(default=None, ge=0, description="Total or per-shard server count")
    shards: Optional[List[int]] = Field(default=None, description="Server count per shard")
    shard_id: Optional[int] = Field(default=None, ge=0, description="Index of the shard being posted")
    shard_count: Optional[int] = Field(default=None, ge=0, description="Total number of shards")

    model_config = {
        "extra": "forbid",
        "frozen": True,
    }

    @field_validator("shards")
    @classmethod
    def validate_shards(cls, v: Optional[List[int]]) -> Optional[List[int]]:
        """Validate that per-shard counts are non-negative."""
        if v is not None and any(count < 0 for count in v):
            raise ValueError("Shard server counts must be non-negative")
        return v

    @property
    def has_counts(self) -> bool:
        """Whether there is anything to publish."""
        return self.server_count is not None or self.shards is not None

    def to_payload(self) -> Dict[str, Any]:
        """Serialize for the wire, omitting absent fields."""
        return self.model_dump(exclude_none=True)


class WebhookVote(BaseModel):
    """Model for a vote notification pushed by the directory.

    IDs are kept as strings so that an odd ID never blocks delivery of an
    otherwise valid vote; use ``bot_id`` / ``user_id`` for the numeric form.
    """

    bot: str = Field(description="ID of the bot that was voted for")
    user: str = Field(description="ID of the user who voted")
    kind: str = Field(alias="type", description="Vote type ('upvote' or 'test')")
    is_weekend: bool = Field(alias="isWeekend", description="Whether the weekend multiplier applied")
    query: Optional[str] = Field(default=None, description="Query string from the vote page URL")

    model_config = {
        "extra": "ignore",
        "frozen": True,
    }

    @property
    def bot_id(self) -> int:
        """Numeric bot ID (raises ValueError if malformed)."""
        return parse_snowflake(self.bot)

    @property
    def user_id(self) -> int:
        """Numeric voter ID (raises ValueError if malformed)."""
        return parse_snowflake(self.user)
