"""Configuration models using Pydantic for validation."""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import structlog
import yaml
from pydantic import BaseModel, Field, field_validator
from ruamel.yaml import YAML

logger = structlog.get_logger(__name__)

DEFAULT_BASE_URL = "https://top.gg/api"
TOKEN_ENV_VAR = "TOPGG_TOKEN"


class HTTPConfig(BaseModel):
    """Configuration for the HTTP connection pool."""

    timeout: int = Field(
        default=30,
        ge=1,
        le=300,
        description="Request timeout in seconds",
    )
    max_redirects: int = Field(
        default=5,
        ge=0,
        le=20,
        description="Maximum number of redirects to follow",
    )
    verify_ssl: bool = Field(
        default=True,
        description="Whether to verify SSL certificates",
    )
    max_connections: int = Field(
        default=100,
        ge=1,
        le=1000,
        description="Maximum number of connections in the pool",
    )
    max_keepalive_connections: int = Field(
        default=20,
        ge=0,
        le=100,
        description="Maximum number of keep-alive connections",
    )


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = Field(
        default="INFO",
        description="Log level: DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )
    format: str = Field(
        default="json",
        description="Log format: json or text",
    )
    third_party: Dict[str, str] = Field(
        default_factory=dict,
        description="Log levels for third-party libraries (advanced)",
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Validate log format."""
        valid_formats = ["json", "text"]
        v_lower = v.lower()
        if v_lower not in valid_formats:
            raise ValueError(f"Invalid format: {v}. Must be one of {valid_formats}")
        return v_lower


class RateLimitConfig(BaseModel):
    """Configuration for the outbound token bucket.

    The directory allows 60 requests per minute; the bucket holds the same
    number of tokens so a full minute's allowance can be spent back-to-back.
    """

    requests_per_minute: int = Field(
        default=60,
        ge=1,
        description="Maximum requests per minute",
    )
    burst_size: Optional[int] = Field(
        default=None,
        ge=1,
        description="Bucket capacity (defaults to requests_per_minute)",
    )


class ClientConfig(BaseModel):
    """Configuration for the directory API client."""

    bot_id: int = Field(
        ge=0,
        lt=2**64,
        description="ID of the bot that owns the token",
    )
    token: Optional[str] = Field(
        default=None,
        description=f"Directory API token (falls back to the {TOKEN_ENV_VAR} env var)",
    )
    base_url: str = Field(
        default=DEFAULT_BASE_URL,
        description="Base URL of the directory REST API",
    )
    http: HTTPConfig = Field(
        default_factory=HTTPConfig,
        description="HTTP connection pool configuration",
    )
    rate_limit: RateLimitConfig = Field(
        default_factory=RateLimitConfig,
        description="Outbound rate limit configuration",
    )

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the base URL so paths can be appended with a leading slash."""
        return v.rstrip("/")

    def resolve_token(self) -> str:
        """
        Return the configured token, falling back to the environment.

        Returns:
            The API token

        Raises:
            ValueError: If no token is configured and TOPGG_TOKEN is unset
        """
        token = self.token or os.environ.get(TOKEN_ENV_VAR)
        if not token:
            raise ValueError(
                f"No directory token configured. Set client.token or the {TOKEN_ENV_VAR} "
                "environment variable."
            )
        return token


class Config(BaseModel):
    """Root configuration for applications embedding topgg_client."""

    client: Optional[ClientConfig] = Field(
        default=None,
        description="Directory API client configuration",
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging configuration",
    )

    @classmethod
    def from_yaml(cls, path: Path) -> "Config":
        """
        Load configuration from YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            Config object with validated configuration

        Raises:
            FileNotFoundError: If config file doesn't exist
            ruamel.yaml.YAMLError: If YAML is invalid
            pydantic.ValidationError: If configuration is invalid

        Example:
            >>> from pathlib import Path
            >>> config = Config.from_yaml(Path("config.yaml"))
        """
        yaml_loader = YAML(typ="safe")

        with open(path, "r", encoding="utf-8") as f:
            data = yaml_loader.load(f)

        logger.debug("config_loaded", path=str(path))
        return cls.model_validate(data or {})

    @classmethod
    def from_yaml_string(cls, yaml_string: str) -> "Config":
        """
        Load configuration from YAML string.

        Args:
            yaml_string: YAML configuration as string

        Returns:
            Config object with validated configuration

        Example:
            >>> yaml_str = "client:\\n  bot_id: 668701133069352961"
            >>> config = Config.from_yaml_string(yaml_str)
        """
        data = yaml.safe_load(yaml_string)
        return cls.model_validate(data or {})
