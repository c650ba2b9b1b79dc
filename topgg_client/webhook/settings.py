"""Webhook receiver settings using Pydantic BaseSettings."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .queue import OverflowPolicy


class WebhookSettings(BaseSettings):
    """
    Webhook receiver settings.

    Settings can be configured via environment variables with the prefix
    TOPGG_WEBHOOK_. For example: TOPGG_WEBHOOK_PORT=5000,
    TOPGG_WEBHOOK_SECRET=my-webhook-secret

    Attributes:
        host: Bind address (all interfaces by default)
        port: Bind port
        secret: Shared secret the directory sends in the Authorization header
        path: URL path the directory posts to
        max_queue_size: Maximum pending votes (0 = unbounded)
        overflow: What to do when a bounded queue is full
    """

    model_config = SettingsConfigDict(
        env_prefix="TOPGG_WEBHOOK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = "0.0.0.0"
    port: int = Field(default=5000, ge=0, le=65535)
    secret: str
    path: str = "/"
    max_queue_size: int = Field(default=0, ge=0)
    overflow: OverflowPolicy = OverflowPolicy.DROP_OLDEST

    @field_validator("secret")
    @classmethod
    def validate_secret(cls, v: str) -> str:
        """Refuse an empty shared secret or one that could never match a header."""
        if not v:
            raise ValueError("TOPGG_WEBHOOK_SECRET must be set")
        if v != v.strip():
            raise ValueError("TOPGG_WEBHOOK_SECRET must not have leading or trailing whitespace")
        return v

    @field_validator("path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        """Ensure the path is absolute."""
        return v if v.startswith("/") else f"/{v}"
