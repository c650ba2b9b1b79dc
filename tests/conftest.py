"""Shared pytest fixtures for all tests."""

import json
from pathlib import Path
from typing import Any

import pytest

from topgg_client.common.config import HTTPConfig


def _load(name: str) -> Any:
    examples_dir = Path(__file__).parent.parent / "examples"
    with open(examples_dir / name, encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def bot_response() -> dict:
    """Load a bot response example."""
    return _load("topgg_bot_response.json")


@pytest.fixture
def user_response() -> dict:
    """Load a user response example."""
    return _load("topgg_user_response.json")


@pytest.fixture
def votes_response() -> list:
    """Load a vote list response example."""
    return _load("topgg_votes_response.json")


@pytest.fixture
def bot_stats_response() -> dict:
    """Load a bot stats response example."""
    return _load("topgg_bot_stats_response.json")


@pytest.fixture
def webhook_vote_payload() -> dict:
    """Load a webhook vote body example."""
    return _load("topgg_webhook_vote.json")


@pytest.fixture
def http_config() -> HTTPConfig:
    """Provide a sample HTTP configuration for tests."""
    return HTTPConfig(
        timeout=10,
        max_redirects=3,
        verify_ssl=True,
    )
