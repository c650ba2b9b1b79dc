"""Shared pytest fixtures for webhook API tests."""

from typing import AsyncGenerator

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from topgg_client.webhook.app import create_webhook_app
from topgg_client.webhook.queue import VoteQueue

WEBHOOK_SECRET = "test-webhook-secret"


@pytest.fixture
def webhook_secret() -> str:
    """Provide the shared webhook secret."""
    return WEBHOOK_SECRET


@pytest.fixture
def vote_queue() -> VoteQueue:
    """Provide an unbounded vote queue."""
    return VoteQueue()


@pytest.fixture
def webhook_app(webhook_secret: str, vote_queue: VoteQueue) -> FastAPI:
    """Provide the webhook app serving the root path."""
    return create_webhook_app(webhook_secret, vote_queue)


@pytest_asyncio.fixture
async def webhook_client(webhook_app: FastAPI) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Provide an in-process HTTP client for the webhook app."""
    transport = httpx.ASGITransport(app=webhook_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://webhook.test") as client:
        yield client


@pytest.fixture
def auth_headers(webhook_secret: str) -> dict:
    """Provide headers carrying the correct secret."""
    return {"Authorization": webhook_secret}
