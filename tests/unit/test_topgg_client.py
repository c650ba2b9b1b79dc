"""Tests for the TopggClient class."""

import json

import httpx
import pytest
import respx
import structlog
from pydantic import ValidationError

from topgg_client.api.topgg_client import TopggClient
from topgg_client.common.config import ClientConfig, RateLimitConfig
from topgg_client.common.rate_limiter import RateLimiter
from topgg_client.parsers.topgg_models import MAX_SNOWFLAKE, Bot, BotStats, PartialUser, User

BASE_URL = "https://top.gg/api"
BOT_ID = 668701133069352961
OTHER_BOT_ID = 264811613708746752
USER_ID = 195512978634833920
TOKEN = "test-topgg-token"


@pytest.fixture(autouse=True)
def clear_topgg_env_vars(monkeypatch):
    """Clear the token env var so a real token never leaks into tests."""
    monkeypatch.delenv("TOPGG_TOKEN", raising=False)


@pytest.fixture
def limiter(fake_clock):
    """Create a 60/minute limiter on virtual time."""
    return RateLimiter(requests_per_minute=60, clock=fake_clock, sleep=fake_clock.sleep)


@pytest.fixture
def client(limiter):
    """Create an unopened client bound to BOT_ID."""
    return TopggClient(BOT_ID, TOKEN, rate_limiter=limiter)


class TestTopggClientSetup:
    """Tests for construction and configuration."""

    def test_defaults(self):
        """Test the default base URL, limiter and auth header."""
        client = TopggClient(BOT_ID, TOKEN)

        assert client.base_url == BASE_URL
        assert client.bot_id == BOT_ID
        assert client.auth_headers == {"Authorization": TOKEN}
        assert client.rate_limiter.rate == 1.0
        assert client.rate_limiter.burst_size == 60

    def test_each_client_owns_its_limiter(self):
        """Test that two clients never share a default limiter."""
        first = TopggClient(BOT_ID, TOKEN)
        second = TopggClient(BOT_ID, TOKEN)

        assert first.rate_limiter is not second.rate_limiter

    def test_base_url_trailing_slash_stripped(self):
        """Test that a trailing slash on the base URL is dropped."""
        client = TopggClient(BOT_ID, TOKEN, base_url="http://localhost:8080/api/")

        assert client.base_url == "http://localhost:8080/api"

    @pytest.mark.parametrize("bot_id", [-1, MAX_SNOWFLAKE + 1])
    def test_rejects_out_of_range_bot_id(self, bot_id):
        """Test that bot IDs outside the unsigned 64-bit range are refused."""
        with pytest.raises(ValueError, match="bot_id"):
            TopggClient(bot_id, TOKEN)

    def test_rejects_empty_token(self):
        """Test that an empty token is refused."""
        with pytest.raises(ValueError, match="token"):
            TopggClient(BOT_ID, "")

    def test_log_events_carry_bot_id(self):
        """Test that the client's logger is bound to the bot it acts for."""
        client = TopggClient(BOT_ID, TOKEN)

        context = structlog.get_context(client.logger)
        assert context["client_bot_id"] == BOT_ID
        assert context["component"] == "http_client"

    def test_from_config(self):
        """Test creating client from configuration."""
        config = ClientConfig(
            bot_id=BOT_ID,
            token=TOKEN,
            rate_limit=RateLimitConfig(requests_per_minute=30, burst_size=5),
        )

        client = TopggClient.from_config(config)

        assert client.bot_id == BOT_ID
        assert client.auth_headers["Authorization"] == TOKEN
        assert client.rate_limiter.rate == 0.5
        assert client.rate_limiter.burst_size == 5

    def test_from_config_env_token(self, monkeypatch):
        """Test that TOPGG_TOKEN is used when no token is configured."""
        monkeypatch.setenv("TOPGG_TOKEN", "env-token-789")

        client = TopggClient.from_config(ClientConfig(bot_id=BOT_ID))

        assert client.auth_headers["Authorization"] == "env-token-789"

    def test_from_config_explicit_token_wins(self, monkeypatch):
        """Test that a configured token takes precedence over TOPGG_TOKEN."""
        monkeypatch.setenv("TOPGG_TOKEN", "env-token-789")

        client = TopggClient.from_config(ClientConfig(bot_id=BOT_ID, token=TOKEN))

        assert client.auth_headers["Authorization"] == TOKEN

    def test_from_config_without_token(self):
        """Test that a missing token is reported."""
        with pytest.raises(ValueError, match="TOPGG_TOKEN"):
            TopggClient.from_config(ClientConfig(bot_id=BOT_ID))

    @pytest.mark.asyncio
    async def test_request_outside_context_manager(self, client):
        """Test that using the client without opening it is a programming error."""
        with pytest.raises(RuntimeError, match="Client not initialized"):
            await client.get_my_bot()


class TestTopggClientReads:
    """Tests for the read endpoints."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_bot(self, client, bot_response):
        """Test fetching a bot listing."""
        route = respx.get(f"{BASE_URL}/bots/{OTHER_BOT_ID}").mock(
            return_value=httpx.Response(200, json=bot_response)
        )

        async with client:
            bot = await client.get_bot(OTHER_BOT_ID)

        assert route.call_count == 1
        assert isinstance(bot, Bot)
        assert bot.username == "VoteBot"
        assert bot.owners == [195512978634833920, 129908908096487424]

    @pytest.mark.asyncio
    @respx.mock
    async def test_authorization_header_sent_verbatim(self, client, bot_response):
        """Test that the token is sent unmodified as the Authorization header."""
        route = respx.get(f"{BASE_URL}/bots/{BOT_ID}").mock(
            return_value=httpx.Response(200, json=bot_response)
        )

        async with client:
            await client.get_my_bot()

        assert route.calls.last.request.headers["Authorization"] == TOKEN

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_my_bot_uses_own_id(self, client, bot_response):
        """Test that the convenience variant targets the client's bot."""
        route = respx.get(f"{BASE_URL}/bots/{BOT_ID}").mock(
            return_value=httpx.Response(200, json=bot_response)
        )

        async with client:
            bot = await client.get_my_bot()

        assert route.called
        assert bot.id == BOT_ID

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_user(self, client, user_response):
        """Test fetching a user profile."""
        respx.get(f"{BASE_URL}/users/{USER_ID}").mock(
            return_value=httpx.Response(200, json=user_response)
        )

        async with client:
            user = await client.get_user(USER_ID)

        assert isinstance(user, User)
        assert user.id == USER_ID
        assert user.reddit == "botdev"
        assert user.twitter is None

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_votes(self, client, votes_response):
        """Test fetching the partial users of recent voters."""
        respx.get(f"{BASE_URL}/bots/{BOT_ID}/votes").mock(
            return_value=httpx.Response(200, json=votes_response)
        )

        async with client:
            voters = await client.get_my_votes()

        assert len(voters) == 3
        assert all(isinstance(v, PartialUser) for v in voters)
        assert voters[0].username == "voter-one"

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_voters(self, client, votes_response):
        """Test fetching voter IDs in response order."""
        respx.get(f"{BASE_URL}/bots/{OTHER_BOT_ID}/votes").mock(
            return_value=httpx.Response(200, json=votes_response)
        )

        async with client:
            voters = await client.get_voters(OTHER_BOT_ID)

        assert voters == [140862798832861184, 205680187394752512, MAX_SNOWFLAKE]

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_my_voters_empty(self, client):
        """Test that an empty vote list is an empty result, not a failure."""
        respx.get(f"{BASE_URL}/bots/{BOT_ID}/votes").mock(
            return_value=httpx.Response(200, json=[])
        )

        async with client:
            voters = await client.get_my_voters()

        assert voters == []

    @pytest.mark.parametrize("voted,expected", [(0, False), (1, True), (-1, True)])
    @pytest.mark.asyncio
    @respx.mock
    async def test_has_voted(self, client, voted, expected):
        """Test the vote check and its userId query parameter."""
        route = respx.get(f"{BASE_URL}/bots/{OTHER_BOT_ID}/check").mock(
            return_value=httpx.Response(200, json={"voted": voted})
        )

        async with client:
            result = await client.has_voted(OTHER_BOT_ID, USER_ID)

        assert result is expected
        assert route.calls.last.request.url.params["userId"] == str(USER_ID)

    @pytest.mark.asyncio
    @respx.mock
    async def test_has_voted_for_me(self, client):
        """Test that the convenience variant checks the client's bot."""
        route = respx.get(f"{BASE_URL}/bots/{BOT_ID}/check").mock(
            return_value=httpx.Response(200, json={"voted": 1})
        )

        async with client:
            assert await client.has_voted_for_me(USER_ID) is True

        assert route.call_count == 1

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_bot_stats(self, client, bot_stats_response):
        """Test fetching published stats."""
        respx.get(f"{BASE_URL}/bots/{BOT_ID}/stats").mock(
            return_value=httpx.Response(200, json=bot_stats_response)
        )

        async with client:
            stats = await client.get_my_bot_stats()

        assert isinstance(stats, BotStats)
        assert stats.server_count == 978
        assert stats.shards == [142, 532, 304]
        assert stats.shard_count == 3

    @pytest.mark.asyncio
    @respx.mock
    async def test_each_read_takes_one_permit(self, client, limiter, bot_stats_response):
        """Test that every call consumes exactly one limiter permit."""
        respx.get(f"{BASE_URL}/bots/{BOT_ID}/stats").mock(
            return_value=httpx.Response(200, json=bot_stats_response)
        )

        async with client:
            await client.get_my_bot_stats()
            await client.get_bot_stats(BOT_ID)

        assert limiter.get_available_tokens() == pytest.approx(58.0)


class TestTopggClientReadFailures:
    """Tests that read failures collapse to None."""

    @pytest.mark.parametrize("status_code", [401, 404, 429, 500])
    @pytest.mark.asyncio
    @respx.mock
    async def test_error_status_returns_none(self, client, status_code):
        """Test that a non-2xx answer yields None."""
        respx.get(f"{BASE_URL}/bots/{OTHER_BOT_ID}").mock(
            return_value=httpx.Response(status_code, json={"error": "nope"})
        )

        async with client:
            assert await client.get_bot(OTHER_BOT_ID) is None

    @pytest.mark.asyncio
    @respx.mock
    async def test_transport_error_returns_none(self, client):
        """Test that a connection failure yields None."""
        respx.get(f"{BASE_URL}/users/{USER_ID}").mock(
            side_effect=httpx.ConnectError("Connection refused")
        )

        async with client:
            assert await client.get_user(USER_ID) is None

    @pytest.mark.asyncio
    @respx.mock
    async def test_timeout_returns_none(self, client):
        """Test that a timeout yields None."""
        respx.get(f"{BASE_URL}/bots/{BOT_ID}/check").mock(
            side_effect=httpx.ReadTimeout("timed out")
        )

        async with client:
            assert await client.has_voted_for_me(USER_ID) is None

    @pytest.mark.asyncio
    @respx.mock
    async def test_invalid_json_returns_none(self, client):
        """Test that a body that is not JSON yields None."""
        respx.get(f"{BASE_URL}/bots/{BOT_ID}/votes").mock(
            return_value=httpx.Response(200, content=b"<html>Bad Gateway</html>")
        )

        async with client:
            assert await client.get_my_voters() is None

    @pytest.mark.asyncio
    @respx.mock
    async def test_wrong_shape_returns_none(self, client):
        """Test that JSON of the wrong shape yields None."""
        respx.get(f"{BASE_URL}/bots/{BOT_ID}/votes").mock(
            return_value=httpx.Response(200, json={"error": "Unauthorized"})
        )
        respx.get(f"{BASE_URL}/bots/{BOT_ID}").mock(
            return_value=httpx.Response(200, json={"id": str(BOT_ID)})
        )

        async with client:
            assert await client.get_my_voters() is None
            assert await client.get_my_bot() is None

    @pytest.mark.asyncio
    @respx.mock
    async def test_malformed_id_returns_none(self, client, bot_response):
        """Test that a malformed owner ID fails the whole bot decode."""
        bot_response["owners"] = ["not-an-id"]
        respx.get(f"{BASE_URL}/bots/{BOT_ID}").mock(
            return_value=httpx.Response(200, json=bot_response)
        )

        async with client:
            assert await client.get_my_bot() is None

    @pytest.mark.asyncio
    @respx.mock
    async def test_failure_is_not_retried(self, client):
        """Test that a failing endpoint is called exactly once."""
        route = respx.get(f"{BASE_URL}/bots/{BOT_ID}/stats").mock(
            return_value=httpx.Response(503)
        )

        async with client:
            assert await client.get_my_bot_stats() is None

        assert route.call_count == 1


class TestTopggClientPostStats:
    """Tests for publishing statistics."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_post_server_count(self, client):
        """Test posting a total count with absent fields omitted."""
        route = respx.post(f"{BASE_URL}/bots/{BOT_ID}/stats").mock(
            return_value=httpx.Response(200, json={})
        )

        async with client:
            ok = await client.post_bot_stats(server_count=978, shard_count=3)

        assert ok is True
        request = route.calls.last.request
        assert json.loads(request.content) == {"server_count": 978, "shard_count": 3}
        assert request.headers["Authorization"] == TOKEN

    @pytest.mark.asyncio
    @respx.mock
    async def test_post_shards(self, client):
        """Test posting per-shard counts."""
        route = respx.post(f"{BASE_URL}/bots/{BOT_ID}/stats").mock(
            return_value=httpx.Response(200)
        )

        async with client:
            assert await client.post_bot_stats(shards=[142, 532, 304]) is True

        assert json.loads(route.calls.last.request.content) == {"shards": [142, 532, 304]}

    @pytest.mark.asyncio
    @respx.mock
    async def test_post_single_shard(self, client):
        """Test posting the count of one shard."""
        route = respx.post(f"{BASE_URL}/bots/{BOT_ID}/stats").mock(
            return_value=httpx.Response(200)
        )

        async with client:
            await client.post_bot_stats(server_count=142, shard_id=0, shard_count=3)

        assert json.loads(route.calls.last.request.content) == {
            "server_count": 142,
            "shard_id": 0,
            "shard_count": 3,
        }

    @pytest.mark.asyncio
    @respx.mock
    async def test_post_without_counts_sends_nothing(self, client, limiter):
        """Test that nothing is sent and no permit is used without counts."""
        route = respx.post(f"{BASE_URL}/bots/{BOT_ID}/stats").mock(
            return_value=httpx.Response(200)
        )

        async with client:
            assert await client.post_bot_stats() is False
            assert await client.post_bot_stats(shard_id=1, shard_count=3) is False

        assert route.call_count == 0
        assert limiter.get_available_tokens() == 60.0

    @pytest.mark.asyncio
    @respx.mock
    async def test_post_rejected(self, client):
        """Test that a non-2xx answer reports failure."""
        route = respx.post(f"{BASE_URL}/bots/{BOT_ID}/stats").mock(
            return_value=httpx.Response(401, json={"error": "Unauthorized"})
        )

        async with client:
            assert await client.post_bot_stats(server_count=978) is False

        assert route.call_count == 1

    @pytest.mark.asyncio
    @respx.mock
    async def test_post_transport_error(self, client):
        """Test that a connection failure reports failure instead of raising."""
        respx.post(f"{BASE_URL}/bots/{BOT_ID}/stats").mock(
            side_effect=httpx.ConnectError("Connection refused")
        )

        async with client:
            assert await client.post_bot_stats(server_count=978) is False

    @pytest.mark.asyncio
    async def test_post_negative_count(self, client):
        """Test that negative counts are refused before anything is sent."""
        async with client:
            with pytest.raises(ValidationError):
                await client.post_bot_stats(server_count=-1)


class TestTopggClientRateLimit:
    """Tests for request pacing."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_sixty_first_request_waits(self, client, fake_clock):
        """Test that a minute's allowance goes out immediately and the next waits."""
        route = respx.get(f"{BASE_URL}/bots/{BOT_ID}/check").mock(
            return_value=httpx.Response(200, json={"voted": 0})
        )

        async with client:
            for _ in range(60):
                await client.has_voted_for_me(USER_ID)
            assert fake_clock.sleeps == []

            await client.has_voted_for_me(USER_ID)

        assert route.call_count == 61
        assert fake_clock.sleeps == [pytest.approx(1.0)]
