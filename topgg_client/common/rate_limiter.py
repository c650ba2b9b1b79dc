"""Rate limiting using token bucket algorithm for async operations."""

import asyncio
import time
from typing import Any, Awaitable, Callable, Optional

import structlog

logger = structlog.get_logger(__name__)


class RateLimiter:
    """
    Token bucket rate limiter for controlling request rates.

    The bucket starts full and refills continuously at ``rate`` tokens per
    second up to ``burst_size``. Each request consumes one token; when the
    bucket is empty the caller is suspended until a token becomes available.
    There is no way to skip the wait.

    Waiters are served strictly in arrival order: the internal lock is held
    while the head waiter sleeps, and ``asyncio.Lock`` wakes waiters FIFO.

    Example:
        >>> limiter = RateLimiter(requests_per_minute=60)
        >>> async with limiter:
        ...     response = await client.get("/bots/668701133069352961")

    Attributes:
        rate: Number of tokens added per second
        burst_size: Maximum number of tokens that can accumulate
        tokens: Current number of available tokens
    """

    def __init__(
        self,
        requests_per_minute: Optional[int] = None,
        requests_per_second: Optional[int] = None,
        burst_size: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        """
        Initialize the rate limiter.

        Args:
            requests_per_minute: Maximum requests per minute
            requests_per_second: Maximum requests per second
            burst_size: Bucket capacity (defaults to one minute's worth of tokens)
            clock: Monotonic clock returning seconds (injectable for tests)
            sleep: Coroutine used to wait for tokens (injectable for tests)

        Raises:
            ValueError: If no rate is given or burst_size is less than 1

        Example:
            >>> # The directory's published limit
            >>> limiter = RateLimiter(requests_per_minute=60)
        """
        rate = 0.0
        if requests_per_second:
            rate += requests_per_second
        if requests_per_minute:
            rate += requests_per_minute / 60.0

        if rate <= 0:
            raise ValueError(
                "At least one rate limit must be specified "
                "(requests_per_second or requests_per_minute)"
            )

        self.rate = rate  # tokens per second
        self.burst_size = burst_size if burst_size is not None else int(rate * 60)
        if self.burst_size < 1:
            raise ValueError("burst_size must be at least 1")

        self._clock = clock
        self._sleep = sleep
        self.tokens = float(self.burst_size)
        self.last_update = self._clock()
        self._lock = asyncio.Lock()

        logger.debug(
            "rate_limiter_initialized",
            rate_per_second=round(self.rate, 2),
            burst_size=self.burst_size,
        )

    def _refill(self) -> None:
        now = self._clock()
        elapsed = now - self.last_update
        self.tokens = min(float(self.burst_size), self.tokens + elapsed * self.rate)
        self.last_update = now

    async def acquire(self) -> None:
        """
        Acquire permission to make one request.

        This method waits as long as necessary until a token is available.

        Example:
            >>> limiter = RateLimiter(requests_per_minute=60)
            >>> await limiter.acquire()  # Wait for permission
            >>> # Now safe to make request
        """
        async with self._lock:
            while True:
                self._refill()

                if self.tokens >= 1:
                    self.tokens -= 1
                    logger.debug(
                        "rate_limit_acquired",
                        tokens_remaining=round(self.tokens, 2),
                    )
                    return

                wait_time = (1 - self.tokens) / self.rate

                logger.debug(
                    "rate_limit_waiting",
                    tokens_needed=round(1 - self.tokens, 2),
                    wait_seconds=round(wait_time, 2),
                )

                await self._sleep(wait_time)

    async def __aenter__(self) -> "RateLimiter":
        """Context manager entry - acquire a token."""
        await self.acquire()
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Context manager exit."""
        pass

    def get_available_tokens(self) -> float:
        """
        Get the current number of available tokens without consuming any.

        Returns:
            Number of available tokens

        Example:
            >>> limiter = RateLimiter(requests_per_minute=60)
            >>> print(f"Can make {int(limiter.get_available_tokens())} immediate requests")
        """
        elapsed = self._clock() - self.last_update
        return min(float(self.burst_size), self.tokens + elapsed * self.rate)
