"""Base API client with rate limiting."""

from typing import Any, Dict, Optional

import httpx
import structlog

from ..common.config import HTTPConfig
from ..common.http_client import AsyncHTTPClient
from ..common.rate_limiter import RateLimiter

logger = structlog.get_logger(__name__)


class RateLimitedAPIClient(AsyncHTTPClient):
    """
    HTTP client with built-in rate limiting and authentication headers.

    Every request first waits for a permit from the rate limiter (if one is
    configured) and then goes out exactly once with the auth headers merged in.
    The limiter only paces when requests start; once a permit is granted the
    request runs concurrently with any others already in flight.
    """

    def __init__(
        self,
        http_config: HTTPConfig,
        base_url: str = "",
        rate_limiter: Optional[RateLimiter] = None,
        auth_headers: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize the rate-limited API client.

        Args:
            http_config: HTTP configuration (timeout, pool limits, etc.)
            base_url: Base URL for all requests
            rate_limiter: Optional rate limiter instance
            auth_headers: Optional authentication headers to include in all requests
        """
        super().__init__(http_config, base_url)
        self.rate_limiter = rate_limiter
        self.auth_headers = auth_headers or {}

        self.logger.info(
            "rate_limited_api_client_initialized",
            base_url=base_url,
            has_rate_limiter=rate_limiter is not None,
        )

    async def _apply_limiter_and_auth(
        self, method: str, url: str, **kwargs: Any
    ) -> httpx.Response:
        """
        Apply rate limiting and auth before making request.

        Args:
            method: HTTP method
            url: Request URL
            **kwargs: Additional request arguments

        Returns:
            httpx.Response object
        """
        if self.auth_headers:
            headers = dict(kwargs.get("headers") or {})
            headers.update(self.auth_headers)
            kwargs["headers"] = headers

        if self.rate_limiter:
            await self.rate_limiter.acquire()

        return await self._make_request(method, url, **kwargs)

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        """
        Make a rate-limited GET request.

        Args:
            url: Request URL
            **kwargs: Additional arguments (params, headers, etc.)

        Returns:
            httpx.Response object
        """
        self.logger.debug("api_request", method="GET", url=str(url))
        return await self._apply_limiter_and_auth("GET", url, **kwargs)

    async def post(
        self,
        url: str,
        json: Optional[Dict[str, Any]] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Make a rate-limited POST request.

        Args:
            url: Request URL
            json: JSON data to send in request body
            **kwargs: Additional arguments (headers, etc.)

        Returns:
            httpx.Response object
        """
        self.logger.debug("api_request", method="POST", url=str(url))
        return await self._apply_limiter_and_auth("POST", url, json=json, **kwargs)

    async def request(
        self,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Make a rate-limited HTTP request.

        Args:
            method: HTTP method
            url: Request URL
            **kwargs: Additional arguments

        Returns:
            httpx.Response object
        """
        self.logger.debug("api_request", method=method.upper(), url=str(url))
        return await self._apply_limiter_and_auth(method.upper(), url, **kwargs)
