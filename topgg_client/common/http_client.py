"""Async HTTP client with connection pooling using httpx."""

from typing import Any, Dict, Optional

import httpx
import structlog

from .config import HTTPConfig

logger = structlog.get_logger(__name__)


class AsyncHTTPClient:
    """
    Async HTTP client with connection pooling.

    This client provides a context manager interface around a single
    ``httpx.AsyncClient`` so that every request made through one instance
    reuses the same connection pool. Requests are issued exactly once; failed
    calls are never retried.

    Example:
        >>> import asyncio
        >>> from topgg_client.common.config import HTTPConfig
        >>>
        >>> async def main():
        ...     async with AsyncHTTPClient(HTTPConfig(), "https://top.gg/api") as client:
        ...         response = await client.get("/bots/668701133069352961")
        ...         print(response.json())
        >>>
        >>> asyncio.run(main())
    """

    def __init__(
        self,
        config: HTTPConfig,
        base_url: str = "",
    ):
        """
        Initialize the async HTTP client.

        Args:
            config: HTTPConfig object with client settings
            base_url: Base URL for all requests (optional)
        """
        self.config = config
        self.base_url = base_url
        self._client: Optional[httpx.AsyncClient] = None
        self.logger = logger.bind(component="http_client")

    async def __aenter__(self) -> "AsyncHTTPClient":
        """Enter async context manager."""
        limits = httpx.Limits(
            max_connections=self.config.max_connections,
            max_keepalive_connections=self.config.max_keepalive_connections,
        )

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(float(self.config.timeout)),
            limits=limits,
            follow_redirects=True,
            max_redirects=self.config.max_redirects,
            verify=self.config.verify_ssl,
        )

        self.logger.info(
            "http_client_initialized",
            base_url=self.base_url,
            timeout=self.config.timeout,
            max_connections=self.config.max_connections,
        )
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit async context manager."""
        if self._client:
            await self._client.aclose()
            self._client = None
            self.logger.info("http_client_closed")

    async def _make_request(
        self,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Make a single HTTP request.

        Args:
            method: HTTP method (GET, POST, etc.)
            url: Request URL
            **kwargs: Additional arguments to pass to httpx

        Returns:
            httpx.Response object

        Raises:
            RuntimeError: If used outside the async context manager
            httpx.RequestError: On network failures
        """
        if not self._client:
            raise RuntimeError("Client not initialized. Use async with context manager.")

        response = await self._client.request(method, url, **kwargs)
        self.logger.debug(
            "http_response",
            method=method,
            url=str(url),
            status_code=response.status_code,
        )
        return response

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        """
        Make a GET request.

        Args:
            url: Request URL
            **kwargs: Additional arguments (params, headers, etc.)

        Returns:
            httpx.Response object
        """
        self.logger.debug("http_request", method="GET", url=str(url))
        return await self._make_request("GET", url, **kwargs)

    async def post(
        self,
        url: str,
        json: Optional[Dict[str, Any]] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Make a POST request.

        Args:
            url: Request URL
            json: JSON data to send in request body
            **kwargs: Additional arguments (headers, etc.)

        Returns:
            httpx.Response object
        """
        self.logger.debug("http_request", method="POST", url=str(url))
        return await self._make_request("POST", url, json=json, **kwargs)

    async def request(
        self,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Make an HTTP request with the specified method.

        Args:
            method: HTTP method (GET, POST, ...)
            url: Request URL
            **kwargs: Additional arguments

        Returns:
            httpx.Response object
        """
        self.logger.debug("http_request", method=method.upper(), url=str(url))
        return await self._make_request(method.upper(), url, **kwargs)
