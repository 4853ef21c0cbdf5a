"""Request managers for fetching dependents pages.

This module provides SyncRequestManager and AsyncRequestManager classes that
encapsulate the HTTP client. They are the fetch capability the drivers depend
on:

- Maintaining the HTTP client (httpx.Client or httpx.AsyncClient)
- Converting HTTP responses to Response objects
- Translating transport failures and non-success statuses into
  FetchException subclasses

Drivers accept any object with the same fetch() signature, which lets tests
substitute canned pages for the network.
"""

from __future__ import annotations

import logging
import ssl
from typing import Any, Protocol

import httpx

from github_dependents.common.exceptions import (
    HTMLResponseAssumptionException,
    RequestTimeoutException,
    RequestTransportException,
)
from github_dependents.data_types import Response

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "User-Agent": "github-dependents (+https://github.com)",
    "Accept": "text/html,application/xhtml+xml",
}


class Fetcher(Protocol):
    def fetch(self, url: str) -> Response: ...


class AsyncFetcher(Protocol):
    async def fetch(self, url: str) -> Response: ...


def _build_response(http_response: httpx.Response, url: str) -> Response:
    if not http_response.is_success:
        raise HTMLResponseAssumptionException(
            status_code=http_response.status_code,
            expected_codes=[200],
            url=url,
        )

    return Response(
        status_code=http_response.status_code,
        headers=dict(http_response.headers),
        content=http_response.content,
        text=http_response.text,
        # final location, after redirects
        url=str(http_response.url),
    )


class SyncRequestManager:
    """Fetches pages for the synchronous driver.

    Example::

        with SyncRequestManager(timeout=30.0) as manager:
            response = manager.fetch(url)
    """

    def __init__(
        self,
        timeout: float | None = None,
        headers: dict[str, str] | None = None,
        ssl_context: ssl.SSLContext | None = None,
    ) -> None:
        """Initialize the request manager.

        Args:
            timeout: Request timeout in seconds. None means no timeout (default).
            headers: Extra headers, merged over DEFAULT_HEADERS.
            ssl_context: Optional SSL context for HTTPS connections.
        """
        self.timeout = timeout
        self._client = httpx.Client(
            headers={**DEFAULT_HEADERS, **(headers or {})},
            timeout=timeout,
            verify=ssl_context if ssl_context else True,
            follow_redirects=True,
        )

    def close(self) -> None:
        """Close the HTTP client and release resources."""
        self._client.close()

    def __enter__(self) -> SyncRequestManager:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def fetch(self, url: str) -> Response:
        """Fetch a URL and return the Response.

        Raises:
            HTMLResponseAssumptionException: If the status is not 2xx.
            RequestTimeoutException: If the request times out.
            RequestTransportException: On DNS, connection or TLS failures.
        """
        logger.debug(f"GET {url}")
        try:
            http_response = self._client.get(url)
        except httpx.TimeoutException as e:
            raise RequestTimeoutException(
                url=url, timeout_seconds=self.timeout
            ) from e
        except httpx.TransportError as e:
            raise RequestTransportException(url=url, reason=str(e)) from e

        return _build_response(http_response, url)


class AsyncRequestManager:
    """Fetches pages for the asynchronous driver.

    Example::

        async with AsyncRequestManager(timeout=30.0) as manager:
            response = await manager.fetch(url)
    """

    def __init__(
        self,
        timeout: float | None = None,
        headers: dict[str, str] | None = None,
        ssl_context: ssl.SSLContext | None = None,
    ) -> None:
        self.timeout = timeout
        self._client = httpx.AsyncClient(
            headers={**DEFAULT_HEADERS, **(headers or {})},
            timeout=timeout,
            verify=ssl_context if ssl_context else True,
            follow_redirects=True,
        )

    async def close(self) -> None:
        """Close the HTTP client and release resources."""
        await self._client.aclose()

    async def __aenter__(self) -> AsyncRequestManager:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def fetch(self, url: str) -> Response:
        """Fetch a URL and return the Response.

        Raises:
            HTMLResponseAssumptionException: If the status is not 2xx.
            RequestTimeoutException: If the request times out.
            RequestTransportException: On DNS, connection or TLS failures.
        """
        logger.debug(f"GET {url}")
        try:
            http_response = await self._client.get(url)
        except httpx.TimeoutException as e:
            raise RequestTimeoutException(
                url=url, timeout_seconds=self.timeout
            ) from e
        except httpx.TransportError as e:
            raise RequestTransportException(url=url, reason=str(e)) from e

        return _build_response(http_response, url)
