"""Upstream HTTP fetching for the stream proxy."""
from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator
from urllib.parse import urlsplit

import httpx

from .settings import DEFAULT_USER_AGENT

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """Raised when an upstream request fails before a response arrives."""


class FetchTimeout(FetchError):
    """Raised when the upstream does not answer within the fetch timeout."""


def browser_headers(url: str, user_agent: str = DEFAULT_USER_AGENT) -> dict[str, str]:
    """Build request headers that look like a browser playing from ``url``'s own site."""

    parts = urlsplit(url)
    site = f"{parts.scheme}://{parts.netloc}"
    return {
        "User-Agent": user_agent,
        "Accept": "*/*",
        "Connection": "keep-alive",
        "Referer": f"{site}/",
        "Origin": site,
    }


class UpstreamResponse:
    """An open upstream response whose body has not been consumed yet."""

    def __init__(
        self,
        response: httpx.Response,
        client: httpx.AsyncClient,
        deadline: float | None = None,
    ) -> None:
        self._response = response
        self._client = client
        # Event-loop time by which a buffered body must be complete.
        self._deadline = deadline

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @property
    def headers(self) -> httpx.Headers:
        return self._response.headers

    @property
    def url(self) -> str:
        """Final URL after redirects."""
        return str(self._response.url)

    @property
    def content_type(self) -> str | None:
        return self._response.headers.get("content-type")

    async def read_text(self) -> str:
        """Drain the whole body and decode it, releasing the connection afterwards.

        The drain shares the fetch deadline: a stalled or trickling body raises
        FetchTimeout, a broken one FetchError.
        """
        remaining = None
        if self._deadline is not None:
            remaining = max(self._deadline - asyncio.get_running_loop().time(), 0)
        try:
            await asyncio.wait_for(self._response.aread(), timeout=remaining)
            return self._response.text
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            raise FetchTimeout(f"body of {self.url} not complete in time") from exc
        except httpx.HTTPError as exc:
            raise FetchError(f"reading {self.url} failed: {exc!r}") from exc
        finally:
            await self.aclose()

    async def iter_bytes(self) -> AsyncIterator[bytes]:
        """Yield body chunks as they arrive; the connection is released on any exit."""
        try:
            async for chunk in self._response.aiter_bytes():
                yield chunk
        finally:
            await self.aclose()

    async def aclose(self) -> None:
        await self._response.aclose()
        await self._client.aclose()


class UpstreamFetcher:
    """Open GET requests against arbitrary origins with a bounded wait for the response."""

    def __init__(
        self,
        timeout: float = 15.0,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            follow_redirects=True,
            timeout=httpx.Timeout(self.timeout),
            transport=self._transport,
        )

    async def fetch(self, url: str) -> UpstreamResponse:
        """Send the request and return once the response head is available.

        Non-2xx statuses are returned like any other response.
        """

        client = self._client()
        deadline = asyncio.get_running_loop().time() + self.timeout
        try:
            request = client.build_request(
                "GET", url, headers=browser_headers(url, self.user_agent)
            )
            response = await asyncio.wait_for(
                client.send(request, stream=True), timeout=self.timeout
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            await client.aclose()
            raise FetchTimeout(f"no response from {url} within {self.timeout}s") from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            await client.aclose()
            raise FetchError(f"request to {url} failed: {exc!r}") from exc
        except BaseException:
            await client.aclose()
            raise

        logger.debug("Upstream %s answered %s", url, response.status_code)
        return UpstreamResponse(response, client, deadline)
