"""
Feed fetcher for feedqa.
"""
import asyncio
import logging
from typing import Optional

import aiohttp
import async_timeout

from feedqa.config import get_config
from feedqa.core.errors import FetchFailed
from feedqa.utils.http import FEED_ACCEPT, build_proxy_url, validate_url

# Configure logging
logger = logging.getLogger(__name__)

class FeedFetcher:
    """
    Fetches raw feed markup, falling back to a relay proxy when the direct
    request fails.
    """
    def __init__(
        self,
        proxy_url: Optional[str] = None,
        timeout: Optional[float] = None,
        user_agent: Optional[str] = None,
    ):
        """
        Initialize the FeedFetcher.

        Args:
            proxy_url: Proxy prefix the encoded feed URL is appended to
            timeout: Per-attempt timeout in seconds, None for no timeout
            user_agent: User-Agent header sent with every request
        """
        self.proxy_url = proxy_url or get_config('transport.proxy_url')
        self.timeout = timeout if timeout is not None else get_config('transport.timeout_seconds')
        self.headers = {
            'User-Agent': user_agent or get_config('transport.user_agent'),
        }
        self._session = None

    @property
    def session(self) -> aiohttp.ClientSession:
        """
        Lazy initialization of aiohttp session.

        Returns:
            aiohttp.ClientSession: The HTTP session
        """
        if self._session is None:
            self._session = aiohttp.ClientSession(headers=self.headers)
        return self._session

    async def close(self):
        """Close aiohttp session."""
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "FeedFetcher":
        return self

    async def __aexit__(self, *exc_info):
        await self.close()

    async def _get_text(self, url: str, headers: Optional[dict] = None) -> str:
        """
        GET ``url`` and return the body as text.

        Raises:
            aiohttp.ClientError: On connection errors and 4xx/5xx responses
            asyncio.TimeoutError: When the attempt exceeds the timeout
        """
        async with async_timeout.timeout(self.timeout):
            async with self.session.get(url, headers=headers) as response:
                response.raise_for_status()
                return await response.text()

    async def fetch_feed(self, url: str) -> str:
        """
        Fetch a feed document.

        Args:
            url: The feed URL

        Returns:
            The response body, unparsed

        Raises:
            InvalidUrl: If the URL is not absolute
            FetchFailed: If both the direct and the proxied request fail
        """
        validate_url(url)

        try:
            logger.debug(f"Attempting direct fetch: {url}")
            return await self._get_text(url, headers={'Accept': FEED_ACCEPT})
        except (aiohttp.ClientError, asyncio.TimeoutError, UnicodeDecodeError) as direct_error:
            logger.warning(f"Direct fetch of {url} failed, trying proxy: {_describe(direct_error)}")

            proxied = build_proxy_url(url, self.proxy_url)
            try:
                return await self._get_text(proxied)
            except (aiohttp.ClientError, asyncio.TimeoutError, UnicodeDecodeError) as proxy_error:
                raise FetchFailed(
                    f"Failed to fetch feed: {_describe(proxy_error)}",
                    direct_error=direct_error,
                ) from proxy_error


def _describe(error: BaseException) -> str:
    if isinstance(error, aiohttp.ClientResponseError):
        return f"HTTP error {error.status}"
    if isinstance(error, asyncio.TimeoutError):
        return "request timed out"
    return str(error) or type(error).__name__


async def fetch_feed(url: str) -> str:
    """
    Fetch a feed with a short-lived FeedFetcher.
    """
    async with FeedFetcher() as fetcher:
        return await fetcher.fetch_feed(url)
