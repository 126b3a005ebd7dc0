"""
RSS Feed Fetcher
================

Single-attempt HTTP(S) download of a changelog feed with status
validation and a hard timeout.
"""

import asyncio
import ssl
import time
from contextlib import asynccontextmanager
from typing import Optional

import aiohttp
import certifi

from ..utils.logging import get_logger_for_component
from ..utils.exceptions import FetchStatusError, FetchTimeoutError, NetworkError

USER_AGENT = "changelog-issues/1.0 (+https://github.com/changelog-issues/changelog-issues)"
DEFAULT_TIMEOUT = 10


class FeedFetcher:
    """Downloads feed XML; no retries, no caching."""

    def __init__(self, timeout: Optional[float] = None):
        """Initialize feed fetcher.

        Args:
            timeout: Overall request timeout in seconds
        """
        self.timeout = DEFAULT_TIMEOUT if timeout is None else timeout
        self.logger = get_logger_for_component("feed_fetcher")

        self.ssl_context = ssl.create_default_context(cafile=certifi.where())

    @asynccontextmanager
    async def get_session(self):
        """Get configured aiohttp session.

        Closing the session on exit tears down any connection still in
        flight, which is how a timed-out request gets cancelled.
        """
        connector = aiohttp.TCPConnector(ssl=self.ssl_context, limit=1)

        timeout = aiohttp.ClientTimeout(total=self.timeout)

        headers = {
            "User-Agent": USER_AGENT,
            "Accept": "application/rss+xml, application/xml, text/xml, */*",
        }

        async with aiohttp.ClientSession(
            connector=connector, timeout=timeout, headers=headers
        ) as session:
            yield session

    async def fetch(self, feed_url: str) -> str:
        """Fetch a feed and return its body as text.

        Args:
            feed_url: URL of the RSS feed

        Returns:
            Full response body decoded as UTF-8

        Raises:
            FetchStatusError: If the response status is not 200
            FetchTimeoutError: If the request exceeds the timeout
            NetworkError: On transport failures, with the original message
        """
        start_time = time.monotonic()
        self.logger.debug(f"Fetching feed: {feed_url}")

        try:
            async with self.get_session() as session:
                async with session.get(feed_url) as response:
                    if response.status != 200:
                        self.logger.warning(
                            f"Feed fetch failed for {feed_url}: HTTP {response.status}"
                        )
                        raise FetchStatusError(response.status, feed_url=feed_url)

                    chunks = []
                    async for chunk in response.content.iter_any():
                        chunks.append(chunk)

        except asyncio.TimeoutError as e:
            self.logger.warning(
                f"Feed fetch timeout for {feed_url} after {self.timeout:g}s"
            )
            raise FetchTimeoutError(self.timeout, feed_url=feed_url) from e

        except (aiohttp.ClientError, OSError) as e:
            self.logger.warning(f"Feed fetch failed for {feed_url}: {e}")
            raise NetworkError(str(e), feed_url=feed_url) from e

        body = b"".join(chunks)
        self.logger.info(
            f"Fetched {len(body)} bytes from {feed_url} "
            f"in {time.monotonic() - start_time:.2f}s"
        )
        return body.decode("utf-8", errors="replace")

