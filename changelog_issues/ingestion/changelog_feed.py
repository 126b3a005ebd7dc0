"""Fetch-then-parse entry point for changelog feeds."""

from typing import List, Optional

from .feed_fetcher import FeedFetcher
from .models import ChangelogEntry
from .rss_parser import RssFeedParser


async def fetch_changelog_feed(
    feed_url: str,
    *,
    fetcher: Optional[FeedFetcher] = None,
    parser: Optional[RssFeedParser] = None,
) -> List[ChangelogEntry]:
    """Download a changelog feed and return its entries, newest first.

    Errors from either stage propagate unchanged.
    """
    fetcher = fetcher or FeedFetcher()
    parser = parser or RssFeedParser()

    xml_text = await fetcher.fetch(feed_url)
    return parser.parse(xml_text)
