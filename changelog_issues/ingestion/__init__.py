"""
Changelog Ingestion Module
==========================

Fetching and parsing of changelog RSS feeds into ChangelogEntry records.
"""

from .models import ChangelogEntry
from .feed_fetcher import FeedFetcher
from .rss_parser import RssFeedParser, parse_rss_feed
from .label_normalizer import normalize_label_case
from .changelog_feed import fetch_changelog_feed

__all__ = [
    'ChangelogEntry',
    'FeedFetcher',
    'RssFeedParser',
    'parse_rss_feed',
    'normalize_label_case',
    'fetch_changelog_feed',
]
