"""
PyTest Configuration and Fixtures
=================================

Shared fixtures and configuration for changelog-issues tests.
"""

import pytest
import pytest_asyncio
import asyncio
import tempfile
import os
import sys
from pathlib import Path

from aiohttp import web
from aiohttp.test_utils import TestServer

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Set test environment variables before any imports
TEST_DIR = Path(tempfile.gettempdir()) / "changelog_issues_tests"
os.environ["CHANGELOG_ISSUES_STORE__LOCATION"] = str(TEST_DIR / "last-changelog-guid.txt")
os.environ["CHANGELOG_ISSUES_LOGGING__CONSOLE_LOGGING"] = "false"
os.environ["CHANGELOG_ISSUES_DEBUG"] = "true"


CHANGELOG_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:content="http://purl.org/rss/1.0/modules/content/">
  <channel>
    <title>GitHub Changelog</title>
    <link>https://github.blog/changelog/</link>
    <description>Updates to GitHub</description>
    <item>
      <title>Copilot code review now generally available</title>
      <link>https://github.blog/changelog/2024-08-28-copilot-code-review</link>
      <pubDate>Wed, 28 Aug 2024 17:00:00 +0000</pubDate>
      <guid isPermaLink="false">https://github.blog/changelog/?p=100</guid>
      <description>Short description</description>
      <content:encoded><![CDATA[<p>Copilot can now <strong>review</strong> pull requests.</p>]]></content:encoded>
      <category domain="changelog-type"><![CDATA[Improvement]]></category>
      <category domain="changelog-label"><![CDATA[copilot]]></category>
      <category>General</category>
    </item>
    <item>
      <title>Deprecation of legacy API tokens</title>
      <link>https://github.blog/changelog/2024-08-27-legacy-tokens</link>
      <pubDate>Tue, 27 Aug 2024 12:00:00 +0000</pubDate>
      <guid>https://github.blog/changelog/?p=99</guid>
      <description>Legacy tokens will stop working.</description>
      <category domain="changelog-type">Retired</category>
      <category domain="changelog-label">github api &amp;amp; oauth</category>
    </item>
    <item>
      <title>Dark mode for the CLI</title>
      <link>https://github.blog/changelog/2024-08-26-cli-dark-mode</link>
      <pubDate>Mon, 26 Aug 2024 09:30:00 +0000</pubDate>
      <guid isPermaLink="true">https://github.blog/changelog/2024-08-26-cli-dark-mode</guid>
    </item>
  </channel>
</rss>
"""

SINGLE_ITEM_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>GitHub Changelog</title>
    <item>
      <title>Only entry</title>
      <link>https://github.blog/changelog/only-entry</link>
      <pubDate>Thu, 29 Aug 2024 08:00:00 +0000</pubDate>
      <guid>only-entry</guid>
      <description>The one and only.</description>
    </item>
  </channel>
</rss>
"""


@pytest.fixture
def changelog_feed_xml():
    """Three-item changelog feed, newest first."""
    return CHANGELOG_FEED


@pytest.fixture
def single_item_feed_xml():
    """Feed with exactly one item."""
    return SINGLE_ITEM_FEED


@pytest.fixture
def temp_store_path(tmp_path):
    """Marker file path inside a nested, not yet existing directory."""
    return tmp_path / ".github" / "last-changelog-guid.txt"


@pytest.fixture
def make_entry():
    """Factory for ChangelogEntry objects."""
    from changelog_issues.ingestion.models import ChangelogEntry

    def _make_entry(guid, title=None, **kwargs):
        return ChangelogEntry(
            title=title or f"Entry {guid}",
            link=kwargs.pop("link", f"https://github.blog/changelog/{guid}"),
            pub_date=kwargs.pop("pub_date", "Wed, 28 Aug 2024 17:00:00 +0000"),
            content=kwargs.pop("content", f"<p>Content for {guid}</p>"),
            guid=guid,
            **kwargs,
        )

    return _make_entry


# ============================================================================
# Local HTTP Feed Server
# ============================================================================


async def _serve_feed(request):
    return web.Response(text=CHANGELOG_FEED, content_type="application/rss+xml")


async def _serve_single(request):
    return web.Response(text=SINGLE_ITEM_FEED, content_type="application/rss+xml")


async def _serve_invalid(request):
    return web.Response(text="<invalid>XML</invalid>", content_type="application/xml")


async def _serve_missing(request):
    return web.Response(status=404, text="Not Found")


async def _serve_error(request):
    return web.Response(status=503, text="Service Unavailable")


async def _serve_slow(request):
    await asyncio.sleep(1)
    return web.Response(text=CHANGELOG_FEED)


async def _serve_chunked(request):
    # "é" is split across two writes
    response = web.StreamResponse()
    response.content_type = "application/rss+xml"
    await response.prepare(request)
    body = SINGLE_ITEM_FEED.replace("The one and only.", "Café update").encode("utf-8")
    split_at = body.index("Caf".encode("utf-8")) + 4
    await response.write(body[:split_at])
    await response.write(body[split_at:])
    await response.write_eof()
    return response


@pytest_asyncio.fixture
async def feed_server():
    """Local aiohttp server exposing feed endpoints for fetcher tests."""
    app = web.Application()
    app.router.add_get("/feed", _serve_feed)
    app.router.add_get("/single", _serve_single)
    app.router.add_get("/invalid", _serve_invalid)
    app.router.add_get("/missing", _serve_missing)
    app.router.add_get("/error", _serve_error)
    app.router.add_get("/slow", _serve_slow)
    app.router.add_get("/chunked", _serve_chunked)

    server = TestServer(app)
    await server.start_server()
    yield server
    await server.close()


@pytest.fixture
def feed_url_for(feed_server):
    """Build an absolute URL on the local feed server."""

    def _url(path):
        return str(feed_server.make_url(path))

    return _url
