"""
Changelog Issues
================

Files one GitHub issue per new entry of a changelog RSS feed.

Main Components:
- Ingestion: feed fetching (aiohttp), RSS parsing (lxml), label normalization
- Storage: last processed GUID marker file
- GitHub: REST client for labels and issues
- Processing: sync orchestration from entries to issues
- Configuration: environment variables with Pydantic validation
"""

__version__ = "1.0.0"
__description__ = "Create GitHub issues from changelog RSS feed entries"

from .config.settings import get_settings
from .ingestion import ChangelogEntry, fetch_changelog_feed, normalize_label_case
from .utils.logging import configure_application_logging, get_logger_for_component
from .utils.exceptions import ChangelogIssuesError

__all__ = [
    "get_settings",
    "ChangelogEntry",
    "fetch_changelog_feed",
    "normalize_label_case",
    "configure_application_logging",
    "get_logger_for_component",
    "ChangelogIssuesError",
]
