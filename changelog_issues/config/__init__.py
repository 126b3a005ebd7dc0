"""Application configuration."""

from .settings import ChangelogIssuesSettings, get_settings, load_settings

__all__ = [
    "ChangelogIssuesSettings",
    "get_settings",
    "load_settings",
]
