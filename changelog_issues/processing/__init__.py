"""
Changelog Processing Module
===========================

Sync orchestration from feed entries to GitHub issues.
"""

from .changelog_sync import ChangelogIssueSync, SyncResult, select_new_entries

__all__ = [
    'ChangelogIssueSync',
    'SyncResult',
    'select_new_entries',
]
