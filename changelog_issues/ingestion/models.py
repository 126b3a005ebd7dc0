"""
Changelog Entry Model
=====================

Immutable value record produced for each item of the changelog feed.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ChangelogEntry:
    """One changelog feed item.

    ``guid`` is the only stable key; entries carry no other identity.
    """

    title: str
    link: str
    pub_date: str
    content: str
    guid: str
    changelog_type: Optional[str] = None
    changelog_label: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the feed-style keys, leaving out absent categories."""
        data = {
            "title": self.title,
            "link": self.link,
            "pubDate": self.pub_date,
            "content": self.content,
            "guid": self.guid,
        }
        if self.changelog_type is not None:
            data["changelogType"] = self.changelog_type
        if self.changelog_label is not None:
            data["changelogLabel"] = self.changelog_label
        return data

    @property
    def category_labels(self) -> tuple:
        """Category-derived labels in type, label order."""
        return tuple(
            value
            for value in (self.changelog_type, self.changelog_label)
            if value is not None
        )
