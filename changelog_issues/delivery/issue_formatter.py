"""
Issue Formatter
===============

Renders changelog entries as GitHub issues: title, markdown body and the
list of labels to apply.
"""

from dataclasses import dataclass, field
from typing import List

from ..ingestion.models import ChangelogEntry

AUTO_LABEL_DESCRIPTION = "Auto-created label"


@dataclass(frozen=True)
class IssueDraft:
    """Issue content ready to be sent to GitHub."""

    title: str
    body: str
    labels: List[str] = field(default_factory=list)


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def _utf16_code_units(text: str) -> List[int]:
    data = text.encode("utf-16-le")
    return [int.from_bytes(data[i:i + 2], "little") for i in range(0, len(data), 2)]


def label_color(name: str) -> str:
    """Deterministic six-digit hex color for a label name.

    Rolling ``hash * 31 + code`` over UTF-16 code units with 32-bit shift
    semantics, so a label keeps the same color across runs and repositories.
    """
    hash_value = 0
    for code_unit in _utf16_code_units(name):
        hash_value = code_unit + (_to_int32(_to_int32(hash_value) << 5) - hash_value)
    return format(abs(hash_value) % 0xFFFFFF, "06x")


class IssueFormatter:
    """Builds IssueDraft objects from changelog entries."""

    def __init__(self, label: str = "", title_prefix: str = "", auto_label: bool = False):
        """Initialize formatter.

        Args:
            label: Base label applied to every issue (empty for none)
            title_prefix: Text prepended to every issue title
            auto_label: Also apply the entry's changelog type and label
        """
        self.label = label
        self.title_prefix = title_prefix
        self.auto_label = auto_label

    def format_title(self, entry: ChangelogEntry) -> str:
        return f"{self.title_prefix}{entry.title}"

    def format_body(self, entry: ChangelogEntry) -> str:
        body = (
            f"# {entry.title}\n"
            f"\n"
            f"{entry.content}\n"
            f"\n"
            f"---\n"
            f"\n"
            f"🔗 [View original changelog entry]({entry.link})\n"
            f"📅 Published: {entry.pub_date}"
        )
        return body.strip()

    def labels_for(self, entry: ChangelogEntry) -> List[str]:
        """Base label first, then category labels when auto-labeling."""
        labels = []
        if self.label:
            labels.append(self.label)
        if self.auto_label:
            for category_label in entry.category_labels:
                if category_label not in labels:
                    labels.append(category_label)
        return labels

    def format_issue(self, entry: ChangelogEntry) -> IssueDraft:
        return IssueDraft(
            title=self.format_title(entry),
            body=self.format_body(entry),
            labels=self.labels_for(entry),
        )
