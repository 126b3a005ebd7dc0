"""
Issue Delivery
==============

Formatting of changelog entries into GitHub issue drafts.
"""

from .issue_formatter import IssueFormatter, IssueDraft, label_color

__all__ = [
    "IssueFormatter",
    "IssueDraft",
    "label_color",
]
