"""
GitHub Integration
==================

REST client for creating labels and issues in the target repository.
"""

from .issues_client import GitHubIssuesClient

__all__ = [
    "GitHubIssuesClient",
]
