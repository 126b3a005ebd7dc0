"""
Changelog Sync Orchestrator
===========================

Coordinates one sync run: read the last processed GUID, fetch the feed,
open an issue for every entry newer than that GUID, then move the marker
to the newest entry.
"""

from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, Optional, Sequence, Set

from ..delivery.issue_formatter import AUTO_LABEL_DESCRIPTION, IssueFormatter, label_color
from ..github.issues_client import GitHubIssuesClient
from ..ingestion.changelog_feed import fetch_changelog_feed
from ..ingestion.models import ChangelogEntry
from ..storage.guid_store import GuidStore
from ..utils.exceptions import GitHubAPIError
from ..utils.logging import PerformanceLogger, get_logger_for_component

FeedLoader = Callable[[str], Awaitable[List[ChangelogEntry]]]


@dataclass
class SyncResult:
    """Outcome of a sync run."""
    issues_created: int
    last_processed_guid: Optional[str]
    total_entries: int = 0
    new_entries: List[ChangelogEntry] = field(default_factory=list)
    dry_run: bool = False


def select_new_entries(
    entries: Sequence[ChangelogEntry], last_processed_guid: Optional[str]
) -> List[ChangelogEntry]:
    """Entries ahead of the last processed GUID in feed (newest-first) order.

    When the GUID is unknown or no longer in the feed, every entry is new.
    """
    if last_processed_guid:
        for index, entry in enumerate(entries):
            if entry.guid == last_processed_guid:
                return list(entries[:index])
    return list(entries)


class ChangelogIssueSync:
    """Turns new changelog entries into GitHub issues."""

    def __init__(
        self,
        issues_client: Optional[GitHubIssuesClient],
        guid_store: GuidStore,
        formatter: IssueFormatter,
        feed_url: str,
        fetch: FeedLoader = fetch_changelog_feed,
        dry_run: bool = False,
    ):
        """Initialize sync.

        Args:
            issues_client: Open GitHub client (may be None for dry runs)
            guid_store: Marker store for the last processed GUID
            formatter: Issue formatter
            feed_url: Changelog feed URL
            fetch: Coroutine returning the feed entries for a URL
            dry_run: Log the issues that would be created without touching
                GitHub or the marker file
        """
        if issues_client is None and not dry_run:
            raise ValueError("issues_client is required unless dry_run is set")

        self.issues_client = issues_client
        self.guid_store = guid_store
        self.formatter = formatter
        self.feed_url = feed_url
        self.fetch = fetch
        self.dry_run = dry_run
        self.logger = get_logger_for_component("changelog_sync", feed_url=feed_url)

    async def run(self) -> SyncResult:
        """Run one sync pass.

        Raises:
            FeedError: If the feed cannot be fetched or parsed
            GitHubAPIError: If an issue cannot be created
            GuidStoreError: If the marker cannot be updated
        """
        with PerformanceLogger(self.logger, "changelog sync") as perf:
            last_processed_guid = self.guid_store.read()

            entries = await self.fetch(self.feed_url)
            perf.record(entries=len(entries))
            self.logger.info(f"Found {len(entries)} entries in the feed")

            new_entries = select_new_entries(entries, last_processed_guid)
            perf.record(new_entries=len(new_entries))
            self.logger.info(f"Found {len(new_entries)} new entries to process")

            issues_created = 0
            perf.record(issues_created=0)
            known_labels: Set[str] = set()
            for entry in new_entries:
                draft = self.formatter.format_issue(entry)

                if self.dry_run:
                    self.logger.info(
                        f"[dry run] Would create issue '{draft.title}' "
                        f"with labels {draft.labels}"
                    )
                    continue

                await self._ensure_labels_exist(draft.labels, known_labels)
                await self.issues_client.create_issue(draft.title, draft.body, draft.labels)
                issues_created += 1
                perf.record(issues_created=issues_created)
                self.logger.info(f"Created issue for entry: {entry.title}")

            latest_guid = entries[0].guid if entries else last_processed_guid
            if entries and not self.dry_run:
                self.guid_store.write(latest_guid)

        return SyncResult(
            issues_created=issues_created,
            last_processed_guid=latest_guid,
            total_entries=len(entries),
            new_entries=new_entries,
            dry_run=self.dry_run,
        )

    async def _ensure_labels_exist(self, labels: List[str], known_labels: Set[str]) -> None:
        """Create missing labels; failures are logged and do not block the issue."""
        for label_name in labels:
            if label_name in known_labels:
                continue

            try:
                await self.issues_client.get_label(label_name)
                self.logger.info(f"Label '{label_name}' already exists")
                known_labels.add(label_name)
            except GitHubAPIError as e:
                if e.status_code != 404:
                    self.logger.warning(f"Error checking label '{label_name}': {e}")
                    continue

                try:
                    await self.issues_client.create_label(
                        label_name,
                        color=label_color(label_name),
                        description=AUTO_LABEL_DESCRIPTION,
                    )
                    self.logger.info(f"Created label '{label_name}'")
                    known_labels.add(label_name)
                except GitHubAPIError as create_error:
                    self.logger.warning(
                        f"Failed to create label '{label_name}': {create_error}"
                    )
