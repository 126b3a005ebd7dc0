"""
Changelog Issues CLI
====================

Usage:
    changelog-issues --help                  # Show all commands
    changelog-issues check-config            # Validate configuration
    changelog-issues show-feed [URL]         # Fetch and list feed entries
    changelog-issues normalize-label TEXT    # Show the normalized label form
    changelog-issues sync                    # Create issues for new entries
"""

import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config.settings import get_settings
from .delivery.issue_formatter import IssueFormatter
from .github.issues_client import GitHubIssuesClient
from .ingestion.changelog_feed import fetch_changelog_feed
from .ingestion.feed_fetcher import FeedFetcher
from .ingestion.label_normalizer import normalize_label_case
from .processing.changelog_sync import ChangelogIssueSync, SyncResult
from .storage.guid_store import GuidStore
from .utils.exceptions import ConfigurationError, ErrorCode, get_user_friendly_message, handle_exception
from .utils.logging import configure_application_logging

console = Console()
logger = logging.getLogger("changelog_issues.cli")


def _configure_logging(debug: bool) -> None:
    settings = get_settings()
    configure_application_logging(
        log_level="DEBUG" if debug else settings.get_effective_log_level(),
        log_file=settings.logging.file_path,
        enable_console=settings.logging.console_logging,
        structured_logging=settings.logging.structured_logging,
        max_file_size_mb=settings.logging.max_file_size_mb,
        backup_count=settings.logging.backup_count,
    )


def write_action_outputs(result: SyncResult, output_path: Optional[str] = None) -> None:
    """Append step outputs for GitHub Actions when GITHUB_OUTPUT is set."""
    output_path = output_path or os.getenv("GITHUB_OUTPUT")
    if not output_path:
        return

    lines = [f"issues-created={result.issues_created}"]
    if result.last_processed_guid:
        lines.append(f"last-processed-guid={result.last_processed_guid}")

    with open(output_path, "a", encoding="utf-8") as output_file:
        output_file.write("\n".join(lines) + "\n")


@click.group(invoke_without_command=True)
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx, debug):
    """Create GitHub issues from changelog RSS feed entries."""
    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
def check_config():
    """Validate configuration and environment variables."""
    console.print("[bold blue]🔧 Checking Configuration[/bold blue]")

    try:
        settings = get_settings()
    except ConfigurationError as e:
        console.print(f"[bold red]❌ Configuration error: {escape(str(e))}[/bold red]")
        sys.exit(1)

    table = Table(title="Configuration Status")
    table.add_column("Component", style="cyan")
    table.add_column("Status", style="green")
    table.add_column("Details")

    checks = [
        ("Feed", _check_feed_config),
        ("Issues", _check_issue_config),
        ("Store", _check_store_config),
        ("GitHub", _check_github_config),
        ("Logging", _check_logging_config),
    ]

    all_passed = True
    for name, check_func in checks:
        status, details = check_func(settings)
        table.add_row(name, "✅ Valid" if status else "❌ Invalid", details)
        if not status:
            all_passed = False

    console.print(table)

    if all_passed:
        console.print("[bold green]✅ All configuration checks passed![/bold green]")
    else:
        console.print("[bold red]❌ Configuration validation failed[/bold red]")
        sys.exit(1)


@cli.command()
@click.argument('url', required=False)
@click.option('--limit', default=10, show_default=True, help='Number of entries to show')
@click.pass_context
def show_feed(ctx, url, limit):
    """Fetch a changelog feed and list its entries."""
    _configure_logging(ctx.obj.get('debug', False))
    settings = get_settings()
    feed_url = url or settings.feed.url
    console.print(f"[bold blue]📡 Fetching changelog feed: {feed_url}[/bold blue]")

    try:
        fetcher = FeedFetcher(timeout=settings.feed.request_timeout)
        entries = asyncio.run(fetch_changelog_feed(feed_url, fetcher=fetcher))
    except Exception as e:
        error = handle_exception(e, logger, "show_feed", {"feed_url": feed_url})
        console.print(f"[bold red]❌ {escape(str(error))}[/bold red]")
        sys.exit(1)

    table = Table(title=f"Changelog Entries ({len(entries)} total)")
    table.add_column("Published", style="yellow")
    table.add_column("Title", style="cyan")
    table.add_column("Type", style="green")
    table.add_column("Label", style="magenta")
    table.add_column("GUID", style="blue")

    for entry in entries[:limit]:
        title = entry.title if len(entry.title) <= 60 else entry.title[:57] + "..."
        table.add_row(
            entry.pub_date,
            title,
            entry.changelog_type or "-",
            entry.changelog_label or "-",
            entry.guid,
        )

    console.print(table)


@cli.command()
@click.argument('label')
def normalize_label(label):
    """Print the normalized display form of a changelog label."""
    click.echo(normalize_label_case(label))


@cli.command()
@click.option('--feed-url', help='Changelog RSS feed URL')
@click.option('--store-location', help='File holding the last processed GUID')
@click.option('--label', help='Label added to every created issue')
@click.option('--issue-title-prefix', help='Prefix for issue titles')
@click.option('--auto-label/--no-auto-label', default=None, help='Add category labels from the feed')
@click.option('--token', envvar='GITHUB_TOKEN', help='GitHub token (env: GITHUB_TOKEN)')
@click.option('--repository', envvar='GITHUB_REPOSITORY', help='Target repository owner/name (env: GITHUB_REPOSITORY)')
@click.option('--dry-run', is_flag=True, help='Show what would be created without calling GitHub')
@click.pass_context
def sync(ctx, feed_url, store_location, label, issue_title_prefix, auto_label, token, repository, dry_run):
    """Create an issue for every changelog entry newer than the last run."""
    _configure_logging(ctx.obj.get('debug', False))
    settings = get_settings()

    formatter = IssueFormatter(
        label=settings.issues.label if label is None else label,
        title_prefix=settings.issues.title_prefix if issue_title_prefix is None else issue_title_prefix,
        auto_label=settings.issues.auto_label if auto_label is None else auto_label,
    )
    guid_store = GuidStore(store_location or settings.store.location)
    feed_url = feed_url or settings.feed.url

    async def run_sync() -> SyncResult:
        fetcher = FeedFetcher(timeout=settings.feed.request_timeout)

        async def load_entries(url):
            return await fetch_changelog_feed(url, fetcher=fetcher)

        if dry_run:
            return await ChangelogIssueSync(
                None, guid_store, formatter, feed_url, fetch=load_entries, dry_run=True
            ).run()

        client = GitHubIssuesClient(
            token=token or settings.resolve_github_token(),
            repository=repository or settings.resolve_repository(),
            api_url=settings.github.api_url,
            timeout=settings.github.request_timeout,
        )
        async with client:
            return await ChangelogIssueSync(
                client, guid_store, formatter, feed_url, fetch=load_entries
            ).run()

    try:
        result = asyncio.run(run_sync())
        write_action_outputs(result)
    except Exception as e:
        error = handle_exception(e, logger, "sync", {"feed_url": feed_url})
        console.print(f"[bold red]❌ {escape(str(error))}[/bold red]")
        if error.error_code == ErrorCode.UNEXPECTED:
            console.print(get_user_friendly_message(error))
        sys.exit(1)

    prefix = escape("[dry run] ") if result.dry_run else ""
    console.print(
        f"[bold green]✅ {prefix}{len(result.new_entries)} new of {result.total_entries} entries, "
        f"{result.issues_created} issues created[/bold green]"
    )
    if result.last_processed_guid:
        console.print(f"Last processed GUID: {result.last_processed_guid}")


# Helper functions for configuration checks
def _check_feed_config(settings) -> tuple:
    return True, f"URL: {settings.feed.url}, timeout: {settings.feed.request_timeout:g}s"


def _check_issue_config(settings) -> tuple:
    issues = settings.issues
    return True, (
        f"Label: {issues.label or 'none'}, prefix: {issues.title_prefix!r}, "
        f"auto-label: {issues.auto_label}"
    )


def _check_store_config(settings) -> tuple:
    try:
        Path(settings.store.location).parent.mkdir(parents=True, exist_ok=True)
        return True, f"Path: {settings.store.location}"
    except OSError as e:
        return False, str(e)


def _check_github_config(settings) -> tuple:
    if not settings.resolve_github_token():
        return False, "Token not set (CHANGELOG_ISSUES_GITHUB__TOKEN or GITHUB_TOKEN)"
    repository = settings.resolve_repository()
    if not repository:
        return False, "Repository not set (CHANGELOG_ISSUES_GITHUB__REPOSITORY or GITHUB_REPOSITORY)"
    return True, f"Repository: {repository}"


def _check_logging_config(settings) -> tuple:
    try:
        if settings.logging.file_path:
            Path(settings.logging.file_path).parent.mkdir(parents=True, exist_ok=True)
        return True, f"Level: {settings.logging.level.value}, Console: {settings.logging.console_logging}"
    except OSError as e:
        return False, str(e)


def main() -> None:
    """Console script entry point."""
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]👋 Interrupted by user[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    main()
