"""
CLI Tests
=========

Tests for the click commands and GitHub Actions output handling.
"""

import pytest
from unittest.mock import AsyncMock, patch

from click.testing import CliRunner

from changelog_issues.cli import cli, write_action_outputs
from changelog_issues.processing.changelog_sync import SyncResult
from changelog_issues.utils.exceptions import FetchStatusError


@pytest.fixture
def runner():
    return CliRunner()


class TestNormalizeLabelCommand:
    """Test the normalize-label command."""

    def test_prints_normalized_label(self, runner):
        result = runner.invoke(cli, ["normalize-label", "github api &amp; oauth"])

        assert result.exit_code == 0
        assert result.output == "GitHub API & OAuth\n"


class TestSyncCommand:
    """Test the sync command."""

    def test_dry_run(self, runner, make_entry, temp_store_path, tmp_path, monkeypatch):
        output_file = tmp_path / "github_output"
        monkeypatch.setenv("GITHUB_OUTPUT", str(output_file))
        entries = [make_entry("entry-2"), make_entry("entry-1")]

        with patch("changelog_issues.cli.fetch_changelog_feed", AsyncMock(return_value=entries)):
            result = runner.invoke(
                cli, ["sync", "--dry-run", "--store-location", str(temp_store_path)]
            )

        assert result.exit_code == 0, result.output
        assert "[dry run] 2 new of 2 entries, 0 issues created" in result.output
        assert not temp_store_path.exists()
        assert output_file.read_text(encoding="utf-8") == (
            "issues-created=0\nlast-processed-guid=entry-2\n"
        )

    def test_missing_token_fails(self, runner, temp_store_path, monkeypatch):
        monkeypatch.delenv("GITHUB_TOKEN", raising=False)
        monkeypatch.delenv("CHANGELOG_ISSUES_GITHUB__TOKEN", raising=False)

        with patch("changelog_issues.cli.fetch_changelog_feed", AsyncMock(return_value=[])):
            result = runner.invoke(
                cli,
                ["sync", "--store-location", str(temp_store_path), "--repository", "octo/repo"],
            )

        assert result.exit_code == 1
        assert "GitHub token is required" in result.output

    def test_feed_error_is_reported(self, runner, temp_store_path):
        failing_fetch = AsyncMock(side_effect=FetchStatusError(404))

        with patch("changelog_issues.cli.fetch_changelog_feed", failing_fetch):
            result = runner.invoke(
                cli, ["sync", "--dry-run", "--store-location", str(temp_store_path)]
            )

        assert result.exit_code == 1
        assert "Failed to fetch feed: 404" in result.output


class TestWriteActionOutputs:
    """Test write_action_outputs."""

    def test_appends_outputs(self, tmp_path):
        output_file = tmp_path / "github_output"
        output_file.write_text("existing=1\n", encoding="utf-8")

        write_action_outputs(SyncResult(issues_created=2, last_processed_guid="guid-9"), str(output_file))

        assert output_file.read_text(encoding="utf-8") == (
            "existing=1\nissues-created=2\nlast-processed-guid=guid-9\n"
        )

    def test_no_guid_written_when_absent(self, tmp_path):
        output_file = tmp_path / "github_output"

        write_action_outputs(SyncResult(issues_created=0, last_processed_guid=None), str(output_file))

        assert output_file.read_text(encoding="utf-8") == "issues-created=0\n"

    def test_no_output_path_is_a_no_op(self, monkeypatch):
        monkeypatch.delenv("GITHUB_OUTPUT", raising=False)

        write_action_outputs(SyncResult(issues_created=1, last_processed_guid="g"))
