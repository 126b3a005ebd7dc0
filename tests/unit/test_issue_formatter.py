"""
Issue Formatter Tests
=====================

Tests for issue titles, bodies, labels and label colors.
"""

import re

import pytest

from changelog_issues.delivery.issue_formatter import IssueDraft, IssueFormatter, label_color


class TestLabelColor:
    """Test the deterministic label color."""

    def test_known_values(self):
        assert label_color("") == "000000"
        assert label_color("a") == "000061"
        assert label_color("ab") == "000c21"

    @pytest.mark.parametrize("name", ["changelog", "Improvement", "GitHub API & OAuth", "Retired 🚀"])
    def test_six_lowercase_hex_digits(self, name):
        assert re.fullmatch(r"[0-9a-f]{6}", label_color(name))

    def test_stable_across_calls(self):
        assert label_color("Copilot") == label_color("Copilot")
        assert label_color("Copilot") != label_color("copilot")

    def test_long_names_wrap_to_32_bits(self):
        color = label_color("a very long label name that overflows a 32-bit hash " * 4)

        assert re.fullmatch(r"[0-9a-f]{6}", color)


class TestIssueFormatter:
    """Test IssueFormatter."""

    @pytest.fixture
    def entry(self, make_entry):
        return make_entry(
            "https://github.blog/changelog/?p=100",
            title="Copilot code review now generally available",
            link="https://github.blog/changelog/2024-08-28-copilot-code-review",
            content="<p>Copilot can now review pull requests.</p>",
            changelog_type="Improvement",
            changelog_label="Copilot",
        )

    def test_title_prefix(self, entry):
        formatter = IssueFormatter(title_prefix="GitHub Changelog: ")

        assert formatter.format_title(entry) == (
            "GitHub Changelog: Copilot code review now generally available"
        )

    def test_body_layout(self, entry):
        body = IssueFormatter().format_body(entry)

        assert body == (
            "# Copilot code review now generally available\n"
            "\n"
            "<p>Copilot can now review pull requests.</p>\n"
            "\n"
            "---\n"
            "\n"
            "🔗 [View original changelog entry](https://github.blog/changelog/2024-08-28-copilot-code-review)\n"
            "📅 Published: Wed, 28 Aug 2024 17:00:00 +0000"
        )

    def test_base_label_only_without_auto_label(self, entry):
        formatter = IssueFormatter(label="changelog")

        assert formatter.labels_for(entry) == ["changelog"]

    def test_auto_label_adds_category_labels(self, entry):
        formatter = IssueFormatter(label="changelog", auto_label=True)

        assert formatter.labels_for(entry) == ["changelog", "Improvement", "Copilot"]

    def test_auto_label_without_base_label(self, entry):
        formatter = IssueFormatter(auto_label=True)

        assert formatter.labels_for(entry) == ["Improvement", "Copilot"]

    def test_duplicate_labels_are_dropped(self, make_entry):
        entry = make_entry("x", changelog_type="changelog", changelog_label="changelog")
        formatter = IssueFormatter(label="changelog", auto_label=True)

        assert formatter.labels_for(entry) == ["changelog"]

    def test_entry_without_categories(self, make_entry):
        formatter = IssueFormatter(label="changelog", auto_label=True)

        assert formatter.labels_for(make_entry("plain")) == ["changelog"]

    def test_format_issue(self, entry):
        draft = IssueFormatter(label="changelog", title_prefix="GitHub Changelog: ").format_issue(entry)

        assert isinstance(draft, IssueDraft)
        assert draft.title.startswith("GitHub Changelog: ")
        assert draft.body.startswith("# Copilot code review")
        assert draft.labels == ["changelog"]
