"""Tests for output formatting."""

from __future__ import annotations

import json
from datetime import UTC, datetime

import click
from factories import make_commit, make_issue, make_pull_request, make_repository

from gh_pulse.formatter import format_cli_output, format_insights, format_json, format_timeline
from gh_pulse.models import (
    Collaborator,
    ContributionData,
    ContributionStats,
    GitHubUser,
    Insight,
    InsightType,
    LanguageShare,
    RepositoryContribution,
)
from gh_pulse.timeline import build_timeline


def _make_data(**kwargs) -> ContributionData:
    """Helper to build ContributionData with sensible defaults."""
    defaults = {
        "user": GitHubUser(login="octocat", name="The Octocat"),
        "stats": ContributionStats(
            total_commits=1234,
            total_prs=12,
            total_issues=4,
            total_stars=55,
            total_forks=5,
            total_watchers=55,
            total_repositories=3,
            top_languages=[
                LanguageShare(name="Python", count=3000, percentage=75),
                LanguageShare(name="Go", count=1000, percentage=25),
            ],
            contribution_streak=1,
            most_active_day="Tuesday",
            contribution_score=700,
            impact_score=130,
            collaboration_score=30,
        ),
        "collaborators": [Collaborator(login="hubot", contributions=9)],
        "repository_contributions": [
            RepositoryContribution(name="widgets", owner="octocat", total_count=42)
        ],
        "recent_commits": [make_commit("abcdef123456")],
    }
    defaults.update(kwargs)
    return ContributionData(**defaults)


class TestFormatCliOutput:
    def test_basic_output(self) -> None:
        out = click.unstyle(format_cli_output(_make_data()))
        assert "octocat (The Octocat)" in out
        assert "Contributions (last year): 1,234" in out
        assert "Stars: 55" in out
        assert "Streak: 1 day |" in out
        assert "Most active day: Tuesday" in out
        assert "Python: 75% (3,000 bytes)" in out

    def test_missing_hour_shown_as_unavailable(self) -> None:
        out = click.unstyle(format_cli_output(_make_data()))
        assert "Most active hour: n/a" in out

    def test_hour_shown_when_known(self) -> None:
        data = _make_data()
        data.stats.most_active_hour = 14
        assert "Most active hour: 14:00" in click.unstyle(format_cli_output(data))

    def test_verbose_shows_details(self) -> None:
        out = click.unstyle(format_cli_output(_make_data(), verbose=True))
        assert "hubot: 9 contributions" in out
        assert "octocat/widgets: 42" in out
        assert "abcdef1 octocat/widgets: Commit abcdef123456" in out

    def test_non_verbose_hides_details(self) -> None:
        out = format_cli_output(_make_data())
        assert "hubot" not in out
        assert "Recent commits" not in out

    def test_no_languages_section_when_empty(self) -> None:
        data = _make_data(stats=ContributionStats())
        assert "Top languages" not in format_cli_output(data)

    def test_contains_ansi_color_codes(self) -> None:
        # click.style adds ANSI escape codes
        assert "\x1b[" in format_cli_output(_make_data())


class TestFormatTimeline:
    def test_lines_per_bucket(self) -> None:
        day = datetime(2024, 3, 1, 10, tzinfo=UTC)
        entries = build_timeline(
            [make_repository(created_at=datetime(2023, 1, 1, tzinfo=UTC))],
            [make_pull_request(1, created_at=day), make_pull_request(2, created_at=day)],
            [make_issue(1)],
            [],
        )
        assert format_timeline(entries).splitlines() == [
            "2024-03-02  1 issue",
            "2024-03-01  2 pull requests",
            "2023-01-01  1 repository",
        ]

    def test_empty(self) -> None:
        assert format_timeline([]) == "No activity found."


class TestFormatInsights:
    def test_lists_insights(self) -> None:
        insight = Insight(
            type=InsightType.ACHIEVEMENT,
            title="Strong Community Impact",
            description="Your repositories have earned 120 stars.",
            confidence=0.85,
            actionable=True,
        )
        out = click.unstyle(format_insights([insight]))
        assert "[achievement] Strong Community Impact (85%)" in out
        assert "  Your repositories have earned 120 stars." in out

    def test_empty(self) -> None:
        assert format_insights([]) == "No insights available."


class TestFormatJson:
    def test_model(self) -> None:
        parsed = json.loads(format_json(_make_data()))
        assert parsed["user"]["login"] == "octocat"
        assert parsed["stats"]["most_active_hour"] is None

    def test_list_of_models(self) -> None:
        entries = build_timeline([], [], [make_issue(1)], [])
        parsed = json.loads(format_json(entries))
        assert parsed[0]["type"] == "issue"
        assert parsed[0]["count"] == 1

    def test_roundtrip(self) -> None:
        data = _make_data()
        restored = ContributionData.model_validate_json(format_json(data))
        assert restored.stats == data.stats
        assert restored.user == data.user
