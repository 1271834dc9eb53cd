"""Tests for the stats calculator."""

from __future__ import annotations

import pytest
from factories import make_calendar, make_commit, make_issue, make_pull_request

from gh_pulse.config import ScoreWeightsConfig
from gh_pulse.models import ContributionCalendar, Repository
from gh_pulse.stats import (
    calculate_contribution_streak,
    calculate_most_active_day,
    calculate_stats,
    calculate_top_languages,
    round_half_up,
)


class TestRoundHalfUp:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(0.5, 1), (1.5, 2), (2.5, 3), (8.49, 8), (0.0, 0)],
    )
    def test_rounds_halves_up(self, value: float, expected: int) -> None:
        assert round_half_up(value) == expected


class TestContributionStreak:
    def test_newest_day_without_contributions_breaks_streak(self) -> None:
        assert calculate_contribution_streak(make_calendar([3, 0, 2, 1, 0])) == 0

    def test_no_zero_days(self) -> None:
        assert calculate_contribution_streak(make_calendar([3, 1, 2])) == 3

    def test_stops_at_first_zero_from_newest(self) -> None:
        assert calculate_contribution_streak(make_calendar([5, 5, 0, 1, 1])) == 2

    def test_streak_spans_weeks(self, sample_calendar: ContributionCalendar) -> None:
        # [3, 0, 2, 1, 4, 5, 6 | 1, 2]
        assert calculate_contribution_streak(sample_calendar) == 7

    def test_empty_calendar(self) -> None:
        assert calculate_contribution_streak(ContributionCalendar()) == 0


class TestMostActiveDay:
    def test_picks_weekday_with_highest_total(self) -> None:
        # Starts on a Sunday: Sunday gets 1 + 1, Monday gets 5.
        calendar = make_calendar([1, 5, 0, 0, 0, 0, 0, 1])
        assert calculate_most_active_day(calendar) == "Monday"

    def test_totals_accumulate_across_weeks(self) -> None:
        calendar = make_calendar([4, 5, 0, 0, 0, 0, 0, 4])
        assert calculate_most_active_day(calendar) == "Sunday"

    def test_defaults_to_monday_without_data(self) -> None:
        assert calculate_most_active_day(ContributionCalendar()) == "Monday"


class TestTopLanguages:
    def test_sorted_with_percentages(self) -> None:
        top = calculate_top_languages({"JS": 800, "TS": 200, "Python": 1000})
        assert [(t.name, t.count, t.percentage) for t in top] == [
            ("Python", 1000, 50),
            ("JS", 800, 40),
            ("TS", 200, 10),
        ]

    def test_limited_to_ten(self) -> None:
        languages = {f"Lang{i}": (i + 1) * 100 for i in range(12)}
        top = calculate_top_languages(languages)
        assert len(top) == 10
        assert top[0].name == "Lang11"
        counts = [t.count for t in top]
        assert counts == sorted(counts, reverse=True)

    def test_percentages_close_to_hundred(self) -> None:
        top = calculate_top_languages({"A": 1, "B": 1, "C": 1})
        assert [t.percentage for t in top] == [33, 33, 33]
        assert abs(sum(t.percentage for t in top) - 100) <= 10

    def test_empty(self) -> None:
        assert calculate_top_languages({}) == []

    def test_zero_bytes_has_zero_percentage(self) -> None:
        top = calculate_top_languages({"Shell": 0})
        assert top[0].percentage == 0


class TestCalculateStats:
    def test_totals_and_scores(self, sample_repositories: list[Repository]) -> None:
        prs = [
            make_pull_request(1, merged=True, comments=3),
            make_pull_request(2, comments=4),
        ]
        issues = [make_issue(1)]
        calendar = make_calendar([50, 50])
        languages = {"JS": 800, "TS": 200, "Python": 1000}

        stats = calculate_stats(sample_repositories, prs, issues, calendar, languages)

        assert stats.total_stars == 60
        assert stats.total_forks == 5
        assert stats.total_watchers == 60
        assert stats.total_repositories == 3
        assert stats.total_prs == 2
        assert stats.total_issues == 1
        assert stats.lines_of_code == 2000
        assert stats.top_languages[0].name == "Python"
        # 3*5 + 100*0.5 + 2*10 + 1*3
        assert stats.contribution_score == 88
        # 60*2 + 5*3 + 1*5
        assert stats.impact_score == 140
        # 2*2 + 1*1 + 7*0.5 = 8.5
        assert stats.collaboration_score == 9

    def test_total_commits_comes_from_calendar(self) -> None:
        calendar = make_calendar([600, 600])
        commits = [make_commit(f"sha{i}") for i in range(50)]
        stats = calculate_stats([], [], [], calendar, {})
        assert stats.total_commits == 1200
        assert stats.total_commits != len(commits)

    def test_most_active_hour_is_unavailable(
        self, sample_calendar: ContributionCalendar
    ) -> None:
        first = calculate_stats([], [], [], sample_calendar, {})
        second = calculate_stats([], [], [], sample_calendar, {})
        assert first.most_active_hour is None
        assert first == second

    def test_custom_weights(self) -> None:
        weights = ScoreWeightsConfig(contribution_pr=1.0, contribution_calendar=0.0)
        stats = calculate_stats(
            [], [make_pull_request(1)], [], make_calendar([10]), {}, weights=weights
        )
        assert stats.contribution_score == 1

    def test_empty_inputs(self) -> None:
        stats = calculate_stats([], [], [], ContributionCalendar(), {})
        assert stats.total_commits == 0
        assert stats.contribution_streak == 0
        assert stats.most_active_day == "Monday"
        assert stats.top_languages == []
        assert stats.contribution_score == 0
