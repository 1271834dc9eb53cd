"""Derived statistics over one aggregation run's collected data."""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence

from gh_pulse.config import ScoreWeightsConfig
from gh_pulse.models import (
    WEEKDAY_NAMES,
    ContributionCalendar,
    ContributionStats,
    Issue,
    LanguageShare,
    PullRequest,
    Repository,
)

DEFAULT_ACTIVE_DAY = "Monday"


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for non-negatives."""
    return math.floor(value + 0.5)


def calculate_top_languages(
    language_bytes: Mapping[str, int], limit: int = 10
) -> list[LanguageShare]:
    """Languages by descending byte count with their share of all bytes.

    Percentages are rounded independently and need not add up to 100.
    """
    total = sum(language_bytes.values())
    ranked = sorted(language_bytes.items(), key=lambda item: item[1], reverse=True)
    return [
        LanguageShare(
            name=name,
            count=byte_count,
            percentage=round_half_up(byte_count / total * 100) if total else 0,
        )
        for name, byte_count in ranked[:limit]
    ]


def calculate_contribution_streak(calendar: ContributionCalendar) -> int:
    """Consecutive days with contributions, counting back from the newest day.

    The streak is 0 when the newest day has no contributions.
    """
    streak = 0
    for day in reversed(calendar.days()):
        if day.contribution_count <= 0:
            break
        streak += 1
    return streak


def calculate_most_active_day(calendar: ContributionCalendar) -> str:
    """Weekday name with the largest total contribution count."""
    totals: dict[str, int] = {}
    for day in calendar.days():
        name = WEEKDAY_NAMES[day.weekday]
        totals[name] = totals.get(name, 0) + day.contribution_count
    if not totals:
        return DEFAULT_ACTIVE_DAY
    # max() keeps the first of equal totals, in calendar order.
    return max(totals.items(), key=lambda item: item[1])[0]


def calculate_contribution_score(
    repositories: Sequence[Repository],
    pull_requests: Sequence[PullRequest],
    issues: Sequence[Issue],
    calendar: ContributionCalendar,
    weights: ScoreWeightsConfig,
) -> int:
    return round_half_up(
        len(repositories) * weights.contribution_repo
        + calendar.total_contributions * weights.contribution_calendar
        + len(pull_requests) * weights.contribution_pr
        + len(issues) * weights.contribution_issue
    )


def calculate_impact_score(
    total_stars: int,
    total_forks: int,
    pull_requests: Sequence[PullRequest],
    weights: ScoreWeightsConfig,
) -> int:
    merged = sum(1 for pr in pull_requests if pr.merged_at is not None)
    return round_half_up(
        total_stars * weights.impact_star
        + total_forks * weights.impact_fork
        + merged * weights.impact_merged_pr
    )


def calculate_collaboration_score(
    pull_requests: Sequence[PullRequest],
    issues: Sequence[Issue],
    weights: ScoreWeightsConfig,
) -> int:
    discussion = sum(pr.comments for pr in pull_requests)
    return round_half_up(
        len(pull_requests) * weights.collaboration_pr
        + len(issues) * weights.collaboration_issue
        + discussion * weights.collaboration_comment
    )


def calculate_stats(
    repositories: Sequence[Repository],
    pull_requests: Sequence[PullRequest],
    issues: Sequence[Issue],
    calendar: ContributionCalendar,
    language_bytes: Mapping[str, int],
    weights: ScoreWeightsConfig | None = None,
    top_language_count: int = 10,
) -> ContributionStats:
    """Combine collected data into a single :class:`ContributionStats`.

    ``total_commits`` is the calendar total, which also counts private and
    older contributions, not the number of fetched commits.
    """
    weights = weights or ScoreWeightsConfig()

    total_stars = sum(repo.stargazers_count for repo in repositories)
    total_forks = sum(repo.forks_count for repo in repositories)
    total_watchers = sum(repo.watchers_count for repo in repositories)

    return ContributionStats(
        total_commits=calendar.total_contributions,
        total_prs=len(pull_requests),
        total_issues=len(issues),
        total_stars=total_stars,
        total_forks=total_forks,
        total_watchers=total_watchers,
        total_repositories=len(repositories),
        lines_of_code=sum(language_bytes.values()),
        top_languages=calculate_top_languages(language_bytes, top_language_count),
        contribution_streak=calculate_contribution_streak(calendar),
        most_active_day=calculate_most_active_day(calendar),
        most_active_hour=None,
        contribution_score=calculate_contribution_score(
            repositories, pull_requests, issues, calendar, weights
        ),
        impact_score=calculate_impact_score(
            total_stars, total_forks, pull_requests, weights
        ),
        collaboration_score=calculate_collaboration_score(
            pull_requests, issues, weights
        ),
    )
