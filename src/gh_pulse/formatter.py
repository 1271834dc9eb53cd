"""Output formatting for aggregated contribution data."""

from __future__ import annotations

import json
from collections.abc import Sequence

import click
from pydantic import BaseModel

from gh_pulse.models import (
    ContributionData,
    Insight,
    InsightType,
    TimelineEntry,
    TimelineEventType,
)

_INSIGHT_COLORS: dict[InsightType, str] = {
    InsightType.SKILL: "cyan",
    InsightType.TREND: "blue",
    InsightType.OPPORTUNITY: "yellow",
    InsightType.ACHIEVEMENT: "green",
}

_EVENT_LABELS: dict[TimelineEventType, str] = {
    TimelineEventType.COMMIT: "commit",
    TimelineEventType.PULL_REQUEST: "pull request",
    TimelineEventType.ISSUE: "issue",
    TimelineEventType.REPOSITORY: "repository",
}


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'s' if count != 1 else ''}"


def format_cli_output(data: ContributionData, verbose: bool = False) -> str:
    """Format the headline statistics for terminal display."""
    stats = data.stats
    user = data.user
    name = click.style(user.login, bold=True)
    if user.name:
        name = f"{name} ({user.name})"

    hour = f"{stats.most_active_hour}:00" if stats.most_active_hour is not None else "n/a"
    lines: list[str] = [
        f"gh-pulse: {name}",
        "",
        f"Contributions (last year): {stats.total_commits:,}",
        f"Repositories: {stats.total_repositories} | "
        f"Stars: {stats.total_stars} | "
        f"Forks: {stats.total_forks} | "
        f"Watchers: {stats.total_watchers}",
        f"Pull requests: {stats.total_prs} | Issues: {stats.total_issues}",
        f"Streak: {_plural(stats.contribution_streak, 'day')} | "
        f"Most active day: {stats.most_active_day} | "
        f"Most active hour: {hour}",
        "",
        "Scores: "
        + click.style(f"contribution {stats.contribution_score}", bold=True)
        + f" | impact {stats.impact_score}"
        + f" | collaboration {stats.collaboration_score}",
    ]

    if stats.top_languages:
        lines.append("")
        lines.append("Top languages:")
        for lang in stats.top_languages:
            lines.append(f"  {lang.name}: {lang.percentage}% ({lang.count:,} bytes)")

    if verbose:
        if data.collaborators:
            lines.append("")
            lines.append("Collaborators:")
            for collaborator in data.collaborators:
                lines.append(
                    f"  {collaborator.login}: "
                    f"{_plural(collaborator.contributions, 'contribution')}"
                )

        if data.repository_contributions:
            lines.append("")
            lines.append("Commit contributions by repository:")
            for contribution in data.repository_contributions:
                lines.append(
                    f"  {contribution.owner}/{contribution.name}: "
                    f"{contribution.total_count}"
                )

        if data.recent_commits:
            lines.append("")
            lines.append("Recent commits:")
            for commit in data.recent_commits[:10]:
                summary = commit.message.splitlines()[0] if commit.message else ""
                lines.append(
                    f"  {commit.sha[:7]} {commit.repository.full_name}: {summary}"
                )

    return "\n".join(lines)


def format_timeline(entries: Sequence[TimelineEntry]) -> str:
    """One line per timeline bucket, newest first."""
    if not entries:
        return "No activity found."
    lines: list[str] = []
    for entry in entries:
        label = _EVENT_LABELS[entry.type]
        lines.append(f"{entry.date.isoformat()}  {_plural(entry.count, label)}")
    return "\n".join(lines)


def format_insights(insights: Sequence[Insight]) -> str:
    """Insights as a terminal list with the type highlighted."""
    if not insights:
        return "No insights available."
    lines: list[str] = []
    for insight in insights:
        color = _INSIGHT_COLORS.get(insight.type, "white")
        tag = click.style(f"[{insight.type.value}]", fg=color, bold=True)
        lines.append(f"{tag} {insight.title} ({insight.confidence:.0%})")
        lines.append(f"  {insight.description}")
    return "\n".join(lines)


def format_json(value: BaseModel | Sequence[BaseModel]) -> str:
    """Format a model, or a list of models, as JSON."""
    if isinstance(value, BaseModel):
        return value.model_dump_json(indent=2)
    return json.dumps([item.model_dump(mode="json") for item in value], indent=2)
