"""Model factories shared by the gh-pulse tests."""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta
from typing import Any

from gh_pulse.models import (
    Commit,
    CommitAuthor,
    ContributionCalendar,
    ContributionDay,
    ContributionWeek,
    Issue,
    PullRequest,
    RepoRef,
    Repository,
)


def make_repository(
    name: str = "widgets",
    owner: str = "octocat",
    repo_id: int = 1,
    created_at: datetime | None = None,
    updated_at: datetime | None = None,
    stars: int = 0,
    forks: int = 0,
    watchers: int = 0,
    archived: bool = False,
    disabled: bool = False,
) -> Repository:
    created = created_at or datetime(2023, 1, 10, 12, 0, tzinfo=UTC)
    return Repository(
        id=repo_id,
        name=name,
        full_name=f"{owner}/{name}",
        created_at=created,
        updated_at=updated_at or created,
        stargazers_count=stars,
        forks_count=forks,
        watchers_count=watchers,
        archived=archived,
        disabled=disabled,
    )


def make_repo_json(
    name: str,
    owner: str = "octocat",
    repo_id: int = 1,
    updated_at: str = "2024-05-01T10:00:00Z",
    archived: bool = False,
    disabled: bool = False,
    stars: int = 0,
) -> dict[str, Any]:
    """A ``/user/repos`` item as returned by the REST API."""
    return {
        "id": repo_id,
        "name": name,
        "full_name": f"{owner}/{name}",
        "owner": {"login": owner},
        "description": None,
        "language": "Python",
        "stargazers_count": stars,
        "forks_count": 0,
        "watchers_count": stars,
        "open_issues_count": 0,
        "size": 10,
        "created_at": "2023-01-01T00:00:00Z",
        "updated_at": updated_at,
        "pushed_at": updated_at,
        "html_url": f"https://github.com/{owner}/{name}",
        "topics": [],
        "license": None,
        "archived": archived,
        "disabled": disabled,
        "private": False,
    }


def make_pull_request(
    number: int = 1,
    created_at: datetime | None = None,
    merged: bool = False,
    comments: int = 0,
    repo: str = "acme/tools",
) -> PullRequest:
    created = created_at or datetime(2024, 3, 1, 9, 30, tzinfo=UTC)
    owner, name = repo.split("/")
    return PullRequest(
        id=1000 + number,
        number=number,
        title=f"Change {number}",
        state="closed" if merged else "open",
        created_at=created,
        updated_at=created,
        merged_at=created + timedelta(days=1) if merged else None,
        repository=RepoRef(name=name, full_name=repo, owner=owner),
        comments=comments,
    )


def make_issue(number: int = 1, created_at: datetime | None = None) -> Issue:
    created = created_at or datetime(2024, 3, 2, 15, 0, tzinfo=UTC)
    return Issue(
        id=2000 + number,
        number=number,
        title=f"Bug {number}",
        state="open",
        created_at=created,
        updated_at=created,
        repository=RepoRef(name="tools", full_name="acme/tools", owner="acme"),
    )


def make_commit(sha: str = "abc1234", authored_at: datetime | None = None) -> Commit:
    return Commit(
        sha=sha,
        message=f"Commit {sha}",
        author=CommitAuthor(
            name="Octo Cat",
            email="octo@example.com",
            date=authored_at or datetime(2024, 3, 3, 8, 0, tzinfo=UTC),
        ),
        repository=RepoRef(name="widgets", full_name="octocat/widgets", owner="octocat"),
    )


def make_calendar(counts: list[int], start: date = date(2024, 1, 7)) -> ContributionCalendar:
    """Calendar with one day per count, oldest first, split into 7-day weeks.

    The default start date is a Sunday so weekday indexes line up.
    """
    days = [
        ContributionDay(
            contribution_count=count,
            date=start + timedelta(days=offset),
            weekday=(start + timedelta(days=offset)).isoweekday() % 7,
        )
        for offset, count in enumerate(counts)
    ]
    weeks = [
        ContributionWeek(contribution_days=days[i : i + 7]) for i in range(0, len(days), 7)
    ]
    return ContributionCalendar(total_contributions=sum(counts), weeks=weeks)


