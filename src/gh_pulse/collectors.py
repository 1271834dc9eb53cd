"""Per-entity collectors turning GitHub API responses into models.

Collectors backed by a single call (repositories, searches, contribution
calendar) let errors propagate.  Collectors that issue one call per
repository or per item log failures and carry on without that item.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, TypeVar

from gh_pulse.config import FetchConfig
from gh_pulse.github_client import GitHubClient
from gh_pulse.models import (
    Collaborator,
    Commit,
    CommitAuthor,
    ContributionCalendar,
    ContributionDay,
    ContributionsCollection,
    ContributionWeek,
    Issue,
    Label,
    PullRequest,
    PullRequestAuthor,
    RepoRef,
    Repository,
    RepositoryContribution,
)
from gh_pulse.pagination import fetch_all_pages

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


async def _gather_isolated(
    items: Sequence[T],
    fetch: Callable[[T], Awaitable[R]],
    max_concurrency: int,
    what: str,
    describe: Callable[[T], str],
) -> list[tuple[T, R]]:
    """Run *fetch* over *items* concurrently, keeping only the successes.

    At most *max_concurrency* calls are in flight.  Results keep the order
    of *items*.  A failed call is logged and dropped without affecting
    the other calls.  Cancellation and other non-Exception errors are
    re-raised.
    """
    semaphore = asyncio.Semaphore(max(1, max_concurrency))

    async def run(item: T) -> R:
        async with semaphore:
            return await fetch(item)

    results = await asyncio.gather(*(run(item) for item in items), return_exceptions=True)

    successes: list[tuple[T, R]] = []
    for item, result in zip(items, results, strict=True):
        if isinstance(result, Exception):
            logger.warning("Failed to fetch %s for %s: %s", what, describe(item), result)
            continue
        if isinstance(result, BaseException):
            raise result
        successes.append((item, result))
    return successes


def _repo_label(repo: Repository) -> str:
    return repo.full_name


def _parse_labels(item: dict[str, Any]) -> list[Label]:
    return [
        Label(name=label["name"], color=label.get("color") or "")
        for label in item.get("labels") or []
    ]


def _repo_ref(repo: Repository) -> RepoRef:
    return RepoRef(name=repo.name, full_name=repo.full_name, owner=repo.owner_login)


# ----------------------------------------------------------------------
# Repositories
# ----------------------------------------------------------------------


async def collect_repositories(
    client: GitHubClient, config: FetchConfig | None = None
) -> list[Repository]:
    """All repositories visible to the authenticated user, most recently updated first."""
    config = config or FetchConfig()

    async def fetch_page(page: int, per_page: int) -> list[dict[str, Any]]:
        return await client.list_repositories(
            sort="updated", page=page, per_page=per_page, type="all"
        )

    raw = await fetch_all_pages(fetch_page, config.per_page)
    repositories = [Repository.model_validate(item) for item in raw]
    logger.info("Collected %d repositories", len(repositories))
    return repositories


# ----------------------------------------------------------------------
# Pull requests and issues
# ----------------------------------------------------------------------


def _build_pull_request(item: dict[str, Any], detail: dict[str, Any]) -> PullRequest:
    user = item.get("user") or {}
    return PullRequest(
        id=item["id"],
        number=item["number"],
        title=item["title"],
        state=item["state"],
        created_at=item["created_at"],
        updated_at=item["updated_at"],
        closed_at=item.get("closed_at"),
        merged_at=detail.get("merged_at"),
        repository=RepoRef.from_api_url(item["repository_url"]),
        additions=detail.get("additions") or 0,
        deletions=detail.get("deletions") or 0,
        changed_files=detail.get("changed_files") or 0,
        commits=detail.get("commits") or 0,
        comments=item.get("comments") or 0,
        author=PullRequestAuthor(
            login=user.get("login") or "",
            avatar_url=user.get("avatar_url") or "",
        ),
        labels=_parse_labels(item),
    )


async def collect_pull_requests(
    client: GitHubClient, login: str, config: FetchConfig | None = None
) -> list[PullRequest]:
    """Public PRs authored by *login*, newest first, enriched with PR details.

    PRs whose detail fetch fails are left out.
    """
    config = config or FetchConfig()
    result = await client.search_issues(
        f"is:pr author:{login} is:public",
        sort="created",
        order="desc",
        per_page=config.pr_search_limit,
    )
    items: list[dict[str, Any]] = result.get("items") or []
    items = items[: config.max_pull_requests]

    async def fetch_detail(item: dict[str, Any]) -> PullRequest:
        ref = RepoRef.from_api_url(item["repository_url"])
        detail = await client.get_pull_request(ref.owner, ref.name, item["number"])
        return _build_pull_request(item, detail)

    fetched = await _gather_isolated(
        items,
        fetch_detail,
        config.max_concurrency,
        "pull request details",
        lambda item: f"#{item.get('number')} ({item.get('repository_url', '?')})",
    )
    pull_requests = [pr for _, pr in fetched]
    logger.info("Collected %d pull requests", len(pull_requests))
    return pull_requests


async def collect_issues(
    client: GitHubClient, login: str, config: FetchConfig | None = None
) -> list[Issue]:
    """Public issues authored by *login*, newest first."""
    config = config or FetchConfig()
    result = await client.search_issues(
        f"is:issue author:{login} is:public",
        sort="created",
        order="desc",
        per_page=config.issue_search_limit,
    )
    issues = [
        Issue(
            id=item["id"],
            number=item["number"],
            title=item["title"],
            state=item["state"],
            created_at=item["created_at"],
            updated_at=item["updated_at"],
            closed_at=item.get("closed_at"),
            repository=RepoRef.from_api_url(item["repository_url"]),
            labels=_parse_labels(item),
            comments=item.get("comments") or 0,
        )
        for item in result.get("items") or []
    ]
    logger.info("Collected %d issues", len(issues))
    return issues


# ----------------------------------------------------------------------
# Commits
# ----------------------------------------------------------------------


async def collect_recent_commits(
    client: GitHubClient,
    login: str,
    repositories: Sequence[Repository],
    config: FetchConfig | None = None,
) -> list[Commit]:
    """Latest commits by *login* across their most recently updated repositories."""
    config = config or FetchConfig()
    candidates = sorted(
        (repo for repo in repositories if repo.is_active),
        key=lambda repo: repo.updated_at,
        reverse=True,
    )[: config.commit_repo_count]

    async def fetch_commits(repo: Repository) -> list[Commit]:
        raw = await client.list_commits(
            repo.owner_login, repo.name, author=login, per_page=config.commits_per_repo
        )
        ref = _repo_ref(repo)
        return [
            Commit(
                sha=item["sha"],
                message=item["commit"]["message"],
                author=CommitAuthor(
                    name=item["commit"]["author"].get("name") or "",
                    email=item["commit"]["author"].get("email") or "",
                    date=item["commit"]["author"]["date"],
                ),
                repository=ref,
            )
            for item in raw
        ]

    fetched = await _gather_isolated(
        candidates, fetch_commits, config.max_concurrency, "commits", _repo_label
    )
    commits = [commit for _, batch in fetched for commit in batch]
    commits.sort(key=lambda commit: commit.author.date, reverse=True)
    return commits[: config.max_recent_commits]


# ----------------------------------------------------------------------
# Contribution calendar
# ----------------------------------------------------------------------


def _parse_contributions(collection: dict[str, Any]) -> ContributionsCollection:
    raw_calendar = collection["contributionCalendar"]
    calendar = ContributionCalendar(
        total_contributions=raw_calendar["totalContributions"],
        weeks=[
            ContributionWeek(
                contribution_days=[
                    ContributionDay(
                        contribution_count=day["contributionCount"],
                        date=day["date"],
                        weekday=day["weekday"],
                    )
                    for day in week["contributionDays"]
                ]
            )
            for week in raw_calendar["weeks"]
        ],
    )
    repository_contributions = [
        RepositoryContribution(
            name=entry["repository"]["name"],
            owner=entry["repository"]["owner"]["login"],
            total_count=entry["contributions"]["totalCount"],
        )
        for entry in collection.get("commitContributionsByRepository") or []
    ]
    return ContributionsCollection(
        calendar=calendar, repository_contributions=repository_contributions
    )


async def collect_contribution_calendar(
    client: GitHubClient, login: str
) -> ContributionsCollection:
    """Contribution calendar for the trailing year plus per-repo commit counts."""
    collection = await client.fetch_contributions(login)
    contributions = _parse_contributions(collection)
    logger.info(
        "Collected contribution calendar: %d contributions",
        contributions.calendar.total_contributions,
    )
    return contributions


# ----------------------------------------------------------------------
# Languages
# ----------------------------------------------------------------------


async def collect_language_bytes(
    client: GitHubClient,
    repositories: Sequence[Repository],
    config: FetchConfig | None = None,
) -> dict[str, int]:
    """Total bytes per language over all active repositories."""
    config = config or FetchConfig()
    active = [repo for repo in repositories if repo.is_active]

    async def fetch_languages(repo: Repository) -> dict[str, int]:
        return await client.list_languages(repo.owner_login, repo.name)

    fetched = await _gather_isolated(
        active, fetch_languages, config.max_concurrency, "languages", _repo_label
    )
    totals: dict[str, int] = {}
    for _, languages in fetched:
        for language, byte_count in languages.items():
            totals[language] = totals.get(language, 0) + byte_count
    return totals


# ----------------------------------------------------------------------
# Collaborators
# ----------------------------------------------------------------------


async def collect_collaborators(
    client: GitHubClient,
    repositories: Sequence[Repository],
    config: FetchConfig | None = None,
) -> list[Collaborator]:
    """Top contributors across the first repositories, excluding each repo's owner.

    Repositories are visited one at a time.
    """
    config = config or FetchConfig()
    collaborators: dict[str, Collaborator] = {}

    for repo in repositories[: config.collaborator_repo_count]:
        try:
            contributors = await client.list_contributors(
                repo.owner_login, repo.name, per_page=config.contributors_per_repo
            )
        except Exception as exc:
            logger.warning("Failed to fetch contributors for %s: %s", repo.full_name, exc)
            continue

        for contributor in contributors:
            login = contributor.get("login")
            # Anonymous contributors carry no login.
            if not login or login == repo.owner_login:
                continue
            existing = collaborators.get(login)
            collaborators[login] = Collaborator(
                login=login,
                avatar_url=contributor.get("avatar_url") or "",
                contributions=(existing.contributions if existing else 0)
                + (contributor.get("contributions") or 0),
            )

    ranked = sorted(collaborators.values(), key=lambda c: c.contributions, reverse=True)
    return ranked[: config.max_collaborators]
