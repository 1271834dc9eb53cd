"""Aggregation orchestrator: run collectors, then derive stats and timeline."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from typing import Any

from gh_pulse.collectors import (
    collect_collaborators,
    collect_contribution_calendar,
    collect_issues,
    collect_language_bytes,
    collect_pull_requests,
    collect_recent_commits,
    collect_repositories,
)
from gh_pulse.config import GhPulseConfig, load_config
from gh_pulse.exceptions import AggregationError
from gh_pulse.github_client import GitHubClient
from gh_pulse.models import (
    Commit,
    ContributionData,
    ContributionsCollection,
    GitHubUser,
    Issue,
    PullRequest,
    Repository,
)
from gh_pulse.stats import calculate_stats
from gh_pulse.timeline import build_timeline

logger = logging.getLogger(__name__)


class ContributionAggregator:
    """Collect everything about the authenticated user into :class:`ContributionData`.

    The client carries the credentials; the aggregator never sees them.
    """

    def __init__(self, client: GitHubClient, config: GhPulseConfig | None = None) -> None:
        self._client = client
        self.config = config if config is not None else load_config()

    async def _fetch_user(self) -> GitHubUser:
        raw = await self._client.get_authenticated_user()
        return GitHubUser.model_validate(raw)

    async def aggregate(self) -> ContributionData:
        """Run one aggregation.

        User, repositories, pull requests, issues, recent commits, the
        contribution calendar and language bytes are collected concurrently.
        Collaborators follow once repositories are known.  If any of the
        concurrent collectors fails, the others are cancelled and
        :class:`AggregationError` is raised.
        """
        fetch = self.config.fetch
        client = self._client

        # Shared by the collectors that need the login or the repository list.
        user_task = asyncio.ensure_future(_labelled("user", self._fetch_user()))
        repos_task = asyncio.ensure_future(
            _labelled("repositories", collect_repositories(client, fetch))
        )

        async def pull_requests() -> list[PullRequest]:
            user = await user_task
            return await collect_pull_requests(client, user.login, fetch)

        async def issues() -> list[Issue]:
            user = await user_task
            return await collect_issues(client, user.login, fetch)

        async def recent_commits() -> list[Commit]:
            user, repositories = await asyncio.gather(user_task, repos_task)
            return await collect_recent_commits(client, user.login, repositories, fetch)

        async def contributions() -> ContributionsCollection:
            user = await user_task
            return await collect_contribution_calendar(client, user.login)

        async def language_bytes() -> dict[str, int]:
            return await collect_language_bytes(client, await repos_task, fetch)

        named: dict[str, Awaitable[Any]] = {
            "pull requests": pull_requests(),
            "issues": issues(),
            "recent commits": recent_commits(),
            "contribution calendar": contributions(),
            "languages": language_bytes(),
        }
        tasks: dict[str, asyncio.Future[Any]] = {
            "user": user_task,
            "repositories": repos_task,
        }
        for name, awaitable in named.items():
            tasks[name] = asyncio.ensure_future(_labelled(name, awaitable))

        try:
            await asyncio.gather(*tasks.values())
        except BaseException:
            for task in tasks.values():
                task.cancel()
            await asyncio.gather(*tasks.values(), return_exceptions=True)
            raise

        user: GitHubUser = tasks["user"].result()
        repositories: list[Repository] = tasks["repositories"].result()
        prs: list[PullRequest] = tasks["pull requests"].result()
        issue_list: list[Issue] = tasks["issues"].result()
        commits: list[Commit] = tasks["recent commits"].result()
        collection: ContributionsCollection = tasks["contribution calendar"].result()
        languages: dict[str, int] = tasks["languages"].result()

        collaborators = await collect_collaborators(client, repositories, fetch)

        stats = calculate_stats(
            repositories,
            prs,
            issue_list,
            collection.calendar,
            languages,
            weights=self.config.score_weights,
            top_language_count=fetch.top_language_count,
        )
        timeline = build_timeline(
            repositories, prs, issue_list, commits, limit=self.config.timeline.limit
        )

        logger.info(
            "Aggregated %s: %d repos, %d PRs, %d issues, %d commits",
            user.login,
            len(repositories),
            len(prs),
            len(issue_list),
            len(commits),
        )

        return ContributionData(
            user=user,
            repositories=repositories,
            pull_requests=prs,
            issues=issue_list,
            recent_commits=commits,
            contribution_calendar=collection.calendar,
            repository_contributions=collection.repository_contributions,
            languages=languages,
            stats=stats,
            timeline=timeline,
            collaborators=collaborators,
        )


async def _labelled(name: str, awaitable: Awaitable[Any]) -> Any:
    """Await *awaitable*, turning a collection failure into AggregationError."""
    try:
        return await awaitable
    except AggregationError:
        raise
    except Exception as exc:
        logger.error("Collector %r failed: %s", name, exc)
        raise AggregationError(name, str(exc) or type(exc).__name__) from exc


async def aggregate_contributions(
    token: str, config: GhPulseConfig | None = None
) -> ContributionData:
    """Convenience wrapper: open a client for *token* and run one aggregation."""
    if config is None:
        config = load_config()
    async with GitHubClient(token=token) as client:
        aggregator = ContributionAggregator(client, config)
        return await aggregator.aggregate()
