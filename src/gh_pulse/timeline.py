"""Merge repository, PR, issue and commit events into a dated timeline."""

from __future__ import annotations

import datetime as dt
from collections.abc import Sequence

from gh_pulse.models import (
    Commit,
    Issue,
    PullRequest,
    Repository,
    TimelineEntry,
    TimelineEventType,
)


def build_timeline(
    repositories: Sequence[Repository],
    pull_requests: Sequence[PullRequest],
    issues: Sequence[Issue],
    commits: Sequence[Commit],
    limit: int = 100,
) -> list[TimelineEntry]:
    """Bucket events by (calendar date, event type), newest dates first.

    Repositories and PRs and issues are dated by creation, commits by
    author date.  A date has at most one entry per event type.  Only the
    *limit* most recent buckets are returned.
    """
    buckets: dict[tuple[dt.date, TimelineEventType], TimelineEntry] = {}

    def bucket(when: dt.datetime, event_type: TimelineEventType) -> TimelineEntry:
        key = (when.date(), event_type)
        entry = buckets.get(key)
        if entry is None:
            entry = TimelineEntry(date=key[0], type=event_type)
            buckets[key] = entry
        return entry

    for repo in repositories:
        bucket(repo.created_at, TimelineEventType.REPOSITORY).details.repos.append(repo)
    for pr in pull_requests:
        bucket(pr.created_at, TimelineEventType.PULL_REQUEST).details.prs.append(pr)
    for issue in issues:
        bucket(issue.created_at, TimelineEventType.ISSUE).details.issues.append(issue)
    for commit in commits:
        bucket(commit.author.date, TimelineEventType.COMMIT).details.commits.append(commit)

    entries = sorted(buckets.values(), key=lambda entry: entry.date, reverse=True)
    return entries[:limit]
