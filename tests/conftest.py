"""Shared test fixtures for gh-pulse tests."""

from __future__ import annotations

import pytest
from factories import make_calendar, make_repository

from gh_pulse.models import ContributionCalendar, Repository


@pytest.fixture
def sample_repositories() -> list[Repository]:
    return [
        make_repository("widgets", repo_id=1, stars=40, forks=4, watchers=40),
        make_repository("gadgets", repo_id=2, stars=15, forks=1, watchers=15),
        make_repository("legacy", repo_id=3, stars=5, forks=0, watchers=5, archived=True),
    ]


@pytest.fixture
def sample_calendar() -> ContributionCalendar:
    return make_calendar([3, 0, 2, 1, 4, 5, 6, 1, 2])
