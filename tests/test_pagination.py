"""Tests for page-number pagination."""

from __future__ import annotations

import pytest

from gh_pulse.exceptions import GitHubAPIError
from gh_pulse.pagination import fetch_all_pages


def _pager(pages: list[list[int]]):
    calls: list[tuple[int, int]] = []

    async def fetch_page(page: int, per_page: int) -> list[int]:
        calls.append((page, per_page))
        return pages[page - 1] if page <= len(pages) else []

    return fetch_page, calls


class TestFetchAllPages:
    async def test_stops_on_short_page(self) -> None:
        fetch_page, calls = _pager([[1, 2, 3], [4, 5, 6], [7]])
        items = await fetch_all_pages(fetch_page, per_page=3)
        assert items == [1, 2, 3, 4, 5, 6, 7]
        assert calls == [(1, 3), (2, 3), (3, 3)]

    async def test_stops_on_empty_page(self) -> None:
        fetch_page, calls = _pager([[1, 2], [3, 4]])
        items = await fetch_all_pages(fetch_page, per_page=2)
        assert items == [1, 2, 3, 4]
        assert [page for page, _ in calls] == [1, 2, 3]

    async def test_single_empty_page(self) -> None:
        fetch_page, calls = _pager([])
        assert await fetch_all_pages(fetch_page, per_page=100) == []
        assert len(calls) == 1

    async def test_page_failure_propagates(self) -> None:
        async def fetch_page(page: int, per_page: int) -> list[int]:
            if page == 2:
                raise GitHubAPIError("boom", status_code=500)
            return [page] * per_page

        with pytest.raises(GitHubAPIError):
            await fetch_all_pages(fetch_page, per_page=2)

    async def test_rejects_non_positive_page_size(self) -> None:
        fetch_page, _ = _pager([])
        with pytest.raises(ValueError):
            await fetch_all_pages(fetch_page, per_page=0)
