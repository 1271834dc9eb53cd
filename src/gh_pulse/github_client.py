"""Async GitHub API client for fetching a developer's activity."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

import httpx

from gh_pulse.exceptions import (
    GitHubAPIError,
    RateLimitExhaustedError,
    ResourceNotFoundError,
    UserNotFoundError,
)

logger = logging.getLogger(__name__)

_GITHUB_BASE_URL = "https://api.github.com"
_GITHUB_GRAPHQL_URL = f"{_GITHUB_BASE_URL}/graphql"

_CONTRIBUTIONS_QUERY = """
query($login: String!) {
  user(login: $login) {
    contributionsCollection {
      contributionCalendar {
        totalContributions
        weeks {
          contributionDays {
            contributionCount
            date
            weekday
          }
        }
      }
      commitContributionsByRepository {
        repository {
          name
          owner { login }
        }
        contributions { totalCount }
      }
    }
  }
}
""".strip()


class GitHubClient:
    """Async client over the GitHub REST and GraphQL APIs.

    Methods return decoded JSON; mapping into models is left to the
    collectors.  The bearer token is only held by this client.
    """

    def __init__(self, token: str, timeout: float = 30.0) -> None:
        self._token = token
        self._client = httpx.AsyncClient(
            base_url=_GITHUB_BASE_URL,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github.v3+json",
            },
            timeout=timeout,
        )

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    @staticmethod
    def _check_rate_limit(response: httpx.Response) -> None:
        """Raise RateLimitExhaustedError on 429 or a 403 mentioning the rate limit."""
        if response.status_code not in (403, 429):
            return
        try:
            body = response.json() if response.content else {}
        except ValueError:
            body = {}
        message = body.get("message", "") if isinstance(body, dict) else ""
        if (
            response.status_code == 429
            or "rate limit" in message.lower()
            or response.headers.get("X-RateLimit-Remaining") == "0"
        ):
            reset_header = response.headers.get("X-RateLimit-Reset")
            if reset_header:
                reset_at = datetime.fromtimestamp(int(reset_header), tz=UTC)
            else:
                reset_at = datetime.now(UTC)
            raise RateLimitExhaustedError(reset_at=reset_at)

    @staticmethod
    def _api_error(response: httpx.Response) -> GitHubAPIError:
        remaining = response.headers.get("X-RateLimit-Remaining")
        return GitHubAPIError(
            message=f"GitHub API returned {response.status_code}",
            status_code=response.status_code,
            rate_limit_remaining=int(remaining) if remaining else None,
        )

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise GitHubAPIError(
                f"Invalid JSON from {response.request.url.path}: {exc}",
                status_code=response.status_code,
            ) from exc

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """GET a REST resource with error and rate-limit handling.

        Raises:
            RateLimitExhaustedError: On 403 with a rate-limit message or on 429.
            ResourceNotFoundError: On 404.
            GitHubAPIError: For any other non-2xx response, or a body that
                is not JSON.
        """
        response = await self._client.get(path, params=params)
        self._check_rate_limit(response)

        if response.status_code == 404:
            raise ResourceNotFoundError(path)
        if not response.is_success:
            raise self._api_error(response)

        logger.debug("GET %s -> %d", path, response.status_code)
        if response.status_code == 204 or not response.content:
            return None
        return self._decode(response)

    async def _graphql(self, query: str, variables: dict[str, object]) -> dict[str, Any]:
        """Execute a GraphQL query with error and rate-limit handling.

        Raises:
            UserNotFoundError: If the ``user`` field in the response is null.
            RateLimitExhaustedError: On 403 with a rate-limit message or on 429.
            GitHubAPIError: For any other non-200 response, or a response
                carrying only ``errors``.
        """
        response = await self._client.post(
            _GITHUB_GRAPHQL_URL,
            json={"query": query, "variables": variables},
        )
        self._check_rate_limit(response)

        if response.status_code != 200:
            raise self._api_error(response)

        data = self._decode(response)
        if not isinstance(data, dict):
            raise GitHubAPIError("GraphQL response is not an object", status_code=200)

        if "data" in data and data["data"] is not None:
            if "user" in data["data"] and data["data"]["user"] is None:
                login = variables.get("login", "unknown")
                raise UserNotFoundError(login=str(login))
        else:
            errors = data.get("errors") or []
            messages = "; ".join(str(e.get("message", e)) for e in errors) or "no data"
            raise GitHubAPIError(f"GraphQL query failed: {messages}", status_code=200)

        return data

    # ------------------------------------------------------------------
    # REST endpoints
    # ------------------------------------------------------------------

    async def get_authenticated_user(self) -> dict[str, Any]:
        """``GET /user``"""
        return await self._get("/user")  # type: ignore[no-any-return]

    async def list_repositories(
        self,
        sort: str = "updated",
        page: int = 1,
        per_page: int = 100,
        type: str = "all",
    ) -> list[dict[str, Any]]:
        """``GET /user/repos`` for one page."""
        return await self._get(  # type: ignore[no-any-return]
            "/user/repos",
            params={"sort": sort, "page": page, "per_page": per_page, "type": type},
        )

    async def search_issues(
        self,
        query: str,
        sort: str = "created",
        order: str = "desc",
        per_page: int = 100,
    ) -> dict[str, Any]:
        """``GET /search/issues``; returns the envelope with ``items``."""
        return await self._get(  # type: ignore[no-any-return]
            "/search/issues",
            params={"q": query, "sort": sort, "order": order, "per_page": per_page},
        )

    async def get_pull_request(
        self, owner: str, repo: str, number: int
    ) -> dict[str, Any]:
        """``GET /repos/{owner}/{repo}/pulls/{number}``"""
        return await self._get(  # type: ignore[no-any-return]
            f"/repos/{owner}/{repo}/pulls/{number}"
        )

    async def list_commits(
        self, owner: str, repo: str, author: str, per_page: int = 10
    ) -> list[dict[str, Any]]:
        """``GET /repos/{owner}/{repo}/commits`` filtered by author."""
        return await self._get(  # type: ignore[no-any-return]
            f"/repos/{owner}/{repo}/commits",
            params={"author": author, "per_page": per_page},
        )

    async def list_languages(self, owner: str, repo: str) -> dict[str, int]:
        """``GET /repos/{owner}/{repo}/languages`` (language name -> bytes)."""
        return await self._get(f"/repos/{owner}/{repo}/languages") or {}

    async def list_contributors(
        self, owner: str, repo: str, per_page: int = 10
    ) -> list[dict[str, Any]]:
        """``GET /repos/{owner}/{repo}/contributors``.

        GitHub answers 204 for empty repositories; that maps to ``[]``.
        """
        result = await self._get(
            f"/repos/{owner}/{repo}/contributors",
            params={"per_page": per_page},
        )
        return result or []

    # ------------------------------------------------------------------
    # GraphQL
    # ------------------------------------------------------------------

    async def fetch_contributions(self, login: str) -> dict[str, Any]:
        """Fetch the ``contributionsCollection`` of *login* for the last year."""
        result = await self._graphql(_CONTRIBUTIONS_QUERY, {"login": login})
        return result["data"]["user"]["contributionsCollection"]  # type: ignore[no-any-return]
